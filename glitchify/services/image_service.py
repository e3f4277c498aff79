from pathlib import Path
from typing import Optional, Tuple, Union
import logging
import os

from dotenv import load_dotenv

from ..models.pixel_buffer import PixelBuffer
from ..repositories.image_codec_repository import ImageCodecRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """
    Codec boundary of the editor: bytes in, PixelBuffer out, PNG bytes back.
    No effect logic here.
    """
    def __init__(self, max_width: int = None, max_height: int = None):
        self.MAX_WIDTH = max_width if max_width is not None else int(os.getenv("MAX_CANVAS_WIDTH", "800"))
        self.MAX_HEIGHT = max_height if max_height is not None else int(os.getenv("MAX_CANVAS_HEIGHT", "600"))
        self.EXPORT_FILENAME = os.getenv("EXPORT_FILENAME", "glitchify-edited.png")
        self.codec_repository = ImageCodecRepository()

    def decode(self, data: bytes, mime_type_hint: Optional[str] = None) -> PixelBuffer:
        """
        Decode any format OpenCV understands into an RGBA buffer.
        The hint is informational only; the codec sniffs the bytes.
        """
        buffer = self.codec_repository.decode(data)
        logger.info(f"Decoded {mime_type_hint or 'image'} to {buffer.width}x{buffer.height} RGBA")
        return buffer

    def encode(self, buffer: PixelBuffer) -> bytes:
        """Lossless PNG export."""
        return self.codec_repository.encode_png(buffer)

    def canvas_size(self, width: int, height: int) -> Tuple[int, int]:
        """
        Size the image gets on the editing canvas: scale down to the max width,
        then (if still too tall) to the max height, keeping the aspect ratio.
        A limit of 0 disables that axis.
        """
        w, h = float(width), float(height)
        if self.MAX_WIDTH and w > self.MAX_WIDTH:
            h = h * self.MAX_WIDTH / w
            w = self.MAX_WIDTH
        if self.MAX_HEIGHT and h > self.MAX_HEIGHT:
            w = w * self.MAX_HEIGHT / h
            h = self.MAX_HEIGHT
        return max(1, int(w)), max(1, int(h))

    def fit_to_canvas(self, buffer: PixelBuffer) -> PixelBuffer:
        if buffer.is_empty:
            return buffer
        width, height = self.canvas_size(buffer.width, buffer.height)
        if (width, height) == (buffer.width, buffer.height):
            return buffer

        logger.info(f"Fitting {buffer.width}x{buffer.height} image to {width}x{height} canvas")
        return self.codec_repository.resize(buffer, width, height)

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        """Load a single image from disk."""
        path = Path(path)
        return self.decode(self.codec_repository.read_bytes(path), path.suffix.lstrip(".") or None)

    def save(self, buffer: PixelBuffer, path: Union[str, Path] = None) -> Path:
        """
        Encode and write a buffer to disk. Defaults to EXPORT_FILENAME in the
        working directory.
        """
        target = self.codec_repository.write_bytes(self.encode(buffer), path or self.EXPORT_FILENAME)
        logger.info(f"Saved {buffer.width}x{buffer.height} image to {target}")
        return target
