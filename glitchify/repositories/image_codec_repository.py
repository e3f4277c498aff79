from io import BytesIO
from pathlib import Path
from typing import Union
import numpy as np
import cv2
from PIL import Image as PILImage

from ..errors import ImageDecodeError, ImageEncodeError
from ..models.pixel_buffer import PixelBuffer


class ImageCodecRepository:
    """
    Handles raster file formats for PixelBuffer entities.
    OpenCV decodes, Pillow encodes; nothing else in the package parses files.
    """

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        # 16-bit PNG/TIFF → keep the high byte
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        elif arr.dtype != np.uint8:
            arr = cv2.normalize(arr, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        channels = arr.shape[2]
        if channels == 1:
            return cv2.cvtColor(arr[:, :, 0], cv2.COLOR_GRAY2RGBA)
        if channels == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        if channels == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise ImageDecodeError(f"Unsupported channel count: {channels}")

    @classmethod
    def decode(cls, data: bytes) -> PixelBuffer:
        if not data:
            raise ImageDecodeError("No image data")

        arr = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ImageDecodeError("Image data could not be decoded")

        return PixelBuffer(np.ascontiguousarray(cls._to_rgba(arr)))

    @staticmethod
    def encode_png(buffer: PixelBuffer) -> bytes:
        if buffer.is_empty:
            raise ImageEncodeError(f"Cannot encode an empty {buffer.width}x{buffer.height} image")

        pil_image = PILImage.fromarray(np.ascontiguousarray(buffer.pixels))
        out = BytesIO()
        pil_image.save(out, format="PNG")
        return out.getvalue()

    @staticmethod
    def resize(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
        resized = cv2.resize(buffer.pixels, (width, height), interpolation=cv2.INTER_AREA)
        return PixelBuffer(np.ascontiguousarray(resized))

    @staticmethod
    def read_bytes(path: Union[str, Path]) -> bytes:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return path.read_bytes()

    @staticmethod
    def write_bytes(data: bytes, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
