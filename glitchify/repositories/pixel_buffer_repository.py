from typing import Sequence, Tuple, Union
import numpy as np

from ..errors import DimensionMismatch, OutOfBounds
from ..models.pixel_buffer import PixelBuffer

RawPixels = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]
Color = Tuple[int, int, int, int]


class PixelBufferRepository:
    """
    Handles construction, pixel access and copying for PixelBuffer entities.
    Every method that returns a buffer returns an independent copy.
    """

    @staticmethod
    def create(width: int, height: int) -> PixelBuffer:
        """Zero-filled (transparent black) buffer."""
        if width < 0 or height < 0:
            raise DimensionMismatch(f"Invalid buffer size {width}x{height}")
        return PixelBuffer(np.zeros((height, width, 4), dtype=np.uint8))

    @staticmethod
    def from_source(raw_pixels: RawPixels, width: int, height: int) -> PixelBuffer:
        """
        Build a buffer from row-major RGBA channel values.

        Raises:
            DimensionMismatch: if the number of values is not width*height*4.
        """
        if width < 0 or height < 0:
            raise DimensionMismatch(f"Invalid buffer size {width}x{height}")

        if isinstance(raw_pixels, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(raw_pixels, dtype=np.uint8)
        else:
            flat = np.asarray(raw_pixels)

        expected = width * height * 4
        if flat.size != expected:
            raise DimensionMismatch(
                f"Pixel data has {flat.size} values, expected {expected} for {width}x{height} RGBA"
            )

        if flat.dtype != np.uint8:
            flat = np.clip(np.rint(flat.astype(np.float64)), 0, 255).astype(np.uint8)

        # reshape of a frombuffer view is read-only, copy to own the memory
        return PixelBuffer(flat.reshape(height, width, 4).copy())

    @staticmethod
    def _check_point(buffer: PixelBuffer, x: int, y: int) -> None:
        if not (0 <= x < buffer.width and 0 <= y < buffer.height):
            raise OutOfBounds(f"({x}, {y}) outside {buffer.width}x{buffer.height} buffer")

    @classmethod
    def get(cls, buffer: PixelBuffer, x: int, y: int) -> Color:
        cls._check_point(buffer, x, y)
        r, g, b, a = buffer.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    @classmethod
    def set(cls, buffer: PixelBuffer, x: int, y: int, color: Sequence[int]) -> None:
        """Write one pixel. RGB colors get an opaque alpha."""
        cls._check_point(buffer, x, y)
        if len(color) == 3:
            color = (*color, 255)
        if len(color) != 4:
            raise DimensionMismatch(f"Color must have 3 or 4 channels, got {len(color)}")
        buffer.pixels[y, x] = np.clip(np.asarray(color, dtype=np.int64), 0, 255).astype(np.uint8)

    @staticmethod
    def clone(buffer: PixelBuffer) -> PixelBuffer:
        return PixelBuffer(buffer.pixels.copy())

    @staticmethod
    def region(buffer: PixelBuffer, x: int, y: int, w: int, h: int) -> PixelBuffer:
        """
        Copy of the w×h rectangle whose top-left corner is (x, y).

        Raises:
            OutOfBounds: if the rectangle is not fully inside the buffer.
        """
        if x < 0 or y < 0 or w < 0 or h < 0 or x + w > buffer.width or y + h > buffer.height:
            raise OutOfBounds(
                f"Region ({x}, {y}, {w}, {h}) exceeds {buffer.width}x{buffer.height} buffer"
            )
        return PixelBuffer(buffer.pixels[y:y + h, x:x + w].copy())

    @staticmethod
    def paste(dest: PixelBuffer, src: PixelBuffer, x: int, y: int) -> None:
        """
        Draw src onto dest with its top-left corner at (x, y).
        Parts of src outside dest are dropped; dest pixels not covered keep their value.
        """
        dst_x0, dst_y0 = max(0, x), max(0, y)
        dst_x1 = min(dest.width, x + src.width)
        dst_y1 = min(dest.height, y + src.height)
        if dst_x0 >= dst_x1 or dst_y0 >= dst_y1:
            return

        src_x0, src_y0 = dst_x0 - x, dst_y0 - y
        dest.pixels[dst_y0:dst_y1, dst_x0:dst_x1] = src.pixels[
            src_y0:src_y0 + (dst_y1 - dst_y0),
            src_x0:src_x0 + (dst_x1 - dst_x0),
        ]
