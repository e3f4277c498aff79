from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from ..errors import DimensionMismatch


@dataclass(eq=False)
class PixelBuffer:
    """
    Simple data object: RGBA pixels of a single raster.
    No pixel logic outside the repository and the effects.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise DimensionMismatch(f"pixels must be a numpy array, got {type(self.pixels).__name__}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise DimensionMismatch(f"pixels must be shaped (H, W, 4), got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise DimensionMismatch(f"pixels must be uint8, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.pixels.size == 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"
