"""
Brightness / contrast adjustment.
"""

import numpy as np

from ..models.pixel_buffer import PixelBuffer


def apply_tonal(buffer: PixelBuffer, *, brightness: float = 1.0, contrast: float = 1.0) -> PixelBuffer:
    """
    Per RGB channel: v' = (v - 128) * contrast + 128 + (brightness - 1) * 255,
    clamped to [0, 255] and rounded half-to-even. Alpha is untouched.

    Works in place and returns the same buffer.
    """
    if buffer.is_empty:
        return buffer

    rgb = buffer.pixels[..., :3].astype(np.float64)
    adjusted = (rgb - 128.0) * contrast + 128.0 + (brightness - 1.0) * 255.0
    buffer.pixels[..., :3] = np.rint(np.clip(adjusted, 0, 255)).astype(np.uint8)
    return buffer
