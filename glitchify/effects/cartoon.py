"""
Color quantization ("cartoon").
"""

import numpy as np

from ..models.pixel_buffer import PixelBuffer


def cartoonize(buffer: PixelBuffer, *, color_levels: int = 8) -> PixelBuffer:
    """
    Quantize every RGB channel onto a grid of step = floor(255 / color_levels):
    v' = floor(v / step) * step. Alpha is copied unchanged.

    Unlike the other effects this returns a NEW buffer of the same size and
    leaves the input alone.
    """
    levels = min(255, max(1, int(color_levels)))
    step = 255 // levels

    quantized = buffer.pixels.copy()
    quantized[..., :3] = (buffer.pixels[..., :3] // np.uint8(step)) * np.uint8(step)
    return PixelBuffer(quantized)
