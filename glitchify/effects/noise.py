"""
Random noise injection.
"""

from typing import Optional
import numpy as np

from ..models.pixel_buffer import PixelBuffer


def add_noise(
    buffer: PixelBuffer,
    *,
    amount: float = 0.05,
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Add (U[0,1) - 0.5) * 255 * amount to every pixel, in place.

    One sample is drawn per pixel and shared by its R, G and B channels, so
    the noise shifts luminance rather than hue. Results are clamped and
    rounded half-to-even; alpha is untouched.

    Args:
        buffer: Buffer to modify
        amount: Noise strength as a fraction of the channel range
        rng: Random source; a fresh unseeded generator when omitted
    """
    if buffer.is_empty:
        return buffer
    rng = rng if rng is not None else np.random.default_rng()

    noise = (rng.random((buffer.height, buffer.width, 1)) - 0.5) * 255.0 * amount
    noisy = buffer.pixels[..., :3].astype(np.float64) + noise
    buffer.pixels[..., :3] = np.rint(np.clip(noisy, 0, 255)).astype(np.uint8)
    return buffer
