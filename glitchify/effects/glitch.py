"""
Horizontal slice displacement ("glitch").
"""

import logging
import math
from typing import Optional
import numpy as np

from ..models.pixel_buffer import PixelBuffer
from ..repositories.pixel_buffer_repository import PixelBufferRepository

logger = logging.getLogger(__name__)

MIN_SLICE_HEIGHT = 5
MAX_OFFSET = 10


def glitch(
    buffer: PixelBuffer,
    *,
    intensity: int = 5,
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Repeat `intensity` times: cut a random full-width horizontal strip and
    draw it back shifted sideways by a random offset in [-10, 10).

    Strip pixels shifted past an edge are dropped. The columns the strip
    vacates are NOT blanked: they keep whatever was already there, so
    successive strips composite over each other.

    The strip is copied over the destination as-is, with no source-over
    alpha blending, so results match a canvas drawImage only where the
    strip is opaque.

    Args:
        buffer: Buffer to modify in place
        intensity: Number of strips to displace
        rng: Random source; a fresh unseeded generator when omitted

    Returns:
        PixelBuffer: the same buffer
    """
    if buffer.is_empty:
        return buffer
    rng = rng if rng is not None else np.random.default_rng()
    width, height = buffer.width, buffer.height

    for _ in range(int(intensity)):
        slice_height = math.floor(rng.random() * (height / 10)) + MIN_SLICE_HEIGHT
        start_y = math.floor(rng.random() * max(0, height - slice_height))
        offset = math.floor(rng.random() * 2 * MAX_OFFSET) - MAX_OFFSET

        # images shorter than the minimum strip: the strip is the whole image
        slice_height = min(slice_height, height - start_y)

        strip = PixelBufferRepository.region(buffer, 0, start_y, width, slice_height)
        PixelBufferRepository.paste(buffer, strip, offset, start_y)
        logger.debug(f"glitch strip y={start_y} h={slice_height} offset={offset}")

    return buffer
