from io import BytesIO

import numpy as np
from PIL import Image as PILImage

from glitchify.models.pixel_buffer import PixelBuffer


def solid(width: int, height: int, color=(255, 255, 255, 255)) -> PixelBuffer:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = color
    return PixelBuffer(pixels)


def png_bytes(buffer: PixelBuffer) -> bytes:
    out = BytesIO()
    PILImage.fromarray(buffer.pixels).save(out, format="PNG")
    return out.getvalue()
