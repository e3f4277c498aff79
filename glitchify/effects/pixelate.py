"""
Block pixelation.
"""

from ..models.pixel_buffer import PixelBuffer


def pixelate(buffer: PixelBuffer, *, block_size: int = 10) -> PixelBuffer:
    """
    Tile the buffer into block_size × block_size squares starting at (0, 0)
    and fill each with the RGBA value of its top-left pixel (a sample, not an
    average). Blocks on the right and bottom edges are clipped to the buffer.

    The sampled alpha is copied too, so a semi-transparent block stays
    semi-transparent. A canvas fillRect with an rgb() color would make every
    block opaque; the two agree only on opaque images.

    Works in place and returns the same buffer.
    """
    block_size = max(1, int(block_size))
    pixels = buffer.pixels

    for y in range(0, buffer.height, block_size):
        for x in range(0, buffer.width, block_size):
            # sample before filling: the block owns its top-left pixel
            pixels[y:y + block_size, x:x + block_size] = pixels[y, x].copy()

    return buffer
