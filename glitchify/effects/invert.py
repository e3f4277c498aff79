from ..models.pixel_buffer import PixelBuffer


def invert_colors(buffer: PixelBuffer) -> PixelBuffer:
    """v' = 255 - v on RGB, in place. Alpha is untouched."""
    rgb = buffer.pixels[..., :3]
    rgb[...] = 255 - rgb
    return buffer
