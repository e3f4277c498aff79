"""
The effect catalog: one pure function per effect.

Every function takes a PixelBuffer plus keyword parameters and returns a
PixelBuffer of identical dimensions. None of them touch edit history.
"""

from .tonal import apply_tonal
from .invert import invert_colors
from .noise import add_noise
from .pixelate import pixelate
from .glitch import glitch
from .cartoon import cartoonize

__all__ = ["apply_tonal", "invert_colors", "add_noise", "pixelate", "glitch", "cartoonize"]
