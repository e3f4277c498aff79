"""
Error types raised by the editing core.

Every error is local and recoverable: a failed operation never leaves an
EditSession half-modified.
"""


class GlitchifyError(Exception):
    """Base class for all editor errors."""


class DimensionMismatch(GlitchifyError, ValueError):
    """Pixel data does not match the declared width × height × 4 layout."""


class OutOfBounds(GlitchifyError, IndexError):
    """A coordinate or rectangle falls outside the buffer."""


class InvalidParameter(GlitchifyError, ValueError):
    """Unknown effect, unknown parameter, or a value the policy refuses."""


class NoImageLoaded(GlitchifyError, RuntimeError):
    """The session has no image yet."""


class NothingToUndo(GlitchifyError, LookupError):
    pass


class NothingToRedo(GlitchifyError, LookupError):
    pass


class ImageDecodeError(GlitchifyError, ValueError):
    """The host codec could not turn the bytes into pixels."""


class ImageEncodeError(GlitchifyError, ValueError):
    pass
