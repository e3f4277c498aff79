"""
Glitchify: effect-processing engine and edit history for RGBA rasters.
"""

from .models.pixel_buffer import PixelBuffer
from .models.session_state import SessionState
from .services.edit_session import EditSession
from .services.effect_service import EffectService
from .services.history_manager import HistoryManager
from .services.image_service import ImageService

__all__ = [
    "PixelBuffer",
    "SessionState",
    "EditSession",
    "EffectService",
    "HistoryManager",
    "ImageService",
]
