from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

import numpy as np
from dotenv import load_dotenv

from ..errors import NoImageLoaded, NothingToRedo, NothingToUndo
from ..models.pixel_buffer import PixelBuffer
from ..models.session_state import SessionState
from ..repositories.pixel_buffer_repository import PixelBufferRepository
from .effect_service import EffectService
from .history_manager import HistoryManager
from .image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def default_rng() -> np.random.Generator:
    """Seeded from RANDOM_SEED when set, otherwise nondeterministic."""
    seed = os.getenv("RANDOM_SEED")
    return np.random.default_rng(int(seed) if seed else None)


class EditSession:
    """
    One open document: the original image, the buffer being edited and its
    undo/redo history.

    The session is the sole owner of its buffers. Everything handed in is
    copied, everything handed out is a copy, and no history entry aliases
    the current buffer.

    Not thread-safe: callers must serialize operations on one session.
    """

    def __init__(
        self,
        *,
        image_service: ImageService = None,
        effect_service: EffectService = None,
        history: HistoryManager = None,
        rng: np.random.Generator = None,
    ):
        self.image_service = image_service or ImageService()
        self.effect_service = effect_service or EffectService()
        self.history = history or HistoryManager()
        self.rng = rng if rng is not None else default_rng()

        self._original: Optional[PixelBuffer] = None
        self._current: Optional[PixelBuffer] = None
        self.state = SessionState.EMPTY

    # ─── Loading ───────────────────────────────────────────────────
    def load(self, data: bytes, mime_type_hint: Optional[str] = None) -> PixelBuffer:
        """
        Decode raw image bytes and start a fresh document.
        Decode errors propagate and leave the session untouched.
        """
        buffer = self.image_service.decode(data, mime_type_hint)
        return self.load_buffer(buffer)

    def load_buffer(self, buffer: PixelBuffer) -> PixelBuffer:
        """Start a fresh document from an already decoded buffer."""
        fitted = self.image_service.fit_to_canvas(PixelBufferRepository.clone(buffer))

        self._original = fitted
        self._current = PixelBufferRepository.clone(fitted)
        self.history.clear()
        self.state = SessionState.LOADED

        logger.info(f"Loaded {fitted.width}x{fitted.height} image")
        return self.current_buffer()

    # ─── Editing ───────────────────────────────────────────────────
    def _require_image(self) -> None:
        if self._current is None:
            raise NoImageLoaded("No image loaded")

    def apply(self, effect_id: str, params: Optional[Mapping] = None) -> PixelBuffer:
        """
        Apply one catalog effect to the current buffer.

        All-or-nothing: parameters are resolved and the effect runs on a
        working copy before any history is recorded, so a failure leaves both
        the buffer and the history unchanged.

        Raises:
            NoImageLoaded: before the first load.
            InvalidParameter: unknown effect, or a value the policy refuses.
        """
        self._require_image()
        resolved = self.effect_service.resolve_parameters(effect_id, params)

        working = PixelBufferRepository.clone(self._current)
        result = self.effect_service.apply(effect_id, working, resolved, rng=self.rng)

        self.history.snapshot(self._current)
        self._current = result
        self.state = SessionState.EDITED

        logger.info(f"Applied {effect_id} {resolved}")
        return self.current_buffer()

    def undo(self) -> bool:
        """
        Step back one edit.

        Returns:
            bool: False when there was nothing to undo (the buffer is unchanged).
        """
        if self._current is None:
            logger.info("Undo requested with no image loaded")
            return False
        try:
            self._current = self.history.undo(self._current)
        except NothingToUndo:
            logger.info("Nothing to undo")
            return False

        self.state = SessionState.EDITED
        logger.info("Undo")
        return True

    def redo(self) -> bool:
        """Step forward one undone edit. False when there is nothing to redo."""
        if self._current is None:
            logger.info("Redo requested with no image loaded")
            return False
        try:
            self._current = self.history.redo(self._current)
        except NothingToRedo:
            logger.info("Nothing to redo")
            return False

        self.state = SessionState.EDITED
        logger.info("Redo")
        return True

    def reset(self) -> PixelBuffer:
        """Restore the image as loaded. Undoable like any other edit."""
        if self._original is None:
            raise NoImageLoaded("No original image to reset to")

        self.history.snapshot(self._current)
        self._current = PixelBufferRepository.clone(self._original)
        self.state = SessionState.LOADED

        logger.info("Image reset to original")
        return self.current_buffer()

    # ─── Output ────────────────────────────────────────────────────
    def current_buffer(self) -> Optional[PixelBuffer]:
        if self._current is None:
            return None
        return PixelBufferRepository.clone(self._current)

    def original_image(self) -> Optional[PixelBuffer]:
        if self._original is None:
            return None
        return PixelBufferRepository.clone(self._original)

    def export_current(self) -> bytes:
        """PNG bytes of the current buffer."""
        self._require_image()
        return self.image_service.encode(self._current)

    def export_to(self, path: Union[str, Path] = None) -> Path:
        self._require_image()
        return self.image_service.save(self._current, path)

    # ─── History queries ───────────────────────────────────────────
    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def history_stats(self) -> dict:
        return self.history.get_stats()
