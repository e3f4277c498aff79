"""
History Manager for Undo/Redo

- Saves full-resolution snapshots of the buffer before each edit
- Maintains undo and redo stacks
- Limits undo history to keep memory bounded
"""

import logging
import os
from collections import deque
from typing import List

from dotenv import load_dotenv

from ..errors import NothingToRedo, NothingToUndo
from ..models.pixel_buffer import PixelBuffer
from ..repositories.pixel_buffer_repository import PixelBufferRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class HistoryManager:
    """Linear undo/redo history of PixelBuffer snapshots."""

    def __init__(self, limit: int = None):
        """
        Args:
            limit: Maximum number of undo states (defaults to HISTORY_LIMIT, else 10).
                Older states are dropped first once the limit is reached.
        """
        self.limit = limit if limit is not None else int(os.getenv("HISTORY_LIMIT", "10"))
        if self.limit < 1:
            raise ValueError(f"History limit must be at least 1, got {self.limit}")
        self.undo_stack = deque(maxlen=self.limit)
        # Only ever filled by undo(), so it can't outgrow what undo held.
        self.redo_stack: List[PixelBuffer] = []

    def snapshot(self, buffer: PixelBuffer) -> None:
        """Record the state before an edit. Any edit invalidates the redo branch."""
        if len(self.undo_stack) == self.limit:
            logger.debug(f"Undo history full ({self.limit}), dropping oldest snapshot")
        self.undo_stack.append(PixelBufferRepository.clone(buffer))
        self.redo_stack.clear()

    def undo(self, current: PixelBuffer) -> PixelBuffer:
        """
        Step back one edit.

        Args:
            current: The buffer being displayed now; a copy goes onto the redo stack.

        Returns:
            PixelBuffer: The previous state.

        Raises:
            NothingToUndo: if there is no earlier state.
        """
        if not self.undo_stack:
            raise NothingToUndo("Nothing to undo")

        previous = self.undo_stack.pop()
        self.redo_stack.append(PixelBufferRepository.clone(current))
        return previous

    def redo(self, current: PixelBuffer) -> PixelBuffer:
        """Inverse of undo(). Raises NothingToRedo when the redo stack is empty."""
        if not self.redo_stack:
            raise NothingToRedo("Nothing to redo")

        following = self.redo_stack.pop()
        self.undo_stack.append(PixelBufferRepository.clone(current))
        return following

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()

    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def get_stats(self) -> dict:
        """
        Statistics about history usage.

        Returns:
            dict: undo/redo counts, the limit, whether undo is full, and the
            bytes held by snapshots
        """
        held = sum(b.pixels.nbytes for b in self.undo_stack) + sum(b.pixels.nbytes for b in self.redo_stack)
        return {
            "undo_count": len(self.undo_stack),
            "redo_count": len(self.redo_stack),
            "limit": self.limit,
            "undo_full": len(self.undo_stack) >= self.limit,
            "snapshot_bytes": held,
        }
