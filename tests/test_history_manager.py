import pytest

from glitchify.errors import NothingToRedo, NothingToUndo
from glitchify.repositories.pixel_buffer_repository import PixelBufferRepository as repo
from glitchify.services.history_manager import HistoryManager

from helpers import solid


def marked(value: int):
    return solid(2, 2, (value, value, value, 255))


def test_empty_history_raises():
    history = HistoryManager(limit=10)
    with pytest.raises(NothingToUndo):
        history.undo(marked(0))
    with pytest.raises(NothingToRedo):
        history.redo(marked(0))
    assert not history.can_undo() and not history.can_redo()


def test_snapshot_is_a_clone():
    history = HistoryManager(limit=10)
    buffer = marked(1)
    history.snapshot(buffer)
    buffer.pixels[...] = 0

    assert history.undo(marked(2)) == marked(1)


def test_undo_then_redo_round_trip():
    history = HistoryManager(limit=10)
    history.snapshot(marked(1))

    previous = history.undo(marked(2))
    assert previous == marked(1)
    assert history.can_redo()

    following = history.redo(previous)
    assert following == marked(2)
    assert history.undo(following) == marked(1)


def test_new_snapshot_clears_redo():
    history = HistoryManager(limit=10)
    history.snapshot(marked(1))
    history.undo(marked(2))
    history.snapshot(marked(3))

    with pytest.raises(NothingToRedo):
        history.redo(marked(4))


def test_limit_drops_oldest():
    history = HistoryManager(limit=10)
    for value in range(15):
        history.snapshot(marked(value))

    assert len(history.undo_stack) == 10
    restored = [history.undo(marked(99)).pixels[0, 0, 0] for _ in range(10)]
    assert restored == list(range(14, 4, -1))
    with pytest.raises(NothingToUndo):
        history.undo(marked(99))


def test_redo_respects_undo_limit():
    history = HistoryManager(limit=3)
    for value in range(3):
        history.snapshot(marked(value))
    current = marked(3)
    for _ in range(3):
        current = history.undo(current)
    for _ in range(3):
        current = history.redo(current)
    assert len(history.undo_stack) == 3
    assert current == marked(3)


def test_clear_and_stats():
    history = HistoryManager(limit=2)
    history.snapshot(marked(1))
    history.snapshot(marked(2))
    history.undo(marked(3))

    stats = history.get_stats()
    assert stats["undo_count"] == 1
    assert stats["redo_count"] == 1
    assert stats["limit"] == 2
    assert stats["undo_full"] is False
    assert stats["snapshot_bytes"] == 2 * 2 * 2 * 4

    history.clear()
    assert history.get_stats()["undo_count"] == 0
    assert history.get_stats()["redo_count"] == 0


def test_limit_from_environment(monkeypatch):
    monkeypatch.setenv("HISTORY_LIMIT", "4")
    assert HistoryManager().limit == 4


def test_invalid_limit():
    with pytest.raises(ValueError):
        HistoryManager(limit=0)


def test_undo_hands_back_independent_copies():
    history = HistoryManager(limit=10)
    current = marked(5)
    history.snapshot(marked(1))
    previous = history.undo(current)
    current.pixels[...] = 0

    assert history.redo(previous) == marked(5)
    assert repo.get(previous, 0, 0) == (1, 1, 1, 255)
