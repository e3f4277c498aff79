import numpy as np
import pytest

from glitchify.models.pixel_buffer import PixelBuffer
from glitchify.services.edit_session import EditSession
from glitchify.services.effect_service import EffectService
from glitchify.services.history_manager import HistoryManager
from glitchify.services.image_service import ImageService

from helpers import solid


@pytest.fixture
def white_2x2() -> PixelBuffer:
    return solid(2, 2)


@pytest.fixture
def gradient_image() -> PixelBuffer:
    """64x48 image: R ramps left→right, G ramps top→bottom, B constant, A varies."""
    pixels = np.zeros((48, 64, 4), dtype=np.uint8)
    pixels[..., 0] = np.linspace(0, 255, 64, dtype=np.uint8)[None, :]
    pixels[..., 1] = np.linspace(0, 255, 48, dtype=np.uint8)[:, None]
    pixels[..., 2] = 77
    pixels[..., 3] = np.linspace(50, 255, 64, dtype=np.uint8)[None, :]
    return PixelBuffer(pixels)


@pytest.fixture
def random_image() -> PixelBuffer:
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8))


@pytest.fixture
def session() -> EditSession:
    return EditSession(
        image_service=ImageService(max_width=800, max_height=600),
        effect_service=EffectService(policy="clamp"),
        history=HistoryManager(limit=10),
        rng=np.random.default_rng(7),
    )
