"""
Pytest fixtures for grayscope tests
"""

import numpy as np
import pytest
from PIL import Image

from grayscope.models.image_model import PixelSource
from grayscope.services.image_service import ImageService


@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(4471)


@pytest.fixture
def color_source(rng):
    """A 12x9 RGB source with random (colored) pixels."""
    data = rng.integers(0, 256, size=(9, 12, 3), dtype=np.uint8)
    data[0, 0] = (255, 0, 0)  # guarantees at least one colored pixel
    return PixelSource.from_array(data, path="images/colors.png")


@pytest.fixture
def gray_rgb_source(rng):
    """An RGB source whose channels differ by at most 1 everywhere."""
    base = rng.integers(1, 255, size=(7, 5), dtype=np.int16)
    jitter = rng.integers(0, 1, size=(7, 5, 3), endpoint=True, dtype=np.int16)
    data = np.clip(base[:, :, np.newaxis] + jitter, 0, 255).astype(np.uint8)
    return PixelSource.from_array(data, path="images/gray_rgb.png")


@pytest.fixture
def codec():
    """An initialized image codec, closed after the test."""
    with ImageService() as service:
        yield service


@pytest.fixture
def write_image(tmp_path):
    """
    Factory writing a numpy array (or a ready PIL image) to a file under tmp_path.
    :return: Callable(name, data) -> path
    """
    def _write(name, data):
        path = tmp_path / name
        image = data if isinstance(data, Image.Image) else Image.fromarray(data)
        image.save(path)
        return path

    return _write
