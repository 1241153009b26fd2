"""
Tests for grayscale intensity statistics.
"""

import numpy as np
import pytest

from grayscope.models.errors import EmptyBuffer, InvalidSource
from grayscope.models.image_model import ColorType, GrayscaleBuffer
from grayscope.services.stats_service import StatsService


def buffer_of(values):
    arr = np.asarray(values, dtype=np.uint8)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    return GrayscaleBuffer(arr.shape[1], arr.shape[0], arr)


@pytest.fixture
def service():
    return StatsService()


class TestCompute:
    """min / max / mean over a grayscale buffer."""

    @pytest.mark.parametrize("shape", [(1, 1), (3, 7), (64, 33)])
    def test_uniform_buffer(self, service, shape):
        stats = service.compute(buffer_of(np.full(shape, 200)))
        assert stats.min_intensity == 200
        assert stats.max_intensity == 200
        assert stats.mean_intensity == 200.0
        assert (stats.height, stats.width) == shape

    def test_two_pixels(self, service):
        stats = service.compute(buffer_of([10, 250]))
        assert stats.min_intensity == 10
        assert stats.max_intensity == 250
        assert stats.mean_intensity == 130.0
        assert stats.contrast == 240

    def test_mean_is_float_division(self, service):
        stats = service.compute(buffer_of([0, 1]))
        assert stats.mean_intensity == 0.5

    def test_no_overflow_on_large_bright_buffer(self, service):
        stats = service.compute(buffer_of(np.full((512, 512), 255)))
        assert stats.mean_intensity == 255.0

    def test_min_le_mean_le_max(self, service, rng):
        for _ in range(20):
            shape = tuple(rng.integers(1, 40, size=2))
            values = rng.integers(0, 256, size=shape, dtype=np.uint8)
            stats = service.compute(buffer_of(values))
            assert stats.min_intensity <= stats.mean_intensity <= stats.max_intensity
            assert stats.min_intensity == int(values.min())
            assert stats.max_intensity == int(values.max())
            assert stats.mean_intensity == pytest.approx(values.mean())

    def test_stats_are_grayscale(self, service):
        stats = service.compute(buffer_of([1, 2, 3]))
        assert stats.color_type is ColorType.GRAYSCALE

    def test_empty_buffer(self, service):
        with pytest.raises(EmptyBuffer):
            service.compute(GrayscaleBuffer(0, 0, np.empty((0, 0), dtype=np.uint8)))

    def test_released_buffer(self, service):
        buffer = buffer_of([5, 6])
        buffer.release()
        with pytest.raises(EmptyBuffer):
            service.compute(buffer)

    def test_missing_buffer(self, service):
        with pytest.raises(InvalidSource):
            service.compute(None)
