from __future__ import annotations

from typing import Optional

import numpy as np

from grayscope.models.errors import EmptyBuffer, InvalidSource
from grayscope.models.image_model import GrayscaleBuffer, IntensityStats


class StatsService:
    def compute(self, buffer: Optional[GrayscaleBuffer]) -> IntensityStats:
        """Минимум, максимум и среднее значение яркости.

        Сумма, минимум и максимум считаются векторными редукциями numpy; результат
        не зависит от порядка обхода и совпадает с последовательным проходом.

        Raises:
            InvalidSource: буфер не передан.
            EmptyBuffer: в буфере нет ни одного пикселя (например, после `release()`).
        """
        if buffer is None:
            raise InvalidSource("no grayscale buffer given")
        total = buffer.width * buffer.height
        if total == 0 or buffer.data_size == 0:
            raise EmptyBuffer(f"grayscale buffer {buffer.width}x{buffer.height} has no pixels")

        pixels = buffer.pixels
        # uint64: сумма uint8 переполнилась бы в исходном типе
        total_sum = int(pixels.sum(dtype=np.uint64))
        return IntensityStats(
            width=buffer.width,
            height=buffer.height,
            mean_intensity=total_sum / total,
            min_intensity=int(pixels.min()),
            max_intensity=int(pixels.max()),
        )
