"""Классификация цвета изображения.

Принципы:
- SRP: только определение типа цвета и монохромности, без преобразований.
- Без побочных эффектов: сервис не логирует и не хранит состояние между вызовами.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from grayscope.models.errors import InvalidSource, UnsupportedChannels
from grayscope.models.image_model import (
    SUPPORTED_CHANNELS,
    ColorClassification,
    ColorType,
    PixelSource,
)


def color_type_for(channels: int) -> ColorType:
    """Тип цвета по количеству каналов; `UNKNOWN` для неподдерживаемых."""
    if channels in SUPPORTED_CHANNELS:
        return ColorType(channels)
    return ColorType.UNKNOWN


def check_source(source: Optional[PixelSource]) -> PixelSource:
    """Общая входная проверка: источник есть, каналы поддерживаются, геометрия корректна.

    Raises:
        InvalidSource: источник отсутствует или геометрия некорректна.
        UnsupportedChannels: количество каналов не входит в {1, 3, 4}.
    """
    if source is None:
        raise InvalidSource("no pixel source given")
    if source.channels not in SUPPORTED_CHANNELS:
        raise UnsupportedChannels(source.channels)
    source.validate_geometry()
    return source


class AnalysisService:
    def __init__(self, tolerance: int = 1) -> None:
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        self.tolerance = tolerance

    def classify(self, source: Optional[PixelSource]) -> ColorClassification:
        """Определяет тип цвета, прозрачность и монохромность.

        Args:
            source: Декодированное изображение.

        Returns:
            `ColorClassification`. Для одноканальных изображений пиксели не сканируются.

        Raises:
            InvalidSource: источник отсутствует или геометрия некорректна.
            UnsupportedChannels: количество каналов не входит в {1, 3, 4}.
        """
        source = check_source(source)
        color_type = color_type_for(source.channels)
        return ColorClassification(
            color_type=color_type,
            is_monochrome=self.is_monochrome(source),
            has_transparency=color_type is ColorType.RGBA,
        )

    def is_monochrome(self, source: Optional[PixelSource]) -> bool:
        """Истинно, если для всех пикселей |R-G|, |G-B| и |R-B| не превышают допуск.

        Альфа-канал игнорируется. Результат не зависит от порядка обхода пикселей.
        """
        source = check_source(source)
        if source.channels == 1:
            return True

        # int16: разности uint8 иначе переполняются
        rgb = source.pixel_view()[:, :, :3].astype(np.int16)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
        tol = self.tolerance
        return bool(
            (np.abs(r - g) <= tol).all()
            and (np.abs(g - b) <= tol).all()
            and (np.abs(r - b) <= tol).all()
        )
