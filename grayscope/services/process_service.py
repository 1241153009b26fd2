from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from grayscope.models.errors import AllocationFailed, UnsupportedChannels
from grayscope.models.image_model import GrayscaleBuffer, PixelSource
from grayscope.services.analysis_service import AnalysisService, check_source

# Y = 0.2125*R + 0.7154*G + 0.0721*B
LUMA_R = 0.2125
LUMA_G = 0.7154
LUMA_B = 0.0721


class ProcessService:
    def __init__(self, analysis: Optional[AnalysisService] = None) -> None:
        self._analysis = analysis or AnalysisService()

    def convert(self, source: Optional[PixelSource]) -> GrayscaleBuffer:
        """
        Преобразование в оттенки серого по формуле яркости.

        Один канал копируется без изменений, у RGB/RGBA берутся R, G, B
        (альфа игнорируется), результат округляется как floor(Y + 0.5).
        Неподдерживаемые каналы отклоняются до выделения памяти.
        """
        source = check_source(source)
        view = source.pixel_view()

        try:
            out = np.empty((source.height, source.width), dtype=np.uint8)
        except MemoryError as exc:
            raise AllocationFailed(
                f"cannot allocate {source.width}x{source.height} grayscale buffer"
            ) from exc

        if source.channels == 1:
            out[:, :] = view[:, :, 0]
        else:
            out[:, :] = self._luminance(view)

        return GrayscaleBuffer(
            width=source.width,
            height=source.height,
            pixels=out,
            source_filename=source.filename,
        )

    def extract(self, source: Optional[PixelSource]) -> GrayscaleBuffer:
        """
        Копирует данные уже одноканального изображения.
        Для цветных изображений используйте `convert`.
        """
        source = check_source(source)
        if source.channels != 1:
            raise UnsupportedChannels(source.channels)
        return self.convert(source)

    def get_grayscale(
        self,
        source: Optional[PixelSource],
        on_branch: Optional[Callable[[bool], None]] = None,
    ) -> GrayscaleBuffer:
        """
        Возвращает серое изображение для любого поддерживаемого источника.

        Монохромность влияет только на сообщение: `on_branch(True)` для уже
        серых изображений, `on_branch(False)` для цветных. Обе ветки выполняют
        полное преобразование, численный результат одинаков.
        """
        source = check_source(source)
        if on_branch is not None:
            on_branch(self._analysis.is_monochrome(source))
        return self.convert(source)

    # ---------- Вспомогательные функции ----------
    def _luminance(self, view: np.ndarray) -> np.ndarray:
        """
        Взвешенная сумма каналов в float64 в том же порядке, что и формула,
        затем округление половины вверх.
        """
        r = view[:, :, 0].astype(np.float64)
        g = view[:, :, 1].astype(np.float64)
        b = view[:, :, 2].astype(np.float64)
        gray = LUMA_R * r + LUMA_G * g + LUMA_B * b
        # веса в сумме дают ~1.0, clip лишь страхует приведение к uint8
        return np.clip(np.floor(gray + 0.5), 0, 255).astype(np.uint8)
