"""Модели данных для анализа изображений.

Принципы:
- SRP: только структуры данных и проверка их инвариантов, без алгоритмов анализа.
- Чистый код: результаты анализа неизменяемы (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Optional, Union

import numpy as np

from grayscope.models.errors import InvalidSource


class ColorType(IntEnum):
    """Тип цвета по числу каналов. Значение совпадает с количеством каналов."""
    UNKNOWN = 0
    GRAYSCALE = 1
    RGB = 3
    RGBA = 4


SUPPORTED_CHANNELS = (1, 3, 4)


@dataclass(frozen=True)
class PixelSource:
    """Декодированное изображение: геометрия и байты пикселей построчно.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        channels: Количество каналов (поддерживаются 1, 3, 4).
        pixels: Байты пикселей, строки идут подряд с шагом `stride`.
        stride: Байт на строку; может быть больше `width * channels` из-за выравнивания.
        path: Путь к исходному файлу, если известен.
    """
    width: int
    height: int
    channels: int
    pixels: bytes = field(repr=False)
    stride: int = 0
    path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.stride == 0:
            object.__setattr__(self, "stride", self.width * self.channels)

    @classmethod
    def from_array(cls, array: np.ndarray, path: Union[str, Path, None] = None) -> "PixelSource":
        """Собирает источник из массива `uint8` формы (H, W) или (H, W, C)."""
        arr = np.asarray(array)
        if arr.dtype != np.uint8:
            raise InvalidSource(f"expected uint8 pixels, got {arr.dtype}")
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise InvalidSource(f"expected 2-D or 3-D array, got shape {arr.shape}")
        height, width, channels = arr.shape
        return cls(
            width=width,
            height=height,
            channels=channels,
            pixels=np.ascontiguousarray(arr).tobytes(),
            stride=width * channels,
            path=Path(path) if path is not None else None,
        )

    @property
    def filename(self) -> Optional[str]:
        return str(self.path) if self.path is not None else None

    def validate_geometry(self) -> None:
        """Проверяет геометрию до любого чтения пикселей.

        Raises:
            InvalidSource: неположительные размеры, слишком короткий шаг строки
                или буфер меньше заявленной геометрии.
        """
        if self.width <= 0 or self.height <= 0:
            raise InvalidSource(f"invalid dimensions {self.width}x{self.height}")
        if self.channels <= 0:
            raise InvalidSource(f"invalid channel count {self.channels}")
        row_bytes = self.width * self.channels
        if self.stride < row_bytes:
            raise InvalidSource(f"row stride {self.stride} is shorter than a row of {row_bytes} bytes")
        required = (self.height - 1) * self.stride + row_bytes
        if len(self.pixels) < required:
            raise InvalidSource(f"pixel buffer holds {len(self.pixels)} bytes, geometry needs {required}")

    def pixel_view(self) -> np.ndarray:
        """Возвращает read-only представление (H, W, C) поверх буфера с учётом `stride`.

        Копия не создаётся: байты выравнивания в конце строк просто пропускаются.
        """
        self.validate_geometry()
        return np.ndarray(
            shape=(self.height, self.width, self.channels),
            dtype=np.uint8,
            buffer=self.pixels,
            strides=(self.stride, self.channels, 1),
        )


@dataclass(frozen=True)
class ColorClassification:
    """Результат классификации цвета.

    Fields:
        color_type: Тип по числу каналов.
        is_monochrome: Все пиксели имеют равные (с допуском) каналы, либо канал один.
        has_transparency: Истинно только для 4-канальных изображений.
    """
    color_type: ColorType
    is_monochrome: bool
    has_transparency: bool


@dataclass
class GrayscaleBuffer:
    """Одноканальное изображение: один байт (0..255) на пиксель.

    Буфер принадлежит владельцу значения и освобождается через `release()`
    (или выходом из блока `with`) после того, как все потребители закончили работу.
    """
    width: int
    height: int
    pixels: np.ndarray = field(repr=False)
    source_filename: Optional[str] = None

    def __post_init__(self) -> None:
        if self.pixels.dtype != np.uint8:
            raise InvalidSource(f"grayscale pixels must be uint8, got {self.pixels.dtype}")
        if self.pixels.shape != (self.height, self.width):
            raise InvalidSource(
                f"grayscale pixels have shape {self.pixels.shape}, expected {(self.height, self.width)}"
            )

    def __enter__(self) -> "GrayscaleBuffer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    @property
    def data_size(self) -> int:
        """Размер данных в байтах (всегда `width * height`)."""
        return int(self.pixels.size)

    @property
    def released(self) -> bool:
        return self.data_size == 0

    def get_pixel(self, x: int, y: int) -> int:
        self._check_bounds(x, y)
        return int(self.pixels[y, x])

    def set_pixel(self, x: int, y: int, value: int) -> None:
        self._check_bounds(x, y)
        if not 0 <= value <= 255:
            raise ValueError(f"intensity {value} is outside 0..255")
        self.pixels[y, x] = value

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def release(self) -> None:
        """Освобождает пиксели и обнуляет размеры. Повторный вызов безопасен."""
        self.pixels = np.empty((0, 0), dtype=np.uint8)
        self.width = 0
        self.height = 0
        self.source_filename = None

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside {self.width}x{self.height}")


@dataclass(frozen=True)
class IntensityStats:
    """Статистика яркости одноканального изображения.

    Пустое состояние (ни одного пикселя): min=255, max=0, mean=0.0.
    """
    width: int
    height: int
    mean_intensity: float
    min_intensity: int
    max_intensity: int
    color_type: ColorType = ColorType.GRAYSCALE

    @classmethod
    def empty(cls, width: int = 0, height: int = 0) -> "IntensityStats":
        return cls(width=width, height=height, mean_intensity=0.0, min_intensity=255, max_intensity=0)

    @property
    def contrast(self) -> int:
        return self.max_intensity - self.min_intensity
