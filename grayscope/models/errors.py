"""Исключения анализа и ввода-вывода изображений.

Каждое исключение наследует и `GrayscopeError`, и подходящее встроенное исключение,
чтобы вызывающий код мог ловить их как общим типом, так и привычным `ValueError`.
"""
from __future__ import annotations


class GrayscopeError(Exception):
    """Базовый тип всех ошибок пакета."""


class UnsupportedChannels(GrayscopeError, ValueError):
    """Количество каналов не входит в {1, 3, 4}."""

    def __init__(self, channels: int) -> None:
        super().__init__(f"unsupported channel count: {channels}")
        self.channels = channels


class InvalidSource(GrayscopeError, ValueError):
    """Источник отсутствует или его геометрия не согласована с буфером."""


class AllocationFailed(GrayscopeError, MemoryError):
    """Не удалось выделить буфер результата."""


class EmptyBuffer(GrayscopeError, ValueError):
    """Статистика запрошена для буфера без пикселей."""


class CodecNotInitialized(GrayscopeError, RuntimeError):
    """Кодек используется до вызова `init()` или после `close()`."""


class InvalidImageFormat(GrayscopeError, ValueError):
    """Файл не распознан как изображение."""


class ImageTooLarge(GrayscopeError, ValueError):
    """Число пикселей превышает защитный предел декодера."""
