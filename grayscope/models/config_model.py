"""Настройки запуска конвейера."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from grayscope.services.image_service import DEFAULT_EXTENSION, DEFAULT_OUTPUT_DIR, DEFAULT_SUFFIX


@dataclass(frozen=True)
class AppConfig:
    """Неизменяемые параметры обработки.

    Fields:
        output_dir: Каталог для серых изображений.
        suffix: Добавка к имени файла результата.
        extension: Расширение файла результата.
        save_mode: "RGB" (R=G=B) или "L" (один канал).
        tolerance: Допуск при проверке R≈G≈B.
        save: Сохранять ли результат на диск.
    """
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    suffix: str = DEFAULT_SUFFIX
    extension: str = DEFAULT_EXTENSION
    save_mode: str = "RGB"
    tolerance: int = 1
    save: bool = True

    def __post_init__(self) -> None:
        if self.save_mode not in ("RGB", "L"):
            raise ValueError(f"save_mode must be 'RGB' or 'L', got {self.save_mode!r}")
        if self.tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        object.__setattr__(self, "output_dir", Path(self.output_dir))
