"""Загрузка изображений с диска, сохранение результата и имена выходных файлов.

Принципы:
- SRP: класс отвечает только за декодирование/кодирование через Pillow.
- Явное состояние: инициализация кодека хранится в объекте `ImageService`,
  а не в глобальном флаге; жизненным циклом управляет вызывающий код.
"""
from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import List, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from grayscope.models.errors import CodecNotInitialized, ImageTooLarge, InvalidImageFormat, InvalidSource
from grayscope.models.image_model import GrayscaleBuffer, PixelSource

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPG", "JPEG", "BMP", "GIF", "TIF", "TIFF")

DEFAULT_OUTPUT_DIR = "grayscale_images"
DEFAULT_SUFFIX = "_gray"
DEFAULT_EXTENSION = ".png"

# режимы Pillow, которые сводятся к одному каналу
_SINGLE_CHANNEL_MODES = {"1", "L", "I", "I;16", "I;16B", "I;16L", "I;16N", "F"}
_ALPHA_MODES = {"RGBA", "LA", "PA", "La", "RGBa"}


def grayscale_filename(
    original: Union[str, Path],
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    suffix: str = DEFAULT_SUFFIX,
    extension: str = DEFAULT_EXTENSION,
    max_length: Optional[int] = None,
) -> Path:
    """Строит путь результата: "images/flowers.jpg" -> "grayscale_images/flowers_gray.png".

    Каталоги отбрасываются, расширение срезается по последней точке имени.

    Raises:
        ValueError: пустое исходное имя или результат длиннее `max_length`.
    """
    original = str(original)
    if not original:
        raise ValueError("original filename is empty")

    name = PurePath(original).name
    base, dot, _ext = name.rpartition(".")
    if not dot:
        base = name

    result = Path(output_dir) / f"{base}{suffix}{extension}"
    if max_length is not None and len(str(result)) > max_length:
        raise ValueError(f"output path {str(result)!r} exceeds {max_length} characters")
    return result


class ImageService:
    """Контекст кодека: `init()` перед работой, `close()` по завершении."""

    def __init__(self) -> None:
        self._initialized = False

    def __enter__(self) -> "ImageService":
        self.init()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        """Регистрирует форматы Pillow. Повторный вызов ничего не делает."""
        if self._initialized:
            return
        Image.init()
        self._initialized = True
        logger.debug("image codec initialized (%d formats registered)", len(Image.OPEN))

    def close(self) -> None:
        if not self._initialized:
            return
        self._initialized = False
        logger.debug("image codec closed")

    @staticmethod
    def supported_formats() -> List[str]:
        return list(SUPPORTED_FORMATS)

    def load_image(self, file_path: Union[str, Path]) -> PixelSource:
        """Загружает изображение с диска и возвращает его в виде `PixelSource`.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `PixelSource` с 1, 3 или 4 каналами и шагом строки `width * channels`.

        Raises:
            CodecNotInitialized: `init()` ещё не вызывался.
            FileNotFoundError: если путь не существует или не указывает на файл.
            InvalidImageFormat: если файл не распознан как изображение.
            ImageTooLarge: если размер превышает `Image.MAX_IMAGE_PIXELS` с запасом Pillow.
        """
        self._require_initialized()
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            with Image.open(path) as opened:
                pil_image = self._normalize_mode(opened)
        except UnidentifiedImageError as exc:
            raise InvalidImageFormat(f"Not an image file: {path}") from exc
        except Image.DecompressionBombError as exc:
            raise ImageTooLarge(f"Image is too large to decode safely: {path}") from exc

        channels = len(pil_image.getbands())
        width, height = pil_image.size
        logger.info("loaded %s (%dx%d, %d channels)", path, width, height, channels)
        return PixelSource(
            width=width,
            height=height,
            channels=channels,
            pixels=pil_image.tobytes(),
            stride=width * channels,
            path=path,
        )

    def save_grayscale(
        self,
        buffer: GrayscaleBuffer,
        output_path: Union[str, Path],
        mode: str = "RGB",
    ) -> Path:
        """Сохраняет серое изображение в PNG.

        Args:
            buffer: Серое изображение.
            output_path: Куда сохранить; родительский каталог создаётся.
            mode: "RGB" (R=G=B в каждом пикселе) или "L" (один канал).

        Raises:
            CodecNotInitialized: `init()` ещё не вызывался.
            InvalidSource: буфер пуст или уже освобождён.
            ValueError: неизвестный режим.
        """
        self._require_initialized()
        if mode not in ("RGB", "L"):
            raise ValueError(f"unsupported save mode: {mode}")
        if buffer is None or buffer.data_size == 0:
            raise InvalidSource("grayscale buffer is empty or released")

        image = Image.fromarray(buffer.pixels)
        if mode == "RGB":
            image = image.convert("RGB")

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path, format="PNG")
        logger.info("saved grayscale image %s (%s)", path, mode)
        return path

    # ---- Helpers ----
    def _require_initialized(self) -> None:
        if not self._initialized:
            raise CodecNotInitialized("image codec is not initialized, call init() first")

    def _normalize_mode(self, image: Image.Image) -> Image.Image:
        """Сводит режим Pillow к L, RGB или RGBA."""
        mode = image.mode
        if mode in ("L", "RGB", "RGBA"):
            return image.copy()
        if mode in _SINGLE_CHANNEL_MODES:
            if mode.startswith("I"):
                # целые режимы считаются 16-битными: 0..65535 -> 0..255 независимо от содержимого
                arr = np.clip(np.asarray(image, dtype=np.float64), 0, 65535) * (255.0 / 65535.0)
                return Image.fromarray(np.rint(arr).astype(np.uint8))
            if mode == "F":
                # F хранит яркость в единицах 0..255, лишнее обрезается
                arr = np.clip(np.rint(np.asarray(image, dtype=np.float64)), 0, 255)
                return Image.fromarray(arr.astype(np.uint8))
            return image.convert("L")
        if mode in _ALPHA_MODES or (mode == "P" and "transparency" in image.info):
            return image.convert("RGBA")
        return image.convert("RGB")
