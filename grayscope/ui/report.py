"""Текстовые отчёты для консоли.

Принципы:
- SRP: здесь живут все строки, которые видит пользователь; сервисы анализа
  возвращают только данные.
- ISP: каждая функция принимает одну модель и возвращает готовый текст.
"""
from __future__ import annotations

from typing import Iterable

from grayscope.models.image_model import (
    ColorClassification,
    ColorType,
    GrayscaleBuffer,
    IntensityStats,
    PixelSource,
)

_COLOR_TYPE_LABELS = {
    ColorType.GRAYSCALE: "Оттенки серого (1 канал)",
    ColorType.RGB: "RGB (3 канала)",
    ColorType.RGBA: "RGBA (4 канала)",
    ColorType.UNKNOWN: "Неизвестно",
}


def _yes_no(flag: bool) -> str:
    return "Да" if flag else "Нет"


def _section(title: str, lines: Iterable[str]) -> str:
    body = "\n".join(lines)
    return f"\n=== {title} ===\n{body}\n" + "=" * (len(title) + 8)


def color_type_label(color_type: ColorType) -> str:
    return _COLOR_TYPE_LABELS.get(color_type, _COLOR_TYPE_LABELS[ColorType.UNKNOWN])


def formats_banner(formats: Iterable[str]) -> str:
    return "Поддерживаемые форматы: " + ", ".join(formats)


def format_source(source: PixelSource) -> str:
    """Сведения о загруженном файле."""
    return "\n".join((
        f"Изображение загружено: {source.filename or '—'}",
        f"Размеры: {source.width}x{source.height} px",
        f"Каналы: {source.channels}",
    ))


def format_analysis(source: PixelSource, analysis: ColorClassification) -> str:
    return _section("Анализ изображения", (
        f"Размеры: {source.width}x{source.height} px",
        f"Тип цвета: {color_type_label(analysis.color_type)}",
        f"Оттенки серого: {_yes_no(analysis.is_monochrome)}",
        f"Прозрачность: {_yes_no(analysis.has_transparency)}",
    ))


def branch_message(is_monochrome: bool) -> str:
    """Сообщение о выбранной ветке получения серого изображения."""
    if is_monochrome:
        return "Изображение уже в оттенках серого — извлекаем данные пикселей"
    return "Изображение цветное — преобразуем в оттенки серого"


def luminance_note() -> str:
    return "Формула яркости: Y = 0.2125*R + 0.7154*G + 0.0721*B"


def format_grayscale(buffer: GrayscaleBuffer) -> str:
    lines = [
        f"Размеры: {buffer.width}x{buffer.height} px",
        f"Размер данных: {buffer.data_size} байт",
    ]
    if buffer.source_filename:
        lines.append(f"Исходный файл: {buffer.source_filename}")
    return _section("Изображение в оттенках серого", lines)


def format_stats(stats: IntensityStats) -> str:
    return _section("Статистика яркости", (
        f"Средняя яркость: {stats.mean_intensity:.2f}",
        f"Минимальная яркость: {stats.min_intensity}",
        f"Максимальная яркость: {stats.max_intensity}",
        f"Контраст: {stats.contrast}",
    ))


def saved_message(path) -> str:
    return f"Сохранено: {path}"


def failure_message(path, error: BaseException) -> str:
    return f"Ошибка обработки {path}: {error}"


def summary_message(processed: int, failed: int) -> str:
    return f"\nГотово: обработано {processed}, с ошибками {failed}."
