"""Контроллер приложения: оркестрация сервисов и вывода.

SOLID:
- SRP: класс связывает сервисы и отчёты (без логики обработки изображений).
- DIP: сервисы и функция вывода передаются снаружи; по умолчанию создаются стандартные.
Clean Code:
- Ошибки одного файла не прерывают обработку остальных.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from grayscope.models.config_model import AppConfig
from grayscope.models.errors import GrayscopeError
from grayscope.models.image_model import ColorClassification, IntensityStats
from grayscope.services.analysis_service import AnalysisService
from grayscope.services.image_service import ImageService, grayscale_filename
from grayscope.services.process_service import ProcessService
from grayscope.services.stats_service import StatsService
from grayscope.ui import report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileResult:
    """Итог обработки одного файла."""
    path: Path
    analysis: ColorClassification
    stats: IntensityStats
    output_path: Optional[Path]


@dataclass
class AppController:
    """Выполняет конвейер: загрузка -> анализ -> серое -> статистика -> сохранение.

    Ответственности:
    - Владеет контекстом кодека (`ImageService`) на время `run`.
    - Освобождает серый буфер после того, как статистика и сохранение завершены.
    - Печатает отчёты через `emit` и пишет диагностику в лог.
    """
    config: AppConfig = field(default_factory=AppConfig)
    emit: Callable[[str], None] = print
    image_service: ImageService = field(default_factory=ImageService)

    failed: int = field(default=0, init=False)

    _analysis_service: AnalysisService = field(init=False, repr=False)
    _process_service: ProcessService = field(init=False, repr=False)
    _stats_service: StatsService = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._analysis_service = AnalysisService(tolerance=self.config.tolerance)
        self._process_service = ProcessService(self._analysis_service)
        self._stats_service = StatsService()

    def run(self, paths: Iterable[Union[str, Path]]) -> List[FileResult]:
        """Обрабатывает файлы по очереди; возвращает результаты успешных.

        Кодек инициализируется на входе и закрывается на выходе, даже при ошибке.
        """
        results: List[FileResult] = []
        failed = 0
        with self.image_service:
            self.emit(report.formats_banner(self.image_service.supported_formats()))
            for path in paths:
                try:
                    results.append(self.process_file(path))
                except (GrayscopeError, OSError) as exc:
                    # FileNotFoundError входит в OSError
                    failed += 1
                    logger.error("failed to process %s: %s", path, exc)
                    self.emit(report.failure_message(path, exc))
        self.emit(report.summary_message(len(results), failed))
        self.failed = failed
        return results

    def process_file(self, file_path: Union[str, Path]) -> FileResult:
        """Полный конвейер для одного файла. Кодек должен быть инициализирован."""
        source = self.image_service.load_image(file_path)
        self.emit(report.format_source(source))

        analysis = self._analysis_service.classify(source)
        logger.debug("classified %s as %s (monochrome=%s)", file_path, analysis.color_type.name, analysis.is_monochrome)
        self.emit(report.format_analysis(source, analysis))

        with self._process_service.get_grayscale(source, on_branch=self._announce_branch) as gray:
            self.emit(report.luminance_note())
            self.emit(report.format_grayscale(gray))

            stats = self._stats_service.compute(gray)
            self.emit(report.format_stats(stats))

            output_path = None
            if self.config.save:
                output_path = grayscale_filename(
                    file_path,
                    output_dir=self.config.output_dir,
                    suffix=self.config.suffix,
                    extension=self.config.extension,
                )
                self.image_service.save_grayscale(gray, output_path, mode=self.config.save_mode)
                self.emit(report.saved_message(output_path))

        return FileResult(path=Path(file_path), analysis=analysis, stats=stats, output_path=output_path)

    # ---- Helpers ----
    def _announce_branch(self, is_monochrome: bool) -> None:
        logger.info("grayscale path: %s", "extract" if is_monochrome else "convert")
        self.emit(report.branch_message(is_monochrome))
