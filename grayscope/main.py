"""Точка входа в приложение."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from grayscope.controllers.app_controller import AppController
from grayscope.models.config_model import AppConfig
from grayscope.services.image_service import DEFAULT_OUTPUT_DIR


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="grayscope",
        description="Image analysis: color type -> grayscale (luminance) -> intensity statistics",
    )
    p.add_argument("images", nargs="+", help="image files to analyze (PNG/JPG/BMP/GIF/TIFF)")
    p.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR, help="directory for <name>_gray.png results")
    p.add_argument("--mode", choices=["RGB", "L"], default="RGB",
                   help="save as 3-channel R=G=B (RGB) or single-channel (L)")
    p.add_argument("--tolerance", type=int, default=1, help="max channel difference still treated as gray")
    p.add_argument("--no-save", action="store_true", help="analyze only, do not write grayscale files")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    args = p.parse_args(argv)
    if args.tolerance < 0:
        p.error("--tolerance must be non-negative")
    return args


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы, запускает конвейер и возвращает код завершения."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    config = AppConfig(
        output_dir=args.output_dir,
        save_mode=args.mode,
        tolerance=args.tolerance,
        save=not args.no_save,
    )
    controller = AppController(config=config)
    controller.run(args.images)
    return 1 if controller.failed else 0


if __name__ == "__main__":
    sys.exit(main())
