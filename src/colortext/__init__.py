"""colortext - strings annotated with colors.

Build colored text, edit it with string operations that keep the colors on
the right characters, and render it to a terminal or to ``>[#RRGGBB]`` markup.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

from colortext.annotated import AnnotatedString, SplitOptions, concat, join
from colortext.color import Color
from colortext.errors import FormatError, InvariantError, RangeError
from colortext.markers import ColorMarker, normalize_markers
from colortext.markup import encode_markup, parse_markup
from colortext.render import Run, render_runs

if TYPE_CHECKING:
    from colortext.config import LogConfig

__version__ = "0.1.0"

__all__ = [
    "AnnotatedString",
    "Color",
    "ColorMarker",
    "FormatError",
    "InvariantError",
    "RangeError",
    "Run",
    "SplitOptions",
    "concat",
    "encode_markup",
    "join",
    "normalize_markers",
    "parse_markup",
    "render_runs",
    "setup_logging",
]

# Handlers installed by setup_logging, replaced on the next call
_installed_handlers: list[logging.Handler] = []


def setup_logging(config: LogConfig) -> None:
    """Configure logging to the console and, optionally, a rotating file.

    Intended for the command line tool; the library itself never configures
    logging.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if config.file_logging:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.log_dir / f"colortext.{os.getpid()}.log"

        # File handler - detailed logging with rotation (10MB, keep 5 backups)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)
        logging.info("Logging configured. Log file: %s", log_file.absolute())
