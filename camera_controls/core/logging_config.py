"""Root logging setup for the gui and headless entry points.

Console records always go to stderr; in headless mode stdout carries
the rendered control listing and must stay clean. The file handler, when
configured, keeps the full timestamped format regardless of mode.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional, Union

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMATS: Dict[str, str] = {
    "gui": "%(asctime)s | %(levelname)-8s | %(message)s",
    # one short line per record next to the listing
    "headless": "%(levelname)s: %(message)s",
}

LOG_FILE_MAX_BYTES = 256 * 1024
LOG_FILE_BACKUPS = 1

# Handlers installed by configure_logging, tagged so reconfiguring replaces only ours
_HANDLER_TAG = "_camera_controls_handler"


def coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level '{level}'")
        return value
    return int(level)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    mode: str = "gui",
    console: bool = True,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """Install the console and optional rotating file handler on the root logger.

    Calling it again replaces the handlers of the previous call and leaves
    handlers installed by anyone else (pytest's capture, for instance) alone.
    """
    numeric_level = coerce_level(level)
    root = logging.getLogger()

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    if console:
        fmt = CONSOLE_FORMATS.get(mode, CONSOLE_FORMATS["gui"])
        _install(root, logging.StreamHandler(sys.stderr), logging.Formatter(fmt, datefmt="%H:%M:%S"))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        _install(root, file_handler, logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))

    root.setLevel(numeric_level)


def _install(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_TAG, True)
    root.addHandler(handler)


__all__ = ["CONSOLE_FORMATS", "FILE_FORMAT", "coerce_level", "configure_logging"]
