"""Process-wide plumbing: logging and configuration files."""

from camera_controls.core.config_loader import ConfigLoader
from camera_controls.core.logging_config import configure_logging
from camera_controls.core.logging_utils import (
    LoggerLike,
    StructuredLogger,
    ensure_structured_logger,
    get_module_logger,
)

__all__ = [
    "ConfigLoader",
    "LoggerLike",
    "StructuredLogger",
    "configure_logging",
    "ensure_structured_logger",
    "get_module_logger",
]
