from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Sequence

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

MODES = ("gui", "headless")

# argparse dest -> config.txt key
ARG_CONFIG_KEYS: Dict[str, str] = {
    "device": "device.path",
    "v4l2_ctl": "v4l2.command",
    "timeout": "v4l2.timeout_s",
    "window_geometry": "ui.geometry",
    "log_level": "logging.level",
    "log_file": "logging.file",
}


def add_common_cli_arguments(
    parser: argparse.ArgumentParser,
    *,
    allowed_modes: Sequence[str] = MODES,
    default_mode: str = "gui",
    include_config: bool = True,
    include_window_geometry: bool = True,
) -> None:
    if allowed_modes:
        parser.add_argument(
            "--mode",
            choices=list(allowed_modes),
            default=default_mode,
            help="Show the control panel window, or print the controls and exit",
        )

    # Defaults stay None so config.txt values survive unless overridden
    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS.keys()),
        type=str.lower,
        default=None,
        help="Logging verbosity (default: logging.level from the config file)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional path to write rotating log files",
    )

    if include_config:
        parser.add_argument(
            "--config",
            type=Path,
            default=None,
            help="Configuration file (default: the bundled config.txt)",
        )

    if include_window_geometry:
        parser.add_argument(
            "--window-geometry",
            dest="window_geometry",
            type=str,
            default=None,
            help="Window position and size (format: WIDTHxHEIGHT+X+Y, e.g., 480x720+100+50)",
        )


def _positive_number(value: str, typ: type, name: str):
    """Generic positive number validator for argparse."""
    try:
        parsed = typ(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Value must be a {name}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("Value must be positive")
    return parsed


def positive_float(value: str) -> float:
    return _positive_number(value, float, "number")


def config_overrides_from_args(args: Any) -> Dict[str, Any]:
    """Map parsed CLI arguments onto config keys; unset arguments map to None."""
    return {key: getattr(args, dest, None) for dest, key in ARG_CONFIG_KEYS.items()}


def install_exception_handlers(logger: Any) -> None:
    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = handle_exception


def log_startup(logger: Any, app_name: str, **extra_info) -> None:
    logger.info("=" * 60)
    logger.info("%s starting", app_name)
    for key, value in extra_info.items():
        display_key = key.replace('_', ' ').title()
        logger.info("%s: %s", display_key, value)
    logger.info("=" * 60)


def log_shutdown(logger: Any, app_name: str) -> None:
    logger.info("=" * 60)
    logger.info("%s stopped", app_name)
    logger.info("=" * 60)


__all__ = [
    "ARG_CONFIG_KEYS",
    "LOG_LEVELS",
    "MODES",
    "add_common_cli_arguments",
    "config_overrides_from_args",
    "install_exception_handlers",
    "log_shutdown",
    "log_startup",
    "positive_float",
]
