"""Typed configuration helpers for camera-controls."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from camera_controls.core.config_loader import ConfigLoader
from camera_controls.core.logging_utils import LoggerLike, ensure_structured_logger

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.txt"

DEFAULT_DEVICE_PATH = "/dev/video0"
DEFAULT_V4L2_COMMAND = "v4l2-ctl"
DEFAULT_V4L2_TIMEOUT_S = 2.0
DEFAULT_UI_DEBOUNCE_MS = 100
DEFAULT_LOG_LEVEL = "INFO"

# Flat defaults as they appear in config.txt
DEFAULTS: Dict[str, Any] = {
    "device.path": DEFAULT_DEVICE_PATH,
    "v4l2.command": DEFAULT_V4L2_COMMAND,
    "v4l2.timeout_s": DEFAULT_V4L2_TIMEOUT_S,
    "ui.geometry": "",
    "ui.debounce_ms": DEFAULT_UI_DEBOUNCE_MS,
    "logging.level": DEFAULT_LOG_LEVEL,
    "logging.file": "",
}


@dataclass(slots=True)
class DeviceSettings:
    path: str


@dataclass(slots=True)
class V4l2Settings:
    command: str
    timeout_s: float


@dataclass(slots=True)
class UISettings:
    geometry: Optional[str]
    debounce_ms: int


@dataclass(slots=True)
class LoggingSettings:
    level: str
    file: Optional[Path]


@dataclass(slots=True)
class ControlsConfig:
    device: DeviceSettings
    v4l2: V4l2Settings
    ui: UISettings
    logging: LoggingSettings


# ---------------------------------------------------------------------------
# Public API


def read_config_file(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Read ``config_path`` (or the bundled config.txt) merged over DEFAULTS."""

    return ConfigLoader.load(Path(config_path or DEFAULT_CONFIG_PATH), DEFAULTS, strict=False)


def load_config(
    data: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    *,
    logger: LoggerLike = None,
) -> ControlsConfig:
    """Build a typed config from flat config data plus optional overrides.

    Overrides whose value is ``None`` are ignored, so argparse namespaces
    with unset options can be passed straight through.
    """

    log = ensure_structured_logger(logger, fallback_name=__name__)
    merged: Dict[str, Any] = dict(DEFAULTS)
    merged.update(data or {})
    if overrides:
        for key, value in overrides.items():
            if value is not None:
                merged[key] = value

    timeout = _coerce_float(merged, ("v4l2.timeout_s",), DEFAULT_V4L2_TIMEOUT_S)
    if timeout <= 0:
        log.warning("Ignoring non-positive v4l2.timeout_s=%s", timeout)
        timeout = DEFAULT_V4L2_TIMEOUT_S

    debounce = _coerce_int(merged, ("ui.debounce_ms",), DEFAULT_UI_DEBOUNCE_MS)
    if debounce < 0:
        log.warning("Ignoring negative ui.debounce_ms=%s", debounce)
        debounce = DEFAULT_UI_DEBOUNCE_MS

    return ControlsConfig(
        device=DeviceSettings(
            path=_coerce_str(merged, ("device.path",), DEFAULT_DEVICE_PATH),
        ),
        v4l2=V4l2Settings(
            command=_coerce_str(merged, ("v4l2.command",), DEFAULT_V4L2_COMMAND),
            timeout_s=timeout,
        ),
        ui=UISettings(
            geometry=_coerce_optional_str(merged, ("ui.geometry",), default=None),
            debounce_ms=debounce,
        ),
        logging=LoggingSettings(
            level=_coerce_str(merged, ("logging.level",), DEFAULT_LOG_LEVEL).upper(),
            file=_coerce_optional_path(merged, ("logging.file",)),
        ),
    )


# ---------------------------------------------------------------------------
# Internal helpers


def _first_present(data: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _coerce_optional_str(data: Dict[str, Any], keys: Tuple[str, ...], default: Optional[str]) -> Optional[str]:
    raw = _first_present(data, keys)
    if raw is None:
        return default
    text = str(raw).strip()
    return text if text else default


def _coerce_str(data: Dict[str, Any], keys: Tuple[str, ...], default: str) -> str:
    raw = _first_present(data, keys)
    if raw is None:
        return default
    text = str(raw).strip()
    return text or default


def _coerce_int(data: Dict[str, Any], keys: Tuple[str, ...], default: int) -> int:
    raw = _first_present(data, keys)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _coerce_float(data: Dict[str, Any], keys: Tuple[str, ...], default: float) -> float:
    raw = _first_present(data, keys)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def _coerce_optional_path(data: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[Path]:
    raw = _first_present(data, keys)
    if raw is None:
        return None
    text = str(raw).strip()
    return Path(text) if text else None


__all__ = [
    "ControlsConfig",
    "DEFAULTS",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "read_config_file",
]
