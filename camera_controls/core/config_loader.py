"""Reader for ``key = value`` configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from camera_controls.core.logging_utils import get_module_logger

logger = get_module_logger(__name__)

TRUE_WORDS = ("true", "yes", "on", "1")
FALSE_WORDS = ("false", "no", "off", "0")


class ConfigLoader:
    """Parses flat config files such as ``config.txt``.

    Blank lines and ``#`` comments are skipped, inline comments are
    stripped. When ``defaults`` are given, values for known keys are
    parsed to the type of the default. Read-only: nothing is ever
    written back.
    """

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False,
    ) -> Dict[str, Any]:
        config = dict(defaults) if defaults else {}
        config_path = Path(config_path)

        if not config_path.exists():
            if defaults:
                logger.debug("Config file not found at %s, using defaults", config_path)
            else:
                logger.warning("Config file not found at %s and no defaults provided", config_path)
            return config

        logger.debug("Loading config from: %s", config_path)

        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to read config file %s: %s", config_path, exc)
            return config

        for line_num, line in enumerate(text.splitlines(), 1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                logger.warning("Invalid config line %d (missing '='): %s", line_num, line)
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if "#" in value:
                value = value.split("#", 1)[0].strip()

            if strict and defaults is not None and key not in defaults:
                logger.warning("Unknown config key '%s' (line %d) - ignored in strict mode", key, line_num)
                continue

            if defaults and key in defaults and defaults[key] is not None:
                config[key] = ConfigLoader._parse_value_with_type(value, type(defaults[key]))
            else:
                config[key] = ConfigLoader._parse_value(value)

        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def _parse_value(value: str) -> Any:
        value_lower = value.lower()
        if value_lower in TRUE_WORDS + FALSE_WORDS:
            return value_lower in TRUE_WORDS

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type) -> Any:
        if target_type is bool:
            return value.lower() in TRUE_WORDS

        if target_type is int:
            try:
                return int(value, 0)
            except ValueError:
                logger.warning("Failed to parse '%s' as int, using default", value)
                return target_type()

        if target_type is float:
            try:
                return float(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as float, using default", value)
                return target_type()

        return value


__all__ = ["ConfigLoader"]
