"""Loader for ``key = value`` config files with typed coercion."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .logging_utils import get_module_logger

logger = get_module_logger(__name__)

_TRUE_WORDS = ("true", "yes", "on", "1")
_BOOL_WORDS = _TRUE_WORDS + ("false", "no", "off", "0")


class ConfigLoader:
    """Parses flat config files such as the bundled ``config.txt``.

    Lines are ``key = value``; ``#`` starts a comment, blank lines are
    skipped. When ``defaults`` are given, each value is coerced to the type
    of its default so ``surface_width = 640`` becomes ``640`` and not
    ``"640"``.
    """

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False,
    ) -> Dict[str, Any]:
        config = dict(defaults) if defaults else {}

        if not config_path.exists():
            if defaults:
                logger.debug("Config file not found at %s, using defaults", config_path)
            else:
                logger.warning("Config file not found at %s and no defaults provided", config_path)
            return config

        logger.debug("Loading config from: %s", config_path)
        with open(config_path, "r", encoding="utf-8") as fh:
            parsed = ConfigLoader.parse_lines(fh, defaults=defaults, strict=strict, origin=str(config_path))

        config.update(parsed)
        logger.info("Loaded config from %s (%d values)", config_path, len(parsed))
        return config

    @staticmethod
    def parse_lines(
        lines: Iterable[str],
        *,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False,
        origin: str = "<config>",
    ) -> Dict[str, Any]:
        config: Dict[str, Any] = {}

        for line_num, raw_line in enumerate(lines, 1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                logger.warning("Invalid config line %s:%d (missing '='): %s", origin, line_num, line)
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.split("#", 1)[0].strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]

            if strict and defaults is not None and key not in defaults:
                logger.warning("Unknown config key '%s' (%s:%d) - ignored in strict mode", key, origin, line_num)
                continue

            if defaults and key in defaults:
                config[key] = ConfigLoader._parse_value_with_type(value, type(defaults[key]), defaults[key])
            else:
                config[key] = ConfigLoader._parse_value(value)

        return config

    @staticmethod
    def _parse_value(value: str) -> Any:
        lowered = value.lower()
        if lowered in _BOOL_WORDS:
            return lowered in _TRUE_WORDS

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
    def _parse_value_with_type(value: str, target_type: type, fallback: Any = None) -> Any:
        if target_type is bool:
            return value.lower() in _TRUE_WORDS

        if target_type is int:
            try:
                return int(value, 0)
            except ValueError:
                logger.warning("Failed to parse '%s' as int, keeping %r", value, fallback)
                return fallback

        if target_type is float:
            try:
                return float(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as float, keeping %r", value, fallback)
                return fallback

        return value


__all__ = ["ConfigLoader"]
