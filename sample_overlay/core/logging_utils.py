"""Component-tagged loggers under the ``sample_overlay`` namespace."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOGGER_NAMESPACE = "sample_overlay"
DEFAULT_COMPONENT = "Overlay"


def _normalize_logger_name(name: Optional[str]) -> str:
    if not name:
        return LOGGER_NAMESPACE
    if name.startswith(LOGGER_NAMESPACE):
        return name
    return f"{LOGGER_NAMESPACE}.{name}"


def _derive_component(name: str) -> str:
    if not name or name == LOGGER_NAMESPACE:
        return DEFAULT_COMPONENT
    # "sample_overlay.overlay.cursor" -> "cursor"
    return name.rsplit(".", 1)[-1]


class StructuredLogger:
    """Thin wrapper that prefixes every message with ``[Component]``."""

    __slots__ = ("_logger", "_component")

    def __init__(self, logger: logging.Logger, component: Optional[str] = None) -> None:
        self._logger = logger
        self._component = component or _derive_component(logger.name)

    def __getattr__(self, item):
        return getattr(self._logger, item)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"StructuredLogger({self._logger!r}, component={self._component!r})"

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def component(self) -> str:
        return self._component

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _compose(self, message: object) -> str:
        text = str(message)
        prefix = f"[{self._component}]"
        if text.startswith(prefix):
            return text
        return f"{prefix} {text}"

    # ------------------------------------------------------------------
    # Logging API surface

    def log(self, level: int, message: object, *args, **kwargs) -> None:
        self._logger.log(level, self._compose(message), *args, **kwargs)

    def debug(self, message: object, *args, **kwargs) -> None:
        self._logger.debug(self._compose(message), *args, **kwargs)

    def info(self, message: object, *args, **kwargs) -> None:
        self._logger.info(self._compose(message), *args, **kwargs)

    def warning(self, message: object, *args, **kwargs) -> None:
        self._logger.warning(self._compose(message), *args, **kwargs)

    def error(self, message: object, *args, **kwargs) -> None:
        self._logger.error(self._compose(message), *args, **kwargs)

    def exception(self, message: object, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._logger.error(self._compose(message), *args, **kwargs)

    def getChild(self, suffix: str) -> "StructuredLogger":
        return StructuredLogger(self._logger.getChild(suffix), component=f"{self._component}.{suffix}")


LoggerLike = Union[StructuredLogger, logging.Logger, None]


def ensure_structured_logger(logger: LoggerLike, *, fallback_name: Optional[str] = None) -> StructuredLogger:
    """Return ``logger`` as a StructuredLogger, or a fresh module logger if None."""
    if isinstance(logger, StructuredLogger):
        return logger
    if isinstance(logger, logging.Logger):
        return StructuredLogger(logger)
    return get_module_logger(fallback_name)


def get_module_logger(name: Optional[str] = None) -> StructuredLogger:
    """Return a structured logger scoped to the sample_overlay namespace."""
    return StructuredLogger(logging.getLogger(_normalize_logger_name(name)))


__all__ = [
    "StructuredLogger",
    "ensure_structured_logger",
    "get_module_logger",
]
