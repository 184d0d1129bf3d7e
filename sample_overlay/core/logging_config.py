"""Root logging setup shared by the CLI and the tests."""

from __future__ import annotations

import contextlib
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
_DEFAULT_MAX_BYTES = 500 * 1024
_DEFAULT_BACKUP_COUNT = 2

_configured = False


def coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        name = level.strip().upper()
        value = logging.getLevelName(name)
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level '{level}'")
        return value
    return int(level)


def _build_handlers(
    level: int,
    console: bool,
    log_file: Optional[Union[str, Path]],
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers: List[logging.Handler] = []

    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    force: bool = False,
    console: bool = True,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = _DEFAULT_MAX_BYTES,
    backup_count: int = _DEFAULT_BACKUP_COUNT,
    quiet_loggers: Iterable[str] = ("PIL",),
) -> None:
    """Install the stdout and rotating-file handlers on the root logger.

    Args:
        level: Desired logging level (int or name such as "debug").
        force: Rebuild handlers even if logging was configured before.
        console: Whether to emit logs to stdout.
        log_file: Optional path for a rotating file handler.
        max_bytes: Max bytes before rotating the log file.
        backup_count: Number of rotated log files to keep.
        quiet_loggers: Third-party logger names raised to WARNING.
    """

    global _configured
    numeric_level = coerce_level(level)
    root = logging.getLogger()

    if _configured and not force:
        root.setLevel(numeric_level)
        return

    for handler in list(root.handlers):
        root.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()

    for handler in _build_handlers(numeric_level, console, log_file, max_bytes, backup_count):
        root.addHandler(handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    root.setLevel(numeric_level)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


__all__ = ["configure_logging", "coerce_level", "LOG_FORMAT", "LOG_DATEFMT"]
