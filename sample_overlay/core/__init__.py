"""Shared infrastructure: logging and config file loading."""

from .config_loader import ConfigLoader
from .logging_config import configure_logging
from .logging_utils import StructuredLogger, get_module_logger

__all__ = ["ConfigLoader", "configure_logging", "StructuredLogger", "get_module_logger"]
