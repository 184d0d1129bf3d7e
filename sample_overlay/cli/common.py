from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.logging_config import configure_logging

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# CLI flag dest -> OverlayConfig field
CONFIG_OVERRIDES = (
    "surface_width",
    "surface_height",
    "tick_interval_ms",
    "sample_side",
    "sample_half_size",
    "indicator_half_size",
    "indicator_box_side",
)


def parse_source(value: str) -> Union[int, str]:
    """Camera indices are given as plain integers, anything else is a path or URL."""
    text = value.strip()
    if text.isdigit():
        return int(text)
    return text


def add_common_cli_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (key = value) overriding the bundled defaults",
    )

    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS.keys()),
        default=None,
        help="Logging verbosity (defaults to the config file's log_level)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional path for a rotating log file",
    )

    console_group = parser.add_mutually_exclusive_group()
    console_group.add_argument(
        "--console",
        dest="console_output",
        action="store_true",
        default=True,
        help="Log to stdout (default)",
    )
    console_group.add_argument(
        "--no-console",
        dest="console_output",
        action="store_false",
        help="Log to the log file only",
    )


def add_overlay_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("overlay")
    group.add_argument("--surface-width", type=int, default=None, help="Logical surface width in pixels")
    group.add_argument("--surface-height", type=int, default=None, help="Logical surface height in pixels")
    group.add_argument("--tick-interval-ms", type=int, default=None, help="Render loop cadence")
    group.add_argument("--sample-side", type=int, default=None, help="Side length of the sampled square")
    group.add_argument(
        "--sample-half-size",
        type=int,
        default=None,
        help="Offset of the sampled square's top-left corner from the cursor",
    )
    group.add_argument("--indicator-half-size", type=int, default=None, help="Half extent of the crosshair")
    group.add_argument("--indicator-box-side", type=int, default=None, help="Side of the indicator box")


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides = {name: getattr(args, name, None) for name in CONFIG_OVERRIDES}
    if getattr(args, "log_level", None):
        overrides["log_level"] = args.log_level
    return overrides


def setup_logging(args: argparse.Namespace, level: Optional[str] = None) -> None:
    configure_logging(
        level or getattr(args, "log_level", None) or "info",
        console=getattr(args, "console_output", True),
        log_file=getattr(args, "log_file", None),
        force=True,
    )


__all__ = [
    "LOG_LEVELS",
    "add_common_cli_arguments",
    "add_overlay_arguments",
    "config_overrides",
    "parse_source",
    "setup_logging",
]
