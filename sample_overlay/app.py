"""Desktop entry point: show a video, click to pick a point, log its pixels."""

from __future__ import annotations

import argparse
import sys
from typing import Optional

import numpy as np

from . import __version__
from .cli.common import (
    add_common_cli_arguments,
    add_overlay_arguments,
    config_overrides,
    parse_source,
    setup_logging,
)
from .core.logging_utils import get_module_logger
from .errors import SampleOverlayError
from .overlay import REFRESH_EVENT, OverlayConfig, RasterSurface, SampleEvent, SamplingOverlay, TkScheduler
from .sources import CaptureVideoSource

logger = get_module_logger("app")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sample-overlay",
        description="Render a video, click to pick a point, and emit the pixels around it",
    )
    parser.add_argument(
        "source",
        type=parse_source,
        help="Video file, stream URL or camera index",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--window-width", type=int, default=640, help="Initial display width")
    parser.add_argument("--window-height", type=int, default=480, help="Initial display height")
    add_common_cli_arguments(parser)
    add_overlay_arguments(parser)
    return parser.parse_args(argv)


def describe_sample(event: SampleEvent) -> str:
    pixels = np.frombuffer(event.data, dtype=np.uint8).reshape(-1, 4)
    r, g, b, a = pixels.mean(axis=0)
    return f"{event.time:%H:%M:%S.%f} mean RGBA=({r:.1f}, {g:.1f}, {b:.1f}, {a:.1f}) over {len(pixels)} px"


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = OverlayConfig.load(args.config, overrides=config_overrides(args))
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(args, config.log_level)
    logger.info("Starting with config %s", config.to_dict())

    import tkinter as tk

    from .ui import TkSurfaceView

    try:
        source = CaptureVideoSource(args.source)
    except SampleOverlayError as exc:
        logger.error("%s", exc)
        return 1

    root = tk.Tk()
    root.title("Sample Overlay")

    surface = RasterSurface(config.surface_width, config.surface_height)
    view = TkSurfaceView(root, width=args.window_width, height=args.window_height)
    view.canvas.pack(fill=tk.BOTH, expand=True)
    surface.attach_display(view)

    overlay = SamplingOverlay(source, surface, config=config, scheduler=TkScheduler(root))
    view.set_pointer_handler(overlay.set_from_pointer_event)
    overlay.on(REFRESH_EVENT, lambda event: logger.debug("Sample %s", describe_sample(event)))

    root.bind("<space>", lambda _event: source.toggle())
    root.bind("<Escape>", lambda _event: root.destroy())
    root.protocol("WM_DELETE_WINDOW", root.destroy)

    # Let the canvas realise its size before the first frame is shown
    root.after(0, source.play)

    try:
        root.mainloop()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        overlay.close()
        source.release()

    return 0


if __name__ == "__main__":
    sys.exit(main())
