"""Raster surface backed by an RGBA numpy array."""

from __future__ import annotations

from typing import Optional, Protocol, Tuple

import cv2
import numpy as np

from ..core.logging_utils import get_module_logger
from .cursor import SurfaceBounds

logger = get_module_logger(__name__)

Point = Tuple[int, int]
Color = Tuple[int, int, int, int]


class SurfaceDisplay(Protocol):
    """Something that shows the surface on screen (e.g. a Tk canvas)."""

    def bounds(self) -> SurfaceBounds:
        ...

    def show(self, pixels: np.ndarray) -> None:
        ...


def to_rgba(frame: np.ndarray) -> np.ndarray:
    """Convert an OpenCV frame (gray, BGR or BGRA) to RGBA."""
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGBA)
    if frame.ndim == 3:
        channels = frame.shape[2]
        if channels == 1:
            return cv2.cvtColor(np.ascontiguousarray(frame[:, :, 0]), cv2.COLOR_GRAY2RGBA)
        if channels == 3:
            return cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA)
        if channels == 4:
            return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
    raise ValueError(f"Unsupported frame shape {frame.shape}")


class RasterSurface:
    """Fixed-resolution RGBA drawing target.

    All coordinates are logical surface pixels. The surface starts fully
    transparent. When a display is attached it supplies the on-screen bounds
    used for pointer mapping; otherwise the surface reports itself at the
    origin at 1:1 scale.
    """

    def __init__(self, width: int = 1280, height: int = 960) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._pixels = np.zeros((self._height, self._width, 4), dtype=np.uint8)
        self._display: Optional[SurfaceDisplay] = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def pixels(self) -> np.ndarray:
        """Live backing store, shape ``(height, width, 4)``."""
        return self._pixels

    # ------------------------------------------------------------------
    # Drawing

    def draw_frame(self, frame: np.ndarray) -> None:
        """Blit ``frame`` over the whole surface, resizing when needed."""
        rgba = to_rgba(frame)
        if rgba.shape[1] != self._width or rgba.shape[0] != self._height:
            rgba = cv2.resize(rgba, (self._width, self._height), interpolation=cv2.INTER_LINEAR)
        np.copyto(self._pixels, rgba)

    def stroke_line(self, start: Point, end: Point, color: Color, width: int) -> None:
        cv2.line(self._pixels, start, end, color, width)

    def stroke_rect(self, top_left: Point, bottom_right: Point, color: Color, width: int) -> None:
        cv2.rectangle(self._pixels, top_left, bottom_right, color, width)

    # ------------------------------------------------------------------
    # Reading

    def read_region(self, x: int, y: int, width: int, height: int) -> bytes:
        """Return ``width*height`` RGBA pixels starting at ``(x, y)``.

        Pixels that fall outside the surface read as transparent black, so
        the result is always ``width*height*4`` bytes long.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Region size must be positive, got {width}x{height}")

        region = np.zeros((height, width, 4), dtype=np.uint8)

        src_x1 = max(0, x)
        src_y1 = max(0, y)
        src_x2 = min(self._width, x + width)
        src_y2 = min(self._height, y + height)

        if src_x2 > src_x1 and src_y2 > src_y1:
            dst_x1 = src_x1 - x
            dst_y1 = src_y1 - y
            region[dst_y1:dst_y1 + (src_y2 - src_y1), dst_x1:dst_x1 + (src_x2 - src_x1)] = (
                self._pixels[src_y1:src_y2, src_x1:src_x2]
            )

        return region.tobytes()

    # ------------------------------------------------------------------
    # Display

    def attach_display(self, display: Optional[SurfaceDisplay]) -> None:
        self._display = display
        logger.debug("Surface %dx%d display set to %r", self._width, self._height, display)

    def bounds(self) -> SurfaceBounds:
        if self._display is not None:
            return self._display.bounds()
        return SurfaceBounds(0.0, 0.0, float(self._width), float(self._height))

    def present(self) -> None:
        if self._display is not None:
            self._display.show(self._pixels)


__all__ = ["RasterSurface", "SurfaceDisplay", "to_rgba"]
