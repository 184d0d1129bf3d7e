"""Cursor state and viewport-to-surface coordinate mapping."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Tuple

from ..core.logging_utils import get_module_logger

logger = get_module_logger(__name__)


@dataclass(frozen=True)
class Cursor:
    x: float
    y: float


@dataclass(frozen=True)
class SurfaceBounds:
    """On-screen rectangle of the displayed surface, in viewport pixels."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class TouchPoint:
    page_x: Optional[float] = None
    page_y: Optional[float] = None
    client_x: Optional[float] = None
    client_y: Optional[float] = None


@dataclass
class PointerEvent:
    """Pointer, mouse or touch input normalised for :class:`CursorStore`.

    ``page_x``/``page_y`` are preferred; hosts that only know widget-relative
    positions can fill ``client_x``/``client_y`` instead. Touch input carries
    its points in ``touches``.
    """

    page_x: Optional[float] = None
    page_y: Optional[float] = None
    client_x: Optional[float] = None
    client_y: Optional[float] = None
    touches: Sequence[TouchPoint] = ()
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


BoundsProvider = Callable[[], SurfaceBounds]


def viewport_position(event: Any) -> Optional[Tuple[float, float]]:
    """Pick the viewport coordinates out of ``event``.

    Uses the first touch point when present, then page coordinates, then
    client coordinates. Returns None when no pair is available.
    """
    touches = getattr(event, "touches", None) or ()
    target = touches[0] if len(touches) > 0 else event

    px = getattr(target, "page_x", None)
    py = getattr(target, "page_y", None)
    if px is None or py is None:
        px = getattr(target, "client_x", None)
        py = getattr(target, "client_y", None)
    if px is None or py is None:
        return None
    return float(px), float(py)


def map_to_surface(
    px: float,
    py: float,
    bounds: SurfaceBounds,
    surface_size: Tuple[int, int],
) -> Cursor:
    if bounds.width <= 0 or bounds.height <= 0:
        raise ValueError(f"Surface bounds must have a positive size, got {bounds}")
    width, height = surface_size
    return Cursor(
        x=width / bounds.width * (px - bounds.left),
        y=height / bounds.height * (py - bounds.top),
    )


class CursorStore:
    """Holds the selection point in surface-logical coordinates.

    Writes come from pointer handlers, reads from the render tick. The lock
    only makes each read or write atomic; a cursor set between ticks shows up
    in the next tick at the latest.
    """

    def __init__(self, surface_size: Tuple[int, int], bounds_provider: BoundsProvider) -> None:
        self._surface_size = surface_size
        self._bounds_provider = bounds_provider
        self._lock = threading.Lock()
        self._cursor = self.center

    @property
    def center(self) -> Cursor:
        width, height = self._surface_size
        return Cursor(width / 2, height / 2)

    @property
    def cursor(self) -> Cursor:
        with self._lock:
            return self._cursor

    def set(self, x: float, y: float) -> Cursor:
        cursor = Cursor(float(x), float(y))
        with self._lock:
            self._cursor = cursor
        logger.debug("Cursor moved to (%.1f, %.1f)", cursor.x, cursor.y)
        return cursor

    def reset(self) -> Cursor:
        center = self.center
        return self.set(center.x, center.y)

    def set_from_pointer_event(self, event: Any) -> Optional[Cursor]:
        """Move the cursor to where ``event`` landed on the surface.

        The event's default action is always suppressed. Events without any
        usable coordinates leave the cursor unchanged and return None.
        """
        prevent_default = getattr(event, "prevent_default", None)
        if callable(prevent_default):
            prevent_default()

        position = viewport_position(event)
        if position is None:
            logger.debug("Ignoring pointer event without coordinates: %r", event)
            return None

        mapped = map_to_surface(position[0], position[1], self._bounds_provider(), self._surface_size)
        return self.set(mapped.x, mapped.y)


__all__ = [
    "Cursor",
    "CursorStore",
    "PointerEvent",
    "SurfaceBounds",
    "TouchPoint",
    "map_to_surface",
    "viewport_position",
]
