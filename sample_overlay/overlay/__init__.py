from .config import OverlayConfig
from .cursor import Cursor, CursorStore, PointerEvent, SurfaceBounds, TouchPoint
from .events import REFRESH_EVENT, EventDispatcher, SampleEvent
from .painter import OverlayPainter
from .renderer import FrameRenderer
from .sampler import RegionSampler
from .sampling_overlay import SamplingOverlay
from .scheduler import AsyncioScheduler, RenderLoop, Scheduler, TkScheduler
from .surface import RasterSurface

__all__ = [
    "AsyncioScheduler",
    "Cursor",
    "CursorStore",
    "EventDispatcher",
    "FrameRenderer",
    "OverlayConfig",
    "OverlayPainter",
    "PointerEvent",
    "REFRESH_EVENT",
    "RasterSurface",
    "RegionSampler",
    "RenderLoop",
    "SampleEvent",
    "SamplingOverlay",
    "Scheduler",
    "SurfaceBounds",
    "TkScheduler",
    "TouchPoint",
]
