"""Video-to-surface overlay that emits the pixels under a user-picked cursor."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from ..core.logging_utils import LoggerLike, ensure_structured_logger
from ..errors import MissingCollaboratorError
from ..sources.video_source import VideoSource
from .config import OverlayConfig
from .cursor import Cursor, CursorStore
from .events import REFRESH_EVENT, EventDispatcher, Listener, SampleEvent, Unsubscribe
from .painter import OverlayPainter
from .renderer import FrameRenderer
from .sampler import RegionSampler
from .scheduler import AsyncioScheduler, RenderLoop, Scheduler
from .surface import RasterSurface

Clock = Callable[[], datetime]


class SamplingOverlay:
    """Renders ``video`` onto ``surface`` and emits ``refresh`` events.

    Each tick copies the current frame, samples the window around the cursor,
    dispatches a :class:`SampleEvent`, paints the cursor indicator on top and
    presents the surface. Painting comes after dispatch so the indicator is
    never part of a sample; the next tick's frame copy overwrites it.

    The loop starts whenever the video source transitions to playing and
    ends quietly on the first tick that finds it paused or ended.
    """

    def __init__(
        self,
        video: Optional[VideoSource],
        surface: Optional[RasterSurface],
        *,
        config: Optional[OverlayConfig] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Clock = datetime.now,
        logger: LoggerLike = None,
    ) -> None:
        if video is None:
            raise MissingCollaboratorError("SamplingOverlay requires a video source")
        if surface is None:
            raise MissingCollaboratorError("SamplingOverlay requires a raster surface")

        self.config = config or OverlayConfig(surface_width=surface.width, surface_height=surface.height)
        if surface.size != self.config.surface_size:
            raise ValueError(
                f"Surface is {surface.width}x{surface.height} but config expects "
                f"{self.config.surface_width}x{self.config.surface_height}"
            )

        self.logger = ensure_structured_logger(logger, fallback_name="overlay.sampling_overlay")
        self._video = video
        self._surface = surface
        self._clock = clock

        self.cursor_store = CursorStore(surface.size, surface.bounds)
        self.renderer = FrameRenderer(video, surface)
        self.sampler = RegionSampler(surface, side_length=self.config.sample_side)
        self.painter = OverlayPainter(
            surface,
            box_side=self.config.indicator_box_side,
            line_width=self.config.indicator_line_width,
            color=self.config.accent_rgba,
        )
        self._events = EventDispatcher(known_events=(REFRESH_EVENT,))
        self._loop = RenderLoop(
            scheduler or AsyncioScheduler(),
            self._tick,
            interval_ms=self.config.tick_interval_ms,
        )

        video.add_play_listener(self._on_play)
        self._closed = False

    # ------------------------------------------------------------------
    # Properties

    @property
    def video(self) -> VideoSource:
        return self._video

    @property
    def surface(self) -> RasterSurface:
        return self._surface

    @property
    def cursor(self) -> Cursor:
        return self.cursor_store.cursor

    @property
    def running(self) -> bool:
        return self._loop.running

    @property
    def ticks(self) -> int:
        return self._loop.ticks

    # ------------------------------------------------------------------
    # Input

    def set_from_pointer_event(self, event: Any) -> Optional[Cursor]:
        """Move the cursor from a pointer, mouse or touch event."""
        return self.cursor_store.set_from_pointer_event(event)

    # ------------------------------------------------------------------
    # Listener registration

    def on(self, event_name: str, callback: Listener) -> Unsubscribe:
        """Register ``callback`` for ``event_name``; returns an unsubscribe callable.

        Only ``"refresh"`` is ever dispatched. Other names are accepted but
        their listeners are never called.
        """
        return self._events.add_listener(event_name, callback)

    add_event_listener = on

    def off(self, event_name: str, callback: Listener) -> bool:
        """Remove a listener added with :meth:`on`.

        Args:
            event_name: Name the listener was registered under.
            callback: The registered callable.

        Returns:
            True if the listener was registered and has been removed.
        """
        return self._events.remove_listener(event_name, callback)

    remove_event_listener = off

    # ------------------------------------------------------------------
    # Render loop

    def start(self) -> bool:
        """Start the render loop now, without waiting for a play transition."""
        if self._closed:
            self.logger.warning("start() called on a closed overlay")
            return False
        return self._loop.start()

    def stop(self) -> None:
        """Cancel the pending tick. A later play transition restarts the loop."""
        self._loop.stop()

    def close(self) -> None:
        """Stop the loop, detach from the video source and drop listeners."""
        if self._closed:
            return
        self._closed = True
        self._loop.stop()
        self._video.remove_play_listener(self._on_play)
        self._events.clear()
        self.logger.info("Sampling overlay closed")

    def _on_play(self) -> None:
        self.logger.debug("Video source started playing")
        self.start()

    def _tick(self) -> bool:
        if not self.renderer.can_render():
            self.logger.debug("Video paused or ended; render loop ending")
            return False

        self.renderer.render()

        cursor = self.cursor_store.cursor
        data = self.sampler.sample(cursor, self.config.sample_half_size)
        event = SampleEvent(data=data, time=self._clock(), source=self)
        self._events.dispatch(event)

        self.painter.paint(cursor, self.config.indicator_half_size)
        self._surface.present()
        return True


__all__ = ["SamplingOverlay"]
