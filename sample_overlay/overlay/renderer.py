from __future__ import annotations

from ..sources.video_source import VideoSource
from .surface import RasterSurface


class FrameRenderer:
    """Copies the video source's current frame onto the surface."""

    def __init__(self, video: VideoSource, surface: RasterSurface) -> None:
        self._video = video
        self._surface = surface
        self._frames_drawn = 0

    @property
    def frames_drawn(self) -> int:
        return self._frames_drawn

    def can_render(self) -> bool:
        return not (self._video.paused or self._video.ended)

    def render(self) -> None:
        frame = self._video.current_frame()
        self._surface.draw_frame(frame)
        self._frames_drawn += 1
