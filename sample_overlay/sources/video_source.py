"""Video sources the sampling overlay can render from."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union, runtime_checkable

import cv2
import numpy as np

from ..core.logging_utils import get_module_logger
from ..errors import VideoSourceError

logger = get_module_logger(__name__)

PlayListener = Callable[[], None]


@runtime_checkable
class VideoSource(Protocol):
    """What the overlay needs from a playable video.

    ``current_frame`` returns an OpenCV-style array (gray, BGR or BGRA).
    Play listeners fire each time the source transitions into playing.
    """

    @property
    def paused(self) -> bool:
        ...

    @property
    def ended(self) -> bool:
        ...

    def current_frame(self) -> np.ndarray:
        ...

    def add_play_listener(self, callback: PlayListener) -> None:
        ...

    def remove_play_listener(self, callback: PlayListener) -> None:
        ...


class PlayNotifier:
    """Play-listener bookkeeping shared by concrete sources."""

    def __init__(self) -> None:
        self._play_listeners: List[PlayListener] = []

    def add_play_listener(self, callback: PlayListener) -> None:
        if callback not in self._play_listeners:
            self._play_listeners.append(callback)

    def remove_play_listener(self, callback: PlayListener) -> None:
        if callback in self._play_listeners:
            self._play_listeners.remove(callback)

    def _notify_play(self) -> None:
        for callback in list(self._play_listeners):
            callback()


class CaptureVideoSource(PlayNotifier):
    """``cv2.VideoCapture`` wrapped with play/pause/ended state.

    ``target`` is a file path, stream URL or camera index. The source starts
    paused; :meth:`play` notifies play listeners. When the capture runs dry
    the source reports ``ended`` and keeps returning the last frame it read.

    Sources that report a frame rate (``CAP_PROP_FPS``) advance on their own
    clock: :meth:`current_frame` returns the frame due at the elapsed play
    time, holding the last frame between due times and grabbing past frames
    that were missed. Sources without a frame rate return the
    next frame on every call.
    """

    def __init__(
        self,
        target: Union[str, int, Path],
        *,
        capture_factory=cv2.VideoCapture,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self._target = str(target) if isinstance(target, Path) else target
        self._capture = capture_factory(self._target)
        if not self._capture.isOpened():
            raise VideoSourceError(f"Unable to open video source {self._target!r}")
        self._clock = clock
        fps = self._capture.get(cv2.CAP_PROP_FPS)
        self._fps = float(fps) if fps and fps > 0 else 0.0
        self._paused = True
        self._ended = False
        self._last_frame: Optional[np.ndarray] = None
        # Index of the frame in _last_frame; -1 before the first read
        self._shown_index = -1
        self._anchor_index = 0
        self._anchor_time = 0.0
        logger.info("Opened video source %r (fps=%s)", self._target, self._fps or "unpaced")

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def fps(self) -> float:
        """Playback rate in frames per second; 0.0 when the source is unpaced."""
        return self._fps

    def play(self) -> None:
        if self._ended:
            logger.debug("Ignoring play on ended source %r", self._target)
            return
        if not self._paused:
            return
        self._paused = False
        self._anchor_index = max(self._shown_index, 0)
        self._anchor_time = self._clock()
        logger.debug("Video source %r playing", self._target)
        self._notify_play()

    def pause(self) -> None:
        self._paused = True

    def toggle(self) -> None:
        if self._paused:
            self.play()
        else:
            self.pause()

    def _due_index(self) -> int:
        elapsed = max(0.0, self._clock() - self._anchor_time)
        return self._anchor_index + int(elapsed * self._fps)

    def current_frame(self) -> np.ndarray:
        """Return the frame that should be on screen now.

        Raises:
            VideoSourceError: The capture ended before yielding any frame.
        """
        if self._fps and self._last_frame is not None and not self._ended:
            due = self._due_index()
            if due <= self._shown_index:
                return self._last_frame
            while self._shown_index < due - 1:
                if not self._capture.grab():
                    return self._finish()
                self._shown_index += 1

        if self._ended:
            return self._finish()

        ok, frame = self._capture.read()
        if not ok or frame is None:
            return self._finish()
        self._last_frame = frame
        self._shown_index += 1
        return frame

    def _finish(self) -> np.ndarray:
        if not self._ended:
            logger.info("Video source %r ended", self._target)
        self._ended = True
        if self._last_frame is None:
            raise VideoSourceError(f"Video source {self._target!r} produced no frames")
        return self._last_frame

    def release(self) -> None:
        self._paused = True
        self._capture.release()
        logger.info("Released video source %r", self._target)

    def __enter__(self) -> "CaptureVideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


__all__ = ["CaptureVideoSource", "PlayNotifier", "VideoSource"]
