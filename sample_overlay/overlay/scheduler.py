"""Deferred-callback schedulers and the repeating render loop built on them."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Protocol

from ..core.logging_utils import get_module_logger

logger = get_module_logger(__name__)


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Run ``callback`` once after ``delay_ms`` and return a cancel handle."""
        ...

    def cancel(self, handle: Any) -> None:
        ...


class TkScheduler:
    """Schedules on a Tk widget's event loop via ``after``."""

    def __init__(self, widget) -> None:
        self._widget = widget

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> str:
        return self._widget.after(delay_ms, callback)

    def cancel(self, handle: str) -> None:
        import tkinter as tk

        try:
            self._widget.after_cancel(handle)
        except tk.TclError:
            pass  # Widget may be destroyed


class AsyncioScheduler:
    """Schedules on an asyncio event loop via ``call_later``."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000.0, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class RenderLoop:
    """Repeating task that runs ``tick`` every ``interval_ms``.

    ``tick`` returns False to end the loop; it is then not rescheduled until
    :meth:`start` is called again. An exception raised by ``tick``, or by the
    scheduler while queueing the next tick, also ends the loop and propagates
    to the caller.

    ``start`` runs the first tick immediately, on the caller's stack.
    """

    def __init__(self, scheduler: Scheduler, tick: Callable[[], bool], interval_ms: int = 20) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._scheduler = scheduler
        self._tick = tick
        self._interval_ms = interval_ms
        self._handle: Any = None
        self._running = False
        self._ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self) -> bool:
        if self._running:
            logger.debug("Render loop already running")
            return False
        self._running = True
        logger.info("Render loop started (interval=%dms)", self._interval_ms)
        self._run_once()
        return True

    def stop(self) -> None:
        """Cancel the pending tick, if any. Safe to call when not running."""
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        if self._running:
            self._running = False
            logger.info("Render loop stopped after %d ticks", self._ticks)

    def _run_once(self) -> None:
        self._handle = None
        if not self._running:
            return
        try:
            keep_going = self._tick()
        except Exception:
            self._running = False
            raise
        if not keep_going:
            self._running = False
            logger.info("Render loop finished after %d ticks", self._ticks)
            return
        self._ticks += 1
        if not self._running:
            return  # stopped from inside the tick
        try:
            self._handle = self._scheduler.call_later(self._interval_ms, self._run_once)
        except Exception:
            self._running = False
            raise


__all__ = ["AsyncioScheduler", "RenderLoop", "Scheduler", "TkScheduler"]
