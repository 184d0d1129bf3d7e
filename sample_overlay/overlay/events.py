"""Sample events and the listener registry that dispatches them."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, DefaultDict, FrozenSet, Iterable, List

from ..core.logging_utils import get_module_logger

logger = get_module_logger(__name__)

REFRESH_EVENT = "refresh"


@dataclass(frozen=True)
class SampleEvent:
    """Pixel window captured during one render tick.

    ``data`` is the flat RGBA window (row-major, 4 bytes per pixel).
    ``bubbles`` and ``cancelable`` are advisory flags for consumers that
    mirror DOM events; the producer never checks them.
    """

    data: bytes
    time: datetime
    source: Any = None
    type: str = REFRESH_EVENT
    bubbles: bool = True
    cancelable: bool = True

    @property
    def pixel_count(self) -> int:
        return len(self.data) // 4


Listener = Callable[[SampleEvent], Any]
Unsubscribe = Callable[[], None]


class EventDispatcher:
    """Named listener lists.

    Listeners are keyed by the name they were registered under and only see
    events dispatched under that same name. Registering under a name outside
    ``known_events`` is allowed but logged, since nothing will ever fire it.
    """

    def __init__(self, known_events: Iterable[str] = (REFRESH_EVENT,)) -> None:
        self._known: FrozenSet[str] = frozenset(known_events)
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def add_listener(self, event_name: str, callback: Listener) -> Unsubscribe:
        if not callable(callback):
            raise TypeError(f"Listener for '{event_name}' must be callable, got {callback!r}")
        if event_name not in self._known:
            logger.warning(
                "Listener registered for unknown event '%s'; only %s are dispatched",
                event_name,
                ", ".join(sorted(self._known)),
            )
        listeners = self._listeners[event_name]
        # Same callback twice is a no-op, as with DOM addEventListener.
        if callback not in listeners:
            listeners.append(callback)

        def unsubscribe() -> None:
            self.remove_listener(event_name, callback)

        return unsubscribe

    def remove_listener(self, event_name: str, callback: Listener) -> bool:
        listeners = self._listeners.get(event_name)
        if not listeners or callback not in listeners:
            return False
        listeners.remove(callback)
        if not listeners:
            del self._listeners[event_name]
        return True

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, ()))

    def dispatch(self, event: SampleEvent) -> int:
        """Call every listener registered for ``event.type``.

        A listener that raises is logged and skipped; the remaining listeners
        still run. Returns the number of listeners called.
        """
        listeners = list(self._listeners.get(event.type, ()))
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed for '%s' event", listener, event.type)
        return len(listeners)

    def clear(self) -> None:
        self._listeners.clear()


__all__ = ["EventDispatcher", "REFRESH_EVENT", "SampleEvent"]
