"""Fire-and-forget notifications to whatever presentation layer is attached."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from loguru import logger

SESSION_ENDED = "emulators:session_ended"
EMBEDDED_SESSION_ENDED = "embedded:session_ended"

Listener = Callable[[Any], None]


class EventBus:
    """Topic-based subscriber list.

    Events emitted while nobody listens are dropped: they are not queued
    and not retried.  A failing listener is logged and does not stop the
    others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, listener: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(topic, []).append(listener)

    def unsubscribe(self, topic: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(topic, [])
            if listener in listeners:
                listeners.remove(listener)

    def has_listeners(self, topic: str) -> bool:
        with self._lock:
            return bool(self._listeners.get(topic))

    def emit(self, topic: str, event: Any) -> int:
        """Deliver *event* to the listeners of *topic*; return how many got it."""
        with self._lock:
            listeners = list(self._listeners.get(topic, []))
        if not listeners:
            logger.debug("No listener for {}; dropping {}", topic, event)
            return 0

        delivered = 0
        for listener in listeners:
            try:
                listener(event)
                delivered += 1
            except Exception as e:
                logger.error("Listener {} failed on {}: {}", listener, topic, e)
        return delivered
