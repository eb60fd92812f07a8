"""Summary: Session events and a tiny subscriber registry.
Why: Commands run under a lock; observers are notified afterwards from one place."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from declutter.platform.logging import logger


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Something observable happened to the session.

    ``name`` uses dotted topics (``decision.bin``, ``suggestions.ready``...).
    """

    name: str
    file_id: str | None = None
    message: str | None = None
    data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


EventSink = Callable[[SessionEvent], None]
Unsubscribe = Callable[[], None]


class EventBus:
    """Fan events out to subscribers; a failing subscriber never breaks the others."""

    def __init__(self) -> None:
        self._subscribers: list[EventSink] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: EventSink) -> Unsubscribe:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, event: SessionEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception as exc:  # pragma: no cover - subscriber bug
                logger.exception("Event subscriber failed for %s: %s", event.name, exc)


__all__ = ["EventBus", "EventSink", "SessionEvent", "Unsubscribe"]
