"""Per-instance callback registry for destination change notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

LOGGER = logging.getLogger(__name__)

Listener = Callable[..., None]


class EventEmitter:
    """Delivers events to listeners in registration order.

    A listener registered twice is called twice. Events outside the declared
    set are rejected so typos surface at registration time.
    """

    def __init__(self, events: tuple[str, ...]) -> None:
        self._listeners: dict[str, list[Listener]] = {event: [] for event in events}

    def on(self, event: str, listener: Listener) -> None:
        self._listeners_for(event).append(listener)

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners_for(event)
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str, *args: Any) -> int:
        listeners = list(self._listeners_for(event))
        LOGGER.debug("Emitting %s to %d listener(s)", event, len(listeners))
        for listener in listeners:
            listener(*args)
        return len(listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners_for(event))

    def _listeners_for(self, event: str) -> list[Listener]:
        try:
            return self._listeners[event]
        except KeyError:
            known = ", ".join(sorted(self._listeners))
            raise ValueError(f"Unknown event '{event}'. Known events: {known}") from None
