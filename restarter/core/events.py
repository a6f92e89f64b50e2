"""Minimal synchronous event emitter used for navigation and media hints."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class EventEmitter:
    """
    Fan-out of a single event to any number of listeners.

    A failing listener is logged and skipped; it never stops delivery to the
    remaining listeners or reaches the emitter's caller.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._listeners: list[Callable[..., Any]] = []

    def subscribe(self, listener: Callable[..., Any]) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def once(self, listener: Callable[..., Any]) -> Unsubscribe:
        return listen_once(self, listener)

    def emit(self, *args: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception("listener for %r failed", self.name)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


def listen_once(source: EventEmitter, listener: Callable[..., Any]) -> Unsubscribe:
    """Subscribe ``listener`` so it is detached right after its first delivery."""
    fired = False

    def wrapper(*args: Any) -> None:
        nonlocal fired
        if fired:
            return
        fired = True
        unsubscribe()
        listener(*args)

    unsubscribe = source.subscribe(wrapper)
    return unsubscribe
