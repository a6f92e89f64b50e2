"""NavigationAggregator — folds independent change hints into one signal stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from restarter.core.events import EventEmitter, Unsubscribe
from restarter.core.state import EngineState
from restarter.core.types import NavigationReason, NavigationSignal

logger = logging.getLogger(__name__)


@dataclass
class NavigationSources:
    """
    The host's navigation hint sources, one emitter each.

    ``history_push`` / ``history_replace`` come from the intercepted history
    API, ``popstate`` from back/forward, ``navigate_finish`` from the app's own
    "navigation finished" event and ``mutation`` from a document observer.
    """

    history_push: EventEmitter = field(default_factory=lambda: EventEmitter("history.pushState"))
    history_replace: EventEmitter = field(default_factory=lambda: EventEmitter("history.replaceState"))
    popstate: EventEmitter = field(default_factory=lambda: EventEmitter("popstate"))
    navigate_finish: EventEmitter = field(default_factory=lambda: EventEmitter("yt-navigate-finish"))
    mutation: EventEmitter = field(default_factory=lambda: EventEmitter("mutation"))

    def tagged(self) -> list[tuple[EventEmitter, NavigationReason]]:
        return [
            (self.history_push, NavigationReason.HISTORY_PUSH),
            (self.history_replace, NavigationReason.HISTORY_REPLACE),
            (self.popstate, NavigationReason.POPSTATE),
            (self.navigate_finish, NavigationReason.NAVIGATE_FINISH),
            (self.mutation, NavigationReason.MUTATION),
        ]


class NavigationAggregator:
    """Tags every hint with its origin and the live generation. No filtering happens here."""

    def __init__(self, state: EngineState, sink: Callable[[NavigationSignal], None]) -> None:
        self._state = state
        self._sink = sink
        self._subscriptions: list[Unsubscribe] = []

    def attach(self, source: EventEmitter, reason: str) -> None:
        self._subscriptions.append(source.subscribe(lambda *_: self.emit(reason)))

    def attach_sources(self, sources: NavigationSources) -> None:
        for source, reason in sources.tagged():
            self.attach(source, reason.value)

    def emit(self, reason: str) -> NavigationSignal:
        if isinstance(reason, NavigationReason):
            reason = reason.value
        signal = NavigationSignal(reason=reason, observed_at_generation=self._state.generation)
        self._sink(signal)
        return signal

    def detach_all(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()

    @property
    def attached_count(self) -> int:
        return len(self._subscriptions)
