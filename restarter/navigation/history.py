"""History interception for hosts that expose a Python history object."""

from __future__ import annotations

import functools
from typing import Any, Callable

from restarter.navigation.aggregator import NavigationSources


class HistoryInterceptor:
    """
    Wraps ``push_state`` / ``replace_state`` on a host history object.

    The original method always runs first and its return value is passed
    back unchanged; the matching emitter fires only afterwards.
    """

    _METHODS = ("push_state", "replace_state")

    def __init__(self, history: Any, sources: NavigationSources) -> None:
        self._history = history
        self._sources = sources
        self._originals: dict[str, Callable[..., Any]] = {}

    @property
    def installed(self) -> bool:
        return bool(self._originals)

    def install(self) -> None:
        if self._originals:
            return
        emitters = {
            "push_state": self._sources.history_push,
            "replace_state": self._sources.history_replace,
        }
        for name in self._METHODS:
            original = getattr(self._history, name)
            self._originals[name] = original
            setattr(self._history, name, self._wrap(original, emitters[name].emit))

    def uninstall(self) -> None:
        for name, original in self._originals.items():
            setattr(self._history, name, original)
        self._originals.clear()

    @staticmethod
    def _wrap(original: Callable[..., Any], notify: Callable[[], None]) -> Callable[..., Any]:
        @functools.wraps(original)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = original(*args, **kwargs)
            notify()
            return result

        return wrapper
