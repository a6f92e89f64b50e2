"""SettingsCache — synchronous reads over an async settings store."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from restarter.core.events import EventEmitter, Unsubscribe
from restarter.core.state import EngineState
from restarter.settings.model import STORAGE_DEFAULTS, SettingsSnapshot, normalize_edit
from restarter.settings.store import SettingsStore, StorageChange

logger = logging.getLogger(__name__)


class SettingsCache:
    """
    Holds the current SettingsSnapshot and owns the engine generation.

    Every accepted change bumps the generation exactly once, which silently
    invalidates any work scheduled before it. Turning the engine off also
    fires the ``on_disabled`` callbacks synchronously, so armed timers are
    cancelled before the change handler returns.
    """

    def __init__(self, store: SettingsStore, state: EngineState, *, area: str = "local") -> None:
        self._store = store
        self._state = state
        self._area = area
        self._raw: dict[str, Any] = dict(STORAGE_DEFAULTS)
        self._current = SettingsSnapshot.from_mapping(self._raw)
        self._previous_enabled = self._current.enabled
        self._resume_pending = False
        self._disabled = EventEmitter("settings.disabled")
        self._unsubscribe: Unsubscribe | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> SettingsSnapshot:
        """Initial read. A failing store degrades to the defaults (enabled)."""
        try:
            data = await self._store.get(STORAGE_DEFAULTS)
            raw = {**STORAGE_DEFAULTS, **data}
        except Exception:
            logger.warning("settings read failed; falling back to defaults", exc_info=True)
            raw = dict(STORAGE_DEFAULTS)

        self._previous_enabled = self._current.enabled
        self._raw = raw
        self._current = SettingsSnapshot.from_mapping(raw)
        logger.debug(
            "settings loaded enabled=%s show_notification=%s",
            self._current.enabled,
            self._current.show_notification,
        )
        return self._current

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.on_change(self._on_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_disabled(self, callback: Callable[[], Any]) -> Unsubscribe:
        return self._disabled.subscribe(callback)

    async def update(self, **values: Any) -> None:
        """Validate an edited payload and write it; the cache follows via the change feed."""
        await self._store.set(normalize_edit(values))

    # ------------------------------------------------------------------
    # Synchronous reads
    # ------------------------------------------------------------------

    @property
    def current(self) -> SettingsSnapshot:
        return self._current

    @property
    def enabled(self) -> bool:
        return self._current.enabled

    @property
    def show_notification(self) -> bool:
        return self._current.show_notification

    @property
    def previous_enabled(self) -> bool:
        return self._previous_enabled

    @property
    def resume_pending(self) -> bool:
        """True between an off->on change and the first handling pass that consumes it."""
        return self._resume_pending

    def acknowledge_resume(self) -> None:
        self._resume_pending = False

    # ------------------------------------------------------------------
    # Change feed
    # ------------------------------------------------------------------

    def _on_change(self, changes: Mapping[str, StorageChange], area: str) -> None:
        if area != self._area:
            return
        relevant = {k: c for k, c in changes.items() if k in STORAGE_DEFAULTS}
        if not relevant:
            return

        raw = dict(self._raw)
        for key, change in relevant.items():
            raw[key] = STORAGE_DEFAULTS[key] if change.new_value is None else change.new_value

        was_enabled = self._current.enabled
        self._previous_enabled = was_enabled
        self._raw = raw
        self._current = SettingsSnapshot.from_mapping(raw)
        generation = self._state.bump_generation()

        logger.debug(
            "settings changed keys=%s enabled %s->%s generation=%d",
            sorted(relevant),
            was_enabled,
            self._current.enabled,
            generation,
        )

        if was_enabled and not self._current.enabled:
            self._resume_pending = False
            self._disabled.emit()
        elif not was_enabled and self._current.enabled:
            self._resume_pending = True
