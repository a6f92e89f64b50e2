"""ApplySequence — the re-entrant zero-position step of one handling pass."""

from __future__ import annotations

import logging
import time
from typing import Callable

from restarter.core.state import EngineState
from restarter.media.element import MediaElement
from restarter.notifier.notifier import Notifier
from restarter.settings.cache import SettingsCache
from restarter.snapshot.store import PositionSnapshotStore

logger = logging.getLogger(__name__)

RESET_MESSAGE = "Playback reset to 0:00"


class ApplySequence:
    """
    Zeroes the media position, up to once per retry point.

    Each ``apply()`` re-checks the generation and enabled flag on its own,
    because either may have changed since the previous retry point. The
    acknowledgment fires at most once for the whole sequence.
    """

    def __init__(
        self,
        *,
        element: MediaElement,
        target: str,
        generation: int,
        state: EngineState,
        settings: SettingsCache,
        snapshots: PositionSnapshotStore,
        notifier: Notifier,
        on_target: Callable[[], bool] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.element = element
        self.target = target
        self.generation = generation
        self._state = state
        self._settings = settings
        self._snapshots = snapshots
        self._notifier = notifier
        self._on_target = on_target
        self._clock = clock
        self._recorded = False
        self.notified = False
        self.applied = 0
        self.attempts: list[str] = []

    async def apply(self, tag: str) -> bool:
        self.attempts.append(tag)

        if not self._state.is_current(self.generation):
            logger.debug(
                "skip reset %s (generation %d != %d)", tag, self.generation, self._state.generation
            )
            return False
        if not self._settings.enabled:
            logger.debug("skip reset %s (disabled)", tag)
            return False
        if self._on_target is not None and not self._on_target():
            logger.debug("skip reset %s (left %s)", tag, self.target)
            return False

        try:
            before = await self.element.get_position()
            self._capture(before)
            await self.element.set_position(0)
        except Exception:
            logger.warning("reset failed at %s for %s", tag, self.target, exc_info=True)
            return False

        self.applied += 1
        logger.debug("reset position=0 at %s (before=%r)", tag, before)

        if not self.notified:
            self.notified = True
            await self._notifier.show(RESET_MESSAGE)
        return True

    def _capture(self, before: float) -> None:
        # Reading back our own zero on a later retry point must not erase the real position
        if self._recorded and before == 0:
            return
        if self._snapshots.record(self.target, before, saved_at=self._clock()):
            self._recorded = True
