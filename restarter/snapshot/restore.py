"""PositionRestorer — puts the pre-reset position back on request."""

from __future__ import annotations

import logging
from typing import Callable

from restarter.core.targets import canonical_target, format_time, is_watch_url
from restarter.core.types import PositionSnapshot, RestoreFailure, RestoreResult, SnapshotResponse
from restarter.core.waiting import wait_for_element
from restarter.media.element import MediaAccessor
from restarter.notifier.notifier import Notifier
from restarter.snapshot.store import PositionSnapshotStore

logger = logging.getLogger(__name__)

_TIMEOUT = 8.0
_POLL_INTERVAL = 0.1

NO_SNAPSHOT_MESSAGE = "Nothing to restore"
NO_ELEMENT_MESSAGE = "Video not found"
APPLY_FAILED_MESSAGE = "Restore failed"


class PositionRestorer:
    """
    Independent, repeatable restore action.

    Reads the snapshot store but never touches the generation or the last
    handled target, so restoring does not re-arm or suppress the engine.
    """

    def __init__(
        self,
        *,
        snapshots: PositionSnapshotStore,
        media: MediaAccessor,
        locate: Callable[[], str],
        notifier: Notifier,
        is_watched_target: Callable[[str], bool] = is_watch_url,
        timeout: float = _TIMEOUT,
        poll_interval: float = _POLL_INTERVAL,
    ) -> None:
        self._snapshots = snapshots
        self._media = media
        self._locate = locate
        self._notifier = notifier
        self._is_watched = is_watched_target
        self._timeout = timeout
        self._poll_interval = poll_interval

    def snapshot_for_current_target(self) -> PositionSnapshot | None:
        url = self._locate()
        if not self._is_watched(url):
            return None
        return self._snapshots.get_for_target(canonical_target(url))

    def describe(self) -> SnapshotResponse:
        snap = self.snapshot_for_current_target()
        if snap is None:
            return SnapshotResponse(ok=False)
        return SnapshotResponse(ok=True, time_text=format_time(snap.prior_position_seconds))

    async def restore(self) -> RestoreResult:
        snap = self.snapshot_for_current_target()
        if snap is None:
            return RestoreResult(
                ok=False, failure=RestoreFailure.NO_SNAPSHOT, message=NO_SNAPSHOT_MESSAGE
            )

        element = await wait_for_element(
            self._media.find_element, timeout=self._timeout, interval=self._poll_interval
        )
        if element is None:
            return RestoreResult(
                ok=False, failure=RestoreFailure.NO_ELEMENT, message=NO_ELEMENT_MESSAGE
            )

        try:
            await element.set_position(snap.prior_position_seconds)
        except Exception:
            logger.warning("restore failed for %s", snap.target, exc_info=True)
            return RestoreResult(
                ok=False, failure=RestoreFailure.APPLY_FAILED, message=APPLY_FAILED_MESSAGE
            )

        text = format_time(snap.prior_position_seconds)
        await self._notifier.show(f"Playback restored ({text})")
        return RestoreResult(ok=True, restored_time_text=text)
