"""Snapshot store — holds the last pre-reset playback position."""

from __future__ import annotations

import math
import time

from restarter.core.types import PositionSnapshot


class PositionSnapshotStore:
    """
    Single-slot store: keeps the most recent PositionSnapshot.
    A new record overwrites the old one; it is never merged.
    """

    def __init__(self) -> None:
        self._snapshot: PositionSnapshot | None = None

    def get(self) -> PositionSnapshot | None:
        return self._snapshot

    def record(self, target: str, position: object, saved_at: float | None = None) -> bool:
        """Store ``position`` for ``target``. Non-numeric or non-finite values are ignored."""
        if isinstance(position, bool):
            return False
        try:
            seconds = float(position)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False
        if not math.isfinite(seconds):
            return False
        self._snapshot = PositionSnapshot(
            target=target,
            prior_position_seconds=seconds,
            saved_at=time.time() if saved_at is None else saved_at,
        )
        return True

    def get_for_target(self, target: str) -> PositionSnapshot | None:
        snap = self._snapshot
        if snap is None or snap.target != target or not snap.is_valid:
            return None
        return snap

    def clear(self) -> None:
        self._snapshot = None
