"""Shared types and dataclasses for restarter."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from restarter.engine.apply import ApplySequence


class NavigationReason(str, Enum):
    HISTORY_PUSH = "history.pushState"
    HISTORY_REPLACE = "history.replaceState"
    POPSTATE = "popstate"
    NAVIGATE_FINISH = "yt-navigate-finish"
    MUTATION = "mutation"
    INITIAL = "initial"


class HandlingState(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    AWAITING_TARGET = "awaiting_target"
    AWAITING_MEDIA = "awaiting_media"
    APPLYING = "applying"
    DONE = "done"


class SkipReason(str, Enum):
    """Why a passive handling pass ended without resetting anything."""

    STALE_GENERATION = "stale_generation"
    DISABLED = "disabled"
    TARGET_NOT_WATCHED = "target_not_watched"
    RESUMED_WHILE_PLAYING = "resumed_while_playing"
    ALREADY_HANDLED = "already_handled"
    TARGET_CHANGED = "target_changed"
    ELEMENT_TIMEOUT = "element_timeout"


class MediaEvent(str, Enum):
    METADATA_LOADED = "metadataLoaded"
    PLAYBACK_STARTED = "playbackStarted"

    @property
    def dom_event(self) -> str:
        return _DOM_EVENTS[self]


_DOM_EVENTS = {
    MediaEvent.METADATA_LOADED: "loadedmetadata",
    MediaEvent.PLAYBACK_STARTED: "playing",
}


@dataclass(frozen=True)
class NavigationSignal:
    """A 'maybe something changed' hint, stamped with the generation it was seen under."""

    reason: str
    observed_at_generation: int


@dataclass(frozen=True)
class PositionSnapshot:
    """Playback position captured right before a reset."""

    target: str
    prior_position_seconds: float
    saved_at: float  # epoch seconds

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.prior_position_seconds)


@dataclass
class HandleResult:
    """Trace of a single passive handling pass through the reset state machine."""

    reason: str
    generation: int
    states: list[HandlingState] = field(
        default_factory=lambda: [HandlingState.SCHEDULED]
    )
    skipped: SkipReason | None = None
    target: str | None = None
    sequence: ApplySequence | None = None

    @property
    def state(self) -> HandlingState:
        return self.states[-1]

    @property
    def applied(self) -> bool:
        return self.sequence is not None and self.sequence.applied > 0

    def advance(self, state: HandlingState) -> None:
        self.states.append(state)

    def skip(self, reason: SkipReason) -> HandleResult:
        self.skipped = reason
        self.advance(HandlingState.DONE)
        return self


# ---------------------------------------------------------------------------
# Control-surface results
# ---------------------------------------------------------------------------


class RestoreFailure(str, Enum):
    NO_SNAPSHOT = "no_snapshot"
    NO_ELEMENT = "no_element"
    APPLY_FAILED = "apply_failed"


class ForceResetFailure(str, Enum):
    NOT_WATCH = "not_watch"
    NO_VIDEO = "no_video"
    FAILED = "failed"


@dataclass
class SnapshotResponse:
    ok: bool
    time_text: str | None = None

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {"ok": self.ok}
        if self.time_text is not None:
            message["timeText"] = self.time_text
        return message


@dataclass
class RestoreResult:
    ok: bool
    restored_time_text: str | None = None
    failure: RestoreFailure | None = None
    message: str | None = None

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {"ok": self.ok}
        if self.restored_time_text is not None:
            message["restoredTimeText"] = self.restored_time_text
        if self.message is not None:
            message["message"] = self.message
        return message


@dataclass
class ForceResetResult:
    ok: bool
    reason: ForceResetFailure | None = None

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {"ok": self.ok}
        if self.reason is not None:
            message["reason"] = self.reason.value
        return message
