from restarter.core.restarter import Restarter
from restarter.core.state import EngineState
from restarter.core.targets import canonical_target, format_time, is_watch_url
from restarter.core.types import (
    ForceResetFailure,
    ForceResetResult,
    HandleResult,
    HandlingState,
    MediaEvent,
    NavigationReason,
    NavigationSignal,
    PositionSnapshot,
    RestoreFailure,
    RestoreResult,
    SkipReason,
    SnapshotResponse,
)
from restarter.settings.model import NotificationStyle, SettingsSnapshot, ToastPosition

__all__ = [
    "Restarter",
    "EngineState",
    "canonical_target",
    "format_time",
    "is_watch_url",
    "ForceResetFailure",
    "ForceResetResult",
    "HandleResult",
    "HandlingState",
    "MediaEvent",
    "NavigationReason",
    "NavigationSignal",
    "PositionSnapshot",
    "RestoreFailure",
    "RestoreResult",
    "SkipReason",
    "SnapshotResponse",
    # Settings
    "NotificationStyle",
    "SettingsSnapshot",
    "ToastPosition",
]
