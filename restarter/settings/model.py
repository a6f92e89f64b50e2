"""Settings value objects and their clamping/validation rules."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ToastPosition(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Persisted keys and their defaults, exactly as stored
STORAGE_DEFAULTS: dict[str, Any] = {
    "enabled": True,
    "showToast": True,
    "toastPosition": "center",
    "toastScale": 1.5,
    "toastDurationMs": 2000,
    "toastBgColor": "#ff0033",
    "toastTextColor": "#ffffff",
    "toastAnimationEnabled": True,
    "toastAnimationDurationMs": 500,
}

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

# Read-side bounds (what the engine tolerates in storage)
_SCALE_RANGE = (0.5, 2.0)
_DURATION_MS_RANGE = (1000, 10000)
_ANIMATION_MS_RANGE = (100, 1000)

# Edit-side bounds (what the settings form lets a user save)
_EDIT_SCALE_RANGE = (0.8, 1.5)
_EDIT_DURATION_S_RANGE = (1, 10)


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def _flag(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.match(value))


def normalize_animation_ms(value: Any) -> int:
    """Snap to 10 ms steps inside [100, 1000]; garbage becomes the default."""
    n = _number(value)
    if n is None:
        return STORAGE_DEFAULTS["toastAnimationDurationMs"]
    return int(clamp(round(n / 10) * 10, *_ANIMATION_MS_RANGE))


@dataclass(frozen=True)
class NotificationStyle:
    position: ToastPosition = ToastPosition.CENTER
    scale: float = 1.5
    bg_color: str = "#ff0033"
    text_color: str = "#ffffff"
    duration_ms: int = 2000
    animation_enabled: bool = True
    animation_duration_ms: int = 500


@dataclass(frozen=True)
class SettingsSnapshot:
    """Immutable, validated view of the persisted configuration."""

    enabled: bool = True
    show_notification: bool = True
    style: NotificationStyle = field(default_factory=NotificationStyle)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> SettingsSnapshot:
        """Build a snapshot from raw storage values, clamping anything out of range."""
        try:
            position = ToastPosition(raw.get("toastPosition"))
        except ValueError:
            position = ToastPosition.CENTER

        scale = _number(raw.get("toastScale"))
        duration = _number(raw.get("toastDurationMs"))
        bg = raw.get("toastBgColor")
        fg = raw.get("toastTextColor")

        style = NotificationStyle(
            position=position,
            scale=clamp(scale, *_SCALE_RANGE) if scale is not None else STORAGE_DEFAULTS["toastScale"],
            bg_color=bg if is_hex_color(bg) else STORAGE_DEFAULTS["toastBgColor"],
            text_color=fg if is_hex_color(fg) else STORAGE_DEFAULTS["toastTextColor"],
            duration_ms=(
                int(clamp(duration, *_DURATION_MS_RANGE))
                if duration is not None
                else STORAGE_DEFAULTS["toastDurationMs"]
            ),
            animation_enabled=_flag(raw.get("toastAnimationEnabled"), True),
            animation_duration_ms=normalize_animation_ms(raw.get("toastAnimationDurationMs")),
        )
        return cls(
            enabled=_flag(raw.get("enabled"), True),
            show_notification=_flag(raw.get("showToast"), True),
            style=style,
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "showToast": self.show_notification,
            "toastPosition": self.style.position.value,
            "toastScale": self.style.scale,
            "toastDurationMs": self.style.duration_ms,
            "toastBgColor": self.style.bg_color,
            "toastTextColor": self.style.text_color,
            "toastAnimationEnabled": self.style.animation_enabled,
            "toastAnimationDurationMs": self.style.animation_duration_ms,
        }


def normalize_edit(values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a user-edited payload before it is written to storage.

    Mirrors the settings form: scale in [0.8, 1.5], duration in whole seconds
    (1-10), colors must be ``#rrggbb``. Raises KeyError for unknown keys.
    """
    unknown = set(values) - set(STORAGE_DEFAULTS)
    if unknown:
        raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

    payload: dict[str, Any] = {}
    for key, value in values.items():
        if key in ("enabled", "showToast", "toastAnimationEnabled"):
            payload[key] = bool(value)
        elif key == "toastPosition":
            try:
                payload[key] = ToastPosition(value).value
            except ValueError:
                payload[key] = STORAGE_DEFAULTS[key]
        elif key == "toastScale":
            n = _number(value)
            payload[key] = clamp(n, *_EDIT_SCALE_RANGE) if n is not None else _EDIT_SCALE_RANGE[0]
        elif key == "toastDurationMs":
            n = _number(value)
            seconds = int(clamp(round(n / 1000), *_EDIT_DURATION_S_RANGE)) if n is not None else 1
            payload[key] = seconds * 1000
        elif key in ("toastBgColor", "toastTextColor"):
            payload[key] = value if is_hex_color(value) else STORAGE_DEFAULTS[key]
        elif key == "toastAnimationDurationMs":
            payload[key] = normalize_animation_ms(value)
    return payload
