from restarter.settings.cache import SettingsCache
from restarter.settings.model import STORAGE_DEFAULTS, NotificationStyle, SettingsSnapshot
from restarter.settings.store import (
    JsonFileSettingsStore,
    MemorySettingsStore,
    SettingsStore,
    StorageChange,
)

__all__ = [
    "SettingsCache",
    "STORAGE_DEFAULTS",
    "NotificationStyle",
    "SettingsSnapshot",
    "JsonFileSettingsStore",
    "MemorySettingsStore",
    "SettingsStore",
    "StorageChange",
]
