"""Key/value settings stores with change notification."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from restarter.core.events import EventEmitter, Unsubscribe

logger = logging.getLogger(__name__)

_DEFAULT_AREA = "local"
_DEFAULT_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".restarter", "settings.json")


@dataclass(frozen=True)
class StorageChange:
    old_value: Any = None
    new_value: Any = None


ChangeListener = Callable[[dict[str, StorageChange], str], None]


class SettingsStore(ABC):
    """Async key/value store contract the settings cache relies on."""

    area: str = _DEFAULT_AREA

    @abstractmethod
    async def get(self, defaults: Mapping[str, Any]) -> dict[str, Any]:
        """Return stored values for ``defaults``' keys, filling absent keys from it."""

    @abstractmethod
    async def set(self, values: Mapping[str, Any]) -> None: ...

    @abstractmethod
    def on_change(self, listener: ChangeListener) -> Unsubscribe: ...


class MemorySettingsStore(SettingsStore):
    """In-process store. Listeners fire synchronously from ``set`` for keys whose value changed."""

    def __init__(self, initial: Mapping[str, Any] | None = None, *, area: str = _DEFAULT_AREA) -> None:
        self.area = area
        self._data: dict[str, Any] = dict(initial or {})
        self._changes = EventEmitter("settings.changed")

    async def get(self, defaults: Mapping[str, Any]) -> dict[str, Any]:
        return {key: self._data.get(key, default) for key, default in defaults.items()}

    async def set(self, values: Mapping[str, Any]) -> None:
        changes: dict[str, StorageChange] = {}
        for key, value in values.items():
            old = self._data.get(key)
            if key in self._data and old == value:
                continue
            self._data[key] = value
            changes[key] = StorageChange(old_value=old, new_value=value)
        if changes:
            self._persist()
            self._changes.emit(changes, self.area)

    async def remove(self, key: str) -> None:
        if key not in self._data:
            return
        old = self._data.pop(key)
        self._persist()
        self._changes.emit({key: StorageChange(old_value=old, new_value=None)}, self.area)

    def on_change(self, listener: ChangeListener) -> Unsubscribe:
        return self._changes.subscribe(listener)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._data)

    def _persist(self) -> None:
        pass


class JsonFileSettingsStore(MemorySettingsStore):
    """
    Memory store backed by a single JSON document on disk.

    A missing or unreadable file starts the store empty, so defaults apply.
    """

    def __init__(self, path: str | None = None, *, area: str = _DEFAULT_AREA) -> None:
        self._path = Path(path or _DEFAULT_SETTINGS_PATH)
        super().__init__(self._load(), area=area)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError):
            logger.warning("settings file %s unreadable; starting from defaults", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _persist(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
