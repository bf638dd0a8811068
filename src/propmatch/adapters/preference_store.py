from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from propmatch.adapters.config import config
from propmatch.adapters.logging_utils import get_logger
from propmatch.domain.ports import KeyValueStore
from propmatch.domain.preferences import (
    PropertyPreferences,
    coerce_preferences,
    default_preferences,
)

logger = get_logger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueStore(KeyValueStore):
    """
    A JSON object on disk mapping key -> raw string value.

    Writes replace the whole file through a temp file, so a reader never sees
    a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            logger.warning("unreadable key-value file", extra={"context": {"path": str(self.path), "error": str(err)}})
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def delete(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


class PreferenceStore:
    """
    Single source of truth for the current search session's filters.

    load() never raises on bad stored data; it falls back to defaults.
    update() overwrites the stored entry synchronously (last write wins).
    """

    def __init__(self, kv: KeyValueStore, key: str | None = None) -> None:
        self.kv = kv
        self.key = key or config.PREFERENCES_KEY
        self._current: PropertyPreferences = default_preferences()

    @property
    def current(self) -> PropertyPreferences:
        return self._current

    def _parse_stored(self, raw: str | None) -> PropertyPreferences:
        if raw is None:
            return default_preferences()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("stored preferences are not valid JSON; using defaults", extra={"context": {"key": self.key}})
            return default_preferences()
        return coerce_preferences(data)

    def load(self, navigation_state: PropertyPreferences | dict[str, Any] | None = None) -> PropertyPreferences:
        if navigation_state is not None:
            self._current = coerce_preferences(navigation_state)
            return self._current

        try:
            raw = self.kv.get(self.key)
        except Exception as err:
            logger.warning("preference store read failed; using defaults", extra={"context": {"error": str(err)}})
            raw = None

        self._current = self._parse_stored(raw)
        return self._current

    def update(self, preferences: PropertyPreferences | dict[str, Any]) -> PropertyPreferences:
        prefs = coerce_preferences(preferences)
        self.kv.set(self.key, json.dumps(prefs.to_storage()))
        self._current = prefs
        return prefs

    def clear(self) -> PropertyPreferences:
        return self.update(default_preferences())


def default_preference_store() -> PreferenceStore:
    return PreferenceStore(FileKeyValueStore(config.PREFERENCES_PATH), config.PREFERENCES_KEY)
