"""Key-value persistence for the progress record and user preferences."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from .config import Settings
from .progress_record import ProgressRecord

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

PROGRESS_KEY = "userProgress"
API_KEY_KEY = "claudeApiKey"
DARK_MODE_KEY = "darkMode"
API_KEY_PREFIX = "sk-ant-"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, used for ephemeral sessions and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._entries: Dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._entries[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)


class JsonFileKeyValueStore:
    """String entries kept in one JSON document on disk.

    Writes go to a temporary file in the same directory followed by an atomic replace, so a
    crash mid-write leaves the previous document in place.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or DATA_DIR / "learnhub_storage.json"
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _load_unlocked(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, ValueError):
            logger.exception("Failed to read storage document %s", self._path)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring storage document %s with unexpected shape", self._path)
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def _write_unlocked(self, entries: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".learnhub-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load_unlocked().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            entries = self._load_unlocked()
            entries[key] = value
            self._write_unlocked(entries)

    def delete(self, key: str) -> None:
        with self._lock:
            entries = self._load_unlocked()
            if entries.pop(key, None) is not None:
                self._write_unlocked(entries)


class ProgressStore:
    """Loads and saves the single progress record.

    ``load`` merges stored fields over the defaults so records written by older builds pick
    up new fields. Absent or malformed records yield a fresh default record.
    """

    def __init__(self, backend: KeyValueStore, *, key: str = PROGRESS_KEY) -> None:
        self._backend = backend
        self._key = key

    def load(self) -> ProgressRecord:
        raw = self._backend.get(self._key)
        if raw is None:
            return ProgressRecord()
        try:
            stored = json.loads(raw)
        except ValueError:
            logger.exception("Stored progress record is not valid JSON; starting fresh")
            return ProgressRecord()
        if not isinstance(stored, dict):
            logger.warning("Stored progress record has unexpected type %s; starting fresh", type(stored).__name__)
            return ProgressRecord()

        merged: Dict[str, Any] = {**ProgressRecord().model_dump(mode="json"), **stored}
        try:
            return ProgressRecord.model_validate(merged)
        except ValidationError:
            logger.exception("Stored progress record failed validation; starting fresh")
            return ProgressRecord()

    def save(self, record: ProgressRecord) -> None:
        payload = json.dumps(record.model_dump(mode="json"), ensure_ascii=False)
        self._backend.set(self._key, payload)


class PreferenceStore:
    """API credential and dark-mode flag, each under its own key."""

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend

    def api_key(self) -> Optional[str]:
        value = self._backend.get(API_KEY_KEY)
        return value or None

    def save_api_key(self, key: str) -> bool:
        """Store ``key`` and return whether it looks like an Anthropic key."""
        cleaned = key.strip()
        if not cleaned:
            raise ValueError("Please enter an API key")
        self._backend.set(API_KEY_KEY, cleaned)
        looks_valid = cleaned.startswith(API_KEY_PREFIX)
        if not looks_valid:
            logger.warning("Saved API key does not start with %s", API_KEY_PREFIX)
        return looks_valid

    def clear_api_key(self) -> None:
        self._backend.delete(API_KEY_KEY)

    def dark_mode(self) -> bool:
        return self._backend.get(DARK_MODE_KEY) == "true"

    def toggle_dark_mode(self) -> bool:
        enabled = not self.dark_mode()
        self._backend.set(DARK_MODE_KEY, "true" if enabled else "false")
        return enabled


def build_backend(settings: Settings) -> KeyValueStore:
    return JsonFileKeyValueStore(settings.storage_path)


__all__ = [
    "API_KEY_KEY",
    "DARK_MODE_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "PROGRESS_KEY",
    "PreferenceStore",
    "ProgressStore",
    "build_backend",
]
