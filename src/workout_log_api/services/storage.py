"""
Local key-value persistence for the workout log.

Values are JSON strings stored under fixed keys, so the same data can
live in any store that offers get/set by string key.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from workout_log_api.parsers.models import WorkoutLog, WorkoutMetadata

logger = logging.getLogger(__name__)

WORKOUT_LOGS_KEY = "workout-logs"
WORKOUT_METADATA_KEY = "workout-metadata"

_LOG_ADAPTER = TypeAdapter(WorkoutLog)
_METADATA_ADAPTER = TypeAdapter(Dict[str, WorkoutMetadata])


class StorageError(RuntimeError):
    """Raised when workout data could not be persisted."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


_FILE_LOCKS: Dict[str, threading.Lock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    """One lock per resolved file path, shared by every store on that file."""
    key = os.path.realpath(path)
    with _FILE_LOCKS_GUARD:
        lock = _FILE_LOCKS.get(key)
        if lock is None:
            lock = _FILE_LOCKS[key] = threading.Lock()
        return lock


class JsonFileStore:
    """Store keeping every key in one JSON document on disk."""

    def __init__(self, path: str):
        self.path = path
        self._lock = _lock_for(path)

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            values = json.load(f)
        if not isinstance(values, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return values

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read_all()
            values[key] = value

            directory = os.path.dirname(self.path) or "."
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(values, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except Exception:
                os.unlink(tmp_path)
                raise


class WorkoutRepository:
    """Reads and writes the workout log and metadata through a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_workout_logs(self) -> WorkoutLog:
        raw = self._get(WORKOUT_LOGS_KEY)
        if not raw:
            return {}
        try:
            return _LOG_ADAPTER.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored workout logs are corrupt: {e}")
            return {}

    def save_workout_logs(self, logs: WorkoutLog) -> bool:
        return self._set(WORKOUT_LOGS_KEY, _LOG_ADAPTER.dump_json(logs).decode("utf-8"))

    def get_workout_metadata(self) -> Dict[str, WorkoutMetadata]:
        raw = self._get(WORKOUT_METADATA_KEY)
        if not raw:
            return {}
        try:
            return _METADATA_ADAPTER.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored workout metadata is corrupt: {e}")
            return {}

    def save_all_workout_metadata(self, metadata: Dict[str, WorkoutMetadata]) -> bool:
        return self._set(
            WORKOUT_METADATA_KEY, _METADATA_ADAPTER.dump_json(metadata).decode("utf-8")
        )

    def save_workout_metadata(self, date_key: str, metadata: WorkoutMetadata) -> bool:
        """Store the metadata of one date, keeping the other dates."""
        all_metadata = self.get_workout_metadata()
        all_metadata[date_key] = metadata
        return self.save_all_workout_metadata(all_metadata)

    def export_all_data(self, clock: Optional[Callable[[], datetime]] = None) -> Dict[str, Any]:
        """JSON-ready backup of everything in the repository."""
        now = clock() if clock else datetime.now(timezone.utc)
        return {
            "workout_logs": _LOG_ADAPTER.dump_python(self.get_workout_logs(), mode="json"),
            "workout_metadata": _METADATA_ADAPTER.dump_python(
                self.get_workout_metadata(), mode="json"
            ),
            "export_date": now.isoformat(),
        }

    def import_data(self, data: Dict[str, Any]) -> bool:
        """
        Restore a backup produced by export_all_data.

        Sections missing from the payload are left as they are.

        Raises:
            ValidationError: If a section does not have the log shape
        """
        logs = data.get("workout_logs")
        metadata = data.get("workout_metadata")

        ok = True
        if logs is not None:
            ok = self.save_workout_logs(_LOG_ADAPTER.validate_python(logs)) and ok
        if metadata is not None:
            ok = self.save_all_workout_metadata(_METADATA_ADAPTER.validate_python(metadata)) and ok
        return ok

    def _get(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {key}: {e}")
            return None

    def _set(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving {key}: {e}")
            return False
