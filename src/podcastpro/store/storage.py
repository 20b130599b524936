"""Key-value storage backends for the persisted collections.

Each key holds one JSON document: an array of records for the entity
collections, a single record for the session pointer.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from podcastpro.utils.errors import StorageError

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "users": "podcast_pro_users",
    "podcasts": "podcast_pro_podcasts",
    "comments": "podcast_pro_comments",
    "notifications": "podcast_pro_notifications",
    "current_user": "podcast_pro_current_user",
    "meta": "podcast_pro_meta",
}


class StorageBackend(ABC):
    """Minimal key-value interface the Store persists through."""

    @abstractmethod
    def read(self, key: str) -> Any | None:
        """Return the decoded value for ``key`` or None if absent."""

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are ignored."""

    def exists(self, key: str) -> bool:
        return self.read(key) is not None


class MemoryStorage(StorageBackend):
    """In-process storage, used by tests and throwaway stores.

    Values are deep-copied on the way in and out so callers can never
    mutate stored state by reference.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def read(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    def write(self, key: str, value: Any) -> None:
        # Round-trip through JSON so memory and file backends accept the same values
        self._data[key] = json.loads(json.dumps(value, default=str))

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage(StorageBackend):
    """Stores each key as ``<key>.json`` inside a data directory.

    Uses atomic write (write to temp file, then rename) to prevent corruption.

    Example:
        >>> storage = JsonFileStorage(Path("~/.local/share/podcastpro"))
        >>> storage.write("podcast_pro_users", [])
        >>> storage.read("podcast_pro_users")
        []
    """

    def __init__(self, data_dir: Path) -> None:
        """Initialize file storage.

        Args:
            data_dir: Directory for the JSON files. Created if missing.
        """
        self.data_dir = data_dir
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def read(self, key: str) -> Any | None:
        path = self._get_file(key)

        if not path.exists():
            return None

        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Corrupted data file {path}: {e}",
                suggestion=f"Fix or remove {path} to reset that collection",
            ) from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, value: Any) -> None:
        path = self._get_file(key)
        temp_file = path.with_suffix(".tmp")

        try:
            with temp_file.open("w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, default=str)

            temp_file.replace(path)

        except (OSError, TypeError) as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StorageError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._get_file(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

    def _get_file(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"
