"""Durable session pointer.

A Session records which user is signed in. It is persisted under the
``current_user`` storage key so it survives restarts. The stored record is a
cached copy of the user; only its id is trusted, and it is always resolved
against the live Users collection.
"""

import logging
from typing import Any

from podcastpro.store.models import User
from podcastpro.store.storage import STORAGE_KEYS, StorageBackend

logger = logging.getLogger(__name__)


class Session:
    """Explicit session object passed to auth operations.

    Example:
        >>> with store.open_session() as session:
        ...     store.auth.login(session, "jane@example.com", "password")
        ...     user = store.auth.current_user(session)
    """

    def __init__(self, storage: StorageBackend) -> None:
        """Open a session, restoring any persisted pointer.

        Args:
            storage: Backend holding the session record
        """
        self._storage = storage
        self._user_id: str | None = self._restore()
        self._closed = False

    @property
    def user_id(self) -> str | None:
        """Id of the signed-in user, or None."""
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def set_user(self, user: User) -> None:
        """Point the session at ``user`` and persist the pointer."""
        self._check_open()
        self._user_id = user.id
        self._storage.write(STORAGE_KEYS["current_user"], user.public_view())

    def clear(self) -> None:
        """Drop the pointer (and its persisted copy)."""
        self._check_open()
        self._user_id = None
        self._storage.delete(STORAGE_KEYS["current_user"])

    def close(self) -> None:
        """Tear down this session object. The persisted pointer is kept."""
        self._closed = True

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Session is closed")

    def _restore(self) -> str | None:
        record: Any = self._storage.read(STORAGE_KEYS["current_user"])
        if isinstance(record, dict) and record.get("id"):
            logger.debug(f"Restored session for {record['id']}")
            return str(record["id"])
        return None
