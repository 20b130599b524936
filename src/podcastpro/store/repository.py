"""In-memory indexed collections backed by a storage backend.

Collections are loaded once into dicts keyed by id. Mutations happen in
memory inside a transaction; the collections touched by the transaction are
written back when it completes. If anything raises, in-memory state is
reloaded from storage so a half-applied change is never observed.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from podcastpro.store.models import Comment, Notification, Podcast, User
from podcastpro.store.storage import STORAGE_KEYS, StorageBackend
from podcastpro.utils.datetime import now_utc
from podcastpro.utils.errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

COLLECTION_MODELS: dict[str, type[BaseModel]] = {
    "users": User,
    "podcasts": Podcast,
    "comments": Comment,
    "notifications": Notification,
}


def newest_first(items: Iterable[T]) -> list[T]:
    """Sort records by ``created_at`` descending.

    Records sharing a timestamp keep reverse insertion order, so the most
    recently added one still comes first.
    """
    indexed = list(enumerate(items))
    indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
    return [item for _, item in indexed]


class Repository:
    """Holds the four entity collections and their write-back state.

    Args:
        storage: Backend the collections are read from and flushed to
        clock: Callable returning the current UTC time (injectable for tests)
    """

    def __init__(
        self,
        storage: StorageBackend,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.storage = storage
        self.clock = clock

        self.users: dict[str, User] = {}
        self.podcasts: dict[str, Podcast] = {}
        self.comments: dict[str, Comment] = {}
        self.notifications: dict[str, Notification] = {}

        self._dirty: set[str] = set()
        self._depth = 0

        self.load()

    def load(self) -> None:
        """(Re)load every collection from storage, discarding unflushed changes."""
        for name, model in COLLECTION_MODELS.items():
            records = self.storage.read(STORAGE_KEYS[name]) or []
            try:
                loaded = {record["id"]: model.model_validate(record) for record in records}
            except (KeyError, TypeError, PydanticValidationError) as e:
                raise StorageError(
                    f"Invalid records in collection '{name}': {e}",
                    suggestion="Run migrations or reset the data directory",
                ) from e
            setattr(self, name, loaded)

        self._dirty.clear()

    def collection(self, name: str) -> dict[str, Any]:
        return getattr(self, name)

    def mark_dirty(self, *names: str) -> None:
        """Flag collections that must be written when the transaction ends."""
        for name in names:
            if name not in COLLECTION_MODELS:
                raise ValueError(f"Unknown collection: {name}")
            self._dirty.add(name)

    @contextmanager
    def transaction(self) -> Iterator["Repository"]:
        """Group mutations so they are persisted together.

        Transactions nest; only the outermost one flushes or rolls back.
        """
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                logger.debug("Rolling back transaction, reloading from storage")
                self.load()
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                self.flush()

    def flush(self) -> None:
        """Write all dirty collections back to storage.

        All or nothing: if one write fails, collections already written in this
        flush are put back to their previous value before the error propagates.
        """
        if not self._dirty:
            return

        dirty = sorted(self._dirty)
        previous = {name: self.storage.read(STORAGE_KEYS[name]) for name in dirty}
        written: list[str] = []
        try:
            for name in dirty:
                records = [
                    record.model_dump(mode="json") for record in self.collection(name).values()
                ]
                self.storage.write(STORAGE_KEYS[name], records)
                written.append(name)
        except StorageError:
            self._restore(previous, written)
            self.load()
            raise

        logger.debug(f"Flushed collections: {', '.join(dirty)}")
        self._dirty.clear()

    def _restore(self, previous: dict[str, Any], written: list[str]) -> None:
        """Put back collections written by a flush that failed partway."""
        for name in written:
            key = STORAGE_KEYS[name]
            try:
                if previous[name] is None:
                    self.storage.delete(key)
                else:
                    self.storage.write(key, previous[name])
            except StorageError as e:
                logger.error(f"Could not restore '{name}' after failed flush: {e}")
        if written:
            logger.warning(f"Rolled back partial flush of: {', '.join(written)}")
