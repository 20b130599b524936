"""The Store: one entry point over all social data operations."""

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime
from pathlib import Path

from podcastpro.config.schema import StoreConfig
from podcastpro.store.admin import AdminService
from podcastpro.store.auth import AuthService
from podcastpro.store.catalog import Catalog
from podcastpro.store.comments import CommentThread
from podcastpro.store.interactions import InteractionEngine
from podcastpro.store.migrations import migrate
from podcastpro.store.notifications import NotificationCenter
from podcastpro.store.repository import Repository
from podcastpro.store.seed import seed_store
from podcastpro.store.session import Session
from podcastpro.store.storage import JsonFileStorage, MemoryStorage, StorageBackend
from podcastpro.utils.datetime import now_utc

logger = logging.getLogger(__name__)


class Store:
    """Social graph and content store.

    Opening a Store migrates the stored schema, loads the collections and
    seeds bootstrap data. Operations are grouped by concern:

    - ``auth``: register, login, logout, current_user
    - ``catalog``: create/list/get/delete podcasts
    - ``interactions``: like, save, download and follow toggles
    - ``comments``: add and list comments
    - ``notifications``: list, unread count, mark read
    - ``admin``: delete users, unfiltered listings, integrity check

    Example:
        >>> store = Store.open(Path("~/.local/share/podcastpro"))
        >>> with store.open_session() as session:
        ...     jane = store.auth.login(session, "jane@example.com", "password")
        ...     store.interactions.toggle_like(jane.id, "pod_2")
    """

    def __init__(
        self,
        storage: StorageBackend,
        config: StoreConfig | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        """Initialize the store.

        Args:
            storage: Backend holding the persisted collections
            config: Store configuration (defaults apply if None)
            clock: Time source for created_at stamps
        """
        self.config = config or StoreConfig()
        self.storage = storage

        self.schema_version = migrate(storage)
        self.repo = Repository(storage, clock=clock)

        self.notifications = NotificationCenter(self.repo)
        self.auth = AuthService(self.repo, min_password_length=self.config.min_password_length)
        self.catalog = Catalog(self.repo)
        self.interactions = InteractionEngine(self.repo, self.notifications)
        self.comments = CommentThread(self.repo, self.notifications)
        self.admin = AdminService(self.repo)

        seed_store(self.repo, include_demo=self.config.seed_demo_data)

    @classmethod
    def open(cls, data_dir: Path, config: StoreConfig | None = None) -> "Store":
        """Open a file-backed store in ``data_dir``."""
        logger.debug(f"Opening store in {data_dir}")
        return cls(JsonFileStorage(data_dir), config=config)

    @classmethod
    def in_memory(cls, config: StoreConfig | None = None, **kwargs) -> "Store":
        """Open a throwaway store that lives only in this process."""
        return cls(MemoryStorage(), config=config, **kwargs)

    def open_session(self) -> Session:
        """Open the persisted session pointer for this store."""
        return Session(self.storage)

    def transaction(self) -> AbstractContextManager[Repository]:
        """Group several operations so they are persisted, or rolled back, together.

        Example:
            >>> with store.transaction():
            ...     store.interactions.toggle_like(user_id, podcast_id)
            ...     store.comments.add_comment(podcast_id, user_id, name, "great!")
        """
        return self.repo.transaction()
