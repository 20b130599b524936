"""Social graph and content store.

Owns users, podcasts, comments and notifications, and keeps their
invariants on every write.
"""

from .models import CATEGORIES, Comment, Notification, NotificationType, Podcast, Role, User
from .session import Session
from .storage import JsonFileStorage, MemoryStorage, StorageBackend
from .store import Store

__all__ = [
    # Store
    "Store",
    "Session",
    # Storage
    "StorageBackend",
    "JsonFileStorage",
    "MemoryStorage",
    # Models
    "User",
    "Podcast",
    "Comment",
    "Notification",
    "NotificationType",
    "Role",
    "CATEGORIES",
]
