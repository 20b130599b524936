"""Versioned schema migrations for persisted collections.

Migrations run once, on raw JSON records, before the repository loads
them into models. After migrating, every record is fully populated.

Version history:
    0: Legacy browser data. camelCase keys, epoch-millisecond timestamps,
       relation sets and password hash sometimes missing, counters that
       don't match their relations.
    1: snake_case keys, ISO timestamps, all fields present, counters
       reconciled with relations. Legacy ``h_`` password hashes are kept
       behind the ``legacy$`` marker until the next successful login.
"""

import logging
from collections.abc import Callable
from typing import Any

from podcastpro.store.security import LEGACY_PREFIX, UNUSABLE_PASSWORD
from podcastpro.store.storage import STORAGE_KEYS, StorageBackend
from podcastpro.utils.datetime import from_epoch_ms, now_utc

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

Record = dict[str, Any]

FIELD_RENAMES: dict[str, dict[str, str]] = {
    "users": {
        "photoUrl": "photo_url",
        "passwordHash": "password_hash",
        "savedPodcastIds": "saved_podcast_ids",
        "downloadedPodcastIds": "downloaded_podcast_ids",
        "likedPodcastIds": "liked_podcast_ids",
    },
    "podcasts": {
        "videoUrl": "video_url",
        "thumbnailUrl": "thumbnail_url",
        "authorId": "author_id",
        "authorName": "author_name",
        "likesCount": "likes_count",
        "commentsCount": "comments_count",
        "savedCount": "saved_count",
        "createdAt": "created_at",
    },
    "comments": {
        "podcastId": "podcast_id",
        "authorId": "author_id",
        "authorName": "author_name",
        "createdAt": "created_at",
    },
    "notifications": {
        "recipientId": "recipient_id",
        "relatedId": "related_id",
        "date": "created_at",
    },
}

USER_RELATIONS = (
    "saved_podcast_ids",
    "downloaded_podcast_ids",
    "liked_podcast_ids",
    "followers",
    "following",
)


def get_schema_version(storage: StorageBackend) -> int:
    """Read the stored schema version (0 when never migrated)."""
    meta = storage.read(STORAGE_KEYS["meta"])
    if isinstance(meta, dict):
        return int(meta.get("schema_version", 0))
    return 0


def migrate(storage: StorageBackend) -> int:
    """Bring stored data up to SCHEMA_VERSION.

    Safe to call on every start: an up-to-date store is left untouched.

    Args:
        storage: Backend to migrate in place

    Returns:
        The schema version after migrating

    Raises:
        RuntimeError: If the stored version is newer than this code understands
    """
    version = get_schema_version(storage)

    if version > SCHEMA_VERSION:
        raise RuntimeError(
            f"Data schema version {version} is newer than supported ({SCHEMA_VERSION})"
        )

    while version < SCHEMA_VERSION:
        step = MIGRATIONS[version]
        logger.info(f"Migrating data schema {version} -> {version + 1}")
        step(storage)
        version += 1
        storage.write(STORAGE_KEYS["meta"], {"schema_version": version})

    return version


def _rename(record: Record, renames: dict[str, str]) -> Record:
    for old, new in renames.items():
        if old in record:
            value = record.pop(old)
            record.setdefault(new, value)
    return record


def _timestamp(value: Any) -> str:
    if isinstance(value, (int, float)):
        return from_epoch_ms(value).isoformat()
    if isinstance(value, str) and value:
        return value
    return now_utc().isoformat()


def _migrate_user(record: Record) -> Record:
    _rename(record, FIELD_RENAMES["users"])
    name = record.get("name") or record.get("email") or record["id"]
    record["name"] = name
    record.setdefault("email", "")
    record.setdefault("nickname", "@" + str(name).lower().replace(" ", ""))
    if record.get("role") not in ("user", "admin"):
        record["role"] = "user"
    record.setdefault("photo_url", "")
    record["description"] = record.get("description") or ""
    record["password_hash"] = _password_hash(record.get("password_hash"))
    for relation in USER_RELATIONS:
        record[relation] = list(dict.fromkeys(record.get(relation) or []))
    return record


def _password_hash(value: Any) -> str:
    """Map a stored credential onto a scheme the current code can verify."""
    if not isinstance(value, str) or not value:
        return UNUSABLE_PASSWORD
    if value.startswith(("scrypt$", LEGACY_PREFIX)):
        return value
    if value.startswith("h_"):
        return LEGACY_PREFIX + value
    return UNUSABLE_PASSWORD


def _migrate_podcast(record: Record) -> Record:
    _rename(record, FIELD_RENAMES["podcasts"])
    record.setdefault("description", "")
    record.setdefault("category", "Technology")
    record.setdefault("video_url", "")
    record.setdefault("thumbnail_url", "")
    record.setdefault("author_name", "")
    record["created_at"] = _timestamp(record.get("created_at"))
    return record


def _migrate_comment(record: Record) -> Record:
    _rename(record, FIELD_RENAMES["comments"])
    record.setdefault("author_name", "")
    record["created_at"] = _timestamp(record.get("created_at"))
    return record


def _migrate_notification(record: Record) -> Record:
    _rename(record, FIELD_RENAMES["notifications"])
    record.setdefault("title", "")
    record.setdefault("message", "")
    if record.get("type") not in ("system", "like", "follow", "comment", "save"):
        record["type"] = "system"
    record.setdefault("related_id", None)
    record["read"] = bool(record.get("read", False))
    record["created_at"] = _timestamp(record.get("created_at"))
    return record


def _reconcile(users: list[Record], podcasts: list[Record], comments: list[Record]) -> None:
    """Recompute counters from relations and mirror follow edges."""
    by_id = {user["id"]: user for user in users}

    for user in users:
        user["following"] = [uid for uid in user["following"] if uid != user["id"]]
        user["followers"] = [uid for uid in user["followers"] if uid != user["id"]]

    for user in users:
        for target_id in user["following"]:
            target = by_id.get(target_id)
            if target is not None and user["id"] not in target["followers"]:
                target["followers"].append(user["id"])
        for follower_id in user["followers"]:
            follower = by_id.get(follower_id)
            if follower is not None and user["id"] not in follower["following"]:
                follower["following"].append(user["id"])

    for podcast in podcasts:
        pid = podcast["id"]
        podcast["likes_count"] = sum(1 for u in users if pid in u["liked_podcast_ids"])
        podcast["saved_count"] = sum(1 for u in users if pid in u["saved_podcast_ids"])
        podcast["comments_count"] = sum(1 for c in comments if c.get("podcast_id") == pid)


def _migrate_v0_to_v1(storage: StorageBackend) -> None:
    users = [_migrate_user(r) for r in storage.read(STORAGE_KEYS["users"]) or []]
    podcasts = [_migrate_podcast(r) for r in storage.read(STORAGE_KEYS["podcasts"]) or []]
    comments = [_migrate_comment(r) for r in storage.read(STORAGE_KEYS["comments"]) or []]
    notifications = [
        _migrate_notification(r) for r in storage.read(STORAGE_KEYS["notifications"]) or []
    ]

    _reconcile(users, podcasts, comments)

    collections = {
        "users": users,
        "podcasts": podcasts,
        "comments": comments,
        "notifications": notifications,
    }
    for name, records in collections.items():
        if records or storage.exists(STORAGE_KEYS[name]):
            storage.write(STORAGE_KEYS[name], records)

    current = storage.read(STORAGE_KEYS["current_user"])
    if isinstance(current, dict):
        storage.write(STORAGE_KEYS["current_user"], _session_record(current, users))

    logger.info(
        f"Migrated {len(users)} users, {len(podcasts)} podcasts, "
        f"{len(comments)} comments, {len(notifications)} notifications"
    )


def _session_record(current: Record, users: list[Record]) -> Record:
    """Rebuild the cached session user from its migrated record, without the hash."""
    user = next((u for u in users if u["id"] == current.get("id")), None)
    if user is None:
        return {"id": current.get("id")}
    return {key: value for key, value in user.items() if key != "password_hash"}


MIGRATIONS: dict[int, Callable[[StorageBackend], None]] = {
    0: _migrate_v0_to_v1,
}
