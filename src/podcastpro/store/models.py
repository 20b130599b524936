"""Entity models for the social store.

Users, podcasts, comments and notifications are plain Pydantic models.
Relation sets are kept as ordered, duplicate-free lists so they serialize
to JSON arrays in insertion order.
"""

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from podcastpro.utils.datetime import ensure_utc, now_utc

Role = Literal["user", "admin"]
NotificationType = Literal["system", "like", "follow", "comment", "save"]

DEFAULT_AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"
DEFAULT_THUMBNAIL_URL = "https://picsum.photos/seed/{seed}/800/450"

CATEGORIES = [
    "Technology",
    "Entertainment",
    "Education",
    "News",
    "Sports",
    "Music",
    "Comedy",
    "Relaxation",
    "Business",
    "Science",
]


def new_id(prefix: str) -> str:
    """Generate a prefixed unique id, e.g. ``pod_3f2a...``."""
    return f"{prefix}_{uuid4().hex}"


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class User(BaseModel):
    """Identity and social node."""

    id: str = Field(default_factory=lambda: new_id("user"))
    name: str
    email: str
    nickname: str
    role: Role = "user"
    photo_url: str = ""
    description: str = ""
    password_hash: str = "!"

    saved_podcast_ids: list[str] = Field(default_factory=list)
    downloaded_podcast_ids: list[str] = Field(default_factory=list)
    liked_podcast_ids: list[str] = Field(default_factory=list)
    followers: list[str] = Field(default_factory=list)  # users following this user
    following: list[str] = Field(default_factory=list)  # users this user follows

    @field_validator(
        "saved_podcast_ids",
        "downloaded_podcast_ids",
        "liked_podcast_ids",
        "followers",
        "following",
    )
    @classmethod
    def validate_unique(cls, v: list[str]) -> list[str]:
        """Relation sets never hold duplicates."""
        return _dedupe(v)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def public_view(self) -> dict:
        """Serialize without the credential."""
        return self.model_dump(mode="json", exclude={"password_hash"})


class Podcast(BaseModel):
    """A published video podcast."""

    id: str = Field(default_factory=lambda: new_id("pod"))
    title: str
    description: str = ""
    category: str = "Technology"
    video_url: str
    thumbnail_url: str = ""
    author_id: str
    author_name: str

    likes_count: int = Field(default=0, ge=0)
    comments_count: int = Field(default=0, ge=0)
    saved_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=now_utc)

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class Comment(BaseModel):
    """A comment attached to exactly one podcast."""

    id: str = Field(default_factory=lambda: new_id("comment"))
    podcast_id: str
    author_id: str
    author_name: str
    text: str
    created_at: datetime = Field(default_factory=now_utc)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Ensure comment is not empty."""
        if not v.strip():
            raise ValueError("Comment text cannot be empty")
        return v.strip()

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class Notification(BaseModel):
    """A directed, typed event record."""

    id: str = Field(default_factory=lambda: new_id("notif"))
    recipient_id: str
    title: str
    message: str
    type: NotificationType
    related_id: str | None = None  # podcast id, or actor id for follows
    created_at: datetime = Field(default_factory=now_utc)
    read: bool = False

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)
