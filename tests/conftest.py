"""Shared fixtures for podcastpro tests."""

from datetime import datetime, timedelta, timezone

import pytest

from podcastpro.config.schema import StoreConfig
from podcastpro.store import MemoryStorage, Store


class TickingClock:
    """Clock that advances one second per call, so created_at never ties."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    """Store seeded with the admin and demo data."""
    return Store(storage, clock=clock)


@pytest.fixture
def bare_store(clock):
    """Store with only the administrator account."""
    return Store(MemoryStorage(), config=StoreConfig(seed_demo_data=False), clock=clock)


@pytest.fixture
def session(store):
    with store.open_session() as session:
        yield session


@pytest.fixture
def ann(store, session):
    return store.auth.register(session, "Ann", "ann@x.com", "@ann", "pass1")


@pytest.fixture
def bob(store, session):
    return store.auth.register(session, "Bob", "bob@x.com", "@bob", "pass2")


@pytest.fixture
def podcast(store, ann):
    """A podcast published by Ann."""
    return store.catalog.create_podcast(
        ann.id,
        "Ann's Show",
        "Weekly chat",
        "Technology",
        "https://example.com/show.mp4",
    )
