"""Bootstrap data: the administrator account and demo content.

Seeding is idempotent. A first run (no users) provisions everything;
later runs only add demo accounts that are missing and restore seed
credentials that a migration marked unusable.
"""

import logging
from datetime import timedelta

from podcastpro.store.models import DEFAULT_AVATAR_URL, Notification, Podcast, User
from podcastpro.store.repository import Repository
from podcastpro.store.security import UNUSABLE_PASSWORD, hash_password

logger = logging.getLogger(__name__)

ADMIN_ID = "admin_1"
ADMIN_EMAIL = "admin"
ADMIN_PASSWORD = "admin"
DEMO_PASSWORD = "password"
TEST_USER_COUNT = 10


def _admin(password_hash: str) -> User:
    return User(
        id=ADMIN_ID,
        name="System Admin",
        email=ADMIN_EMAIL,
        nickname="@admin",
        role="admin",
        photo_url=DEFAULT_AVATAR_URL.format(seed="admin"),
        description="System Administrator",
        password_hash=password_hash,
    )


def _demo_users(password_hash: str) -> list[User]:
    users = [
        User(
            id="user_1",
            name="Jane Doe",
            email="jane@example.com",
            nickname="@janed",
            photo_url=DEFAULT_AVATAR_URL.format(seed="Jane"),
            description="Podcast enthusiast",
            password_hash=password_hash,
        )
    ]
    for num in range(1, TEST_USER_COUNT + 1):
        users.append(
            User(
                id=f"user_test_{num}",
                name=f"User {num}",
                email=f"{num}@a.c",
                nickname=f"@user{num}",
                photo_url=DEFAULT_AVATAR_URL.format(seed=num),
                description=f"Test account #{num} for social interactions.",
                password_hash=password_hash,
            )
        )
    return users


def _demo_podcasts(repo: Repository) -> list[Podcast]:
    now = repo.clock()
    return [
        Podcast(
            id="pod_1",
            title="The Future of AI",
            description=(
                "Exploring how generative AI is reshaping software development and creativity."
            ),
            category="Technology",
            video_url=(
                "http://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4"
            ),
            thumbnail_url="https://picsum.photos/seed/tech/800/450",
            author_id="user_1",
            author_name="Jane Doe",
            created_at=now - timedelta(seconds=10_000),
        ),
        Podcast(
            id="pod_2",
            title="Morning Meditation",
            description="Start your day with this 10-minute guided meditation session.",
            category="Relaxation",
            video_url=(
                "http://commondatastorage.googleapis.com/gtv-videos-bucket/sample/ElephantsDream.mp4"
            ),
            thumbnail_url="https://picsum.photos/seed/relax/800/450",
            author_id="user_1",
            author_name="Jane Doe",
            created_at=now - timedelta(seconds=5_000),
        ),
    ]


def seed_store(repo: Repository, include_demo: bool = True) -> bool:
    """Provision bootstrap data.

    Args:
        repo: Repository to seed
        include_demo: Also create demo users, podcasts and a welcome notification

    Returns:
        True if anything was added or repaired
    """
    if not repo.users:
        return _first_run(repo, include_demo)

    changed = False
    demo_hash: str | None = None

    with repo.transaction():
        if include_demo:
            for demo_user in _demo_users(UNUSABLE_PASSWORD):
                if demo_user.id not in repo.users:
                    demo_hash = demo_hash or hash_password(DEMO_PASSWORD)
                    demo_user.password_hash = demo_hash
                    repo.users[demo_user.id] = demo_user
                    logger.info(f"Backfilled demo user {demo_user.id}")
                    changed = True

        changed |= _restore_seed_credentials(repo)

        if changed:
            repo.mark_dirty("users")

    return changed


def _first_run(repo: Repository, include_demo: bool) -> bool:
    with repo.transaction():
        admin = _admin(hash_password(ADMIN_PASSWORD))
        repo.users[admin.id] = admin
        repo.mark_dirty("users")

        if include_demo:
            demo_hash = hash_password(DEMO_PASSWORD)
            for user in _demo_users(demo_hash):
                repo.users[user.id] = user

            if not repo.podcasts:
                for podcast in _demo_podcasts(repo):
                    repo.podcasts[podcast.id] = podcast
                repo.mark_dirty("podcasts")

            if not repo.notifications:
                welcome = Notification(
                    id="n1",
                    recipient_id="user_1",
                    title="Welcome!",
                    message="Thanks for joining Podcast Pro.",
                    type="system",
                    created_at=repo.clock(),
                )
                repo.notifications[welcome.id] = welcome
                repo.mark_dirty("notifications")

    logger.info(f"Seeded store with {len(repo.users)} users and {len(repo.podcasts)} podcasts")
    return True


def _restore_seed_credentials(repo: Repository) -> bool:
    """Give seed accounts back their known password if it was marked unusable."""
    changed = False
    admin = repo.users.get(ADMIN_ID)
    if admin is not None and admin.password_hash == UNUSABLE_PASSWORD:
        admin.password_hash = hash_password(ADMIN_PASSWORD)
        changed = True

    demo_hash: str | None = None
    for user in _demo_users(UNUSABLE_PASSWORD):
        existing = repo.users.get(user.id)
        if existing is not None and existing.password_hash == UNUSABLE_PASSWORD:
            demo_hash = demo_hash or hash_password(DEMO_PASSWORD)
            existing.password_hash = demo_hash
            changed = True

    if changed:
        logger.info("Restored credentials for seed accounts")
    return changed
