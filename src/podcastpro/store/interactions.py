"""Interaction engine: like, save, download and follow toggles.

Every toggle reads membership in the acting user's set to decide its
direction, then applies the set change, the counter change and any
notification in a single transaction. Counters are never consulted to
decide direction.
"""

import logging

from podcastpro.store.models import Podcast, User
from podcastpro.store.notifications import NotificationCenter
from podcastpro.store.repository import Repository
from podcastpro.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class InteractionEngine:
    """Toggle operations over user/podcast and user/user relations."""

    def __init__(self, repo: Repository, notifications: NotificationCenter) -> None:
        self.repo = repo
        self.notifications = notifications

    def toggle_like(self, user_id: str, podcast_id: str) -> User:
        """Like or unlike a podcast.

        Liking increments ``likes_count`` and notifies the author (unless it is
        their own podcast). Unliking decrements, floored at zero.

        Returns:
            The updated user

        Raises:
            NotFoundError: If the user or podcast does not exist
        """
        user, podcast = self._resolve(user_id, podcast_id)

        with self.repo.transaction():
            added = self._toggle_membership(user.liked_podcast_ids, podcast.id)
            podcast.likes_count = _step(podcast.likes_count, added)
            self.repo.mark_dirty("users", "podcasts")

            if added:
                self.notifications.notify(
                    podcast.author_id,
                    "New Like",
                    f'{user.name} liked your podcast "{podcast.title}"',
                    "like",
                    related_id=podcast.id,
                    actor_id=user.id,
                )

        logger.debug(f"{user.id} {'liked' if added else 'unliked'} {podcast.id}")
        return user

    def toggle_save(self, user_id: str, podcast_id: str) -> User:
        """Save or unsave a podcast, keeping ``saved_count`` in step.

        Raises:
            NotFoundError: If the user or podcast does not exist
        """
        user, podcast = self._resolve(user_id, podcast_id)

        with self.repo.transaction():
            added = self._toggle_membership(user.saved_podcast_ids, podcast.id)
            podcast.saved_count = _step(podcast.saved_count, added)
            self.repo.mark_dirty("users", "podcasts")

            if added:
                self.notifications.notify(
                    podcast.author_id,
                    "New Save",
                    f'{user.name} saved your podcast "{podcast.title}"',
                    "save",
                    related_id=podcast.id,
                    actor_id=user.id,
                )

        logger.debug(f"{user.id} {'saved' if added else 'unsaved'} {podcast.id}")
        return user

    def toggle_download(self, user_id: str, podcast_id: str) -> User:
        """Mark or unmark a podcast as available offline.

        Purely per-user: no counter, no notification.

        Raises:
            NotFoundError: If the user or podcast does not exist
        """
        user, podcast = self._resolve(user_id, podcast_id)

        with self.repo.transaction():
            added = self._toggle_membership(user.downloaded_podcast_ids, podcast.id)
            self.repo.mark_dirty("users")

        logger.debug(f"{user.id} {'downloaded' if added else 'removed download'} {podcast.id}")
        return user

    def toggle_follow(self, current_user_id: str, target_user_id: str) -> User:
        """Follow or unfollow another user.

        Both sides of the edge change together. Following notifies the
        target with ``related_id`` set to the follower's id.

        Returns:
            The updated acting user

        Raises:
            ValidationError: If a user tries to follow themself
            NotFoundError: If either user does not exist
        """
        if current_user_id == target_user_id:
            raise ValidationError("You cannot follow yourself")

        current = self.repo.users.get(current_user_id)
        if current is None:
            raise NotFoundError("User", current_user_id)
        target = self.repo.users.get(target_user_id)
        if target is None:
            raise NotFoundError("User", target_user_id)

        with self.repo.transaction():
            added = self._toggle_membership(current.following, target.id)
            if added:
                if current.id not in target.followers:
                    target.followers.append(current.id)
            elif current.id in target.followers:
                target.followers.remove(current.id)
            self.repo.mark_dirty("users")

            if added:
                self.notifications.notify(
                    target.id,
                    "New Follower",
                    f"{current.name} started following you.",
                    "follow",
                    related_id=current.id,
                    actor_id=current.id,
                )

        logger.debug(f"{current.id} {'followed' if added else 'unfollowed'} {target.id}")
        return current

    def is_liked_by_user(self, user_id: str, podcast_id: str) -> bool:
        user = self.repo.users.get(user_id)
        return user is not None and podcast_id in user.liked_podcast_ids

    def is_saved_by_user(self, user_id: str, podcast_id: str) -> bool:
        user = self.repo.users.get(user_id)
        return user is not None and podcast_id in user.saved_podcast_ids

    def is_downloaded_by_user(self, user_id: str, podcast_id: str) -> bool:
        user = self.repo.users.get(user_id)
        return user is not None and podcast_id in user.downloaded_podcast_ids

    def is_following(self, user_id: str, target_user_id: str) -> bool:
        user = self.repo.users.get(user_id)
        return user is not None and target_user_id in user.following

    def _resolve(self, user_id: str, podcast_id: str) -> tuple[User, Podcast]:
        user = self.repo.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        podcast = self.repo.podcasts.get(podcast_id)
        if podcast is None:
            raise NotFoundError("Podcast", podcast_id)
        return user, podcast

    @staticmethod
    def _toggle_membership(ids: list[str], item_id: str) -> bool:
        """Flip membership of ``item_id``. Returns True if it was added."""
        if item_id in ids:
            ids.remove(item_id)
            return False
        ids.append(item_id)
        return True


def _step(count: int, added: bool) -> int:
    # Floor at zero in case a counter drifted from its relation
    return count + 1 if added else max(0, count - 1)
