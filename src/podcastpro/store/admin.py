"""Moderation operations and integrity checks."""

import logging

from podcastpro.store.models import Podcast, User
from podcastpro.store.repository import Repository, newest_first

logger = logging.getLogger(__name__)


class AdminService:
    """Unfiltered reads and user deletion for moderation views.

    Whether the acting user is an admin, and protection of the root
    administrator, are enforced by the caller.
    """

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def list_all_users(self) -> list[User]:
        return list(self.repo.users.values())

    def list_all_podcasts(self) -> list[Podcast]:
        return newest_first(self.repo.podcasts.values())

    def delete_user(self, user_id: str, cascade: bool = False) -> bool:
        """Remove a user.

        By default nothing else changes: podcasts, comments, notifications
        and other users' follow sets may keep referring to the deleted id.
        With ``cascade`` the id is also removed from other users'
        followers/following, and like/save counters the user contributed are
        decremented, so the follow and counter invariants still hold.

        Args:
            user_id: User to delete
            cascade: Also clean references held by other users and podcasts

        Returns:
            True if a user was removed
        """
        user = self.repo.users.get(user_id)
        if user is None:
            return False

        with self.repo.transaction():
            del self.repo.users[user_id]
            self.repo.mark_dirty("users")

            if cascade:
                for other in self.repo.users.values():
                    if user_id in other.followers:
                        other.followers.remove(user_id)
                    if user_id in other.following:
                        other.following.remove(user_id)

                for podcast_id in user.liked_podcast_ids:
                    podcast = self.repo.podcasts.get(podcast_id)
                    if podcast is not None:
                        podcast.likes_count = max(0, podcast.likes_count - 1)
                for podcast_id in user.saved_podcast_ids:
                    podcast = self.repo.podcasts.get(podcast_id)
                    if podcast is not None:
                        podcast.saved_count = max(0, podcast.saved_count - 1)
                self.repo.mark_dirty("podcasts")

        logger.info(f"Deleted user {user_id}{' (cascade)' if cascade else ''}")
        return True

    def check_integrity(self) -> list[str]:
        """Report counter and follow-graph inconsistencies.

        Returns:
            Human readable problems; empty when everything is consistent
        """
        problems: list[str] = []
        users = self.repo.users

        for podcast in self.repo.podcasts.values():
            likes = sum(1 for u in users.values() if podcast.id in u.liked_podcast_ids)
            saves = sum(1 for u in users.values() if podcast.id in u.saved_podcast_ids)
            comments = sum(1 for c in self.repo.comments.values() if c.podcast_id == podcast.id)

            if podcast.likes_count != likes:
                problems.append(
                    f"Podcast {podcast.id}: likes_count={podcast.likes_count}, actual likes={likes}"
                )
            if podcast.saved_count != saves:
                problems.append(
                    f"Podcast {podcast.id}: saved_count={podcast.saved_count}, actual saves={saves}"
                )
            if podcast.comments_count != comments:
                problems.append(
                    f"Podcast {podcast.id}: comments_count={podcast.comments_count}, "
                    f"actual comments={comments}"
                )

        for user in users.values():
            if user.id in user.following:
                problems.append(f"User {user.id} follows themself")
            for target_id in user.following:
                target = users.get(target_id)
                if target is not None and user.id not in target.followers:
                    problems.append(f"User {user.id} follows {target_id} but is not in its followers")
            for follower_id in user.followers:
                follower = users.get(follower_id)
                if follower is not None and user.id not in follower.following:
                    problems.append(
                        f"User {user.id} lists follower {follower_id} who does not follow back"
                    )

        return problems
