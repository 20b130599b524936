"""Comment threads attached to podcasts."""

import logging

from podcastpro.store.models import Comment
from podcastpro.store.notifications import NotificationCenter
from podcastpro.store.repository import Repository, newest_first
from podcastpro.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CommentThread:
    """Creates and lists comments. Comments are immutable once written."""

    def __init__(self, repo: Repository, notifications: NotificationCenter) -> None:
        self.repo = repo
        self.notifications = notifications

    def add_comment(self, podcast_id: str, author_id: str, author_name: str, text: str) -> Comment:
        """Add a comment and bump the podcast's ``comments_count``.

        The podcast author is notified unless they wrote the comment.

        Args:
            podcast_id: Podcast being commented on
            author_id: Commenting user
            author_name: Display name stored with the comment
            text: Comment body (trimmed)

        Returns:
            The new Comment

        Raises:
            ValidationError: If the text is blank
            NotFoundError: If the podcast does not exist
        """
        if not text or not text.strip():
            raise ValidationError("Comment cannot be empty")

        podcast = self.repo.podcasts.get(podcast_id)
        if podcast is None:
            raise NotFoundError("Podcast", podcast_id)

        comment = Comment(
            podcast_id=podcast.id,
            author_id=author_id,
            author_name=author_name,
            text=text,
            created_at=self.repo.clock(),
        )

        with self.repo.transaction():
            self.repo.comments[comment.id] = comment
            podcast.comments_count += 1
            self.repo.mark_dirty("comments", "podcasts")

            self.notifications.notify(
                podcast.author_id,
                "New Comment",
                f'{author_name} commented on "{podcast.title}"',
                "comment",
                related_id=podcast.id,
                actor_id=author_id,
            )

        logger.debug(f"{author_id} commented on {podcast.id}")
        return comment

    def list_comments(self, podcast_id: str) -> list[Comment]:
        """Comments for a podcast, newest first."""
        return newest_first(c for c in self.repo.comments.values() if c.podcast_id == podcast_id)
