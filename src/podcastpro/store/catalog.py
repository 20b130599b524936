"""Podcast catalog: publishing, browsing and deletion."""

import logging

from podcastpro.store.models import DEFAULT_THUMBNAIL_URL, Podcast
from podcastpro.store.repository import Repository, newest_first
from podcastpro.utils.errors import NotFoundError, ValidationError
from podcastpro.utils.video import VideoSource, find_embedded_video, resolve_video_source

logger = logging.getLogger(__name__)


class Catalog:
    """CRUD over the Podcasts collection."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def create_podcast(
        self,
        author_id: str,
        title: str,
        description: str,
        category: str,
        video_url: str | None = None,
        thumbnail_url: str | None = None,
    ) -> Podcast:
        """Publish a new podcast.

        Counters start at zero. When no video URL is given, a YouTube or Vimeo
        link found in the description is used, then the sample video.

        Args:
            author_id: Publishing user
            title: Podcast title
            description: Free text description
            category: Category name (open set)
            video_url: Direct media URL or YouTube/Vimeo link
            thumbnail_url: Optional thumbnail; defaults to a generated image

        Returns:
            The stored Podcast

        Raises:
            NotFoundError: If the author does not exist
            ValidationError: If the title is blank
        """
        author = self.repo.users.get(author_id)
        if author is None:
            raise NotFoundError("User", author_id)

        if not title or not title.strip():
            raise ValidationError("Title is required")

        if not video_url or not video_url.strip():
            embedded = find_embedded_video(description)
            video_url = embedded.url if embedded else None

        podcast = Podcast(
            title=title.strip(),
            description=(description or "").strip(),
            category=(category or "").strip() or "Technology",
            video_url=resolve_video_source(video_url).url,
            thumbnail_url="",
            author_id=author.id,
            author_name=author.name,
            created_at=self.repo.clock(),
        )
        podcast.thumbnail_url = (
            thumbnail_url.strip()
            if thumbnail_url and thumbnail_url.strip()
            else DEFAULT_THUMBNAIL_URL.format(seed=podcast.id)
        )

        with self.repo.transaction():
            self.repo.podcasts[podcast.id] = podcast
            self.repo.mark_dirty("podcasts")

        logger.info(f"User {author.id} published podcast {podcast.id}")
        return podcast

    def list_podcasts(self) -> list[Podcast]:
        """All podcasts, newest first."""
        return newest_first(self.repo.podcasts.values())

    def list_user_podcasts(self, user_id: str) -> list[Podcast]:
        """Podcasts published by ``user_id``, newest first."""
        return newest_first(p for p in self.repo.podcasts.values() if p.author_id == user_id)

    def get_podcast(self, podcast_id: str) -> Podcast | None:
        return self.repo.podcasts.get(podcast_id)

    def video_source(self, podcast_id: str) -> VideoSource:
        """Resolve how the podcast's video should be played.

        Raises:
            NotFoundError: If the podcast does not exist
        """
        podcast = self.repo.podcasts.get(podcast_id)
        if podcast is None:
            raise NotFoundError("Podcast", podcast_id)
        return resolve_video_source(podcast.video_url)

    def delete_podcast(self, podcast_id: str) -> bool:
        """Remove a podcast.

        Authorization (author or admin) is the caller's job. The podcast's
        comments are removed and its id is dropped from every user's
        liked, saved and downloaded sets. Notifications that mention it are
        kept as history.

        Returns:
            True if a podcast was removed
        """
        if podcast_id not in self.repo.podcasts:
            return False

        with self.repo.transaction():
            del self.repo.podcasts[podcast_id]

            orphaned = [c.id for c in self.repo.comments.values() if c.podcast_id == podcast_id]
            for comment_id in orphaned:
                del self.repo.comments[comment_id]

            for user in self.repo.users.values():
                for relation in ("liked_podcast_ids", "saved_podcast_ids", "downloaded_podcast_ids"):
                    ids = getattr(user, relation)
                    if podcast_id in ids:
                        ids.remove(podcast_id)

            self.repo.mark_dirty("podcasts", "comments", "users")

        logger.info(f"Deleted podcast {podcast_id} and {len(orphaned)} comment(s)")
        return True
