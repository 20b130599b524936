"""Notification center: creation primitive and read-state transitions."""

import logging

from podcastpro.store.models import Notification, NotificationType
from podcastpro.store.repository import Repository, newest_first

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Creates and reads per-user notifications."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def notify(
        self,
        recipient_id: str,
        title: str,
        message: str,
        type: NotificationType,
        related_id: str | None = None,
        actor_id: str | None = None,
    ) -> Notification | None:
        """Record a notification for ``recipient_id``.

        Called by the interaction and comment operations. A user is never
        notified about their own action: when ``actor_id`` equals the
        recipient nothing is recorded.

        Args:
            recipient_id: User receiving the notification
            title: Short title
            message: Body text
            type: Notification type
            related_id: Podcast id (like/comment/save) or actor id (follow)
            actor_id: User whose action triggered this notification

        Returns:
            The new Notification, or None if suppressed
        """
        if actor_id is not None and actor_id == recipient_id:
            logger.debug(f"Suppressed self-notification ({type}) for {recipient_id}")
            return None

        notification = Notification(
            recipient_id=recipient_id,
            title=title,
            message=message,
            type=type,
            related_id=related_id,
            created_at=self.repo.clock(),
        )

        with self.repo.transaction():
            self.repo.notifications[notification.id] = notification
            self.repo.mark_dirty("notifications")

        return notification

    def list_for_user(self, user_id: str) -> list[Notification]:
        """Notifications addressed to ``user_id``, newest first."""
        return newest_first(
            n for n in self.repo.notifications.values() if n.recipient_id == user_id
        )

    def unread_count(self, user_id: str) -> int:
        return sum(
            1
            for n in self.repo.notifications.values()
            if n.recipient_id == user_id and not n.read
        )

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification read.

        Idempotent. Ids that don't exist or belong to another recipient are ignored.

        Returns:
            True if the read flag changed
        """
        notification = self.repo.notifications.get(notification_id)
        if notification is None or notification.recipient_id != user_id or notification.read:
            return False

        with self.repo.transaction():
            notification.read = True
            self.repo.mark_dirty("notifications")

        return True

    def mark_all_read(self, user_id: str) -> int:
        """Mark every notification for ``user_id`` read.

        Returns:
            Number of notifications that changed
        """
        unread = [
            n
            for n in self.repo.notifications.values()
            if n.recipient_id == user_id and not n.read
        ]
        if not unread:
            return 0

        with self.repo.transaction():
            for notification in unread:
                notification.read = True
            self.repo.mark_dirty("notifications")

        return len(unread)
