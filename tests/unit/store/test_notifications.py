"""Tests for the notification center."""


class TestNotify:
    """Tests for NotificationCenter.notify."""

    def test_notify_creates_unread_notification(self, store, ann, bob) -> None:
        notification = store.notifications.notify(
            ann.id, "Hello", "Hi there", "system", actor_id=bob.id
        )

        assert notification is not None
        assert notification.read is False
        assert store.notifications.list_for_user(ann.id) == [notification]

    def test_notify_suppresses_self_notification(self, store, ann) -> None:
        result = store.notifications.notify(ann.id, "Hi", "me", "like", actor_id=ann.id)

        assert result is None
        assert store.notifications.list_for_user(ann.id) == []

    def test_list_for_user_newest_first(self, store, ann) -> None:
        first = store.notifications.notify(ann.id, "1", "first", "system")
        second = store.notifications.notify(ann.id, "2", "second", "system")

        assert [n.id for n in store.notifications.list_for_user(ann.id)] == [second.id, first.id]

    def test_seeded_welcome_notification(self, store) -> None:
        notifications = store.notifications.list_for_user("user_1")

        assert len(notifications) == 1
        assert notifications[0].type == "system"
        assert notifications[0].title == "Welcome!"


class TestReadState:
    """Tests for unread counts and read transitions."""

    def test_unread_count(self, store, ann) -> None:
        store.notifications.notify(ann.id, "1", "a", "system")
        store.notifications.notify(ann.id, "2", "b", "system")

        assert store.notifications.unread_count(ann.id) == 2

    def test_mark_read(self, store, ann) -> None:
        notification = store.notifications.notify(ann.id, "1", "a", "system")

        assert store.notifications.mark_read(ann.id, notification.id) is True
        assert notification.read is True
        assert store.notifications.unread_count(ann.id) == 0

    def test_mark_read_is_idempotent(self, store, ann) -> None:
        notification = store.notifications.notify(ann.id, "1", "a", "system")
        store.notifications.mark_read(ann.id, notification.id)

        assert store.notifications.mark_read(ann.id, notification.id) is False
        assert notification.read is True

    def test_mark_read_ignores_other_recipient(self, store, ann, bob) -> None:
        notification = store.notifications.notify(ann.id, "1", "a", "system")

        assert store.notifications.mark_read(bob.id, notification.id) is False
        assert notification.read is False

    def test_mark_read_unknown_id(self, store, ann) -> None:
        assert store.notifications.mark_read(ann.id, "notif_missing") is False

    def test_mark_all_read(self, store, ann, bob) -> None:
        store.notifications.notify(ann.id, "1", "a", "system")
        store.notifications.notify(ann.id, "2", "b", "system")
        other = store.notifications.notify(bob.id, "3", "c", "system")

        assert store.notifications.mark_all_read(ann.id) == 2
        assert store.notifications.unread_count(ann.id) == 0
        assert other.read is False
        assert store.notifications.mark_all_read(ann.id) == 0

    def test_read_state_is_persisted(self, store, storage, ann) -> None:
        notification = store.notifications.notify(ann.id, "1", "a", "system")
        store.notifications.mark_read(ann.id, notification.id)

        records = {n["id"]: n for n in storage.read("podcast_pro_notifications")}
        assert records[notification.id]["read"] is True
