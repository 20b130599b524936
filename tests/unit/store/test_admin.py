"""Tests for moderation operations."""

from podcastpro.store.seed import ADMIN_ID


class TestListings:
    """Tests for unfiltered admin listings."""

    def test_list_all_users_includes_admin(self, store) -> None:
        ids = {u.id for u in store.admin.list_all_users()}

        assert ADMIN_ID in ids
        assert "user_1" in ids
        assert len(ids) == 12

    def test_list_all_podcasts_newest_first(self, store, ann) -> None:
        newest = store.catalog.create_podcast(ann.id, "Newest", "", "News", None)

        podcasts = store.admin.list_all_podcasts()

        assert podcasts[0].id == newest.id
        assert [p.id for p in podcasts[1:]] == ["pod_2", "pod_1"]


class TestDeleteUser:
    """Tests for AdminService.delete_user."""

    def test_delete_user(self, store, ann) -> None:
        assert store.admin.delete_user(ann.id) is True
        assert store.auth.get_user(ann.id) is None

    def test_delete_missing_user(self, store) -> None:
        assert store.admin.delete_user("user_missing") is False

    def test_delete_without_cascade_leaves_references(self, store, ann, bob, podcast) -> None:
        """Podcasts, comments and follow edges keep pointing at the removed id."""
        store.interactions.toggle_follow(bob.id, ann.id)
        store.comments.add_comment(podcast.id, ann.id, ann.name, "mine")

        store.admin.delete_user(ann.id)

        assert store.catalog.get_podcast(podcast.id).author_id == ann.id
        assert store.comments.list_comments(podcast.id)[0].author_id == ann.id
        assert ann.id in bob.following

    def test_delete_with_cascade_cleans_follow_graph(self, store, ann, bob) -> None:
        store.interactions.toggle_follow(bob.id, ann.id)
        store.interactions.toggle_follow(ann.id, bob.id)

        store.admin.delete_user(ann.id, cascade=True)

        assert ann.id not in bob.following
        assert ann.id not in bob.followers
        assert store.admin.check_integrity() == []

    def test_delete_with_cascade_adjusts_counters(self, store, ann, bob, podcast) -> None:
        store.interactions.toggle_like(bob.id, podcast.id)
        store.interactions.toggle_save(bob.id, podcast.id)

        store.admin.delete_user(bob.id, cascade=True)

        assert podcast.likes_count == 0
        assert podcast.saved_count == 0

    def test_delete_is_persisted(self, store, storage, ann) -> None:
        store.admin.delete_user(ann.id)

        ids = [u["id"] for u in storage.read("podcast_pro_users")]
        assert ann.id not in ids


class TestCheckIntegrity:
    """Tests for AdminService.check_integrity."""

    def test_seeded_store_is_consistent(self, store) -> None:
        assert store.admin.check_integrity() == []

    def test_reports_counter_drift(self, store, bob, podcast) -> None:
        store.interactions.toggle_like(bob.id, podcast.id)
        podcast.likes_count = 3

        problems = store.admin.check_integrity()

        assert len(problems) == 1
        assert "likes_count=3" in problems[0]

    def test_reports_asymmetric_follow(self, store, ann, bob) -> None:
        ann.following.append(bob.id)

        problems = store.admin.check_integrity()

        assert any(ann.id in p and bob.id in p for p in problems)
