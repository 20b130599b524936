"""Integration tests for CLI commands."""

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from podcastpro.cli import app
from podcastpro.store import Store

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch) -> Path:
    """Isolated config and data directories for one CLI session."""
    monkeypatch.setenv("PODCASTPRO_CONFIG_DIR", str(tmp_path / "config"))
    for name in ("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "data"


@pytest.fixture
def cli(data_dir: Path):
    def invoke(*args: str, input: str | None = None):
        return runner.invoke(app, ["--data-dir", str(data_dir), *args], input=input)

    return invoke


def _register(cli, name: str, email: str, nickname: str, password: str = "pass1"):
    return cli(
        "register",
        "--name", name,
        "--email", email,
        "--nickname", nickname,
        "--password", password,
    )


def _login(cli, email: str, password: str):
    return cli("login", email, "--password", password)


def _publish(cli, data_dir: Path, title: str) -> str:
    result = cli("publish", title, "-c", "Science", "-d", "About science")
    assert result.exit_code == 0, result.output
    store = Store.open(data_dir)
    return next(p.id for p in store.catalog.list_podcasts() if p.title == title)


class TestCLIVersion:
    """Tests for version command."""

    def test_version_command(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "podcastpro" in result.output
        assert "0.1.0" in result.output


class TestCLIAccounts:
    """Tests for register, login, logout and whoami."""

    def test_register_logs_in(self, cli) -> None:
        result = _register(cli, "Ann", "ann@x.com", "@ann")

        assert result.exit_code == 0
        assert "Welcome, Ann" in result.output

        whoami = cli("whoami")
        assert whoami.exit_code == 0
        assert "ann@x.com" in whoami.output

    def test_register_duplicate_email(self, cli) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")

        result = _register(cli, "Other", "ANN@x.com", "@other")

        assert result.exit_code == 1
        assert "Email already registered" in result.output

    def test_register_short_password(self, cli) -> None:
        result = _register(cli, "Ann", "ann@x.com", "@ann", password="abc")

        assert result.exit_code == 1
        assert "at least 4 characters" in result.output

    def test_login_wrong_password(self, cli) -> None:
        result = _login(cli, "jane@example.com", "nope")

        assert result.exit_code == 1
        assert "Invalid email or password" in result.output

    def test_login_seeded_user(self, cli) -> None:
        result = _login(cli, "jane@example.com", "password")

        assert result.exit_code == 0
        assert "Logged in as Jane Doe" in result.output

    def test_logout(self, cli) -> None:
        _login(cli, "jane@example.com", "password")

        assert cli("logout").exit_code == 0

        result = cli("whoami")
        assert result.exit_code == 1
        assert "Not logged in" in result.output


class TestCLIPodcasts:
    """Tests for publishing, browsing and interacting."""

    def test_feed_lists_seeded_podcasts(self, cli) -> None:
        result = cli("feed")

        assert result.exit_code == 0
        assert "pod_1" in result.output
        assert "pod_2" in result.output

    def test_publish_requires_login(self, cli) -> None:
        result = cli("publish", "Nope")

        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_publish_and_show(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")
        podcast_id = _publish(cli, data_dir, "Ann Show")

        result = cli("show", podcast_id)

        assert result.exit_code == 0
        assert "Ann Show" in result.output
        assert "About science" in result.output

    def test_publish_generate_without_key_uses_fallback(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")

        result = cli("publish", "Calm", "-c", "Relaxation", "--generate")

        assert result.exit_code == 0
        store = Store.open(data_dir)
        podcast = next(p for p in store.catalog.list_podcasts() if p.title == "Calm")
        assert podcast.description == "A fascinating podcast about Relaxation."

    def test_show_missing_podcast(self, cli) -> None:
        result = cli("show", "pod_missing")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_like_notifies_author(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")
        podcast_id = _publish(cli, data_dir, "Ann Show")
        _register(cli, "Bob", "bob@x.com", "@bob", password="pass2")

        result = cli("like", podcast_id)
        assert result.exit_code == 0
        assert "Liked" in result.output

        _login(cli, "ann@x.com", "pass1")
        notes = cli("notifications")
        assert notes.exit_code == 0
        assert "like" in notes.output
        assert "1 unread" in notes.output

        assert "Marked 1" in cli("notifications", "--read-all").output

    def test_comment_appears_on_show(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")
        podcast_id = _publish(cli, data_dir, "Ann Show")

        assert cli("comment", podcast_id, "nice!").exit_code == 0

        result = cli("show", podcast_id)
        assert "nice!" in result.output

    def test_saved_feed(self, cli) -> None:
        _login(cli, "jane@example.com", "password")
        cli("save", "pod_1")

        result = cli("feed", "--saved")

        assert "pod_1" in result.output
        assert "pod_2" not in result.output

    def test_delete_by_other_user_refused(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")
        podcast_id = _publish(cli, data_dir, "Ann Show")
        _register(cli, "Bob", "bob@x.com", "@bob")

        result = cli("delete", podcast_id, "--force")

        assert result.exit_code == 1
        assert Store.open(data_dir).catalog.get_podcast(podcast_id) is not None

    def test_delete_by_author(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")
        podcast_id = _publish(cli, data_dir, "Ann Show")

        result = cli("delete", podcast_id, input="y\n")

        assert result.exit_code == 0
        assert Store.open(data_dir).catalog.get_podcast(podcast_id) is None

    def test_follow_self_refused(self, cli) -> None:
        _login(cli, "jane@example.com", "password")

        result = cli("follow", "user_1")

        assert result.exit_code == 1
        assert "cannot follow yourself" in result.output


class TestCLIDescribe:
    """Tests for the describe command."""

    def test_describe_without_key(self, cli) -> None:
        result = cli("describe", "Space Talk", "-c", "Science")

        assert result.exit_code == 0
        assert "A fascinating podcast about Science." in result.output


class TestCLIAdmin:
    """Tests for admin commands."""

    def test_admin_required(self, cli) -> None:
        _login(cli, "jane@example.com", "password")

        result = cli("admin", "users")

        assert result.exit_code == 1
        assert "Admin privileges required" in result.output

    def test_admin_lists_users(self, cli) -> None:
        _login(cli, "admin", "admin")

        result = cli("admin", "users")

        assert result.exit_code == 0
        assert "admin_1" in result.output
        assert "user_1" in result.output

    def test_root_admin_cannot_be_deleted(self, cli) -> None:
        _login(cli, "admin", "admin")

        result = cli("admin", "delete-user", "admin_1", "--force")

        assert result.exit_code == 1
        assert "cannot be deleted" in result.output

    def test_delete_user(self, cli, data_dir) -> None:
        _register(cli, "Ann", "ann@x.com", "@ann")
        ann_id = Store.open(data_dir).auth.find_by_email("ann@x.com").id
        _login(cli, "admin", "admin")

        result = cli("admin", "delete-user", ann_id, "--cascade", "--force")

        assert result.exit_code == 0
        assert Store.open(data_dir).auth.get_user(ann_id) is None

    def test_integrity_check(self, cli) -> None:
        _login(cli, "admin", "admin")

        result = cli("admin", "check")

        assert result.exit_code == 0
        assert "No integrity problems" in result.output


class TestCLILogging:
    """The configured log level reaches the package logger."""

    def test_config_log_level_applied(self, cli, tmp_path: Path) -> None:
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("log_level: ERROR\n")

        assert cli("feed").exit_code == 0
        assert logging.getLogger("podcastpro").level == logging.ERROR

    def test_verbose_overrides_config(self, data_dir: Path, tmp_path: Path) -> None:
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("log_level: ERROR\n")

        result = runner.invoke(app, ["--verbose", "--data-dir", str(data_dir), "feed"])

        assert result.exit_code == 0
        assert logging.getLogger("podcastpro").level == logging.DEBUG

    def test_config_log_level_applied_to_describe(self, cli, tmp_path: Path) -> None:
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("log_level: INFO\n")

        assert cli("describe", "Space Talk").exit_code == 0
        assert logging.getLogger("podcastpro").level == logging.INFO
