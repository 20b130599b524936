"""CLI entry point for podcastpro."""

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from podcastpro.config.logging import setup_logging
from podcastpro.config.manager import ConfigManager
from podcastpro.config.schema import GlobalConfig
from podcastpro.generation import DescriptionGenerator
from podcastpro.store import CATEGORIES, Session, Store, User
from podcastpro.store.seed import ADMIN_ID
from podcastpro.utils.errors import AuthError, NotFoundError, PodcastProError, ValidationError

app = typer.Typer(
    name="podcastpro",
    help="Publish, browse and interact with short video podcasts",
    no_args_is_help=True,
)
admin_app = typer.Typer(help="Moderation commands (admin only)", no_args_is_help=True)
app.add_typer(admin_app, name="admin")

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
    data_dir: Path | None = typer.Option(
        None, "--data-dir", help="Directory holding the store's data files"
    ),
) -> None:
    """podcastpro - a tiny podcast social network."""
    setup_logging(verbose=verbose, log_file=log_file)
    ctx.obj = {"data_dir": data_dir, "verbose": verbose, "log_file": log_file}


def _load_config(ctx: typer.Context, manager: ConfigManager) -> GlobalConfig:
    """Load config.yaml and apply its log level (--verbose still wins)."""
    config = manager.load_config()
    obj = ctx.obj or {}
    setup_logging(
        verbose=obj.get("verbose", False),
        log_file=obj.get("log_file"),
        level=config.log_level,
    )
    return config


def _load(ctx: typer.Context) -> tuple[Store, GlobalConfig]:
    manager = ConfigManager()
    config = _load_config(ctx, manager)
    data_dir = (ctx.obj or {}).get("data_dir") or manager.resolve_data_dir(config)
    return Store.open(data_dir, config.store), config


def _require_user(store: Store, session: Session) -> User:
    user = store.auth.current_user(session)
    if user is None:
        raise AuthError("Not logged in. Run: podcastpro login <email>")
    return user


def _require_admin(store: Store, session: Session) -> User:
    user = _require_user(store, session)
    if not user.is_admin:
        raise AuthError("Admin privileges required")
    return user


def _fail(error: PodcastProError) -> None:
    console.print(f"[red]✗[/red] {error}")
    if error.suggestion:
        console.print(f"[dim]  {error.suggestion}[/dim]")
    sys.exit(1)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podcastpro import __version__

    console.print(f"[bold cyan]podcastpro[/bold cyan] v{__version__}")


@app.command("register")
def register(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    email: str = typer.Option(..., "--email", "-e", help="Login email"),
    nickname: str = typer.Option(..., "--nickname", help="Public handle, e.g. @ann"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Create an account and log in.

    Examples:
        podcastpro register --name Ann --email ann@x.com --nickname @ann
    """
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = store.auth.register(session, name, email, nickname, password)
        console.print(f"[green]✓[/green] Welcome, [bold]{user.name}[/bold] ({user.nickname})")
    except PodcastProError as e:
        _fail(e)


@app.command("login")
def login(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Account email ('admin' for the administrator)"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Log in to an existing account."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = store.auth.login(session, email, password)
        console.print(f"[green]✓[/green] Logged in as [bold]{user.name}[/bold]")
    except PodcastProError as e:
        _fail(e)


@app.command("logout")
def logout(ctx: typer.Context) -> None:
    """Log out of the current account."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            store.auth.logout(session)
        console.print("[green]✓[/green] Logged out")
    except PodcastProError as e:
        _fail(e)


@app.command("whoami")
def whoami(ctx: typer.Context) -> None:
    """Show the logged-in user and their stats."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)

        table = Table(show_header=False, box=None)
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Name", user.name)
        table.add_row("Handle", user.nickname)
        table.add_row("Email", user.email)
        table.add_row("Role", user.role)
        table.add_row("Followers", str(len(user.followers)))
        table.add_row("Following", str(len(user.following)))
        table.add_row("Podcasts", str(len(store.catalog.list_user_podcasts(user.id))))
        table.add_row("Unread", str(store.notifications.unread_count(user.id)))
        console.print(table)
    except PodcastProError as e:
        _fail(e)


@app.command("feed")
def feed(
    ctx: typer.Context,
    user_id: str | None = typer.Option(None, "--user", "-u", help="Only podcasts by this user"),
    saved: bool = typer.Option(False, "--saved", help="Only podcasts you saved"),
    downloads: bool = typer.Option(False, "--downloads", help="Only podcasts you downloaded"),
) -> None:
    """List podcasts, newest first."""
    try:
        store, _ = _load(ctx)
        podcasts = (
            store.catalog.list_user_podcasts(user_id) if user_id else store.catalog.list_podcasts()
        )

        if saved or downloads:
            with store.open_session() as session:
                user = _require_user(store, session)
            wanted = set(user.saved_podcast_ids if saved else user.downloaded_podcast_ids)
            podcasts = [p for p in podcasts if p.id in wanted]

        if not podcasts:
            console.print("[yellow]No podcasts found.[/yellow]")
            return

        table = Table(title="[bold]Podcasts[/bold]")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title", style="bold")
        table.add_column("Category", style="green")
        table.add_column("Author", style="blue")
        table.add_column("♥", justify="right")
        table.add_column("💬", justify="right")
        table.add_column("Saved", justify="right")

        for podcast in podcasts:
            table.add_row(
                podcast.id,
                podcast.title,
                podcast.category,
                podcast.author_name,
                str(podcast.likes_count),
                str(podcast.comments_count),
                str(podcast.saved_count),
            )

        console.print(table)
        console.print(f"\n[dim]Total: {len(podcasts)} podcast(s)[/dim]")
    except PodcastProError as e:
        _fail(e)


@app.command("publish")
def publish(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Podcast title"),
    category: str = typer.Option("Technology", "--category", "-c", help="Category"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    video_url: str | None = typer.Option(
        None, "--video-url", help="YouTube/Vimeo link or direct video URL"
    ),
    thumbnail_url: str | None = typer.Option(None, "--thumbnail-url", help="Thumbnail image URL"),
    generate: bool = typer.Option(
        False, "--generate", "-g", help="Generate the description with Gemini"
    ),
) -> None:
    """Publish a new podcast as the logged-in user.

    Examples:
        podcastpro publish "The Future of AI" -c Technology --video-url https://youtu.be/dQw4w9WgXcQ

        podcastpro publish "Morning Calm" -c Relaxation --generate
    """
    try:
        store, config = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)

        if category not in CATEGORIES:
            console.print(f"[dim]Note: '{category}' is not one of the suggested categories[/dim]")

        if generate and not description:
            with console.status("Generating description..."):
                description = DescriptionGenerator(config.generation).generate(title, category)

        podcast = store.catalog.create_podcast(
            user.id, title, description or "", category, video_url, thumbnail_url
        )
        console.print(f"[green]✓[/green] Published '[bold]{podcast.title}[/bold]' ({podcast.id})")
    except PodcastProError as e:
        _fail(e)


@app.command("show")
def show(
    ctx: typer.Context,
    podcast_id: str = typer.Argument(..., help="Podcast ID"),
) -> None:
    """Show a podcast with its comments."""
    try:
        store, _ = _load(ctx)
        podcast = store.catalog.get_podcast(podcast_id)
        if podcast is None:
            raise NotFoundError("Podcast", podcast_id)

        source = store.catalog.video_source(podcast.id)

        console.print(f"\n[bold]{podcast.title}[/bold]  [dim]{podcast.category}[/dim]")
        console.print(f"by {podcast.author_name} · {podcast.created_at:%Y-%m-%d %H:%M}")
        if podcast.description:
            console.print(f"\n{podcast.description}")
        console.print(f"\n[cyan]{source.kind}[/cyan] {source.embed_url}")
        console.print(
            f"♥ {podcast.likes_count}  💬 {podcast.comments_count}  saved {podcast.saved_count}"
        )

        comments = store.comments.list_comments(podcast.id)
        if comments:
            console.print("\n[bold]Comments[/bold]")
            for comment in comments:
                console.print(f"  [blue]{comment.author_name}[/blue]: {comment.text}")
    except PodcastProError as e:
        _fail(e)


@app.command("delete")
def delete(
    ctx: typer.Context,
    podcast_id: str = typer.Argument(..., help="Podcast ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a podcast (author or admin only)."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)

        podcast = store.catalog.get_podcast(podcast_id)
        if podcast is None:
            raise NotFoundError("Podcast", podcast_id)

        if podcast.author_id != user.id and not user.is_admin:
            raise AuthError("Only the author or an admin can delete this podcast")

        if not force and not typer.confirm(f"Delete '{podcast.title}'?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

        store.catalog.delete_podcast(podcast.id)
        console.print(f"[green]✓[/green] Deleted '[bold]{podcast.title}[/bold]'")
    except PodcastProError as e:
        _fail(e)


@app.command("like")
def like(ctx: typer.Context, podcast_id: str = typer.Argument(..., help="Podcast ID")) -> None:
    """Like or unlike a podcast."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)
        user = store.interactions.toggle_like(user.id, podcast_id)
        state = "Liked" if podcast_id in user.liked_podcast_ids else "Unliked"
        console.print(f"[green]✓[/green] {state} {podcast_id}")
    except PodcastProError as e:
        _fail(e)


@app.command("save")
def save(ctx: typer.Context, podcast_id: str = typer.Argument(..., help="Podcast ID")) -> None:
    """Save or unsave a podcast."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)
        user = store.interactions.toggle_save(user.id, podcast_id)
        state = "Saved" if podcast_id in user.saved_podcast_ids else "Unsaved"
        console.print(f"[green]✓[/green] {state} {podcast_id}")
    except PodcastProError as e:
        _fail(e)


@app.command("download")
def download(ctx: typer.Context, podcast_id: str = typer.Argument(..., help="Podcast ID")) -> None:
    """Mark or unmark a podcast for offline viewing."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)
        user = store.interactions.toggle_download(user.id, podcast_id)
        state = "Downloaded" if podcast_id in user.downloaded_podcast_ids else "Removed download"
        console.print(f"[green]✓[/green] {state} {podcast_id}")
    except PodcastProError as e:
        _fail(e)


@app.command("follow")
def follow(ctx: typer.Context, user_id: str = typer.Argument(..., help="User ID to follow")) -> None:
    """Follow or unfollow a user."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)
        user = store.interactions.toggle_follow(user.id, user_id)
        state = "Following" if user_id in user.following else "Unfollowed"
        console.print(f"[green]✓[/green] {state} {user_id}")
    except PodcastProError as e:
        _fail(e)


@app.command("comment")
def comment(
    ctx: typer.Context,
    podcast_id: str = typer.Argument(..., help="Podcast ID"),
    text: str = typer.Argument(..., help="Comment text"),
) -> None:
    """Comment on a podcast."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)
        store.comments.add_comment(podcast_id, user.id, user.name, text)
        console.print("[green]✓[/green] Comment posted")
    except PodcastProError as e:
        _fail(e)


@app.command("notifications")
def notifications(
    ctx: typer.Context,
    read_all: bool = typer.Option(False, "--read-all", help="Mark all notifications read"),
) -> None:
    """List your notifications, newest first."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)

        if read_all:
            changed = store.notifications.mark_all_read(user.id)
            console.print(f"[green]✓[/green] Marked {changed} notification(s) read")
            return

        items = store.notifications.list_for_user(user.id)
        if not items:
            console.print("[yellow]No notifications.[/yellow]")
            return

        table = Table(title="[bold]Notifications[/bold]")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("", justify="center")
        table.add_column("Type", style="green")
        table.add_column("Message")
        table.add_column("When", style="dim")

        for item in items:
            table.add_row(
                item.id,
                "•" if not item.read else "",
                item.type,
                f"[bold]{item.title}[/bold] {item.message}",
                f"{item.created_at:%Y-%m-%d %H:%M}",
            )

        console.print(table)
        console.print(f"\n[dim]{store.notifications.unread_count(user.id)} unread[/dim]")
    except PodcastProError as e:
        _fail(e)


@app.command("read")
def read(
    ctx: typer.Context,
    notification_id: str = typer.Argument(..., help="Notification ID"),
) -> None:
    """Mark one notification read."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            user = _require_user(store, session)
        store.notifications.mark_read(user.id, notification_id)
        console.print("[green]✓[/green] Marked read")
    except PodcastProError as e:
        _fail(e)


@app.command("describe")
def describe(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Podcast title"),
    category: str = typer.Option("Technology", "--category", "-c", help="Category"),
) -> None:
    """Generate a podcast description with Gemini."""
    try:
        config = _load_config(ctx, ConfigManager())
        with console.status("Generating description..."):
            text = DescriptionGenerator(config.generation).generate(title, category)
        console.print(text)
    except PodcastProError as e:
        _fail(e)


@admin_app.command("users")
def admin_users(ctx: typer.Context) -> None:
    """List all users."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            _require_admin(store, session)

        table = Table(title="[bold]Users[/bold]")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name", style="bold")
        table.add_column("Handle")
        table.add_column("Email", style="blue")
        table.add_column("Role", style="green")

        for user in store.admin.list_all_users():
            table.add_row(user.id, user.name, user.nickname, user.email, user.role)

        console.print(table)
    except PodcastProError as e:
        _fail(e)


@admin_app.command("podcasts")
def admin_podcasts(ctx: typer.Context) -> None:
    """List all podcasts with their authors."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            _require_admin(store, session)

        table = Table(title="[bold]All podcasts[/bold]")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title", style="bold")
        table.add_column("Author ID", style="blue")

        for podcast in store.admin.list_all_podcasts():
            table.add_row(podcast.id, podcast.title, podcast.author_id)

        console.print(table)
    except PodcastProError as e:
        _fail(e)


@admin_app.command("delete-user")
def admin_delete_user(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User ID to delete"),
    cascade: bool = typer.Option(
        False, "--cascade", help="Also remove the user from follow sets and counters"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a user account."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            _require_admin(store, session)

        if user_id == ADMIN_ID:
            raise ValidationError("The root administrator cannot be deleted")

        if store.auth.get_user(user_id) is None:
            raise NotFoundError("User", user_id)

        if not force and not typer.confirm(f"Delete user {user_id}?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

        store.admin.delete_user(user_id, cascade=cascade)
        console.print(f"[green]✓[/green] Deleted user {user_id}")
    except PodcastProError as e:
        _fail(e)


@admin_app.command("check")
def admin_check(ctx: typer.Context) -> None:
    """Check counters and follow edges for inconsistencies."""
    try:
        store, _ = _load(ctx)
        with store.open_session() as session:
            _require_admin(store, session)

        problems = store.admin.check_integrity()
        if not problems:
            console.print("[green]✓[/green] No integrity problems found")
            return

        for problem in problems:
            console.print(f"[yellow]⚠[/yellow] {problem}")
        sys.exit(1)
    except PodcastProError as e:
        _fail(e)


if __name__ == "__main__":
    app()
