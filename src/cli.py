"""CLI interface for folio."""

from __future__ import annotations

import hmac
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from folio.config import load_config, merge_cli_overrides
from folio.content.models import ContentDocument, ContentStatus, PostDraft, PostUpdate
from folio.content.publisher import HtmlExporter, MarkdownExporter
from folio.core import Folio, build_folio
from folio.markdown.renderer import render
from folio.markdown.text import extract_plain_text, reading_time
from folio.profile.models import Profile
from folio.security.audit import export_logs, summarize
from folio.security.gate import LoginOutcome
from folio.security.passwords import check_password_strength
from folio.security.sanitizer import sanitize
from folio.shared.errors import FolioError

app = typer.Typer(
    name="folio",
    help="Manage the portfolio blog and its admin tools.",
    no_args_is_help=True,
)
posts_app = typer.Typer(help="Create, publish and export blog posts.", no_args_is_help=True)
audit_app = typer.Typer(help="Inspect the admin audit log.", no_args_is_help=True)
profile_app = typer.Typer(help="View and edit the site profile.", no_args_is_help=True)
app.add_typer(posts_app, name="posts")
app.add_typer(audit_app, name="audit")
app.add_typer(profile_app, name="profile")

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from folio import __version__

        console.print(f"folio {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .folio.toml file."),
    ] = None,
    store_path: Annotated[
        Optional[Path],
        typer.Option("--store", help="Path to the JSON store file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """folio - content core for a portfolio site."""
    _configure_logging(verbose)
    config = merge_cli_overrides(
        load_config(config_path),
        store_path=str(store_path) if store_path else None,
    )
    ctx.obj = build_folio(config)


def _folio(ctx: typer.Context) -> Folio:
    return ctx.obj


def _require_admin(folio: Folio) -> object:
    subject = folio.gate.require_session()
    if subject is None:
        err_console.print("[red]Not logged in.[/red] Run [bold]folio login[/bold] first.")
        raise typer.Exit(1)
    return subject


def _read_source(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    if not path.exists():
        err_console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _find_post(folio: Folio, ref: str) -> ContentDocument:
    post = folio.posts.get_post(ref)
    if post is None:
        post = next((p for p in folio.posts.list_posts(True) if p.slug == ref), None)
    if post is None:
        err_console.print(f"[red]No post matching[/red] {ref}")
        raise typer.Exit(1)
    return post


# ── Content tools ────────────────────────────────────────────────


@app.command(name="render")
def render_cmd(
    source: Annotated[Path, typer.Argument(help="Markdown file, or - for stdin.")],
) -> None:
    """Render markdown to HTML."""
    console.print(render(_read_source(source)), markup=False, highlight=False, soft_wrap=True)


@app.command(name="excerpt")
def excerpt_cmd(
    source: Annotated[Path, typer.Argument(help="Markdown file, or - for stdin.")],
) -> None:
    """Print the plain-text version of a markdown document."""
    text = _read_source(source)
    console.print(extract_plain_text(text), markup=False, highlight=False, soft_wrap=True)


@app.command(name="sanitize")
def sanitize_cmd(text: Annotated[str, typer.Argument(help="Text to clean.")]) -> None:
    """Show how author input is cleaned before storage."""
    console.print(sanitize(text), markup=False, highlight=False, soft_wrap=True)


@app.command(name="password-check")
def password_check_cmd(password: Annotated[str, typer.Argument()]) -> None:
    """Score a candidate admin password."""
    result = check_password_strength(password)
    colour = "green" if result.is_valid else "red"
    console.print(f"[{colour}]Score {result.score}/5[/{colour}]")
    for message in result.feedback:
        console.print(f"  - {message}")
    if not result.is_valid:
        raise typer.Exit(1)


# ── Session ──────────────────────────────────────────────────────


@app.command()
def login(
    ctx: typer.Context,
    username: Annotated[str, typer.Option(prompt=True)],
    password: Annotated[str, typer.Option(prompt=True, hide_input=True)],
) -> None:
    """Open an admin session."""
    folio = _folio(ctx)
    admin = folio.config.admin
    if not admin.is_configured:
        err_console.print(
            "[red]No admin password configured.[/red] "
            "Set FOLIO_ADMIN_PASSWORD or admin.password in .folio.toml."
        )
        raise typer.Exit(1)

    def verify() -> bool:
        user_ok = hmac.compare_digest(username.encode(), admin.username.encode())
        pass_ok = hmac.compare_digest(password.encode(), admin.password.encode())
        return user_ok and pass_ok

    outcome = folio.gate.login(username, verify, {"id": "local-admin", "username": username})
    if outcome == LoginOutcome.BLOCKED:
        err_console.print("[red]Too many login attempts.[/red] Try again later.")
        raise typer.Exit(1)
    if outcome == LoginOutcome.FAILED:
        err_console.print("[red]Invalid credentials.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Logged in as {username}.[/green]")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Close the admin session."""
    _folio(ctx).gate.logout()
    console.print("Logged out.")


@app.command()
def whoami(ctx: typer.Context) -> None:
    """Show the current session subject."""
    subject = _folio(ctx).gate.require_session()
    if subject is None:
        console.print("Not logged in.")
        raise typer.Exit(1)
    console.print(subject)


# ── Posts ────────────────────────────────────────────────────────


@posts_app.command(name="list")
def posts_list(
    ctx: typer.Context,
    include_all: Annotated[
        bool, typer.Option("--all", "-a", help="Include drafts and archived posts.")
    ] = False,
) -> None:
    """List posts, newest first."""
    folio = _folio(ctx)
    if include_all:
        _require_admin(folio)
    posts = folio.posts.list_posts(include_unpublished=include_all)
    if not posts:
        console.print("No posts.")
        return

    table = Table(title="Posts")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Created")
    table.add_column("Read", justify="right")
    for post in posts:
        table.add_row(
            post.slug,
            post.title,
            str(post.status),
            post.created_at.strftime("%Y-%m-%d"),
            f"{reading_time(post.body, folio.config.content.words_per_minute)} min",
        )
    console.print(table)


@posts_app.command(name="show")
def posts_show(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Post id or slug.")],
    html: Annotated[bool, typer.Option("--html", help="Print rendered HTML.")] = False,
) -> None:
    """Show a single post."""
    folio = _folio(ctx)
    post = folio.posts.get_post_by_slug(ref)
    if post is None:
        _require_admin(folio)
        post = _find_post(folio, ref)
    console.print(f"[bold]{post.title}[/bold] ({post.status})", highlight=False)
    body = folio.renderer.render(post.body) if html else post.body
    console.print(body, markup=False, highlight=False, soft_wrap=True)


@posts_app.command(name="create")
def posts_create(
    ctx: typer.Context,
    title: Annotated[str, typer.Option("--title", "-t")],
    body_file: Annotated[
        Path, typer.Option("--body", "-b", help="Markdown file with the body, or - for stdin.")
    ],
    tags: Annotated[Optional[list[str]], typer.Option("--tag")] = None,
    excerpt: Annotated[Optional[str], typer.Option("--excerpt")] = None,
    image: Annotated[Optional[str], typer.Option("--image", help="Featured image URL.")] = None,
    publish: Annotated[bool, typer.Option("--publish", help="Publish immediately.")] = False,
) -> None:
    """Create a post."""
    folio = _folio(ctx)
    subject = _require_admin(folio)
    actor = subject.get("id", "local") if isinstance(subject, dict) else str(subject)
    draft = PostDraft(
        title=title,
        body=_read_source(body_file),
        excerpt=excerpt,
        featured_image=image,
        tags=tags or [],
        status=ContentStatus.PUBLISHED if publish else ContentStatus.DRAFT,
    )
    result = folio.posts.create_post(draft, actor_id=actor)
    if not result.ok or result.post is None:
        err_console.print(f"[red]{result.error}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Created[/green] {result.post.slug} ({result.post.id})")


def _change_status(ctx: typer.Context, ref: str, status: ContentStatus) -> None:
    folio = _folio(ctx)
    _require_admin(folio)
    post = _find_post(folio, ref)
    result = folio.posts.update_post(PostUpdate(id=post.id, status=status))
    if not result.ok:
        err_console.print(f"[red]{result.error}[/red]")
        raise typer.Exit(1)
    console.print(f"{post.slug} is now {status}.")


@posts_app.command(name="publish")
def posts_publish(ctx: typer.Context, ref: Annotated[str, typer.Argument()]) -> None:
    """Publish a post."""
    _change_status(ctx, ref, ContentStatus.PUBLISHED)


@posts_app.command(name="archive")
def posts_archive(ctx: typer.Context, ref: Annotated[str, typer.Argument()]) -> None:
    """Archive a post."""
    _change_status(ctx, ref, ContentStatus.ARCHIVED)


@posts_app.command(name="delete")
def posts_delete(ctx: typer.Context, ref: Annotated[str, typer.Argument()]) -> None:
    """Delete a post."""
    folio = _folio(ctx)
    _require_admin(folio)
    post = _find_post(folio, ref)
    folio.posts.delete_post(post.id)
    console.print(f"Deleted {post.slug}.")


@posts_app.command(name="stats")
def posts_stats(ctx: typer.Context) -> None:
    """Show post counts and top tags."""
    folio = _folio(ctx)
    _require_admin(folio)
    stats = folio.posts.stats()
    console.print(f"Total posts: {stats.total}")
    console.print(f"Published: {stats.published}")
    console.print(f"Drafts: {stats.drafts}")
    console.print(f"Archived: {stats.archived}")
    console.print(f"Published this week: {stats.recent}")
    if stats.top_tags:
        console.print("Top tags: " + ", ".join(f"{t} ({n})" for t, n in stats.top_tags))


@posts_app.command(name="export")
def posts_export(
    ctx: typer.Context,
    output: Annotated[Path, typer.Argument(help="Output directory.")],
    fmt: Annotated[str, typer.Option("--format", "-f", help="md or html.")] = "md",
    include_all: Annotated[bool, typer.Option("--all", "-a")] = False,
) -> None:
    """Export posts as markdown or HTML files."""
    folio = _folio(ctx)
    if fmt not in ("md", "html"):
        err_console.print(f"[red]Unknown format:[/red] {fmt}")
        raise typer.Exit(1)
    if include_all:
        _require_admin(folio)
    exporter = MarkdownExporter() if fmt == "md" else HtmlExporter(folio.renderer)
    written = exporter.export(folio.posts.list_posts(include_unpublished=include_all), output)
    console.print(f"Wrote {len(written)} files to {output}")


# ── Audit ────────────────────────────────────────────────────────


@audit_app.command(name="show")
def audit_show(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option("--limit", "-n")] = 20,
) -> None:
    """Show the newest audit entries."""
    folio = _folio(ctx)
    _require_admin(folio)
    entries = folio.audit.get_logs()[:limit]
    if not entries:
        console.print("Audit log is empty.")
        return
    table = Table(title="Audit log")
    table.add_column("Time")
    table.add_column("Action")
    table.add_column("Detail")
    for entry in entries:
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            entry.action,
            ", ".join(f"{k}={v}" for k, v in (entry.detail or {}).items()),
        )
    console.print(table)


@audit_app.command(name="summary")
def audit_summary(ctx: typer.Context) -> None:
    """Show login and blog activity counts."""
    folio = _folio(ctx)
    _require_admin(folio)
    summary = summarize(folio.audit.get_logs())
    console.print(f"Events: {summary.total}")
    console.print(f"Login attempts: {summary.login_attempts}")
    console.print(f"Failed logins: {summary.failed_logins}")
    console.print(f"Blog actions: {summary.blog_actions}")


@audit_app.command(name="export")
def audit_export(
    ctx: typer.Context,
    output: Annotated[Optional[Path], typer.Option("--output", "-o")] = None,
) -> None:
    """Export login and blog events as JSON."""
    folio = _folio(ctx)
    _require_admin(folio)
    data = export_logs(summarize(folio.audit.get_logs()).entries)
    if output is None:
        console.print(data, markup=False, highlight=False, soft_wrap=True)
        return
    output.write_text(data, encoding="utf-8")
    console.print(f"Wrote {output}")


@audit_app.command(name="clear")
def audit_clear(ctx: typer.Context) -> None:
    """Delete every audit entry."""
    folio = _folio(ctx)
    _require_admin(folio)
    folio.audit.clear_logs()
    console.print("Audit log cleared.")


# ── Profile ──────────────────────────────────────────────────────


@profile_app.command(name="show")
def profile_show(ctx: typer.Context) -> None:
    """Show the site profile."""
    profile = _folio(ctx).profile.load()
    for field, value in profile.model_dump(exclude_none=True).items():
        console.print(f"[bold]{field}[/bold]: {value}", highlight=False)


@profile_app.command(name="set")
def profile_set(
    ctx: typer.Context,
    name: Annotated[Optional[str], typer.Option()] = None,
    headline: Annotated[Optional[str], typer.Option()] = None,
    bio: Annotated[Optional[str], typer.Option()] = None,
    email: Annotated[Optional[str], typer.Option()] = None,
    website: Annotated[Optional[str], typer.Option()] = None,
    github: Annotated[Optional[str], typer.Option()] = None,
    linkedin: Annotated[Optional[str], typer.Option()] = None,
) -> None:
    """Update profile fields; unspecified fields keep their value."""
    folio = _folio(ctx)
    _require_admin(folio)
    changes = {
        k: v
        for k, v in {
            "name": name,
            "headline": headline,
            "bio": bio,
            "email": email,
            "website": website,
            "github": github,
            "linkedin": linkedin,
        }.items()
        if v is not None
    }
    current = folio.profile.load()
    saved = folio.profile.save(Profile.model_validate(current.model_dump() | changes))
    console.print(f"[green]Profile saved[/green] for {saved.name}.")


def run() -> None:
    """Console-script entry point."""
    try:
        app()
    except FolioError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
