"""SHORTENER link commands, one operation per invocation.

Each command restores the saved snapshot, runs a single command or query
through the message bus, and (for commands that change state) saves the
snapshot again.

Behavior
- Results go to **stdout** (the slug, the destination url, or the stats) so
  they can be piped; human-oriented notices go to **stderr**.
- Commands that change state hold the snapshot lock from restore to save, so
  parallel invocations on one snapshot take turns instead of overwriting each
  other. ``--lock-timeout`` bounds the wait.
- Domain errors (invalid url, slug in use, slug not found) exit with status 1
  and the error message.
- A snapshot that cannot be saved is reported as a warning; the operation
  itself already succeeded.
"""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import Iterator

import click

from shortener.bootstrap import (
    AppContainer,
    DomainError,
    SnapshotError,
    SnapshotLockedError,
    bootstrap,
    exclusive_app,
)

from .helpers import hyperlink, success, warn

logger = logging.getLogger(__name__)


def load_app(ctx: click.Context) -> AppContainer:
    """Bootstrap the service from the snapshot selected on the command line.

    No lock is taken; use `locked_app` when the snapshot will be saved again.
    """
    return bootstrap(ctx.obj["snapshot_path"])


@contextlib.contextmanager
def locked_app(ctx: click.Context) -> Iterator[AppContainer]:
    """Bootstrap the service and keep its snapshot locked until the block ends."""
    try:
        with exclusive_app(
            ctx.obj["snapshot_path"], lock_timeout=ctx.obj["lock_timeout"]
        ) as app:
            yield app
    except SnapshotLockedError as e:
        raise click.ClickException(str(e)) from e


def persist(app: AppContainer) -> None:
    """Save a snapshot, downgrading failures to a warning."""
    try:
        app.save_snapshot()
    except SnapshotError as e:
        logger.error("Failed to save system state: %s", e)
        warn(f"State not saved: {e}")


@click.command()
@click.argument("url")
@click.option("--slug", help="Custom slug; a random one is generated if omitted.")
@click.pass_context
def shorten(ctx: click.Context, url: str, slug: str | None) -> None:
    """Create a short link for URL and print its slug."""
    with locked_app(ctx) as app:
        try:
            link = app.create_short_link(url, slug)
        except DomainError as e:
            raise click.ClickException(str(e)) from e
        persist(app)
    click.echo(link.slug)
    success(f"{link.slug} -> {hyperlink(link.url)}")


@click.command()
@click.argument("slug")
@click.pass_context
def redirect(ctx: click.Context, slug: str) -> None:
    """Follow SLUG: count one redirect and print the destination url."""
    with locked_app(ctx) as app:
        try:
            link = app.redirect(slug)
        except DomainError as e:
            raise click.ClickException(str(e)) from e
        persist(app)
    click.echo(link.url)


@click.command()
@click.argument("slug")
@click.option("--json", "as_json", is_flag=True, help="Print the stats as JSON.")
@click.pass_context
def stats(ctx: click.Context, slug: str, as_json: bool) -> None:
    """Show the destination url and redirect count of SLUG."""
    app = load_app(ctx)
    try:
        result = app.get_stats(slug)
    except DomainError as e:
        raise click.ClickException(str(e)) from e
    if as_json:
        click.echo(json.dumps(result.as_dict()))
        return
    click.echo(f"Slug      : {result.slug}")
    click.echo(f"Url       : {result.url}")
    click.echo(f"Redirects : {result.redirects}")
