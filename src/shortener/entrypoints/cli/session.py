"""SHORTENER interactive session.

Keeps one service alive for many operations: lines are read from stdin and
each is answered on stdout. While the session runs, snapshots are saved on a
fixed interval in the background; a final snapshot is saved on exit (end of
input, ``quit``, or Ctrl-C). The snapshot stays locked while the session
runs, so one-shot commands on the same file wait for it to end.

Session commands
    shorten URL [SLUG]   print the new slug
    redirect SLUG        print the destination url
    stats SLUG           print the stats as JSON
    quit                 end the session
"""

from __future__ import annotations

import json
import logging

import click

from shortener import config
from shortener.bootstrap import AppContainer, DomainError

from .helpers import error
from .links import locked_app

logger = logging.getLogger(__name__)

QUIT_WORDS = {"quit", "exit"}


class UnknownSessionCommand(click.UsageError):
    """Raised for a line that is not a session command."""

    def __init__(self, line: str) -> None:
        super().__init__(f"Unknown command: {line!r}")


def run_line(app: AppContainer, words: list[str]) -> str:
    """Execute one session command and return its output line.

    Raises:
        UnknownSessionCommand: If *words* is not a session command.
        DomainError: If the service rejects the operation.
    """
    match words:
        case ["shorten", url]:
            return app.create_short_link(url).slug
        case ["shorten", url, slug]:
            return app.create_short_link(url, slug).slug
        case ["redirect", slug]:
            return app.redirect(slug).url
        case ["stats", slug]:
            return json.dumps(app.get_stats(slug).as_dict())
        case _:
            raise UnknownSessionCommand(" ".join(words))


def _resolve_interval(interval: float | None) -> float:
    if interval is not None:
        return interval
    try:
        return config.get_snapshot_interval()
    except config.InvalidSnapshotIntervalError as e:
        raise click.BadParameter(str(e), param_hint="--interval") from e


@click.command()
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help=(
        "Seconds between background snapshots "
        f"[default: ${config.SNAPSHOT_INTERVAL_ENV} or "
        f"{config.DEFAULT_SNAPSHOT_INTERVAL:g}]."
    ),
)
@click.pass_context
def session(ctx: click.Context, interval: float | None) -> None:
    """Answer shorten/redirect/stats lines from stdin until end of input."""
    interval = _resolve_interval(interval)
    stdin = click.get_text_stream("stdin")

    with locked_app(ctx) as app, app.snapshotter(interval):
        try:
            for line in stdin:
                if not (words := line.split()):
                    continue
                if words[0].lower() in QUIT_WORDS:
                    break
                try:
                    click.echo(run_line(app, words))
                except DomainError as e:
                    error(str(e))
                except click.UsageError as e:
                    error(e.format_message())
        except KeyboardInterrupt:
            logger.info("Interrupted")
