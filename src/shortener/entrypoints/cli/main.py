"""The ``shortener`` command.

The group built here sets up logging for every run, then hands over to one
of its subcommands:

- ``shorten URL [--slug SLUG]`` prints the slug of a new short link;
- ``redirect SLUG`` prints where a slug leads and counts the visit;
- ``stats SLUG [--json]`` prints the url and visit count of a slug;
- ``session`` reads those operations from stdin, saving snapshots as it goes.

State lives in the snapshot file given by ``--snapshot-path``. Options can
also come from ``SHORTENER_*`` environment variables (see ``--help``).

Examples
    $ shortener shorten https://example.com --slug ex
    $ shortener redirect ex
    $ shortener stats ex --json
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from shortener import __version__, config
from shortener.logging import config_console_handler, config_flight_recorder, log_startup

from .helpers import hyperlink
from .helpers.log_level_parser import parse_log_level
from .links import redirect, shorten, stats
from .session import session

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(user_log_dir(config.APP_NAME, appauthor=False)) / "latest.log"

LEVEL_STEP = logging.INFO - logging.DEBUG


HELP = """SHORTENER, an event-sourced URL shortener.

    Creating a short link and following one are both written down as events
    that are never changed afterwards. Urls and redirect counts are rebuilt
    from those events, and the rebuilt state is saved as a snapshot file
    between runs.
    """


EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('Background:', fg='blue', bold=True, underline=True)}",
        "  " + hyperlink("https://martinfowler.com/eaaDev/EventSourcing.html"),
        "  " + hyperlink("https://martinfowler.com/bliki/CQRS.html"),
    ]
)


def console_level(verbose_count: int, quiet_count: int) -> int:
    """Start at WARNING, move one level per -v/-q and stay within DEBUG..CRITICAL."""
    level = logging.WARNING + LEVEL_STEP * (quiet_count - verbose_count)
    return min(max(level, logging.DEBUG), logging.CRITICAL)


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    default=0,
    help="Show more on the console: -v adds INFO, -vv adds DEBUG.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    default=0,
    help="Show less on the console: -q hides WARNING, -qq also hides ERROR.",
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    default=False,
    help="Log everything to the console with times, logger names and source lines.",
)
@click.option(
    "--snapshot-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=config.default_snapshot_path(),
    envvar=config.SNAPSHOT_PATH_ENV,
    show_default=True,
    show_envvar=True,
    help="Snapshot file read on start and written after each change.",
)
@click.option(
    "--lock-timeout",
    type=click.FloatRange(min=0),
    default=config.DEFAULT_LOCK_TIMEOUT,
    envvar=config.LOCK_TIMEOUT_ENV,
    show_default=True,
    show_envvar=True,
    help="Seconds to wait while another shortener process is using the snapshot.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    envvar="SHORTENER_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="SHORTENER_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Number of records the flight recorder holds.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    default=True,
    show_envvar=True,
    help=(
        "Buffer recent records at DEBUG, whatever -v/-q say, and write them "
        "to --log-path as soon as a WARNING or worse is logged."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    default=False,
    show_default=True,
    show_envvar=True,
    help="Also write the flight recorder buffer to --log-path on exit.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=("click_extra=WARNING",),
    show_default=True,
    show_envvar=True,
    help=(
        "Raise the level of one logger, as NAME=LEVEL, for both the console and "
        "the flight recorder. Repeat the option, or list several pairs in the "
        "environment variable."
    ),
)
@clickx.pass_context
def shortener(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    snapshot_path: Path,
    lock_timeout: float,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """SHORTENER command-line interface."""
    level = console_level(verbose_count, quiet_count)

    # color stays on unless --no-color was given
    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # the root passes everything on; each handler applies its own level
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, name_level in logger_levels.items():
        logging.getLogger(name).setLevel(name_level)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        snapshot_path=snapshot_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.obj = {"snapshot_path": snapshot_path, "lock_timeout": lock_timeout}
    ctx.call_on_close(logging.shutdown)


for command in (shorten, redirect, stats, session):
    shortener.add_command(command)
