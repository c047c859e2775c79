"""Log handlers for SHORTENER.

Two handlers are built here and attached to the root logger by the CLI:

- a Rich console handler on stderr, whose level follows ``-v``/``-q``;
- the "flight recorder", a memory buffer that holds the latest records at
  DEBUG and writes them to a log file once a WARNING (or worse) shows up.

Outside debug mode, console lines coming from other libraries start with
their top-level logger name in brackets, e.g. ``[click_extra]``.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "shortener"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)


class ThirdPartyPrefixFilter(logging.Filter):
    """Attach a ``prefix`` attribute naming where a record comes from.

    Our own records get an empty prefix; a record from ``urllib3.poolmanager``
    gets ``[urllib3]``. All records pass.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top_level = record.name.partition(".")[0]
        record.prefix = "" if top_level == PROJECT_PREFIX else f"[{top_level}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr handler.

    In debug mode everything down to DEBUG is shown, along with the time, the
    logger name and a link to the source line; *level* is then ignored.
    *color* mirrors click-extra's ``--color/--no-color``.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the flight recorder writing to *path*.

    Args:
        path: Log file; created along with its directory and emptied on
            every call.
        capacity: Records kept in memory between flushes.
        flush_level: A record at this level or above writes the buffer out.
        flush_on_close: Also write whatever is left when logging shuts down.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    snapshot_path: Path,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
) -> None:
    """Announce the run at INFO, then describe the environment at DEBUG."""
    logger.info(
        "SHORTENER %s - console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    details: list[tuple[str, tuple[object, ...]]] = [
        ("Python: %s", (platform.python_version(),)),
        ("Platform: %s %s", (platform.system(), platform.release())),
        ("PID: %s", (os.getpid(),)),
        ("CWD: %s", (Path.cwd(),)),
        ("Snapshot: %s", (snapshot_path,)),
        ("Handlers: %s", ([type(h).__name__ for h in handlers],)),
    ]
    if flight_recorder:
        details.append(
            (
                "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
                (log_path or "<none>", flight_capacity, force_flush_fr),
            )
        )
    overrides = {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
    details.append(("Per-logger overrides: %s", (overrides or "<none>",)))

    for message, args in details:
        logger.debug(message, *args)
    logger.debug("Interpreter: %s", sys.executable)
