"""Parsing of ``-L NAME=LEVEL`` logger overrides.

Pairs may be given one per option or several in one string separated by
commas or spaces, which is how they arrive from ``SHORTENER_LOGGER_LEVEL``.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"click_extra": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def _split_pairs(value: str | list[str] | tuple[str, ...]) -> list[str]:
    chunks = (value,) if isinstance(value, str) else value
    return [pair for chunk in chunks for pair in _SEPARATORS.split(chunk) if pair]


def _level_number(level_name: str) -> int:
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise click.BadParameter(f"Invalid log level: {level_name}")
    return level


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Turn the ``-L`` values into ``{logger name: level}``.

    The result starts from ``DEFAULT_LIB_LEVELS``; a name given twice keeps
    its last level. Level names ignore case.

    Raises:
        click.BadParameter: For a pair without ``=`` or an unknown level.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for pair in _split_pairs(value):
        name, sep, level_name = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {pair!r}")
        levels[name.strip()] = _level_number(level_name)
    return levels
