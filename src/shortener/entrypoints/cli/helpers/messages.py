"""Human-facing notices on stderr.

Results that scripts may consume go to stdout; these helpers print the
remarks around them to stderr, coloured and prefixed with a symbol. When the
terminal encoding cannot represent the emoji an ASCII stand-in is used.
"""

import click

CAUTION = ("⚠️", "[!]")
SUCCESS = ("✅", "[OK]")
FAILURE = ("❌", "[X]")


def _can_encode(text: str) -> bool:
    """Whether the current stderr stream can write *text*."""
    encoding = click.get_text_stream("stderr").encoding or "ascii"
    try:
        text.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _pick(symbol: tuple[str, str]) -> str:
    emoji, ascii_fallback = symbol
    return emoji if _can_encode(emoji) else ascii_fallback


def caution_glyph() -> str:
    """Symbol in front of warnings."""
    return _pick(CAUTION)


def success_glyph() -> str:
    """Symbol in front of confirmations."""
    return _pick(SUCCESS)


def error_glyph() -> str:
    """Symbol in front of errors."""
    return _pick(FAILURE)


def _notice(glyph: str, msg: str, color: str) -> None:
    click.secho(f"{glyph}  {msg}", fg=color, bold=True, err=True)


def warn(msg: str) -> None:
    """Print a warning, e.g. ``⚠️  State not saved: disk full``."""
    _notice(caution_glyph(), msg, "yellow")


def success(msg: str) -> None:
    """Print a confirmation, e.g. ``✅  ex -> https://example.com``."""
    _notice(success_glyph(), msg, "green")


def error(msg: str) -> None:
    """Print an error, e.g. ``❌  Slug 'ex' not found.``."""
    _notice(error_glyph(), msg, "red")
