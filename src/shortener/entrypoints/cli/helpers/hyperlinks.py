"""Clickable links in the terminal.

Urls shown to a person (the destination of a new short link, the pages in
``--help``) are wrapped in OSC-8 escapes so terminals that understand them
make the text clickable. Anything that is not a known terminal, including
pipes and files, gets the bare text.
"""

import os
import sys
from typing import TextIO

OSC8_TERMINAL_PROGRAMS = {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}
OSC8_TERM_PREFIXES = ("alacritty", "konsole")
# Windows Terminal, then VTE based terminals (GNOME Terminal, Tilix)
OSC8_MARKER_VARIABLES = ("WT_SESSION", "VTE_VERSION")


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Guess whether *stream* (stdout by default) renders OSC-8 links.

    Only a terminal we recognise from its environment variables counts.
    """
    if not _is_tty(stream or sys.stdout):
        return False
    if os.getenv("TERM_PROGRAM", "").lower() in OSC8_TERMINAL_PROGRAMS:
        return True
    if any(os.getenv(name) for name in OSC8_MARKER_VARIABLES):
        return True
    return os.getenv("TERM", "").startswith(OSC8_TERM_PREFIXES)


def hyperlink(url: str, text: str | None = None) -> str:
    """Show *text*, or *url* itself, as a link to *url* where possible."""
    label = url if text is None else text
    if supports_osc8():
        # ESC ] 8 ; ; url BEL label ESC ] 8 ; ; BEL
        return f"\x1b]8;;{url}\x07{label}\x1b]8;;\x07"
    return label
