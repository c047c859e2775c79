"""Identifier sources: ULIDs for events, random tokens for slugs."""

import secrets
import threading

from ulid import monotonic

from shortener.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods

DEFAULT_SLUG_BYTES = 8


class ULIDGenerator(IdGenerator):
    """Event ids from `ulid.monotonic`.

    Ids made by one process sort in the order they were made, even within
    the same millisecond and across threads. The leading timestamp makes
    them easy to guess, so they are never used as slugs.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Return the next ULID as its 26-character string."""
        with self._lock:
            return str(monotonic.new())


class TokenSlugGenerator(IdGenerator):
    """Unpredictable, URL-safe slug generator.

    Slugs are public tokens, so they must not be guessable from earlier ones
    and must not collide in practice. Each slug is drawn from the operating
    system CSPRNG via `secrets.token_urlsafe`: ``nbytes`` random bytes,
    base64url encoded without padding (``[A-Za-z0-9_-]``). The default of
    8 bytes gives 64 bits of entropy in 11 characters.

    Args:
        nbytes: Number of random bytes per slug; at least 8.
    """

    def __init__(self, nbytes: int = DEFAULT_SLUG_BYTES) -> None:
        if nbytes < DEFAULT_SLUG_BYTES:
            raise ValueError(f"nbytes must be >= {DEFAULT_SLUG_BYTES}")
        self._nbytes = nbytes

    def new_id(self) -> str:
        """Generate a new slug."""
        return secrets.token_urlsafe(self._nbytes)


class SimpleIdGenerator(IdGenerator):
    """Counter rendered as zero-padded digits: 000001, 000002, ...

    Predictable on purpose, for tests and demos.
    """

    def __init__(self, length: int = 26) -> None:
        self._counter = 0
        self._length = length
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            self._counter += 1
            return f"{self._counter:0{self._length}d}"
