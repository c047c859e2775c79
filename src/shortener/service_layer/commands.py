"""Requests that change the set of short links or their counts."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """Something the service is asked to do."""


@dataclass(frozen=True)
class CreateShortLink(Command):
    """Register *url* under *slug*, or under a fresh random slug if none is given."""

    url: str
    slug: str | None = None


@dataclass(frozen=True)
class Redirect(Command):
    """Look up where *slug* leads and count the visit."""

    slug: str
