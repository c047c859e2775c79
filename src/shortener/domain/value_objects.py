"""Module including value objects used across the domain layer."""

from dataclasses import dataclass
from typing import Any

from shortener.domain.errors import InvalidUrlError

URL_SCHEME_PREFIX = "http"  # pragma: no mutate


def validate_url(url: str) -> str:
    """Check that *url* can be shortened.

    A url is accepted when it is non-empty and starts with the ``http``
    scheme marker (which covers both ``http://`` and ``https://``).

    Args:
        url: The destination url.

    Returns:
        str: The url, unchanged.

    Raises:
        InvalidUrlError: If the url is empty or lacks the scheme marker.
    """
    if not url or not url.startswith(URL_SCHEME_PREFIX):
        raise InvalidUrlError(url)
    return url


@dataclass(frozen=True)
class ShortLink:
    """The externally visible mapping from a slug to its destination url."""

    slug: str
    url: str


@dataclass(frozen=True)
class Stats:
    """Query-time composite of a short link and its redirect count."""

    link: ShortLink
    redirects: int

    @property
    def slug(self) -> str:
        """The slug of the underlying short link."""
        return self.link.slug

    @property
    def url(self) -> str:
        """The destination url of the underlying short link."""
        return self.link.url

    def as_dict(self) -> dict[str, Any]:
        """Flatten to the ``{slug, url, redirects}`` shape used at the boundary."""
        return {"slug": self.slug, "url": self.url, "redirects": self.redirects}


@dataclass(frozen=True)
class LinkRecord:
    """Compact per-slug state persisted in snapshots."""

    url: str
    redirects: int
