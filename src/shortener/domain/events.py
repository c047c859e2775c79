"""Facts recorded in the log, one stream per slug."""

import abc
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DomainEvent(abc.ABC):
    """Something that happened to a short link."""

    @property
    @abc.abstractmethod
    def aggregate_id(self) -> str:
        """Slug of the link the event is about."""


@dataclass(frozen=True, slots=True)
class LinkCreated(DomainEvent):
    """A slug now leads to *url*."""

    slug: str
    url: str

    @property
    def aggregate_id(self) -> str:
        return self.slug


@dataclass(frozen=True, slots=True)
class RedirectOccurred(DomainEvent):
    """Someone followed the slug once."""

    slug: str

    @property
    def aggregate_id(self) -> str:
        return self.slug


@dataclass(frozen=True, slots=True)
class StatsUpdated(DomainEvent):
    """Event overwriting the redirect count of a short link.

    Absolute set, not a delta.
    """

    slug: str
    redirects: int

    @property
    def aggregate_id(self) -> str:
        return self.slug


@dataclass(frozen=True, slots=True)
class LinkRestored(DomainEvent):
    """Event re-establishing a short link and its count from a snapshot."""

    slug: str
    url: str
    redirects: int

    @property
    def aggregate_id(self) -> str:
        return self.slug


# event_type names as stored in envelopes
DOMAIN_EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    "LinkCreated": LinkCreated,
    "RedirectOccurred": RedirectOccurred,
    "StatsUpdated": StatsUpdated,
    "LinkRestored": LinkRestored,
}
