"""Snapshot state: a compact projection of `DerivedState`.

`ServiceState` maps each slug to its url and redirect count. It is the only
thing persisted across restarts; the event log itself lives in memory.

Wire shape (see `to_mapping` / `from_mapping`)::

    {"<slug>": {"url": "<url>", "redirects": <int >= 0>}, ...}
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from shortener.domain import events
from shortener.domain.replay import DerivedState
from shortener.domain.errors import InvalidUrlError
from shortener.domain.value_objects import LinkRecord, validate_url


class InvalidStateError(ValueError):
    """Raised when a mapping cannot be read as a `ServiceState`."""


class ServiceState(Mapping[str, LinkRecord]):
    """Immutable mapping of slug -> `LinkRecord`."""

    def __init__(self, records: Mapping[str, LinkRecord] | None = None) -> None:
        self._records: Mapping[str, LinkRecord] = MappingProxyType(
            dict(records or {})
        )

    def __getitem__(self, slug: str) -> LinkRecord:
        return self._records[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._records)!r})"

    # --- Construction Paths ---

    @classmethod
    def from_derived(cls, state: DerivedState) -> ServiceState:
        """Project replayed state into a snapshot."""
        return cls(
            {
                slug: LinkRecord(url=url, redirects=state.redirects.get(slug, 0))
                for slug, url in state.links.items()
            }
        )

    @classmethod
    def from_mapping(cls, data: Any) -> ServiceState:
        """Build a state from its decoded wire form.

        Raises:
            InvalidStateError: If *data* is not shaped like a snapshot.
        """
        if not isinstance(data, dict):
            raise InvalidStateError("snapshot must be a mapping of slug to record")

        records: dict[str, LinkRecord] = {}
        for slug, entry in data.items():
            if not isinstance(entry, dict):
                raise InvalidStateError(f"record for slug {slug!r} must be a mapping")
            url, redirects = entry.get("url"), entry.get("redirects")
            if not isinstance(url, str) or not url:
                raise InvalidStateError(f"record for slug {slug!r} has no url")
            try:
                validate_url(url)
            except InvalidUrlError as e:
                raise InvalidStateError(f"record for slug {slug!r}: {e}") from e
            # bool is an int subclass; reject it explicitly
            if (
                not isinstance(redirects, int)
                or isinstance(redirects, bool)
                or redirects < 0
            ):
                raise InvalidStateError(
                    f"record for slug {slug!r} needs a non-negative redirect count"
                )
            records[slug] = LinkRecord(url=url, redirects=redirects)
        return cls(records)

    # --- Projections ---

    def to_mapping(self) -> dict[str, dict[str, Any]]:
        """Return the JSON-ready wire form."""
        return {
            slug: {"url": record.url, "redirects": record.redirects}
            for slug, record in self._records.items()
        }


def from_state(
    state: ServiceState, *, expand_redirects: bool = False
) -> list[events.DomainEvent]:
    """Rebuild an event stream whose replay reproduces *state*.

    By default each slug yields a single `LinkRestored` event carrying the
    pre-computed count. With ``expand_redirects=True`` each slug yields one
    `LinkCreated` followed by one `RedirectOccurred` per recorded redirect,
    which costs O(total redirects) in time and space.

    Args:
        state: The snapshot to materialize.
        expand_redirects: Emit one event per historical redirect.

    Returns:
        list[DomainEvent]: Events in replay order.
    """
    restored: list[events.DomainEvent] = []
    for slug, record in state.items():
        if expand_redirects:
            restored.append(events.LinkCreated(slug=slug, url=record.url))
            restored.extend(
                events.RedirectOccurred(slug=slug) for _ in range(record.redirects)
            )
        else:
            restored.append(
                events.LinkRestored(
                    slug=slug, url=record.url, redirects=record.redirects
                )
            )
    return restored
