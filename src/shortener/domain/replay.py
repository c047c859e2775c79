"""Replay of the event log into derived state.

`replay` is a deterministic left fold starting from empty mappings:

- `LinkCreated`: sets the url and resets the count to 0.
- `RedirectOccurred`: increments the count of a known slug; unknown slugs are
  ignored (replay never fails).
- `StatsUpdated`: sets the count unconditionally.
- `LinkRestored`: sets both url and count, as recorded by a snapshot.

No state is cached between calls; every call folds the whole log.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from shortener.domain import events
from shortener.domain.errors import SlugNotFoundError
from shortener.domain.value_objects import ShortLink, Stats


@dataclass
class DerivedState:
    """Current url mapping and redirect counts, as produced by `replay`."""

    links: dict[str, str] = field(default_factory=dict)
    redirects: dict[str, int] = field(default_factory=dict)

    def __contains__(self, slug: object) -> bool:
        return slug in self.links

    def __len__(self) -> int:
        return len(self.links)

    def get_link(self, slug: str) -> ShortLink:
        """Return the short link for *slug*.

        Raises:
            SlugNotFoundError: If the slug was never created.
        """
        if (url := self.links.get(slug)) is None:
            raise SlugNotFoundError(slug)
        return ShortLink(slug=slug, url=url)

    def get_stats(self, slug: str) -> Stats:
        """Return the stats for *slug*.

        Raises:
            SlugNotFoundError: If the slug was never created.
        """
        link = self.get_link(slug)
        return Stats(link=link, redirects=self.redirects.get(slug, 0))

    # --- Fold step ---

    def apply(self, event: events.DomainEvent) -> None:
        """Fold a single event into the state."""
        match event:
            case events.LinkCreated():
                self.links[event.slug] = event.url
                self.redirects[event.slug] = 0
            case events.RedirectOccurred():
                if event.slug in self.redirects:
                    self.redirects[event.slug] += 1
            case events.StatsUpdated():
                self.redirects[event.slug] = event.redirects
            case events.LinkRestored():
                self.links[event.slug] = event.url
                self.redirects[event.slug] = event.redirects
            case _:
                raise ValueError(f"Unhandled event type: {type(event).__name__}")


def replay(event_stream: Iterable[events.DomainEvent]) -> DerivedState:
    """Fold *event_stream* into a fresh `DerivedState`.

    Args:
        event_stream: Domain events in append order.

    Returns:
        DerivedState: The links and redirect counts the events describe.
    """
    state = DerivedState()
    for event in event_stream:
        state.apply(event)
    return state
