"""Event-sourced access to the short link log.

`EventLog` wraps an `EventStore`: it replays the whole log into a
`DerivedState` and records new domain events as envelopes. It does no
locking of its own; use it inside a unit of work.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from typing import TYPE_CHECKING

from shortener.domain.replay import DerivedState, replay

from .event_mapper import EventMapper

if TYPE_CHECKING:
    from shortener.domain.events import DomainEvent
    from shortener.interfaces.eventstore import EventEnvelope, EventStore
    from shortener.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods

STREAM_TYPE = "ShortLink"


class EventLog:
    """Repository over the append-only log of short link events."""

    def __init__(
        self,
        event_store: EventStore,
        event_id_generator: IdGenerator,
        event_mapper: EventMapper | None = None,
    ) -> None:
        self.event_store = event_store
        self.event_id_generator = event_id_generator
        self.event_mapper = event_mapper if event_mapper is not None else EventMapper()

    def __len__(self) -> int:
        return sum(1 for _ in self.event_store.read_since())

    # --- Reads ---

    def history(self) -> Iterator[DomainEvent]:
        """Yield every recorded domain event in append order."""
        for envelope in self.event_store.read_since():
            yield self.event_mapper.to_domain_event(envelope)

    def replay(self) -> DerivedState:
        """Fold the full log into the current links and redirect counts."""
        return replay(self.history())

    # --- Writes ---

    def record(self, *events: DomainEvent) -> list[EventEnvelope]:
        """Append *events*, in order, one batch per consecutive run of a slug.

        Returns:
            The persisted envelopes.
        """
        appended: list[EventEnvelope] = []
        for slug, group in itertools.groupby(events, key=lambda e: e.aggregate_id):
            tip = self._stream_tip(slug)
            envelopes = [
                self.event_mapper.to_envelope(
                    stream_type=STREAM_TYPE,
                    version=tip + i,
                    event_id=self.event_id_generator.new_id(),
                    event=event,
                )
                for i, event in enumerate(group, start=1)
            ]
            appended.extend(self.event_store.append(envelopes))
        return appended

    def _stream_tip(self, slug: str) -> int:
        """Return the latest version recorded for *slug* (0 if none)."""
        return max((e.version for e in self.event_store.read_stream(slug)), default=0)
