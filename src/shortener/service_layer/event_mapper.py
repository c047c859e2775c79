"""Translation between domain events and the envelopes the log stores."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from typing import TYPE_CHECKING

from shortener.domain.events import DOMAIN_EVENT_REGISTRY
from shortener.interfaces.eventstore import EventEnvelope

if TYPE_CHECKING:
    from shortener.domain.events import DomainEvent


class EventMapper:
    """Packs events into envelopes and unpacks them again.

    The envelope's ``event_type`` is the event class name and its payload the
    event's fields, so unpacking only needs to know which class goes with
    which name.
    """

    def __init__(
        self, event_registry: Mapping[str, type[DomainEvent]] | None = None
    ) -> None:
        self.event_registry = (
            DOMAIN_EVENT_REGISTRY if event_registry is None else event_registry
        )

    @staticmethod
    def to_envelope(
        stream_type: str,
        version: int,
        event_id: str,
        event: DomainEvent,
    ) -> EventEnvelope:
        """Wrap *event* for the stream of the slug it is about."""
        return EventEnvelope(
            stream_id=event.aggregate_id,
            stream_type=stream_type,
            version=version,
            event_id=event_id,
            event_type=type(event).__name__,
            payload=asdict(event),
        )

    def to_domain_event(self, envelope: EventEnvelope) -> DomainEvent:
        """Rebuild the event stored in *envelope*.

        Raises:
            ValueError: If the envelope's event type is not registered.
        """
        event_class = self.event_registry.get(envelope.event_type)
        if event_class is None:
            raise ValueError(f"Unknown event type: {envelope.event_type}")
        return event_class(**envelope.payload)
