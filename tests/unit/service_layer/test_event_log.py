"""Unit tests for the EventLog repository and EventMapper."""

import pytest

from shortener.adapters.eventstore import MemoryEventStore
from shortener.adapters.id_generators import SimpleIdGenerator
from shortener.domain import events
from shortener.interfaces.eventstore import EventEnvelope
from shortener.service_layer.event_log import STREAM_TYPE, EventLog
from shortener.service_layer.event_mapper import EventMapper

# pylint: disable=redefined-outer-name, magic-value-comparison


@pytest.fixture
def log() -> EventLog:
    """An event log over an empty in-memory store."""
    return EventLog(MemoryEventStore(), SimpleIdGenerator())


class TestEventMapper:
    """Tests for DomainEvent <-> EventEnvelope conversion."""

    @staticmethod
    def test_to_envelope_uses_slug_as_stream():
        """Test that the envelope is placed on the event's slug stream."""
        envelope = EventMapper.to_envelope(
            stream_type=STREAM_TYPE,
            version=1,
            event_id="0" * 26,
            event=events.LinkCreated(slug="ex", url="https://example.com"),
        )
        assert envelope.stream_id == "ex"
        assert envelope.stream_type == "ShortLink"
        assert envelope.event_type == "LinkCreated"
        assert envelope.payload == {"slug": "ex", "url": "https://example.com"}

    @staticmethod
    def test_to_domain_event_reverses_to_envelope():
        """Test that an envelope maps back to an equal domain event."""
        event = events.StatsUpdated(slug="ex", redirects=5)
        envelope = EventMapper.to_envelope(STREAM_TYPE, 1, "0" * 26, event)
        assert EventMapper().to_domain_event(envelope) == event

    @staticmethod
    def test_unknown_event_type_raises():
        """Test that an unregistered event type cannot be mapped back."""
        envelope = EventEnvelope(
            stream_id="ex",
            stream_type=STREAM_TYPE,
            version=1,
            event_id="0" * 26,
            event_type="LinkDeleted",
            payload={"slug": "ex"},
        )
        with pytest.raises(ValueError, match="Unknown event type: LinkDeleted"):
            EventMapper().to_domain_event(envelope)


def test_record_assigns_per_slug_versions(log):
    """Test that each slug stream is versioned independently."""
    log.record(events.LinkCreated(slug="a", url="https://a.example"))
    log.record(events.LinkCreated(slug="b", url="https://b.example"))
    appended = log.record(
        events.RedirectOccurred(slug="a"), events.RedirectOccurred(slug="a")
    )

    assert [e.version for e in appended] == [2, 3]
    assert [e.version for e in log.event_store.read_stream("b")] == [1]


def test_record_mixed_slugs_keeps_order(log):
    """Test that a multi-slug record keeps the given order in the global log."""
    log.record(
        events.LinkCreated(slug="a", url="https://a.example"),
        events.LinkCreated(slug="b", url="https://b.example"),
        events.RedirectOccurred(slug="a"),
    )
    assert list(log.history()) == [
        events.LinkCreated(slug="a", url="https://a.example"),
        events.LinkCreated(slug="b", url="https://b.example"),
        events.RedirectOccurred(slug="a"),
    ]
    assert [e.global_seq for e in log.event_store.read_since()] == [1, 2, 3]


def test_replay_folds_history(log):
    """Test that replay sees every recorded event."""
    log.record(
        events.LinkCreated(slug="ex", url="https://example.com"),
        events.RedirectOccurred(slug="ex"),
    )
    assert log.replay().get_stats("ex").redirects == 1
    assert len(log) == 2


def test_record_uses_fresh_event_ids(log):
    """Test that every envelope gets its own event id."""
    appended = log.record(
        events.LinkCreated(slug="ex", url="https://example.com"),
        events.RedirectOccurred(slug="ex"),
    )
    assert len({e.event_id for e in appended}) == 2
