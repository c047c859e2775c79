"""Tests for EventEnvelope validation."""

from datetime import datetime, timedelta, timezone

import pytest

from shortener.interfaces.eventstore import EventEnvelope, InvalidEnvelopeError

VALID = {
    "stream_id": "ex",
    "stream_type": "ShortLink",
    "version": 1,
    "event_id": "0" * 26,
    "event_type": "LinkCreated",
    "payload": {"slug": "ex", "url": "https://example.com"},
}


@pytest.mark.parametrize(
    "override, message",
    [
        ({"event_id": "short"}, "26-character ULID"),
        ({"version": 0}, "version must be >= 1"),
        ({"global_seq": 0}, "global_seq must be >= 1"),
        ({"recorded_at": datetime(2024, 1, 1)}, "tz-aware"),
        (
            {"recorded_at": datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=2)))},
            "must be UTC",
        ),
        ({"stream_type": " "}, "must be non-empty"),
        ({"event_type": ""}, "must be non-empty"),
    ],
)
def test_invalid_envelopes_rejected(override, message):
    """Check that malformed envelopes cannot be constructed."""
    with pytest.raises(InvalidEnvelopeError, match=message):
        EventEnvelope(**{**VALID, **override})


def test_valid_envelope():
    """Check that a well-formed envelope is accepted as is."""
    envelope = EventEnvelope(**VALID)
    assert envelope.global_seq is None
    assert envelope.recorded_at is None
