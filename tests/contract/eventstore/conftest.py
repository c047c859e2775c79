"""Fixtures for the event store contract.

Each store implementation is listed in `STORES`; every contract test runs
once per entry.
"""

import itertools
from datetime import datetime, timezone

import pytest

from shortener.adapters.eventstore import MemoryEventStore
from shortener.interfaces.eventstore import EventEnvelope

STORES = {"memory": MemoryEventStore}

# 26 digits pass the envelope's length check
_event_ids = (f"{n:026d}" for n in itertools.count(1))


@pytest.fixture(params=sorted(STORES))
def eventstore(request: pytest.FixtureRequest):
    """An empty store of each kind."""
    return STORES[request.param]()


@pytest.fixture
def make_envelope():
    """Build an unsaved `RedirectOccurred` envelope for slug ``ex``.

    Any field can be overridden by keyword; the event id is fresh unless
    given.
    """

    def _make(
        *,
        stream_id: str = "ex",
        version: int = 1,
        event_id: str | None = None,
        **overrides,
    ) -> EventEnvelope:
        fields = {
            "stream_type": "ShortLink",
            "event_type": "RedirectOccurred",
            "payload": {"slug": stream_id},
            **overrides,
        }
        return EventEnvelope(
            stream_id=stream_id,
            version=version,
            event_id=event_id or next(_event_ids),
            **fields,
        )

    return _make


@pytest.fixture
def utc_now() -> datetime:
    """The time the test started, in UTC."""
    return datetime.now(timezone.utc)
