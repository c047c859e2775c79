"""The append-only log behind every short link.

Each change to a short link is stored as an `EventEnvelope` in the stream
named after its slug. Stores implement the `EventStore` port below; the
service layer only ever talks to the port.

What a store promises
---------------------
Appending:
- A call writes one batch for one slug, all or nothing.
- The store numbers each envelope with the next `global_seq` and stamps
  `recorded_at` with the current UTC time.
- The stored envelopes come back in the order they were given.
- Nothing is ever rewritten or dropped afterwards.
- Failures:
  * `InvalidEnvelopeError`: the batch itself is malformed (empty, two slugs,
    gaps between versions).
  * `VersionConflictError`: the first version is not the one after the
    slug's latest event.
  * `DuplicateEventIdError`: an `event_id` was stored before.

Reading:
- `read_stream` walks one slug's events by version, both bounds inclusive.
- `read_since` walks the whole log by `global_seq`; replay reads this way.
- Nothing to read means an empty iterator. Bad bounds raise `ValueError`.

Only the service layer and adapters import this module.
"""

import abc
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

ULID_LENGTH = 26


class EventStoreError(Exception):
    """Root of the event store failures."""


class VersionConflictError(EventStoreError):
    """The batch does not continue the slug's stream."""


class DuplicateEventIdError(EventStoreError):
    """An event with this event_id is already stored."""


class InvalidEnvelopeError(EventStoreError):
    """An envelope or batch failed validation."""


def _check_recorded_at(recorded_at: datetime) -> None:
    offset = recorded_at.utcoffset()
    if offset is None:
        raise InvalidEnvelopeError("recorded_at must be tz-aware.")
    if offset != timedelta(0):
        raise InvalidEnvelopeError("recorded_at must be UTC.")


@dataclass(frozen=True, slots=True)
class EventEnvelope:
    """One stored event plus the bookkeeping around it.

    `global_seq` and `recorded_at` stay None until a store appends the
    envelope; the copies a store hands back always carry both.
    """

    # pylint: disable=too-many-instance-attributes

    stream_id: str  # slug
    stream_type: str
    version: int
    event_id: str
    event_type: str
    payload: dict[str, Any]
    recorded_at: datetime | None = None
    global_seq: int | None = None

    def __post_init__(self) -> None:
        if len(self.event_id) != ULID_LENGTH:
            raise InvalidEnvelopeError(
                f"event_id must be a {ULID_LENGTH}-character ULID."
            )
        if self.version < 1:
            raise InvalidEnvelopeError("version must be >= 1")
        if self.global_seq is not None and self.global_seq < 1:
            raise InvalidEnvelopeError("global_seq must be >= 1 when set")
        if self.recorded_at is not None:
            _check_recorded_at(self.recorded_at)
        if not (self.stream_type.strip() and self.event_type.strip()):
            raise InvalidEnvelopeError("stream_type and event_type must be non-empty.")


def check_batch(events: Sequence[EventEnvelope]) -> None:
    """Reject a batch that cannot be appended in one call.

    A batch is accepted when it is non-empty, every envelope belongs to the
    stream of the first one and has not been stored yet, no event_id repeats
    and the versions count up by one.

    Raises:
        InvalidEnvelopeError: Naming the first problem found.
    """
    if not events:
        raise InvalidEnvelopeError("Empty batch is not allowed.")

    stream = (events[0].stream_id, events[0].stream_type)
    if any((e.stream_id, e.stream_type) != stream for e in events):
        raise InvalidEnvelopeError("Mixed streams in a single batch.")
    if any(e.global_seq is not None for e in events):
        raise InvalidEnvelopeError("global_seq must be None before persistence.")
    if len({e.event_id for e in events}) != len(events):
        raise InvalidEnvelopeError("Duplicate event_id within batch.")

    first = events[0].version
    if [e.version for e in events] != list(range(first, first + len(events))):
        raise InvalidEnvelopeError("Versions in batch must be contiguous and ordered.")


class EventStore(abc.ABC):
    """Port for the append-only log."""

    @abc.abstractmethod
    def append(self, events: Sequence[EventEnvelope]) -> Sequence[EventEnvelope]:
        """Store a batch for a single slug and return the stored copies.

        The returned envelopes match the input order and have `global_seq`
        and `recorded_at` filled in.

        Raises:
            InvalidEnvelopeError: If `check_batch` rejects the batch.
            VersionConflictError: If the batch does not start right after the
                slug's latest version.
            DuplicateEventIdError: If an event_id is already in the log.
        """

    @abc.abstractmethod
    def read_stream(
        self, stream_id: str, from_version: int = 1, to_version: int | None = None
    ) -> Iterable[EventEnvelope]:
        """Iterate the events of one slug from `from_version` to `to_version`.

        Raises:
            ValueError: If from_version < 1 or to_version < from_version.
        """

    @abc.abstractmethod
    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Iterable[EventEnvelope]:
        """Iterate up to `limit` events recorded after `global_seq`.

        Raises:
            ValueError: If global_seq < 0, or limit is given and below 1.
        """
