"""Event store kept in a Python list.

Nothing here survives the process; state is carried between runs by
snapshots instead.
"""

import dataclasses
import itertools
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timezone

from shortener.interfaces.eventstore import (
    DuplicateEventIdError,
    EventEnvelope,
    EventStore,
    VersionConflictError,
    check_batch,
)


class MemoryEventStore(EventStore):
    """Append-only list of envelopes in `global_seq` order.

    Access is not synchronised here; the unit of work holds the service
    guard around every use.

    Args:
        events: Envelopes that were already stored, oldest first. Used to
            build a working copy of another store.
    """

    def __init__(self, events: Iterable[EventEnvelope] = ()) -> None:
        self._events: list[EventEnvelope] = []
        self._event_ids: set[str] = set()
        self._latest_version: dict[str, int] = {}
        self._last_seq = 0
        for event in events:
            self._keep(event)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> tuple[EventEnvelope, ...]:
        """Everything stored so far, oldest first."""
        return tuple(self._events)

    def _keep(self, event: EventEnvelope) -> None:
        self._events.append(event)
        self._event_ids.add(event.event_id)
        self._latest_version[event.stream_id] = event.version
        self._last_seq = event.global_seq or self._last_seq

    def append(self, events: Sequence[EventEnvelope]) -> Sequence[EventEnvelope]:
        check_batch(events)

        head = events[0]
        expected = self._latest_version.get(head.stream_id, 0) + 1
        if head.version != expected:
            raise VersionConflictError(
                f"expected first version {expected}, got {head.version}"
            )
        if reused := [e.event_id for e in events if e.event_id in self._event_ids]:
            raise DuplicateEventIdError(f"duplicate event_id {reused[0]}")

        now = datetime.now(timezone.utc)
        stored = [
            dataclasses.replace(
                event, payload=dict(event.payload), recorded_at=now, global_seq=seq
            )
            for seq, event in enumerate(events, start=self._last_seq + 1)
        ]
        for event in stored:
            self._keep(event)
        return stored

    def read_stream(
        self, stream_id: str, from_version: int = 1, to_version: int | None = None
    ) -> Iterator[EventEnvelope]:
        if from_version < 1:
            raise ValueError("from_version must be >= 1")
        if to_version is not None and to_version < from_version:
            raise ValueError("to_version must be >= from_version")
        return self._stream(stream_id, from_version, to_version)

    def _stream(
        self, stream_id: str, from_version: int, to_version: int | None
    ) -> Iterator[EventEnvelope]:
        for event in self._events:
            if event.stream_id != stream_id or event.version < from_version:
                continue
            if to_version is not None and event.version > to_version:
                return
            yield event

    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Iterator[EventEnvelope]:
        if global_seq < 0:
            raise ValueError("global_seq must be >= 0")
        if limit is not None and limit <= 0:
            raise ValueError("limit cannot be <= 0")
        later = [e for e in self._events if (e.global_seq or 0) > global_seq]
        return itertools.islice(later, limit)
