"""In-memory Unit of Work for SHORTENER.

Owns the committed event log and the service guard. Each ``with uow:``
block holds the guard end-to-end and works on a staged `MemoryEventStore`;
`commit` publishes the staged events, anything else is discarded on exit.
"""

from __future__ import annotations

import logging
import threading

from shortener.adapters.eventstore import MemoryEventStore
from shortener.interfaces.eventstore import EventEnvelope
from shortener.interfaces.unit_of_work import AbstractUnitOfWork, GuardUnavailableError

logger = logging.getLogger(__name__)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Lock-guarded Unit of Work over an in-memory event log.

    Args:
        events: Committed envelopes to start from.
        guard_timeout: Seconds to wait for the guard before giving up with
            `GuardUnavailableError`. ``None`` waits forever.
    """

    eventstore: MemoryEventStore

    def __init__(
        self,
        events: tuple[EventEnvelope, ...] = (),
        *,
        guard_timeout: float | None = None,
    ) -> None:
        self._committed: tuple[EventEnvelope, ...] = tuple(events)
        self._guard = threading.Lock()
        self._guard_timeout = guard_timeout
        self.eventstore = MemoryEventStore(self._committed)

    def __enter__(self) -> InMemoryUnitOfWork:
        timeout = -1 if self._guard_timeout is None else self._guard_timeout
        if not self._guard.acquire(timeout=timeout):
            logger.error("Timed out after %ss waiting for the service guard", timeout)
            raise GuardUnavailableError(
                f"service guard not acquired within {timeout} seconds"
            )
        self.eventstore = MemoryEventStore(self._committed)
        super().__enter__()
        return self

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self._guard.release()

    def commit(self):
        self._committed = self.eventstore.events

    def rollback(self):
        if len(self.eventstore) != len(self._committed):
            logger.debug(
                "Discarding %d uncommitted event(s)",
                len(self.eventstore) - len(self._committed),
            )
        self.eventstore = MemoryEventStore(self._committed)

    @property
    def events(self) -> tuple[EventEnvelope, ...]:
        """The committed event log, in append order."""
        return self._committed

    @property
    def guard(self) -> threading.Lock:
        """The lock serializing every unit of work on this log."""
        return self._guard
