"""Unit of Work port for SHORTENER.

A unit of work is the only way handlers reach the event log. Entering one
(``with uow:``) is entering the service guard: replay, decision and append
inside the block are seen by other callers as a single step. Leaving the
block without `commit` throws the pending events away.
"""

from __future__ import annotations

import abc

from .eventstore import EventStore


class GuardUnavailableError(RuntimeError):
    """The service guard could not be taken in time; only this call fails."""


class AbstractUnitOfWork(abc.ABC):
    """Transactional access to the event log.

    Attributes:
        eventstore: Store to read and append through while the block runs.
    """

    eventstore: EventStore

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        # uncommitted work never survives the block
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Keep the events appended in this block."""

    @abc.abstractmethod
    def rollback(self):
        """Drop the events appended since the last commit."""
