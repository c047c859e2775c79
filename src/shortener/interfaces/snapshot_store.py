"""Snapshot store interface for SHORTENER.

A snapshot store persists a `ServiceState` so the service can be restored
after a restart. Failures are reported with `SnapshotError` subclasses, which
are persistence errors and never domain errors.

Several processes may share one store. A process that loads a snapshot,
changes state and saves it again holds `exclusive()` for the whole cycle so
no other process saves in between.
"""

import abc
import contextlib
from collections.abc import Iterator

from shortener.domain.snapshot import ServiceState


class SnapshotError(Exception):
    """Base class for snapshot persistence errors."""


class SnapshotNotFoundError(SnapshotError):
    """No snapshot has been saved yet."""


class InvalidSnapshotError(SnapshotError):
    """The stored snapshot cannot be decoded."""


class SnapshotLockedError(SnapshotError):
    """Another process kept the snapshot locked for too long."""


class SnapshotStore(abc.ABC):
    """Contract for loading and saving snapshots."""

    @abc.abstractmethod
    def save(self, state: ServiceState) -> None:
        """Persist *state*, replacing any previous snapshot.

        Raises:
            SnapshotError: If the snapshot cannot be written.
        """

    @abc.abstractmethod
    def load(self) -> ServiceState:
        """Return the last saved snapshot.

        Raises:
            SnapshotNotFoundError: If nothing has been saved.
            InvalidSnapshotError: If the stored data is malformed.
        """

    @contextlib.contextmanager
    def exclusive(self, timeout: float | None = None) -> Iterator[None]:
        """Keep other processes from using the store while the block runs.

        Stores private to one process have nothing to exclude.

        Args:
            timeout: Seconds to wait for the store; None waits indefinitely.

        Raises:
            SnapshotLockedError: If the store stayed busy past *timeout*.
        """
        yield
