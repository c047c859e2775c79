"""Snapshot save/restore and periodic snapshotting.

Both directions run inside the unit of work, so a snapshot never observes a
half-finished command and a restore never interleaves with one.

Failure policy:
- `restore_snapshot`: a missing or unreadable snapshot is logged and the
  service starts from an empty log.
- `save_snapshot_quietly` (periodic and shutdown saves): failures are logged
  and swallowed so the service stays live; the last good snapshot remains.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from shortener.domain.snapshot import ServiceState, from_state
from shortener.interfaces.snapshot_store import SnapshotError, SnapshotNotFoundError

from .event_log import EventLog

if TYPE_CHECKING:
    from shortener.interfaces.id_generator import IdGenerator
    from shortener.interfaces.snapshot_store import SnapshotStore
    from shortener.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def save_snapshot(
    uow: AbstractUnitOfWork, store: SnapshotStore, event_id_generator: IdGenerator
) -> ServiceState:
    """Replay the log and persist its projection.

    Returns:
        ServiceState: The state that was saved.

    Raises:
        SnapshotError: If the store cannot write the snapshot.
    """
    with uow:
        state = ServiceState.from_derived(
            EventLog(uow.eventstore, event_id_generator).replay()
        )
        store.save(state)
    logger.info("Snapshot saved (%d link(s))", len(state))
    return state


def save_snapshot_quietly(
    uow: AbstractUnitOfWork, store: SnapshotStore, event_id_generator: IdGenerator
) -> bool:
    """Like `save_snapshot`, but log failures instead of raising.

    Returns:
        bool: True if the snapshot was written.
    """
    try:
        save_snapshot(uow, store, event_id_generator)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Failed to save snapshot")
        return False
    return True


def restore_snapshot(
    uow: AbstractUnitOfWork,
    store: SnapshotStore,
    event_id_generator: IdGenerator,
    *,
    expand_redirects: bool = False,
) -> int:
    """Load the last snapshot and append its events to the log.

    Args:
        uow: Unit of work holding the (normally empty) log to restore into.
        store: Where the snapshot is read from.
        event_id_generator: Generator for the ids of the restored events.
        expand_redirects: Rebuild one event per historical redirect instead
            of one `LinkRestored` event per slug.

    Returns:
        int: Number of restored links; 0 when starting fresh.
    """
    try:
        state = store.load()
    except SnapshotNotFoundError:
        logger.info("No saved state found. Starting fresh...")
        return 0
    except SnapshotError as e:
        logger.warning("Cannot load saved state (%s). Starting fresh...", e)
        return 0

    restored = from_state(state, expand_redirects=expand_redirects)
    with uow:
        if restored:
            EventLog(uow.eventstore, event_id_generator).record(*restored)
            uow.commit()
    logger.info("Saved state found. Restored %d link(s)", len(state))
    return len(state)


class PeriodicSnapshotter:
    """Save snapshots on a fixed interval from a background thread.

    The interval is independent of request traffic. A failed save is logged
    and the next one is attempted on schedule. Use as a context manager to
    get a best-effort final save on exit.

    Args:
        uow: Unit of work of the running service.
        store: Destination of the snapshots.
        event_id_generator: Passed through to the event log.
        interval: Seconds between saves.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        store: SnapshotStore,
        event_id_generator: IdGenerator,
        interval: float,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._uow = uow
        self._store = store
        self._event_id_generator = event_id_generator
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def __enter__(self) -> PeriodicSnapshotter:
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop(final_save=True)

    @property
    def running(self) -> bool:
        """True while the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread."""
        if self.running:
            raise RuntimeError("snapshotter already running")
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run, name="snapshotter", daemon=True
        )
        self._thread.start()
        logger.debug("Periodic snapshots every %ss", self.interval)

    def stop(self, final_save: bool = False) -> None:
        """Stop the background thread, optionally saving once more."""
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if final_save:
            logger.info("Shutting down...")
            self.save_now()

    def save_now(self) -> bool:
        """Save immediately; failures are logged, never raised."""
        return save_snapshot_quietly(self._uow, self._store, self._event_id_generator)

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.save_now()
