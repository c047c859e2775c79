"""Bootstrap the message bus with handlers, unit of work and snapshot store."""

from __future__ import annotations

import contextlib
import functools
import inspect
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from shortener import config
from shortener.adapters.id_generators import TokenSlugGenerator, ULIDGenerator
from shortener.adapters.snapshot_store import JsonSnapshotStore
from shortener.adapters.unit_of_work import InMemoryUnitOfWork
from shortener.service_layer import commands, queries, snapshots
from shortener.service_layer.handlers import COMMAND_HANDLERS
from shortener.service_layer.messagebus import MessageBus
from shortener.service_layer.queries import QUERY_HANDLERS

if TYPE_CHECKING:
    from shortener.domain.snapshot import ServiceState
    from shortener.domain.value_objects import ShortLink, Stats
    from shortener.interfaces.id_generator import IdGenerator
    from shortener.interfaces.snapshot_store import SnapshotStore
    from shortener.interfaces.unit_of_work import AbstractUnitOfWork
    from shortener.service_layer.commands import Command
    from shortener.service_layer.queries import Query


@dataclass(frozen=True)
class AppContainer:
    """Wired application: the message bus plus what snapshotting needs.

    The convenience methods mirror the service's external call contract.
    """

    message_bus: MessageBus
    snapshot_store: SnapshotStore
    event_id_generator: IdGenerator

    @property
    def uow(self) -> AbstractUnitOfWork:
        """The unit of work shared by every handler."""
        return self.message_bus.uow

    def create_short_link(self, url: str, slug: str | None = None) -> ShortLink:
        """Create a short link (see `handlers.create_short_link`)."""
        return self.message_bus.handle(commands.CreateShortLink(url=url, slug=slug))

    def redirect(self, slug: str) -> ShortLink:
        """Follow a short link (see `handlers.redirect`)."""
        return self.message_bus.handle(commands.Redirect(slug=slug))

    def get_stats(self, slug: str) -> Stats:
        """Read the stats of a short link (see `queries.get_stats`)."""
        return self.message_bus.handle(queries.GetStats(slug=slug))

    def save_snapshot(self) -> ServiceState:
        """Persist the current state, raising on failure."""
        return snapshots.save_snapshot(
            self.uow, self.snapshot_store, self.event_id_generator
        )

    def snapshotter(self, interval: float) -> snapshots.PeriodicSnapshotter:
        """Build a periodic snapshotter for this container (not started)."""
        return snapshots.PeriodicSnapshotter(
            self.uow, self.snapshot_store, self.event_id_generator, interval
        )


def build_uow(guard_timeout: float | None = None) -> InMemoryUnitOfWork:
    """Build a new unit of work over an empty event log."""
    return InMemoryUnitOfWork(guard_timeout=guard_timeout)


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: Mapping[type[Command], Callable[..., Any]],
    query_handlers: Mapping[type[Query], Callable[..., Any]] | None = None,
    dependencies: Mapping[str, object] | None = None,
) -> MessageBus:
    """Build a message bus with injected dependencies.

    `uow` is always injected; *dependencies* adds further named values, each
    passed only to the handlers that declare a parameter of that name.
    """
    dependencies = {"uow": uow, **(dependencies or {})}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }
    injected_query_handlers = {
        query_type: inject_dependencies(handler, dependencies)
        for query_type, handler in (query_handlers or {}).items()
    }

    return MessageBus(
        uow,
        command_handlers=injected_command_handlers,
        query_handlers=injected_query_handlers,
    )


def bootstrap(  # pylint: disable=too-many-arguments
    snapshot_path: Path | str | None = None,
    *,
    snapshot_store: SnapshotStore | None = None,
    slug_generator: IdGenerator | None = None,
    emit_stats_updates: bool = False,
    expand_redirects: bool = False,
    guard_timeout: float | None = None,
) -> AppContainer:
    """Wire the service and restore its last snapshot.

    Args:
        snapshot_path: JSON snapshot file; defaults to `config.get_snapshot_path()`.
        snapshot_store: Use this store instead of a JSON file.
        slug_generator: Generator for slugs; defaults to `TokenSlugGenerator`.
        emit_stats_updates: Mirror each redirect into a `StatsUpdated` event.
        expand_redirects: Restore one event per historical redirect.
        guard_timeout: Seconds a call may wait for the service guard.

    Returns:
        AppContainer: The wired application.
    """
    if snapshot_store is None:
        snapshot_store = JsonSnapshotStore(
            snapshot_path if snapshot_path is not None else config.get_snapshot_path()
        )
    event_id_generator = ULIDGenerator()
    uow = build_uow(guard_timeout)

    snapshots.restore_snapshot(
        uow, snapshot_store, event_id_generator, expand_redirects=expand_redirects
    )

    message_bus = build_message_bus(
        uow,
        COMMAND_HANDLERS,
        QUERY_HANDLERS,
        dependencies={
            "slug_generator": slug_generator or TokenSlugGenerator(),
            "event_id_generator": event_id_generator,
            "emit_stats_updates": emit_stats_updates,
        },
    )

    return AppContainer(
        message_bus=message_bus,
        snapshot_store=snapshot_store,
        event_id_generator=event_id_generator,
    )


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return functools.partial(handler, **deps)


@contextlib.contextmanager
def exclusive_app(
    snapshot_path: Path | str | None = None,
    *,
    lock_timeout: float | None = config.DEFAULT_LOCK_TIMEOUT,
    snapshot_store: SnapshotStore | None = None,
    slug_generator: IdGenerator | None = None,
) -> Iterator[AppContainer]:
    """Bootstrap the service while holding its snapshot store exclusively.

    Other processes sharing the snapshot wait until the block ends, so state
    restored at the start and saved inside the block cannot be overwritten
    by them in between.

    Raises:
        SnapshotLockedError: If the snapshot stayed locked past *lock_timeout*.
    """
    if snapshot_store is None:
        snapshot_store = JsonSnapshotStore(
            snapshot_path if snapshot_path is not None else config.get_snapshot_path()
        )
    with snapshot_store.exclusive(lock_timeout):
        yield bootstrap(snapshot_store=snapshot_store, slug_generator=slug_generator)
