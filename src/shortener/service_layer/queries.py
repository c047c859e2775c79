"""Queries and their handlers.

Query handlers are strictly read-only: they replay the log inside the unit
of work (so they observe a consistent state) and never commit.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .event_log import EventLog

if TYPE_CHECKING:
    from shortener.domain.value_objects import Stats
    from shortener.interfaces.id_generator import IdGenerator
    from shortener.interfaces.unit_of_work import AbstractUnitOfWork


@dataclass(frozen=True)
class Query:
    """Base class for all queries."""


@dataclass(frozen=True)
class GetStats(Query):
    """Query for the redirect statistics of a short link."""

    slug: str


def get_stats(
    query: GetStats, uow: AbstractUnitOfWork, event_id_generator: IdGenerator
) -> Stats:
    """Return the short link and redirect count for a slug.

    Raises:
        SlugNotFoundError: If the slug was never created.
    """
    with uow:
        state = EventLog(uow.eventstore, event_id_generator).replay()
        return state.get_stats(query.slug)


QUERY_HANDLERS: dict[type, Callable[..., object]] = {
    GetStats: get_stats,
}
