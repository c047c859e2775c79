"""Service layer command handlers.

Every handler runs its whole check-then-act sequence inside ``with uow:``,
so replay, validation and the append happen under the service guard.
Validation and uniqueness checks always precede the only mutation.
"""

import logging
from collections.abc import Callable

from shortener.domain import events
from shortener.domain.errors import SlugAlreadyInUseError
from shortener.domain.value_objects import ShortLink, validate_url
from shortener.interfaces.id_generator import IdGenerator
from shortener.interfaces.unit_of_work import AbstractUnitOfWork

from . import commands
from .event_log import EventLog

logger = logging.getLogger(__name__)

# ============================================================================
#                           Short Link Handlers
# ============================================================================


def create_short_link(
    cmd: commands.CreateShortLink,
    uow: AbstractUnitOfWork,
    slug_generator: IdGenerator,
    event_id_generator: IdGenerator,
) -> ShortLink:
    """Create a short link, generating a slug when none is given.

    Raises:
        InvalidUrlError: If the url is empty or not an http(s) url.
        SlugAlreadyInUseError: If the slug already maps to a url.
    """

    url = validate_url(cmd.url)
    slug = cmd.slug or slug_generator.new_id()

    with uow:
        log = EventLog(uow.eventstore, event_id_generator)
        if slug in log.replay():
            raise SlugAlreadyInUseError(slug)

        log.record(events.LinkCreated(slug=slug, url=url))
        uow.commit()

    logger.info("Created short link %s -> %s", slug, url)
    return ShortLink(slug=slug, url=url)


def redirect(
    cmd: commands.Redirect,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    emit_stats_updates: bool = False,
) -> ShortLink:
    """Resolve a slug and count one redirect.

    With ``emit_stats_updates`` the count is replayed again after the
    `RedirectOccurred` event and mirrored into a `StatsUpdated` event, in
    the same unit of work.

    Raises:
        SlugNotFoundError: If the slug was never created.
    """

    with uow:
        log = EventLog(uow.eventstore, event_id_generator)
        link = log.replay().get_link(cmd.slug)

        log.record(events.RedirectOccurred(slug=link.slug))
        if emit_stats_updates:
            redirects = log.replay().redirects[link.slug]
            log.record(events.StatsUpdated(slug=link.slug, redirects=redirects))
        uow.commit()

    logger.debug("Redirect %s -> %s", link.slug, link.url)
    return link


# ============================================================================
#                       Handler Registry
# ============================================================================


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.CreateShortLink: create_short_link,
    commands.Redirect: redirect,
}
