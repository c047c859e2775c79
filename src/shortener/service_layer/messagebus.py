"""Routing of commands and queries to their handlers."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from shortener.domain.errors import DomainError
from shortener.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command
from .queries import Query

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods

Message = Command | Query
Handler = Callable[..., Any]


class NoHandlerForMessage(LookupError):
    """No handler is registered for the type of the message."""

    def __init__(self, message: Message) -> None:
        super().__init__(f"No handler found for message {type(message).__name__}")


class MessageBus:
    """Single way into the service layer.

    Each message goes to the one handler registered for its exact type and
    the handler's return value is passed back, so a command can report what
    it created and a query what it found. Dispatch happens on the calling
    thread.

    Handlers take the message as their only argument; bootstrap binds the
    unit of work and anything else they need beforehand. The same unit of
    work is kept as ``bus.uow`` for callers that read the log directly.

    A `DomainError` means the request was refused; it is logged at INFO and
    reaches the caller as is. Other errors are logged with their traceback
    before being re-raised.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: Mapping[type[Command], Handler],
        query_handlers: Mapping[type[Query], Handler] | None = None,
    ) -> None:
        self.uow = uow
        self._command_handlers = command_handlers
        self._query_handlers = query_handlers or {}

    def handle(self, message: Message) -> Any:
        """Run the handler for *message* and return its result.

        Raises:
            NoHandlerForMessage: If nothing handles this message type.
        """
        table = (
            self._query_handlers
            if isinstance(message, Query)
            else self._command_handlers
        )
        handler = table.get(type(message))
        if handler is None:
            logger.error("No handler found for message %s", type(message).__name__)
            raise NoHandlerForMessage(message)

        handler_name = _handler_name(handler)
        logger.debug("Handling %s with handler %s", message, handler_name)
        try:
            return handler(message)
        except DomainError as e:
            logger.info("%s rejected: %s", type(message).__name__, e)
            raise
        except Exception:
            logger.exception(
                "Exception handling %s with handler %s", message, handler_name
            )
            raise


def _handler_name(handler: Handler) -> str:
    # bootstrap wraps handlers in functools.partial
    target = getattr(handler, "func", handler)
    return getattr(target, "__name__", repr(handler))
