"""Message bus dispatching commands and queries to their handlers."""

import logging
from collections.abc import Callable
from typing import Any

from codetype.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Message

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForMessage(LookupError):
    """Exception raised when no handler is found for a message."""

    def __init__(self, message: Message) -> None:
        super().__init__(f"No handler found for message {type(message).__name__}")


class MessageBus:
    """Routes commands and queries to their handlers.

    The bus is the single entrypoint to the service layer. It logs each
    dispatch, logs and re-raises handler failures, and hands back whatever
    the handler returned.

    Args:
        uow: The unit of work injected into the handlers, exposed here for
            convenience.
        handlers: A mapping of message types to handlers. Handlers accept the
            message as their only argument; dependencies must already be
            bound (see `codetype.bootstrap.bootstrap.inject_dependencies`).
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        handlers: dict[type[Message], Callable[..., Any]],
    ) -> None:
        self.uow = uow
        self._handlers = handlers

    def handle(self, message: Message) -> Any:
        """Dispatch a message to its handler and return the handler's result.

        Raises:
            NoHandlerForMessage: If no handler is registered for the message type.
            Exception: Whatever the handler raises, unchanged.
        """

        if handler := self._handlers.get(type(message)):
            handler_name = self._get_handler_name(handler)
            logger.debug("Handling %s with handler %s", message, handler_name)
            try:
                return handler(message)
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling %s with handler %s", message, handler_name
                )
                raise
        logger.error("No handler found for message %s", type(message).__name__)
        raise NoHandlerForMessage(message)

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
