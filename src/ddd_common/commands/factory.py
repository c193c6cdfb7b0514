# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Command handler factory with a per-scope handler cache.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from typing import Any, TypeVar, get_args, get_origin

from ddd_common.commands.base import Command
from ddd_common.commands.errors import InvalidHandlerTypeError
from ddd_common.commands.handlers import (
    HANDLER_INTERFACES,
    CommandHandler,
    CommandHandlerBase,
    ResultCommandHandler,
)
from ddd_common.di.protocols import ScopeProtocol
from ddd_common.di.scanning import closed_interfaces_of
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger

THandler = TypeVar("THandler")


def _is_closed_interface(handler_type: Any) -> bool:
    return get_origin(handler_type) in HANDLER_INTERFACES and not any(
        isinstance(arg, TypeVar) for arg in get_args(handler_type)
    )


def _is_abstract_handler(handler_type: Any) -> bool:
    return (
        isinstance(handler_type, type)
        and issubclass(handler_type, CommandHandlerBase)
        and inspect.isabstract(handler_type)
        and handler_type not in (CommandHandlerBase, *HANDLER_INTERFACES)
    )


def _implements(handler: Any, handler_type: Any) -> bool:
    origin = get_origin(handler_type)
    if origin is None:
        return isinstance(handler, handler_type)
    return handler_type in closed_interfaces_of(type(handler), origin)


class CommandHandlerFactory:
    """Resolves command handlers from a scope, caching one per handler type.

    The cache map is guarded by a re-entrant lock; first creation of a handler
    is serialised by an asyncio lock so concurrent first requests for the same
    type get the same instance.
    """

    def __init__(self, scope: ScopeProtocol) -> None:
        ensure_not_none(scope, "scope")
        self._scope = scope
        self._handlers: dict[Any, Any] = {}
        self._lock = threading.RLock()
        self._creation_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    def _cached(self, handler_type: Any) -> Any | None:
        with self._lock:
            handler = self._handlers.get(handler_type)
            if handler is not None:
                return handler
            for other in self._handlers.values():
                if _implements(other, handler_type):
                    return other
        return None

    async def get_handler(self, handler_type: type[THandler] | Any) -> THandler:
        """Get the handler registered for ``handler_type``.

        ``handler_type`` is a closed handler interface
        (``CommandHandler[CreateProduct]``) or an abstract handler class.

        Raises:
            InvalidHandlerTypeError: For any other type
            ServiceNotRegisteredError: If no handler is registered for it
        """
        ensure_not_none(handler_type, "handler_type")
        if not (_is_closed_interface(handler_type) or _is_abstract_handler(handler_type)):
            raise InvalidHandlerTypeError(handler_type)

        handler = self._cached(handler_type)
        if handler is not None:
            return handler

        async with self._creation_lock:
            handler = self._cached(handler_type)
            if handler is not None:
                return handler
            handler = await self._scope.resolve(handler_type)
            with self._lock:
                handler = self._handlers.setdefault(handler_type, handler)
            self._logger.debug(
                "Command handler created",
                handler_type=repr(handler_type),
                handler=type(handler).__name__,
            )
            return handler

    async def get_handler_for(
        self, command_type: type[Command], result_type: Any = None
    ) -> Any:
        """Get the handler for ``command_type``.

        Without ``result_type`` this is ``CommandHandler[command_type]``,
        otherwise ``ResultCommandHandler[command_type, result_type]``.
        """
        ensure_not_none(command_type, "command_type")
        if result_type is None:
            return await self.get_handler(CommandHandler[command_type])
        return await self.get_handler(ResultCommandHandler[command_type, result_type])
