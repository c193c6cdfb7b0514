# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Command handler interfaces.

Handlers subclass a closed handler interface and are registered under it::

    class CreateProductHandler(CommandHandler[CreateProduct]):
        async def handle(self, command: CreateProduct) -> Result[None]: ...

    class GetPriceHandler(ResultCommandHandler[GetPrice, Decimal]):
        async def handle(self, command: GetPrice) -> Result[Decimal]: ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from ddd_common.commands.base import Command
from ddd_common.results import Result

TCommand = TypeVar("TCommand", bound=Command)
TResult = TypeVar("TResult")


class CommandHandlerBase(ABC):
    """Marker base of every command handler."""


class CommandHandler(CommandHandlerBase, Generic[TCommand]):
    """Handles a command that produces no value."""

    @abstractmethod
    async def handle(self, command: TCommand) -> Result[None]: ...


class ResultCommandHandler(CommandHandlerBase, Generic[TCommand, TResult]):
    """Handles a command that produces a ``TResult``."""

    @abstractmethod
    async def handle(self, command: TCommand) -> Result[TResult]: ...


HANDLER_INTERFACES: tuple[type[Any], ...] = (CommandHandler, ResultCommandHandler)
