# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Commands, command handlers and the handler factory.
"""

from __future__ import annotations

from ddd_common.commands.base import Command, ResultCommand
from ddd_common.commands.configuration import CommandHandlerConfiguration
from ddd_common.commands.errors import CommandError, InvalidHandlerTypeError
from ddd_common.commands.factory import CommandHandlerFactory
from ddd_common.commands.handlers import (
    CommandHandler,
    CommandHandlerBase,
    ResultCommandHandler,
)
from ddd_common.commands.registration import add_command_handlers, handler_interfaces_of

__all__ = [
    "Command",
    "CommandError",
    "CommandHandler",
    "CommandHandlerBase",
    "CommandHandlerConfiguration",
    "CommandHandlerFactory",
    "InvalidHandlerTypeError",
    "ResultCommand",
    "ResultCommandHandler",
    "add_command_handlers",
    "handler_interfaces_of",
]
