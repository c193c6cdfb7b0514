# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Command-specific errors for ddd_common.
"""

from __future__ import annotations

from typing import Any

from ddd_common.errors import DddError


class CommandError(DddError):
    """Base class for command-related errors."""

    category_name = "COMMAND"

    def __init__(self, message: str, code: str = "COMMAND_ERROR", **context: Any) -> None:
        super().__init__(message, code=code, context=context)


class InvalidHandlerTypeError(CommandError, TypeError):
    """Raised when a handler is requested by a type that isn't a handler interface."""

    def __init__(self, handler_type: Any) -> None:
        super().__init__(
            f"{handler_type!r} is not a closed command handler interface or an "
            "abstract command handler type",
            code="INVALID_HANDLER_TYPE",
            handler_type=repr(handler_type),
        )
        self.handler_type = handler_type
