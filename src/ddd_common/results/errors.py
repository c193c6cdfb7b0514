# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Error payloads carried by failed results.

These are exceptions so they carry codes, context and a message, but
services return them inside ``Failure`` instead of raising them.
"""

from __future__ import annotations

from typing import Any

from ddd_common.errors import DddError, ErrorSeverity


class ResultError(DddError):
    """Base class for errors carried by a Failure."""

    category_name = "RESULT"

    def __init__(
        self,
        message: str = "Operation failed",
        code: str = "RESULT_ERROR",
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        **context: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context)


class NotFoundError(ResultError):
    """The requested entity or resource does not exist."""

    def __init__(self, message: str = "Resource not found", **context: Any) -> None:
        super().__init__(
            message, code="NOT_FOUND", severity=ErrorSeverity.WARNING, **context
        )


class ArgumentInvalidError(ResultError):
    """An argument had a value the operation can't accept."""

    def __init__(self, argument_name: str, message: str | None = None, **context: Any) -> None:
        super().__init__(
            message or f"Argument '{argument_name}' is invalid",
            code="ARGUMENT_INVALID",
            argument_name=argument_name,
            **context,
        )
        self.argument_name = argument_name


class InvalidOperationError(ResultError):
    """The operation is not valid in the current state."""

    def __init__(self, message: str = "Invalid operation", **context: Any) -> None:
        super().__init__(message, code="INVALID_OPERATION", **context)


class ExceptionError(ResultError):
    """Wraps an exception that was caught and turned into a result."""

    def __init__(self, exception: BaseException, **context: Any) -> None:
        super().__init__(
            str(exception) or type(exception).__name__,
            code="EXCEPTION",
            exception_type=type(exception).__name__,
            **context,
        )
        self.exception = exception
