# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Error classes for the data access layer.
"""

from __future__ import annotations

from typing import Any

from ddd_common.errors import DddError


class DataAccessError(DddError):
    """Base class for data access errors."""

    category_name = "DATA_ACCESS"

    def __init__(self, message: str, code: str = "DATA_ACCESS_ERROR", **context: Any) -> None:
        super().__init__(message, code=code, context=context)


class RepositoryError(DataAccessError):
    """Raised when a repository can't carry out an operation."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="REPOSITORY_ERROR", **context)


class UnitOfWorkCommitError(DataAccessError):
    """Raised when committing a unit of work fails."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="UOW_COMMIT_FAILED", **context)


class UnitOfWorkRollbackError(DataAccessError):
    """Raised when rolling back a unit of work fails."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="UOW_ROLLBACK_FAILED", **context)


class UnitOfWorkDisposedError(DataAccessError):
    """Raised when using a unit of work after dispose()."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot perform '{operation}': unit of work is disposed",
            code="UOW_DISPOSED",
            operation=operation,
        )
