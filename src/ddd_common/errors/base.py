# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Base error classes for the ddd_common error handling system.

Every exception raised by the package carries an error code, a category
derived from that code, a severity and free-form context, so failures can be
logged and serialised uniformly.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Final

from ddd_common.errors.registry import registry


class ErrorSeverity(str, Enum):
    """Severity levels for errors across ddd_common."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErrorCategory:
    """Error category with optional parent for hierarchical grouping."""

    def __init__(self, name: str, parent: ErrorCategory | None = None) -> None:
        self.name = name
        self.parent = parent

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ErrorCategory({self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorCategory):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def is_subcategory_of(self, category: ErrorCategory) -> bool:
        """Check if this category is the given category or one of its descendants."""
        current: ErrorCategory | None = self
        while current:
            if current == category:
                return True
            current = current.parent
        return False

    @classmethod
    def get_or_create(
        cls, name: str, parent: ErrorCategory | None = None
    ) -> ErrorCategory:
        """Get or create an error category through the shared registry."""
        return registry.get_category(name, parent)


class ErrorCode:
    """Error code bound to the category it belongs to."""

    def __init__(self, code: str, category: ErrorCategory | None = None) -> None:
        self.code = code
        self.category = category or registry.get_category("INTERNAL")

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.code == other
        if not isinstance(other, ErrorCode):
            return False
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)

    @classmethod
    def get_or_create(cls, code: str, category: ErrorCategory) -> ErrorCode:
        """Get or create an error code through the shared registry."""
        return registry.get_code(code, category.name)


INTERNAL: Final = ErrorCategory.get_or_create("INTERNAL")
ARGUMENT: Final = ErrorCategory.get_or_create("ARGUMENT")
INTERNAL_ERROR: Final = ErrorCode.get_or_create("INTERNAL_ERROR", INTERNAL)
ARGUMENT_NONE: Final = ErrorCode.get_or_create("ARGUMENT_NONE", ARGUMENT)


class DddError(Exception):
    """
    Base error class for ddd_common errors.

    Subclass it for package-specific errors; the subclasses choose the
    category their codes are registered under.
    """

    category_name: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        code: ErrorCode | str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize a new error.

        Args:
            message: Human-readable error message
            code: ErrorCode or bare code string registered under the class category
            severity: Severity level of the error
            context: Additional contextual information
            **kwargs: Merged into the context
        """
        if code is None:
            code = INTERNAL_ERROR
        elif isinstance(code, str):
            code = registry.get_code(code, self.category_name)

        full_context = dict(context or {})
        full_context.update(kwargs)

        self.message = message
        self.code: ErrorCode = code
        self.category = code.category
        self.severity = severity
        self.context = full_context
        self.timestamp = datetime.now(UTC)
        super().__init__(message)

    def add_context(self, key: str, value: Any) -> DddError:
        """Add a key-value pair to the error context and return self for chaining."""
        self.context[key] = value
        return self

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation of the error."""
        return {
            "code": self.code.code,
            "message": self.message,
            "category": self.category.name,
            "severity": self.severity.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class ArgumentNoneError(DddError, ValueError):
    """Raised when a required argument is None."""

    category_name = "ARGUMENT"

    def __init__(self, argument_name: str, **context: Any) -> None:
        super().__init__(
            f"Argument '{argument_name}' must not be None",
            code=ARGUMENT_NONE,
            argument_name=argument_name,
            **context,
        )
        self.argument_name = argument_name


def ensure_not_none(value: Any, argument_name: str) -> None:
    """Raise ArgumentNoneError when value is None."""
    if value is None:
        raise ArgumentNoneError(argument_name)
