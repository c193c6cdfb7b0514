# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Result objects for functional error handling in ddd_common.

Services report expected outcomes (not found, invalid arguments) as a
``Failure`` holding an error instance rather than raising it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, cast, runtime_checkable

from ddd_common.errors import DddError
from ddd_common.results.errors import ExceptionError

T = TypeVar("T")
U = TypeVar("U")


@runtime_checkable
class HasToDict(Protocol):
    """Protocol for objects that can be converted to dictionaries."""

    def to_dict(self) -> dict[str, Any]: ...


class Result(Generic[T], ABC):
    """Abstract base class for Result monad."""

    @property
    @abstractmethod
    def is_success(self) -> bool: ...

    @property
    @abstractmethod
    def is_failure(self) -> bool: ...

    @abstractmethod
    def map(self, func: Callable[[T], U]) -> Result[U]: ...

    @abstractmethod
    def flat_map(self, func: Callable[[T], Result[U]]) -> Result[U]: ...

    @abstractmethod
    def unwrap(self) -> T: ...

    @abstractmethod
    def unwrap_or(self, default: T) -> T: ...

    @abstractmethod
    def unwrap_or_else(self, func: Callable[[BaseException], T]) -> T: ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...

    @staticmethod
    def from_success(value: U = None) -> Success[U]:  # type: ignore[assignment]
        """Create a successful result (``value`` defaults to None)."""
        return Success(value)

    @staticmethod
    def from_error(error: BaseException) -> Failure[Any]:
        """Create a failed result carrying ``error``."""
        return Failure(error)

    def is_defined(self) -> bool:
        """True for a success whose value is not None."""
        return self.is_success and self.unwrap() is not None

    def ensure(self, predicate: Callable[[T], bool], error: BaseException) -> Result[T]:
        """Return Failure if predicate is False for a Success value, else self."""
        if self.is_success and not predicate(self.unwrap()):
            return Failure(error)
        return self

    async def map_async(self, func: Callable[[T], Awaitable[U]]) -> Result[U]:
        """Map the value of a Success asynchronously."""
        if self.is_success:
            try:
                return Success(await func(self.unwrap()))
            except Exception as e:
                return Failure(e)
        return cast("Result[U]", self)

    async def flat_map_async(
        self, func: Callable[[T], Awaitable[Result[U]]]
    ) -> Result[U]:
        """Flat map the value of a Success asynchronously."""
        if self.is_success:
            try:
                return await func(self.unwrap())
            except Exception as e:
                return Failure(e)
        return cast("Result[U]", self)


@dataclass(frozen=True)
class Success(Result[T], Generic[T]):
    """
    Represents a successful result with a value.

    Attributes:
        value: The successful result value
    """

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    @property
    def error(self) -> None:
        return None

    def map(self, func: Callable[[T], U]) -> Result[U]:
        """
        Map the value of a successful result.

        Returns:
            A new Success with the mapped value, or a Failure holding what
            ``func`` raised
        """
        try:
            return Success(func(self.value))
        except Exception as e:
            return Failure(e)

    def flat_map(self, func: Callable[[T], Result[U]]) -> Result[U]:
        try:
            return func(self.value)
        except Exception as e:
            return Failure(e)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, func: Callable[[BaseException], T]) -> T:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.value, HasToDict):
            return {"status": "success", "data": self.value.to_dict()}
        return {"status": "success", "data": self.value}

    def __str__(self) -> str:
        return f"Success({self.value})"

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@dataclass(frozen=True)
class Failure(Result[T], Generic[T]):
    """
    Represents a failed result with an error.

    Attributes:
        error: The error that caused the failure
    """

    error: BaseException

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    @property
    def value(self) -> None:
        return None

    def map(self, func: Callable[[T], U]) -> Result[U]:
        return cast("Failure[U]", self)

    def flat_map(self, func: Callable[[T], Result[U]]) -> Result[U]:
        return cast("Failure[U]", self)

    def unwrap(self) -> T:
        """
        Raises:
            The carried error, since this is a failure
        """
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, func: Callable[[BaseException], T]) -> T:
        return func(self.error)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the result to a dictionary.

        Errors without ``to_dict`` are described through ExceptionError.
        """
        error = self.error
        if not isinstance(error, DddError):
            error = ExceptionError(error)
        return {"status": "error", "error": error.to_dict()}

    def __str__(self) -> str:
        return f"Failure({self.error})"

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"
