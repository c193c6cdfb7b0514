# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Protocol definitions for the ddd_common DI system.

A constructor parameter annotated with ``ScopeProtocol`` receives the scope
the service is being resolved from.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator, Hashable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ScopeProtocol(Protocol):
    """Protocol for a DI scope."""

    @property
    def id(self) -> str:
        """Get the unique ID of this scope."""
        ...

    @property
    def tag(self) -> Hashable | None:
        """Get the tag this scope was created with."""
        ...

    @property
    def parent(self) -> ScopeProtocol | None:
        """Get the parent scope, or None if this is the root scope."""
        ...

    async def resolve(self, interface: Any) -> Any:
        """Resolve a service within this scope."""
        ...

    async def resolve_optional(self, interface: Any) -> Any | None:
        """Resolve a service or return None when it isn't registered."""
        ...

    def create_scope(self, tag: Hashable | None = None) -> ScopeProtocol:
        """Create a child scope; use it with ``async with``."""
        ...

    async def dispose(self) -> None:
        """Dispose of the scope and its services."""
        ...


@runtime_checkable
class ContainerProtocol(Protocol):
    """Protocol for dependency injection containers."""

    async def register(
        self,
        interface: Any,
        implementation: Any,
        lifetime: Any = ...,
        tags: tuple[Hashable, ...] = (),
        owned: Any = None,
        interceptors: Any = (),
        replace: bool = False,
    ) -> None:
        """Register a service with an explicit lifetime."""
        ...

    async def register_generic(
        self,
        open_interface: type[Any],
        open_implementation: type[Any],
        lifetime: Any = ...,
        interceptors: Any = (),
        replace: bool = False,
    ) -> None:
        """Register an open generic implementation for an open generic interface."""
        ...

    async def has_registration(self, interface: Any) -> bool:
        """Check if a service is registered."""
        ...

    async def resolve(self, interface: Any) -> Any:
        """Resolve a service by type."""
        ...

    async def resolve_optional(self, interface: Any) -> Any | None:
        """Resolve a service or return None when it isn't registered."""
        ...

    @contextlib.asynccontextmanager  # type: ignore[misc]
    async def create_scope(
        self, tag: Hashable | None = None
    ) -> AsyncGenerator[ScopeProtocol, None]:
        """Create a new scope for scoped services."""
        ...

    async def get_registration_keys(self) -> list[str]:
        """Get all registered service keys."""
        ...

    async def dispose(self) -> None:
        """Dispose the container and all its services."""
        ...
