# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Scope implementation for the ddd_common DI system.

Scopes form a tree rooted at the container's root scope. Each scope caches
its shared instances and tracks the disposable instances it created.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Hashable, Iterable, Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ddd_common.di.errors import ScopeDisposedError
from ddd_common.di.lifetime_policies import OwnedTag

if TYPE_CHECKING:
    from types import TracebackType

    from ddd_common.di.container import Container

T = TypeVar("T")


class Scope:
    """A lifetime scope created by the container."""

    def __init__(
        self,
        container: Container,
        parent: Scope | None = None,
        tag: Hashable | None = None,
    ) -> None:
        self.container = container
        self._id = uuid.uuid4().hex
        self._parent = parent
        self._tag = tag
        self._services: dict[Hashable, Any] = {}
        self._creation_locks: dict[Hashable, asyncio.Lock] = {}
        self._tracked: list[Any] = []
        self._scopes: list[Scope] = []
        self._disposed = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def tag(self) -> Hashable | None:
        return self._tag

    @property
    def parent(self) -> Scope | None:
        return self._parent

    @property
    def root(self) -> Scope:
        scope = self
        while scope._parent is not None:
            scope = scope._parent
        return scope

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def __repr__(self) -> str:
        return f"Scope(id={self._id[:8]}, tag={self._tag!r})"

    async def __aenter__(self) -> Scope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    def iter_chain(self) -> Iterator[Scope]:
        """Yield this scope and then each ancestor up to the root."""
        scope: Scope | None = self
        while scope is not None:
            yield scope
            scope = scope._parent

    def find_tagged(self, tags: Iterable[Hashable]) -> Scope | None:
        """Return the nearest scope in the chain whose tag is one of ``tags``."""
        wanted = set(tags)
        for scope in self.iter_chain():
            if scope._tag is not None and scope._tag in wanted:
                return scope
        return None

    def _check_not_disposed(self, operation: str) -> None:
        if self._disposed:
            raise ScopeDisposedError(operation=operation, scope_id=self._id)

    def creation_lock(self, key: Hashable) -> asyncio.Lock:
        """Lock serialising the first creation of ``key`` in this scope."""
        return self._creation_locks.setdefault(key, asyncio.Lock())

    def track(self, instance: Any) -> None:
        """Dispose ``instance`` together with this scope."""
        self._tracked.append(instance)

    async def resolve(self, interface: Any) -> Any:
        """Resolve a service from this scope."""
        self._check_not_disposed("resolve")
        return await self.container._resolve(interface, self)

    async def resolve_optional(self, interface: Any) -> Any | None:
        """Resolve a service, or return None when it isn't registered."""
        self._check_not_disposed("resolve_optional")
        if not await self.container.has_registration(interface):
            return None
        return await self.container._resolve(interface, self)

    async def resolve_owned(self, interface: Any) -> Owned[Any]:
        """Resolve ``interface`` in a new child scope owned by the caller.

        Services registered with ``INSTANCE_PER_OWNED`` for ``interface`` are
        shared inside that child scope.
        """
        self._check_not_disposed("resolve_owned")
        child = self.create_scope(tag=OwnedTag(interface))
        try:
            value = await child.resolve(interface)
        except BaseException:
            await child.dispose()
            raise
        return Owned(value, child)

    def create_scope(self, tag: Hashable | None = None) -> Scope:
        """Create a nested scope."""
        self._check_not_disposed("create_scope")
        scope = type(self)(self.container, parent=self, tag=tag)
        self._scopes.append(scope)
        return scope

    async def dispose(self) -> None:
        """Dispose child scopes and then this scope's services (idempotent)."""
        if self._disposed:
            return
        self._disposed = True
        try:
            for scope in reversed(list(self._scopes)):
                await scope.dispose()
            await self.container._disposal_manager.dispose_services(self._tracked)
        finally:
            self._tracked.clear()
            self._services.clear()
            self._creation_locks.clear()
            if self._parent is not None and self in self._parent._scopes:
                self._parent._scopes.remove(self)


class Owned(Generic[T]):
    """A resolved value together with the scope that owns its dependencies."""

    def __init__(self, value: T, scope: Scope) -> None:
        self.value = value
        self._scope = scope

    async def dispose(self) -> None:
        await self._scope.dispose()

    async def __aenter__(self) -> T:
        return self.value

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()
