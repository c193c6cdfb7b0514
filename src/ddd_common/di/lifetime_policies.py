# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Lifetime policies: where an instance is cached and which scope builds it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable
from typing import TYPE_CHECKING, Any

from ddd_common.di.errors import ScopeError
from ddd_common.di.lifetime import Lifetime

if TYPE_CHECKING:
    from ddd_common.di.registration import ServiceRegistration
    from ddd_common.di.resolution import Scope


class OwnedTag:
    """Tag of the scope created for an owned resolution of ``service``."""

    __slots__ = ("service",)

    def __init__(self, service: Any) -> None:
        self.service = service

    def __eq__(self, other: object) -> bool:
        return isinstance(other, OwnedTag) and other.service == self.service

    def __hash__(self) -> int:
        return hash((OwnedTag, self.service))

    def __repr__(self) -> str:
        return f"OwnedTag({getattr(self.service, '__qualname__', self.service)})"


class _CachingPolicy:
    async def get_instance(
        self, scope: Scope, factory: Callable[[], Awaitable[Any]], key: Hashable
    ) -> Any:
        if key in scope._services:
            return scope._services[key]
        # Concurrent first resolutions of ``key`` in ``scope`` wait for one factory call.
        async with scope.creation_lock(key):
            if key not in scope._services:
                scope._services[key] = await factory()
            return scope._services[key]


class SingletonPolicy(_CachingPolicy):
    def target_scope(self, registration: ServiceRegistration[Any], scope: Scope) -> Scope:
        return scope.root


class LifetimeScopePolicy(_CachingPolicy):
    def target_scope(self, registration: ServiceRegistration[Any], scope: Scope) -> Scope:
        if scope.parent is None:
            raise ScopeError.outside_scope(registration.interface)
        return scope


class MatchingScopePolicy(_CachingPolicy):
    def target_scope(self, registration: ServiceRegistration[Any], scope: Scope) -> Scope:
        found = scope.find_tagged(registration.tags)
        if found is None:
            raise ScopeError.no_matching_scope(registration.interface, registration.tags)
        return found


class OwnedPolicy(_CachingPolicy):
    def target_scope(self, registration: ServiceRegistration[Any], scope: Scope) -> Scope:
        tag = OwnedTag(registration.owned)
        found = scope.find_tagged((tag,))
        if found is None:
            raise ScopeError.no_matching_scope(registration.interface, (tag,))
        return found


class TransientPolicy:
    def target_scope(self, registration: ServiceRegistration[Any], scope: Scope) -> Scope:
        return scope

    async def get_instance(
        self, scope: Scope, factory: Callable[[], Awaitable[Any]], key: Hashable
    ) -> Any:
        return await factory()


LIFETIME_POLICY_MAP: dict[Lifetime, Any] = {
    Lifetime.SINGLE_INSTANCE: SingletonPolicy(),
    Lifetime.INSTANCE_PER_REQUEST: MatchingScopePolicy(),
    Lifetime.INSTANCE_PER_LIFETIME_SCOPE: LifetimeScopePolicy(),
    Lifetime.INSTANCE_PER_DEPENDENCY: TransientPolicy(),
    Lifetime.INSTANCE_PER_MATCHING_LIFETIME_SCOPE: MatchingScopePolicy(),
    Lifetime.INSTANCE_PER_OWNED: OwnedPolicy(),
}
