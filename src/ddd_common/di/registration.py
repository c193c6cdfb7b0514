# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Service registration records for the ddd_common container.

``ServiceRegistration`` tracks one resolvable key; ``OpenGenericRegistration``
tracks an open generic interface that is closed on demand.
"""

from __future__ import annotations

import inspect
from collections.abc import Hashable, Sequence
from typing import Any, Generic, TypeVar, get_origin

from ddd_common.di.errors import RegistrationError
from ddd_common.di.interception import InterceptorReference
from ddd_common.di.lifetime import REQUEST_SCOPE_TAG, Lifetime
from ddd_common.di.lifetime_policies import LIFETIME_POLICY_MAP

T = TypeVar("T")

_NO_INSTANCE = object()


def is_constructible(implementation: Any) -> bool:
    """True for classes and closed generic aliases of classes."""
    return isinstance(implementation, type) or isinstance(
        get_origin(implementation), type
    )


class ServiceRegistration(Generic[T]):
    """Represents a service registration in the DI container.

    A registration contains the interface key, its implementation (a class,
    a closed generic alias, a factory taking the resolving scope, or a
    prebuilt instance), the lifetime and lifetime data, and interceptors.
    """

    def __init__(
        self,
        interface: Any,
        implementation: Any,
        lifetime: Lifetime,
        tags: Sequence[Hashable] = (),
        owned: Any = None,
        interceptors: Sequence[InterceptorReference] = (),
        instance: Any = _NO_INSTANCE,
    ) -> None:
        lifetime = Lifetime(lifetime)
        if lifetime is Lifetime.INSTANCE_PER_REQUEST:
            tags = (REQUEST_SCOPE_TAG,)
        elif lifetime is Lifetime.INSTANCE_PER_MATCHING_LIFETIME_SCOPE and not tags:
            raise RegistrationError(
                "INSTANCE_PER_MATCHING_LIFETIME_SCOPE requires at least one scope tag",
                service_type=str(interface),
            )
        elif lifetime is Lifetime.INSTANCE_PER_OWNED and owned is None:
            raise RegistrationError(
                "INSTANCE_PER_OWNED requires an owned type",
                service_type=str(interface),
            )

        self.interface = interface
        self.implementation = implementation
        self.lifetime = lifetime
        self.tags: tuple[Hashable, ...] = tuple(tags)
        self.owned = owned
        self.interceptors: tuple[InterceptorReference, ...] = tuple(interceptors)
        self.lifetime_policy = LIFETIME_POLICY_MAP[lifetime]
        self._instance = instance

    @classmethod
    def for_instance(cls, interface: Any, instance: Any) -> ServiceRegistration[Any]:
        """Registration for an already-built singleton instance."""
        return cls(interface, type(instance), Lifetime.SINGLE_INSTANCE, instance=instance)

    @property
    def has_instance(self) -> bool:
        return self._instance is not _NO_INSTANCE

    @property
    def instance(self) -> Any:
        return self._instance

    @property
    def is_factory(self) -> bool:
        """True if the implementation is a factory rather than a constructible type."""
        return not self.has_instance and not is_constructible(self.implementation)

    @property
    def is_async_factory(self) -> bool:
        if not self.is_factory:
            return False
        return inspect.iscoroutinefunction(self.implementation)

    def __repr__(self) -> str:
        return (
            f"ServiceRegistration({self.interface!r}, {self.implementation!r}, "
            f"{self.lifetime.value})"
        )


class OpenGenericRegistration:
    """Maps an open generic interface to an open generic implementation."""

    def __init__(
        self,
        open_interface: type[Any],
        open_implementation: type[Any],
        lifetime: Lifetime,
        tags: Sequence[Hashable] = (),
        owned: Any = None,
        interceptors: Sequence[InterceptorReference] = (),
    ) -> None:
        if not getattr(open_implementation, "__parameters__", ()):
            raise RegistrationError(
                f"{open_implementation.__qualname__} is not an open generic type",
                service_type=open_interface.__qualname__,
            )
        self.open_interface = open_interface
        self.open_implementation = open_implementation
        self.lifetime = Lifetime(lifetime)
        self.tags = tuple(tags)
        self.owned = owned
        self.interceptors = tuple(interceptors)

    def close(self, interface: Any, type_args: tuple[Any, ...]) -> ServiceRegistration[Any]:
        """Build the registration for one closed parameterisation."""
        expected = len(self.open_implementation.__parameters__)
        if len(type_args) != expected:
            raise RegistrationError(
                f"{self.open_implementation.__qualname__} takes {expected} type "
                f"argument(s), got {len(type_args)}",
                service_type=str(interface),
            )
        return ServiceRegistration(
            interface,
            self.open_implementation[type_args],
            self.lifetime,
            tags=self.tags,
            owned=self.owned,
            interceptors=self.interceptors,
        )
