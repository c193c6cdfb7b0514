# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Registration decorators read by module scanning.

Decorator data is stored in the decorated class's own ``__dict__`` so it is
never inherited by subclasses.

Example:
    ```python
    @register_service
    @register_as(GreeterProtocol)
    @lifetime(Lifetime.SINGLE_INSTANCE)
    @enable_interception
    @intercepted_by(TimingInterceptor, is_async=True)
    class Greeter: ...
    ```
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Hashable
from typing import Any, TypeVar

from ddd_common.di.interception import InterceptorReference
from ddd_common.di.lifetime import Lifetime
from ddd_common.errors import ensure_not_none

C = TypeVar("C", bound=type)

_ATTRIBUTE_KEY = "__ddd_registration_attributes__"


@dataclasses.dataclass
class RegistrationAttributes:
    """Registration data attached to one class."""

    lifetime: Lifetime | None = None
    tags: tuple[Hashable, ...] = ()
    owned: Any = None
    register_as: tuple[Any, ...] = ()
    enable_interception: bool = False
    intercepted_by: list[InterceptorReference] = dataclasses.field(default_factory=list)
    register_service: bool = False

    @property
    def interceptors(self) -> tuple[InterceptorReference, ...]:
        """Interceptors that apply; they only apply when interception is enabled."""
        if not self.enable_interception:
            return ()
        return tuple(self.intercepted_by)


def get_attributes(cls: type) -> RegistrationAttributes | None:
    """Return the attributes declared on ``cls`` itself (never inherited)."""
    return cls.__dict__.get(_ATTRIBUTE_KEY)


def _own_attributes(cls: type) -> RegistrationAttributes:
    attributes = cls.__dict__.get(_ATTRIBUTE_KEY)
    if attributes is None:
        attributes = RegistrationAttributes()
        setattr(cls, _ATTRIBUTE_KEY, attributes)
    return attributes


def lifetime(
    scope: Lifetime, *tags: Hashable, owned: Any = None
) -> Callable[[C], C]:
    """Set the lifetime the class is registered with."""

    def decorator(cls: C) -> C:
        attributes = _own_attributes(cls)
        attributes.lifetime = Lifetime(scope)
        attributes.tags = tuple(tags)
        attributes.owned = owned
        return cls

    return decorator


def register_as(*interfaces: Any) -> Callable[[C], C]:
    """Register the class as each of ``interfaces`` instead of as itself."""

    def decorator(cls: C) -> C:
        attributes = _own_attributes(cls)
        attributes.register_as = attributes.register_as + tuple(interfaces)
        return cls

    return decorator


def enable_interception(cls: C) -> C:
    """Allow ``intercepted_by`` interceptors to wrap the class."""
    _own_attributes(cls).enable_interception = True
    return cls


def intercepted_by(interceptor: type[Any], is_async: bool = False) -> Callable[[C], C]:
    """Add an interceptor; stacked decorators run top to bottom."""
    ensure_not_none(interceptor, "interceptor")

    def decorator(cls: C) -> C:
        _own_attributes(cls).intercepted_by.insert(
            0, InterceptorReference(interceptor, is_async)
        )
        return cls

    return decorator


def register_service(cls: C) -> C:
    """Mark the class for attribute-based registration."""
    _own_attributes(cls).register_service = True
    return cls
