# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Dependency injection for ddd_common.

Provides an async container with lifetime scopes, open generic
registrations, decorator-driven registration data, module scanning and
method interception.
"""

from __future__ import annotations

from ddd_common.di.attributes import (
    RegistrationAttributes,
    enable_interception,
    get_attributes,
    intercepted_by,
    lifetime,
    register_as,
    register_service,
)
from ddd_common.di.container import Container
from ddd_common.di.errors import (
    CircularDependencyError,
    ContainerDisposedError,
    DIError,
    DuplicateRegistrationError,
    RegistrationError,
    ScopeDisposedError,
    ScopeError,
    ServiceCreationError,
    ServiceNotRegisteredError,
    UnsupportedLifetimeError,
)
from ddd_common.di.interception import (
    AsyncInterceptor,
    AsyncInterceptorAdapter,
    InterceptionProxy,
    Interceptor,
    InterceptorReference,
    Invocation,
)
from ddd_common.di.lifetime import REQUEST_SCOPE_TAG, Lifetime
from ddd_common.di.protocols import ContainerProtocol, ScopeProtocol
from ddd_common.di.resolution import Owned, Scope
from ddd_common.di.scanning import closed_interfaces_of, is_concrete, iter_classes

__all__ = [
    "REQUEST_SCOPE_TAG",
    "AsyncInterceptor",
    "AsyncInterceptorAdapter",
    "CircularDependencyError",
    "Container",
    "ContainerDisposedError",
    "ContainerProtocol",
    "DIError",
    "DuplicateRegistrationError",
    "InterceptionProxy",
    "Interceptor",
    "InterceptorReference",
    "Invocation",
    "Lifetime",
    "Owned",
    "RegistrationAttributes",
    "RegistrationError",
    "Scope",
    "ScopeDisposedError",
    "ScopeError",
    "ScopeProtocol",
    "ServiceCreationError",
    "ServiceNotRegisteredError",
    "UnsupportedLifetimeError",
    "closed_interfaces_of",
    "enable_interception",
    "get_attributes",
    "intercepted_by",
    "is_concrete",
    "iter_classes",
    "lifetime",
    "register_as",
    "register_service",
]
