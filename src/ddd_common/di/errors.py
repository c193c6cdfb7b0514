# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Error classes for the ddd_common DI system.

Every DI error code is prefixed with ``DI_`` and registered under the ``DI``
category.
"""

from __future__ import annotations

from typing import Any, Final

from ddd_common.errors import DddError, ErrorSeverity

ERROR_CODE_PREFIX: Final[str] = "DI"


def _type_name(service_type: Any) -> str:
    return getattr(service_type, "__qualname__", None) or str(service_type)


class DIError(DddError):
    """Base class for all DI-related errors."""

    category_name = "DI"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        **context: Any,
    ) -> None:
        super().__init__(
            message,
            code=f"{ERROR_CODE_PREFIX}_{code}" if code else f"{ERROR_CODE_PREFIX}_ERROR",
            severity=severity,
            context=context,
        )


class ServiceNotRegisteredError(DIError):
    """Raised when resolving a service that has no registration."""

    def __init__(self, service_type: Any, **context: Any) -> None:
        super().__init__(
            f"Service {_type_name(service_type)} is not registered",
            code="SERVICE_NOT_REGISTERED",
            service_type=_type_name(service_type),
            **context,
        )
        self.service_type = service_type


class DuplicateRegistrationError(DIError):
    """Raised when registering a service twice without ``replace=True``."""

    def __init__(self, service_type: Any, **context: Any) -> None:
        super().__init__(
            f"Service {_type_name(service_type)} is already registered",
            code="DUPLICATE_REGISTRATION",
            service_type=_type_name(service_type),
            **context,
        )
        self.service_type = service_type


class RegistrationError(DIError):
    """Raised for registrations that can never be resolved."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="REGISTRATION_ERROR", **context)


class UnsupportedLifetimeError(RegistrationError):
    """Raised when a lifetime can't be used as a bulk registration default."""

    def __init__(self, lifetime: Any, **context: Any) -> None:
        super().__init__(
            f"Lifetime {getattr(lifetime, 'name', lifetime)} is not supported here",
            lifetime=str(getattr(lifetime, "value", lifetime)),
            **context,
        )
        self.lifetime = lifetime


class ScopeError(DIError):
    """Raised when a service can't be resolved from the current scope chain."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="SCOPE_ERROR", **context)

    @classmethod
    def outside_scope(cls, service_type: Any) -> ScopeError:
        return cls(
            f"Cannot resolve scoped service {_type_name(service_type)} outside of a scope",
            service_type=_type_name(service_type),
        )

    @classmethod
    def no_matching_scope(cls, service_type: Any, tags: tuple[Any, ...]) -> ScopeError:
        return cls(
            f"No scope tagged with any of {list(map(str, tags))} is visible "
            f"when resolving {_type_name(service_type)}",
            service_type=_type_name(service_type),
            tags=[str(tag) for tag in tags],
        )


class ServiceCreationError(DIError):
    """Raised when constructing a service instance fails."""

    def __init__(
        self, service_type: Any, original_error: BaseException, **context: Any
    ) -> None:
        super().__init__(
            f"Failed to create service {_type_name(service_type)}: {original_error}",
            code="SERVICE_CREATION_FAILED",
            service_type=_type_name(service_type),
            original_error=repr(original_error),
            **context,
        )
        self.service_type = service_type
        self.original_error = original_error


class CircularDependencyError(DIError):
    """Raised when resolving a service requires itself."""

    def __init__(self, dependency_chain: list[str], **context: Any) -> None:
        super().__init__(
            f"Circular dependency detected: {' -> '.join(dependency_chain)}",
            code="CIRCULAR_DEPENDENCY",
            dependency_chain=dependency_chain,
            **context,
        )
        self.dependency_chain = dependency_chain


class ContainerDisposedError(DIError):
    """Raised when using a container after dispose()."""

    def __init__(self, operation: str, **context: Any) -> None:
        super().__init__(
            f"Cannot perform '{operation}': container is disposed",
            code="CONTAINER_DISPOSED",
            operation=operation,
            **context,
        )


class ScopeDisposedError(DIError):
    """Raised when using a scope after it has been disposed."""

    def __init__(self, operation: str, scope_id: str, **context: Any) -> None:
        super().__init__(
            f"Cannot perform '{operation}': scope {scope_id} is disposed",
            code="SCOPE_DISPOSED",
            operation=operation,
            scope_id=scope_id,
            **context,
        )
