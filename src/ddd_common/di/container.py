# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
DI container implementation for ddd_common.

This module implements the async container that provides service
registration and resolution with constructor injection, open generic
registrations, tagged/owned lifetime scopes and interception.
"""

from __future__ import annotations

import contextlib
import contextvars
import inspect
import types
import typing
from collections.abc import AsyncGenerator, Awaitable, Callable, Hashable, Sequence
from typing import Any, TypeVar, Union, get_args, get_origin

from ddd_common.di.disposal import _DisposalManager, is_disposable
from ddd_common.di.errors import (
    CircularDependencyError,
    ContainerDisposedError,
    DIError,
    DuplicateRegistrationError,
    ServiceCreationError,
    ServiceNotRegisteredError,
)
from ddd_common.di.interception import (
    AsyncInterceptorAdapter,
    InterceptorReference,
    create_proxy,
)
from ddd_common.di.lifetime import Lifetime
from ddd_common.di.protocols import ContainerProtocol, ScopeProtocol
from ddd_common.di.registration import OpenGenericRegistration, ServiceRegistration
from ddd_common.di.resolution import Owned, Scope
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger

T = TypeVar("T")

# Context variable for dependency chain tracking (per-task/async context)
_DI_DEPENDENCY_CHAIN: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "_DI_DEPENDENCY_CHAIN", default=()
)


def _key_name(key: Any) -> str:
    if get_origin(key) is not None:
        return repr(key).replace("typing.", "")
    return getattr(key, "__qualname__", None) or str(key)


def _optional_inner(hint: Any) -> Any | None:
    """Return ``X`` for ``X | None`` / ``Optional[X]``, else None."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1 and len(get_args(hint)) == 2:
            return args[0]
    return None


class Container:
    """Dependency Injection container for managing service lifetimes.

    Lifetimes:
    - SINGLE_INSTANCE: one instance per container, cached on the root scope
    - INSTANCE_PER_LIFETIME_SCOPE: one instance per (non-root) scope
    - INSTANCE_PER_REQUEST / INSTANCE_PER_MATCHING_LIFETIME_SCOPE: one instance
      per nearest scope carrying a matching tag
    - INSTANCE_PER_OWNED: one instance per owned resolution of a given type
    - INSTANCE_PER_DEPENDENCY: new instance per resolution

    Attributes:
        _root: Scope
            The root scope; holds singletons.
        _registrations: dict[Any, ServiceRegistration]
            Service keys (types or closed generic aliases) to registrations.
        _generic_registrations: dict[type, OpenGenericRegistration]
            Open generic interfaces to their open implementations.
    """

    def __init__(self) -> None:
        self._root: Scope = Scope(self)
        self._registrations: dict[Any, ServiceRegistration[Any]] = {}
        self._generic_registrations: dict[type, OpenGenericRegistration] = {}
        self._closed_keys: set[Any] = set()
        self._disposal_manager = _DisposalManager()
        self._disposed: bool = False
        self._logger = get_logger(__name__)

    @classmethod
    async def create(
        cls, configurator: Callable[[Container], Awaitable[None]]
    ) -> Container:
        """Create and configure a new container.

        Example:
            ```python
            async def configure(c: Container) -> None:
                await c.register_singleton(Mapper, Mapper)
                await add_data_access_layer(c, settings)

            container = await Container.create(configure)
            ```
        """
        container = cls()
        try:
            await configurator(container)
        except BaseException:
            await container.dispose()
            raise
        return container

    def _check_not_disposed(self, operation: str) -> None:
        """Check if the container is disposed and raise an error if it is."""
        if self._disposed:
            raise ContainerDisposedError(operation)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register_singleton(
        self, interface: Any, implementation: Any = None, replace: bool = False
    ) -> None:
        await self.register(
            interface, implementation, Lifetime.SINGLE_INSTANCE, replace=replace
        )

    async def register_scoped(
        self, interface: Any, implementation: Any = None, replace: bool = False
    ) -> None:
        await self.register(
            interface,
            implementation,
            Lifetime.INSTANCE_PER_LIFETIME_SCOPE,
            replace=replace,
        )

    async def register_transient(
        self, interface: Any, implementation: Any = None, replace: bool = False
    ) -> None:
        await self.register(
            interface, implementation, Lifetime.INSTANCE_PER_DEPENDENCY, replace=replace
        )

    async def register(
        self,
        interface: Any,
        implementation: Any = None,
        lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE,
        tags: Sequence[Hashable] = (),
        owned: Any = None,
        interceptors: Sequence[InterceptorReference] = (),
        replace: bool = False,
    ) -> None:
        """Register ``implementation`` (defaults to ``interface`` itself).

        ``implementation`` may be a class, a closed generic alias, or a
        factory called with the resolving scope (sync or async).

        Raises:
            DuplicateRegistrationError: If already registered and not ``replace``
            RegistrationError: If the lifetime data is missing
        """
        self._check_not_disposed("register")
        ensure_not_none(interface, "interface")
        registration = ServiceRegistration(
            interface,
            interface if implementation is None else implementation,
            lifetime,
            tags=tags,
            owned=owned,
            interceptors=interceptors,
        )
        self._add_registration(registration, replace)

    async def register_instance(
        self, interface: Any, instance: Any, replace: bool = False
    ) -> None:
        """Register an existing object as a singleton."""
        self._check_not_disposed("register_instance")
        ensure_not_none(interface, "interface")
        ensure_not_none(instance, "instance")
        self._add_registration(ServiceRegistration.for_instance(interface, instance), replace)

    async def register_generic(
        self,
        open_interface: type[Any],
        open_implementation: type[Any],
        lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE,
        tags: Sequence[Hashable] = (),
        owned: Any = None,
        interceptors: Sequence[InterceptorReference] = (),
        replace: bool = False,
    ) -> None:
        """Register an open generic implementation.

        Resolving ``open_interface[X]`` builds ``open_implementation[X]``
        unless ``open_interface[X]`` has an explicit registration.
        """
        self._check_not_disposed("register_generic")
        ensure_not_none(open_interface, "open_interface")
        ensure_not_none(open_implementation, "open_implementation")
        registration = OpenGenericRegistration(
            open_interface,
            open_implementation,
            lifetime,
            tags=tags,
            owned=owned,
            interceptors=interceptors,
        )
        if open_interface in self._generic_registrations:
            if not replace:
                raise DuplicateRegistrationError(open_interface)
            for key in [k for k in self._closed_keys if get_origin(k) is open_interface]:
                self._forget(key)
        self._generic_registrations[open_interface] = registration
        self._logger.debug(
            "Registered open generic service",
            interface=_key_name(open_interface),
            implementation=_key_name(open_implementation),
            lifetime=registration.lifetime.value,
        )

    def _add_registration(
        self, registration: ServiceRegistration[Any], replace: bool
    ) -> None:
        key = registration.interface
        if key in self._registrations:
            if not replace:
                raise DuplicateRegistrationError(key)
            self._forget(key)
        self._registrations[key] = registration
        self._logger.debug(
            "Registered service",
            interface=_key_name(key),
            implementation=_key_name(registration.implementation),
            lifetime=registration.lifetime.value,
        )

    def _forget(self, key: Any) -> None:
        """Drop a registration and any instance cached for it."""
        self._registrations.pop(key, None)
        self._closed_keys.discard(key)
        self._forget_cached(self._root, key)

    def _forget_cached(self, scope: Scope, key: Any) -> None:
        scope._services.pop(key, None)
        for child in scope._scopes:
            self._forget_cached(child, key)

    async def has_registration(self, interface: Any) -> bool:
        """Check if a service is registered, directly or as an open generic."""
        return self._find_registration(interface) is not None

    def has_explicit_registration(self, interface: Any) -> bool:
        """True if ``interface`` itself was registered, not via an open generic."""
        return interface in self._registrations and interface not in self._closed_keys

    def _find_registration(self, interface: Any) -> ServiceRegistration[Any] | None:
        registration = self._registrations.get(interface)
        if registration is not None:
            return registration
        origin = get_origin(interface)
        if origin is None:
            return None
        open_registration = self._generic_registrations.get(origin)
        if open_registration is None:
            return None
        registration = open_registration.close(interface, get_args(interface))
        self._registrations[interface] = registration
        self._closed_keys.add(interface)
        return registration

    async def get_registration_keys(self) -> list[str]:
        """Get all registered service keys.

        Returns:
            The names of registered services and open generic interfaces.
        """
        self._check_not_disposed("get_registration_keys")
        keys = [_key_name(k) for k in self._registrations]
        keys.extend(f"{_key_name(k)}[...]" for k in self._generic_registrations)
        return keys

    def get_registration(self, interface: Any) -> ServiceRegistration[Any] | None:
        """Return the registration that resolves ``interface``, if any."""
        return self._find_registration(interface)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, interface: type[T] | Any) -> T:
        """Resolve a service instance from the root scope.

        Raises:
            ScopeError: If resolving a scoped service outside of a scope
            ServiceNotRegisteredError: If the service is not registered
            CircularDependencyError: If a circular dependency is detected
        """
        return await self._resolve(interface, self._root)

    async def resolve_optional(self, interface: type[T] | Any) -> T | None:
        """Resolve a service instance or return None if not registered."""
        self._check_not_disposed("resolve_optional")
        if self._find_registration(interface) is None:
            return None
        return await self._resolve(interface, self._root)

    async def resolve_owned(self, interface: type[T] | Any) -> Owned[T]:
        """Resolve ``interface`` in a new owned child scope of the root."""
        self._check_not_disposed("resolve_owned")
        return await self._root.resolve_owned(interface)

    @contextlib.asynccontextmanager
    async def create_scope(
        self, tag: Hashable | None = None
    ) -> AsyncGenerator[Scope, None]:
        """Create a new scope for scoped services.

        Example:
            ```python
            async with container.create_scope() as scope:
                service = await scope.resolve(CrudDataServiceProtocol[Product])
            # Scope is automatically disposed here
            ```
        """
        self._check_not_disposed("create_scope")
        scope = self._root.create_scope(tag)
        try:
            yield scope
        finally:
            await scope.dispose()

    async def _resolve(self, interface: Any, scope: Scope) -> Any:
        self._check_not_disposed("resolve")
        registration = self._find_registration(interface)
        if registration is None:
            raise ServiceNotRegisteredError(interface)

        name = _key_name(interface)
        dependency_chain = _DI_DEPENDENCY_CHAIN.get()
        if name in dependency_chain:
            raise CircularDependencyError(list(dependency_chain) + [name])

        token = _DI_DEPENDENCY_CHAIN.set(dependency_chain + (name,))
        try:
            if registration.has_instance:
                return registration.instance

            policy = registration.lifetime_policy
            target = policy.target_scope(registration, scope)

            async def factory() -> Any:
                instance = await self._create_instance(registration, interface, target)
                if is_disposable(instance):
                    target.track(instance)
                return instance

            return await policy.get_instance(target, factory, interface)
        finally:
            _DI_DEPENDENCY_CHAIN.reset(token)

    async def _create_instance(
        self, registration: ServiceRegistration[Any], interface: Any, scope: Scope
    ) -> Any:
        implementation = registration.implementation
        if registration.is_factory:
            try:
                instance = implementation(scope)
                if inspect.isawaitable(instance):
                    instance = await instance
            except DIError:
                raise
            except Exception as exc:
                raise ServiceCreationError(interface, exc) from exc
        else:
            instance = await self._construct(implementation, interface, scope)

        if registration.interceptors:
            instance = await self._apply_interceptors(
                instance, registration.interceptors, scope
            )
        self._logger.debug(
            "Created service",
            interface=_key_name(interface),
            lifetime=registration.lifetime.value,
            scope=scope.id[:8],
        )
        return instance

    async def _construct(self, implementation: Any, interface: Any, scope: Scope) -> Any:
        """Build ``implementation`` with constructor injection."""
        cls = get_origin(implementation) or implementation
        init = cls.__init__
        try:
            hints = typing.get_type_hints(init)
        except (NameError, TypeError) as exc:
            raise ServiceCreationError(interface, exc) from exc

        kwargs: dict[str, Any] = {}
        parameters = list(inspect.signature(init).parameters.values())[1:]
        for parameter in parameters:
            if parameter.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                continue
            hint = hints.get(parameter.name)
            has_default = parameter.default is not inspect.Parameter.empty
            if hint is None:
                if has_default:
                    continue
                raise ServiceCreationError(
                    interface,
                    TypeError(f"parameter '{parameter.name}' has no type annotation"),
                )
            value = await self._resolve_dependency(hint, has_default, scope)
            if value is not _SKIP:
                kwargs[parameter.name] = value

        try:
            return implementation(**kwargs)
        except DIError:
            raise
        except Exception as exc:
            raise ServiceCreationError(interface, exc) from exc

    async def _resolve_dependency(self, hint: Any, has_default: bool, scope: Scope) -> Any:
        if hint in (ScopeProtocol, Scope):
            return scope
        if hint in (ContainerProtocol, Container):
            return self
        inner = _optional_inner(hint)
        if inner is not None:
            if self._find_registration(inner) is None:
                return _SKIP if has_default else None
            return await self._resolve(inner, scope)
        if has_default and self._find_registration(hint) is None:
            return _SKIP
        return await self._resolve(hint, scope)

    async def _apply_interceptors(
        self,
        instance: Any,
        references: Sequence[InterceptorReference],
        scope: Scope,
    ) -> Any:
        interceptors: list[Any] = []
        for reference in references:
            if self._find_registration(reference.interceptor) is not None:
                interceptor = await self._resolve(reference.interceptor, scope)
            else:
                interceptor = await self._construct(
                    reference.interceptor, reference.interceptor, scope
                )
            if reference.is_async:
                interceptor = AsyncInterceptorAdapter(interceptor)
            interceptors.append(interceptor)
        return create_proxy(instance, interceptors)

    # ------------------------------------------------------------------
    # Disposal
    # ------------------------------------------------------------------

    async def dispose(self) -> None:
        """Dispose every scope and then the singleton services.

        After disposal, the container cannot be used and raises
        ContainerDisposedError.
        """
        if self._disposed:
            return
        self._disposed = True
        await self._root.dispose()
        self._logger.debug("Container disposed")

    @contextlib.asynccontextmanager
    async def use(self) -> AsyncGenerator[Container, None]:
        """Context manager that disposes the container on exit."""
        try:
            yield self
        finally:
            await self.dispose()


_SKIP = object()
