# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Application layer registration.

Example:
    ```python
    async def configure(container: Container) -> None:
        await add_data_access_layer(container, settings)
        await add_application_layer(
            container,
            lambda app: app.add_data_services(
                lambda services: services.add_data_service_interceptor(AuditInterceptor)
            ),
            modules=["shop"],
        )

    container = await Container.create(configure)
    ```
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol

from ddd_common.application.configuration import (
    AttributeRegistrationConfiguration,
    ServiceRegistrationConfiguration,
)
from ddd_common.application.services import (
    CrudDataService,
    CrudDataServiceProtocol,
    ReadOnlyDataService,
    ReadOnlyDataServiceProtocol,
)
from ddd_common.commands import CommandHandlerConfiguration, add_command_handlers
from ddd_common.commands.registration import handler_interfaces_of
from ddd_common.config import ApplicationSettings
from ddd_common.di import (
    Container,
    Lifetime,
    RegistrationAttributes,
    RegistrationError,
    UnsupportedLifetimeError,
    get_attributes,
)
from ddd_common.di.scanning import (
    ModuleRef,
    closed_interfaces_of,
    is_concrete,
    is_open_generic,
    iter_classes,
)
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger
from ddd_common.mapping import Mapper

logger = get_logger(__name__)

_GENERIC_DATA_SERVICES = (ReadOnlyDataService, CrudDataService)
_DATA_SERVICE_PROTOCOLS = (ReadOnlyDataServiceProtocol, CrudDataServiceProtocol)


def _bulk_lifetime(lifetime: Lifetime) -> Lifetime:
    lifetime = Lifetime(lifetime)
    if not lifetime.supports_bulk_registration:
        raise UnsupportedLifetimeError(lifetime)
    return lifetime


def _lifetime_of(attributes: RegistrationAttributes | None, default: Lifetime) -> Lifetime:
    if attributes is not None and attributes.lifetime is not None:
        return attributes.lifetime
    return _bulk_lifetime(default)


def is_data_service(cls: type) -> bool:
    """True for concrete subclasses of the generic data services."""
    return (
        is_concrete(cls)
        and issubclass(cls, ReadOnlyDataService)
        and cls not in _GENERIC_DATA_SERVICES
    )


def data_service_interfaces_of(cls: type) -> list[Any]:
    """Closed data service protocols and custom protocols ``cls`` implements."""
    interfaces: list[Any] = []
    for protocol in _DATA_SERVICE_PROTOCOLS:
        interfaces.extend(closed_interfaces_of(cls, protocol))
    for base in cls.__mro__[1:]:
        if (
            Protocol in base.__bases__
            and base not in _DATA_SERVICE_PROTOCOLS
            and not is_open_generic(base)
        ):
            interfaces.append(base)
    return interfaces


async def add_data_services(
    container: Container,
    modules: Iterable[ModuleRef],
    config: ServiceRegistrationConfiguration,
) -> None:
    """Register the mapper, the generic data services and custom data services.

    Custom data services are registered as themselves, under any custom
    protocol they implement, and under the closed data service protocols they
    implement unless those are already registered.
    """
    modules = list(modules)
    if not await container.has_registration(Mapper):
        await container.register_instance(Mapper, Mapper.from_modules(modules))

    base_lifetime = _bulk_lifetime(config.base_generic_data_service_lifetime)
    await container.register_generic(
        ReadOnlyDataServiceProtocol,
        ReadOnlyDataService,
        base_lifetime,
        interceptors=config.interceptors_for(crud=False),
    )
    await container.register_generic(
        CrudDataServiceProtocol,
        CrudDataService,
        base_lifetime,
        interceptors=config.interceptors_for(crud=True),
    )

    for cls in iter_classes(modules):
        if not is_data_service(cls):
            continue
        attributes = get_attributes(cls)
        lifetime = _lifetime_of(attributes, config.data_service_lifetime)
        interceptors = config.interceptors_for(crud=issubclass(cls, CrudDataService))
        if attributes is not None:
            interceptors = attributes.interceptors + interceptors
        options = {
            "tags": attributes.tags if attributes else (),
            "owned": attributes.owned if attributes else None,
            "interceptors": interceptors,
        }
        await container.register(cls, cls, lifetime, **options)
        for interface in data_service_interfaces_of(cls):
            if container.has_explicit_registration(interface):
                logger.debug(
                    "Data service interface already registered",
                    interface=repr(interface),
                    service=cls.__qualname__,
                )
                continue
            await container.register(interface, cls, lifetime, replace=True, **options)
        logger.debug("Data service registered", service=cls.__qualname__)


def is_attribute_service(cls: type) -> bool:
    attributes = get_attributes(cls)
    return (
        attributes is not None
        and attributes.register_service
        and is_concrete(cls)
        and not is_data_service(cls)
        and not handler_interfaces_of(cls)
    )


async def add_attribute_services(
    container: Container,
    modules: Iterable[ModuleRef],
    config: AttributeRegistrationConfiguration,
) -> None:
    """Register every ``register_service`` class found in ``modules``.

    A class is registered under each ``register_as`` interface, or as itself
    when it names none. Data services and command handlers are left to their
    own registration.
    """
    for cls in iter_classes(modules):
        attributes = get_attributes(cls)
        if attributes is None or not is_attribute_service(cls):
            continue
        lifetime = _lifetime_of(attributes, config.default_lifetime)
        for interface in attributes.register_as or (cls,):
            await container.register(
                interface,
                cls,
                lifetime,
                tags=attributes.tags,
                owned=attributes.owned,
                interceptors=attributes.interceptors,
            )
        logger.debug(
            "Attribute service registered",
            service=cls.__qualname__,
            lifetime=lifetime.value,
        )


InterceptorFactory = Callable[..., Any]


class ApplicationConfiguration:
    """Fluent configuration of the application layer.

    Nothing is registered until ``register()`` is awaited.
    """

    def __init__(
        self,
        container: Container,
        modules: Sequence[ModuleRef] = (),
        settings: ApplicationSettings | None = None,
    ) -> None:
        ensure_not_none(container, "container")
        self.container = container
        self.modules: list[ModuleRef] = list(modules)
        self.settings = settings
        self._interceptors: list[tuple[Any, InterceptorFactory]] = []
        self._data_services: ServiceRegistrationConfiguration | None = None
        self._command_handlers: CommandHandlerConfiguration | None = None
        self._attribute_services: AttributeRegistrationConfiguration | None = None

    def add_interceptor(
        self, factory: InterceptorFactory, interceptor_type: Any = None
    ) -> ApplicationConfiguration:
        """Register an interceptor (transient).

        ``factory`` is an interceptor class, or a callable taking the
        resolving scope; for a callable, the interceptor type is
        ``interceptor_type`` or the callable's return annotation.
        """
        ensure_not_none(factory, "factory")
        if interceptor_type is None:
            if inspect.isclass(factory):
                interceptor_type = factory
            else:
                interceptor_type = typing.get_type_hints(factory).get("return")
        if interceptor_type is None:
            raise RegistrationError(
                "Interceptor factories need a return annotation or an interceptor_type",
                factory=repr(factory),
            )
        self._interceptors.append((interceptor_type, factory))
        return self

    def add_data_services(
        self, configure: Callable[[ServiceRegistrationConfiguration], Any] | None = None
    ) -> ApplicationConfiguration:
        self._data_services = self._data_services or self._service_defaults()
        if configure is not None:
            configure(self._data_services)
        return self

    def add_command_handlers(
        self, configure: Callable[[CommandHandlerConfiguration], Any] | None = None
    ) -> ApplicationConfiguration:
        self._command_handlers = self._command_handlers or CommandHandlerConfiguration(
            self._handler_default_lifetime()
        )
        if configure is not None:
            configure(self._command_handlers)
        return self

    def add_attribute_services(
        self, configure: Callable[[AttributeRegistrationConfiguration], Any] | None = None
    ) -> ApplicationConfiguration:
        self._attribute_services = self._attribute_services or AttributeRegistrationConfiguration(
            self._service_defaults().data_service_lifetime
        )
        if configure is not None:
            configure(self._attribute_services)
        return self

    def _service_defaults(self) -> ServiceRegistrationConfiguration:
        if self.settings is None:
            return ServiceRegistrationConfiguration()
        return ServiceRegistrationConfiguration(
            base_generic_data_service_lifetime=self.settings.default_service_lifetime,
            data_service_lifetime=self.settings.default_service_lifetime,
        )

    def _handler_default_lifetime(self) -> Lifetime:
        if self.settings is None:
            return CommandHandlerConfiguration().default_lifetime
        return self.settings.default_command_handler_lifetime

    async def register(self) -> Container:
        """Register everything that was configured."""
        for interceptor_type, factory in self._interceptors:
            await self.container.register_transient(interceptor_type, factory)
        if self._data_services is not None:
            await add_data_services(self.container, self.modules, self._data_services)
        if self._command_handlers is not None:
            configured = self._command_handlers

            def apply(config: CommandHandlerConfiguration) -> None:
                config.default_lifetime = configured.default_lifetime

            await add_command_handlers(self.container, self.modules, apply)
        if self._attribute_services is not None:
            await add_attribute_services(
                self.container, self.modules, self._attribute_services
            )
        logger.debug(
            "Application layer registered",
            modules=[getattr(m, "__name__", m) for m in self.modules],
        )
        return self.container


async def add_application_layer(
    container: Container,
    configure: Callable[[ApplicationConfiguration], Any] | None = None,
    modules: Sequence[ModuleRef] | None = None,
    settings: ApplicationSettings | None = None,
) -> Container:
    """Register data services, the mapper, command handlers and attribute services.

    ``modules`` defaults to the settings' ``scan_modules``. ``configure``
    receives the ``ApplicationConfiguration`` before registration and may
    adjust any part of it.
    """
    ensure_not_none(container, "container")
    if settings is None:
        settings = await container.resolve_optional(ApplicationSettings)
    if modules is None:
        modules = settings.scan_modules if settings is not None else ()

    config = ApplicationConfiguration(container, modules, settings)
    config.add_data_services().add_command_handlers().add_attribute_services()
    if configure is not None:
        configure(config)
    return await config.register()
