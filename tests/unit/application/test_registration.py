# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from ddd_common.application import (
    ApplicationConfiguration,
    CrudDataService,
    CrudDataServiceProtocol,
    DataInterceptorConfiguration,
    ReadOnlyDataServiceProtocol,
    ServiceRegistrationConfiguration,
    add_application_layer,
)
from ddd_common.commands import CommandHandlerFactory
from ddd_common.config import ApplicationSettings
from ddd_common.data_access import add_data_access_layer, create_schema
from ddd_common.di import (
    Container,
    InterceptionProxy,
    InterceptorReference,
    Invocation,
    Lifetime,
    RegistrationError,
    UnsupportedLifetimeError,
)
from ddd_common.mapping import Mapper

from tests.conftest import MEMORY_DATABASE_URL
from tests.fixtures.shop.clock import CallRecorder, ClockProtocol, Greeter, SystemClock
from tests.fixtures.shop.handlers import CreateProduct, GetProductPrice
from tests.fixtures.shop.models import Category, Product
from tests.fixtures.shop.services import ProductService, ProductServiceProtocol

SHOP = ["tests.fixtures.shop"]


class MethodLog:
    calls: list[str] = []

    def intercept(self, invocation: Invocation) -> Any:
        MethodLog.calls.append(invocation.method_name)
        return invocation.proceed()


async def _shop_container(configure=None, settings=None) -> Container:
    settings = settings or ApplicationSettings(database_url=MEMORY_DATABASE_URL)
    container = Container()
    await add_data_access_layer(container, settings)
    await add_application_layer(container, configure, modules=SHOP)
    await create_schema(await container.resolve(AsyncEngine))
    return container


@pytest.fixture
async def container():
    container = await _shop_container()
    yield container
    await container.dispose()


def test_data_interceptor_configuration_targets():
    assert DataInterceptorConfiguration.CRUD_AND_READ_ONLY.applies_to_crud
    assert DataInterceptorConfiguration.CRUD_AND_READ_ONLY.applies_to_read_only
    assert DataInterceptorConfiguration.CRUD.applies_to_crud
    assert not DataInterceptorConfiguration.CRUD.applies_to_read_only
    assert not DataInterceptorConfiguration.READ_ONLY.applies_to_crud
    assert DataInterceptorConfiguration.READ_ONLY.applies_to_read_only


def test_first_interceptor_configuration_is_kept():
    config = ServiceRegistrationConfiguration()
    config.add_data_service_interceptor(MethodLog, DataInterceptorConfiguration.CRUD)
    config.add_data_service_interceptor(MethodLog, DataInterceptorConfiguration.READ_ONLY)

    assert config.interceptors_for(crud=True) == (InterceptorReference(MethodLog),)
    assert config.interceptors_for(crud=False) == ()


@pytest.mark.asyncio
async def test_custom_data_service_is_registered_under_its_interfaces(container):
    async with container.create_scope() as scope:
        crud = await scope.resolve(CrudDataServiceProtocol[Product])
        custom = await scope.resolve(ProductServiceProtocol)
        assert isinstance(crud, ProductService)
        assert isinstance(custom, ProductService)
        assert isinstance(await scope.resolve(ProductService), ProductService)
        assert crud is await scope.resolve(CrudDataServiceProtocol[Product])


@pytest.mark.asyncio
async def test_generic_data_service_is_used_without_a_custom_one(container):
    async with container.create_scope() as scope:
        categories = await scope.resolve(CrudDataServiceProtocol[Category])
        assert type(categories) is CrudDataService
        assert categories.entity_type is Category
        assert await scope.resolve(ReadOnlyDataServiceProtocol[Category]) is not None


@pytest.mark.asyncio
async def test_mapper_is_built_from_scanned_profiles(container):
    mapper = await container.resolve(Mapper)
    assert await container.resolve(Mapper) is mapper


@pytest.mark.asyncio
async def test_attribute_services_are_registered(container):
    clock = await container.resolve(ClockProtocol)
    assert isinstance(clock, SystemClock)
    assert await container.resolve(ClockProtocol) is clock
    assert container.get_registration(ClockProtocol).lifetime is Lifetime.SINGLE_INSTANCE


@pytest.mark.asyncio
async def test_attribute_service_interceptors_apply(container):
    CallRecorder.calls.clear()
    async with container.create_scope() as scope:
        greeter = await scope.resolve(Greeter)
        assert isinstance(greeter, InterceptionProxy)
        assert greeter.greet("Ada") == "Hello, Ada"
    assert CallRecorder.calls == ["greet"]


@pytest.mark.asyncio
async def test_command_handlers_run_end_to_end(container):
    async with container.create_scope() as scope:
        factory = await scope.resolve(CommandHandlerFactory)
        create = await factory.get_handler_for(CreateProduct)
        assert (await create.handle(CreateProduct(name="Lamp", price=40))).is_success

        products = await scope.resolve(ProductServiceProtocol)
        [lamp] = (await products.get_priced_above(0)).unwrap()
        price = await factory.get_handler_for(GetProductPrice, int)
        assert (await price.handle(GetProductPrice(product_id=lamp.id))).unwrap() == 40


@pytest.mark.asyncio
async def test_data_service_interceptors_follow_their_configuration():
    MethodLog.calls.clear()
    container = await _shop_container(
        lambda app: app.add_data_services(
            lambda services: services.add_data_service_interceptor(
                MethodLog, DataInterceptorConfiguration.READ_ONLY
            )
        )
    )
    async with container.use():
        async with container.create_scope() as scope:
            read_only = await scope.resolve(ReadOnlyDataServiceProtocol[Category])
            crud = await scope.resolve(CrudDataServiceProtocol[Category])
            assert isinstance(read_only, InterceptionProxy)
            assert not isinstance(crud, InterceptionProxy)

            assert (await read_only.long_count()).unwrap() == 0
            await crud.long_count()
    assert MethodLog.calls == ["long_count"]


@pytest.mark.asyncio
async def test_modules_default_to_settings_scan_modules():
    settings = ApplicationSettings(database_url=MEMORY_DATABASE_URL, scan_modules=SHOP)
    container = Container()
    await add_data_access_layer(container, settings)
    await add_application_layer(container)
    async with container.use():
        assert await container.has_registration(ProductServiceProtocol)


@pytest.mark.asyncio
async def test_non_bulk_default_lifetime_is_rejected():
    settings = ApplicationSettings(
        database_url=MEMORY_DATABASE_URL,
        default_service_lifetime=Lifetime.INSTANCE_PER_OWNED,
    )
    container = Container()
    with pytest.raises(UnsupportedLifetimeError):
        await add_application_layer(container, modules=SHOP, settings=settings)


@pytest.mark.asyncio
async def test_add_interceptor_registers_classes_and_annotated_factories():
    def make_log(scope) -> MethodLog:
        return MethodLog()

    container = Container()
    config = ApplicationConfiguration(container)
    config.add_interceptor(CallRecorder).add_interceptor(make_log)
    await config.register()

    assert isinstance(await container.resolve(MethodLog), MethodLog)
    registration = container.get_registration(CallRecorder)
    assert registration.lifetime is Lifetime.INSTANCE_PER_DEPENDENCY


def test_add_interceptor_needs_a_type_for_unannotated_factories():
    config = ApplicationConfiguration(Container())
    with pytest.raises(RegistrationError):
        config.add_interceptor(lambda scope: MethodLog())
    config.add_interceptor(lambda scope: MethodLog(), interceptor_type=MethodLog)
