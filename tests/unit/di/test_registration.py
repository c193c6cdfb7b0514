# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from typing import Generic, TypeVar

import pytest

from ddd_common.di import (
    Container,
    DuplicateRegistrationError,
    Lifetime,
    RegistrationError,
)
from ddd_common.di.registration import OpenGenericRegistration, ServiceRegistration

T = TypeVar("T")


class FakeService:
    pass


class Clock:
    pass


class Store(Generic[T]):
    pass


class MemoryStore(Store[T], Generic[T]):
    def __init__(self, clock: Clock):
        self.clock = clock


class StringStore(Store[str]):
    pass


def test_service_registration_properties():
    reg = ServiceRegistration(FakeService, FakeService, Lifetime.SINGLE_INSTANCE)
    assert reg.interface is FakeService
    assert reg.implementation is FakeService
    assert reg.lifetime is Lifetime.SINGLE_INSTANCE
    assert not reg.is_factory


def test_request_lifetime_gets_request_tag():
    reg = ServiceRegistration(FakeService, FakeService, "instance_per_request")
    assert reg.tags == ("request",)


def test_factory_registration_is_detected():
    async def make(scope):
        return FakeService()

    reg = ServiceRegistration(FakeService, make, Lifetime.INSTANCE_PER_DEPENDENCY)
    assert reg.is_factory
    assert reg.is_async_factory


def test_open_generic_requires_type_parameters():
    with pytest.raises(RegistrationError):
        OpenGenericRegistration(Store, StringStore, Lifetime.SINGLE_INSTANCE)


@pytest.mark.asyncio
async def test_register_services():
    container = Container()
    await container.register_singleton(FakeService, FakeService)
    assert await container.has_registration(FakeService)
    reg_keys = await container.get_registration_keys()
    assert "FakeService" in reg_keys
    await container.dispose()


@pytest.mark.asyncio
async def test_open_generic_resolution():
    container = Container()
    await container.register_singleton(Clock)
    await container.register_generic(Store, MemoryStore, Lifetime.SINGLE_INSTANCE)

    int_store = await container.resolve(Store[int])
    assert isinstance(int_store, MemoryStore)
    assert int_store.__orig_class__ == MemoryStore[int]
    assert int_store.clock is await container.resolve(Clock)
    assert await container.resolve(Store[int]) is int_store
    assert await container.resolve(Store[bytes]) is not int_store
    assert "Store[...]" in await container.get_registration_keys()


@pytest.mark.asyncio
async def test_closed_registration_wins_over_open_generic():
    container = Container()
    await container.register_singleton(Clock)
    await container.register_generic(Store, MemoryStore)
    await container.register_transient(Store[str], StringStore)

    assert container.has_explicit_registration(Store[str])
    assert not container.has_explicit_registration(Store[int])
    async with container.create_scope() as scope:
        assert isinstance(await scope.resolve(Store[str]), StringStore)
        assert isinstance(await scope.resolve(Store[int]), MemoryStore)
    assert not container.has_explicit_registration(Store[int])


@pytest.mark.asyncio
async def test_duplicate_open_generic_registration():
    container = Container()
    await container.register_generic(Store, MemoryStore)
    with pytest.raises(DuplicateRegistrationError):
        await container.register_generic(Store, MemoryStore)
    await container.register_generic(
        Store, MemoryStore, Lifetime.INSTANCE_PER_DEPENDENCY, replace=True
    )
    registration = container.get_registration(Store[int])
    assert registration.lifetime is Lifetime.INSTANCE_PER_DEPENDENCY
