# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
import pytest

from ddd_common.di import CircularDependencyError, Container


class ServiceA:
    def __init__(self, b: "ServiceB"):
        self.b = b


class ServiceB:
    def __init__(self, a: ServiceA):
        self.a = a


@pytest.mark.asyncio
async def test_circular_dependency_detection():
    container = Container()
    await container.register_singleton(ServiceA)
    await container.register_singleton(ServiceB)
    with pytest.raises(CircularDependencyError) as exc:
        await container.resolve(ServiceA)
    assert exc.value.dependency_chain == ["ServiceA", "ServiceB", "ServiceA"]


@pytest.mark.asyncio
async def test_circular_dependency_error_details():
    container = Container()

    async def factory_a(_):
        b = await container.resolve(ServiceB)
        return ServiceA(b)

    async def factory_b(_):
        a = await container.resolve(ServiceA)
        return ServiceB(a)

    await container.register_singleton(ServiceA, factory_a)
    await container.register_singleton(ServiceB, factory_b)
    with pytest.raises(CircularDependencyError) as exc:
        await container.resolve(ServiceA)
    err = exc.value
    assert "dependency_chain" in err.context
    assert err.code.code == "DI_CIRCULAR_DEPENDENCY"
