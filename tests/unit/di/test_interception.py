# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from typing import Any

import pytest

from ddd_common.di import (
    Container,
    InterceptionProxy,
    InterceptorReference,
    Invocation,
)


class Calculator:
    def __init__(self):
        self.offset = 0

    def add(self, a: int, b: int) -> int:
        return a + b + self.offset

    async def double(self, x: int) -> int:
        return x * 2


class Recorder:
    def __init__(self):
        self.calls: list[str] = []

    def intercept(self, invocation: Invocation) -> Any:
        self.calls.append(f"recorder:{invocation.method_name}")
        return invocation.proceed()


class Tracer:
    def __init__(self, recorder: Recorder):
        self.recorder = recorder

    def intercept(self, invocation: Invocation) -> Any:
        self.recorder.calls.append(f"tracer:{invocation.method_name}")
        return invocation.proceed()


class AsyncIncrementer:
    async def intercept_async(self, invocation: Invocation) -> Any:
        result = await invocation.proceed_async()
        return result + 1


@pytest.mark.asyncio
async def test_sync_interceptors_run_in_registration_order():
    container = Container()
    await container.register_singleton(Recorder)
    await container.register_transient(Tracer)
    await container.register_transient(
        Calculator,
        interceptors=[InterceptorReference(Recorder), InterceptorReference(Tracer)],
    )
    calculator = await container.resolve(Calculator)

    assert isinstance(calculator, Calculator)
    assert isinstance(calculator, InterceptionProxy)
    assert type(calculator).__name__ == "CalculatorProxy"
    assert calculator.add(1, 2) == 3
    recorder = await container.resolve(Recorder)
    assert recorder.calls == ["recorder:add", "tracer:add"]


@pytest.mark.asyncio
async def test_proxy_forwards_attributes_to_target():
    container = Container()
    await container.register_transient(
        Calculator, interceptors=[InterceptorReference(Recorder)]
    )
    calculator = await container.resolve(Calculator)
    calculator.offset = 10
    assert calculator.offset == 10
    assert calculator.add(1, 2) == 13


@pytest.mark.asyncio
async def test_async_interceptor_wraps_coroutine_methods_only():
    container = Container()
    await container.register_transient(
        Calculator,
        interceptors=[InterceptorReference(AsyncIncrementer, is_async=True)],
    )
    calculator = await container.resolve(Calculator)
    assert await calculator.double(4) == 9
    assert calculator.add(1, 1) == 2


@pytest.mark.asyncio
async def test_unregistered_interceptor_is_constructed_per_instance():
    container = Container()
    await container.register_transient(
        Calculator, interceptors=[InterceptorReference(Recorder)]
    )
    first = await container.resolve(Calculator)
    second = await container.resolve(Calculator)
    first_recorder = object.__getattribute__(first, "_ddd_interceptors")[0]
    second_recorder = object.__getattribute__(second, "_ddd_interceptors")[0]
    assert first_recorder is not second_recorder
