# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Method interception for services resolved from the container.

A registration with interceptors resolves to a proxy: an instance of a
generated ``<Implementation>Proxy`` subclass whose public methods run
through the interceptor chain before reaching the real instance.
"""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class InterceptorReference:
    """An interceptor type attached to a registration."""

    interceptor: type[Any]
    is_async: bool = False


class Invocation:
    """A single intercepted method call."""

    def __init__(
        self,
        target: Any,
        method_name: str,
        method: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        interceptors: list[Any],
    ) -> None:
        self.target = target
        self.method_name = method_name
        self.method = method
        self.args = args
        self.kwargs = kwargs
        self.return_value: Any = None
        self._interceptors = interceptors
        self._index = 0

    def proceed(self) -> Any:
        """Call the next interceptor, or the target method after the last one.

        For coroutine methods this returns the coroutine; await it, or use
        ``proceed_async``.
        """
        if self._index < len(self._interceptors):
            interceptor = self._interceptors[self._index]
            self._index += 1
            self.return_value = interceptor.intercept(self)
        else:
            self.return_value = self.method(*self.args, **self.kwargs)
        return self.return_value

    async def proceed_async(self) -> Any:
        result = self.proceed()
        if inspect.isawaitable(result):
            result = await result
        self.return_value = result
        return result


@runtime_checkable
class Interceptor(Protocol):
    """Synchronous interceptor; return ``invocation.proceed()`` to continue."""

    def intercept(self, invocation: Invocation) -> Any: ...


@runtime_checkable
class AsyncInterceptor(Protocol):
    """Asynchronous interceptor; ``await invocation.proceed_async()`` to continue."""

    async def intercept_async(self, invocation: Invocation) -> Any: ...


class AsyncInterceptorAdapter:
    """Adapts an AsyncInterceptor to the interceptor chain."""

    def __init__(self, interceptor: AsyncInterceptor) -> None:
        self.interceptor = interceptor

    def intercept(self, invocation: Invocation) -> Any:
        return self.interceptor.intercept_async(invocation)


class InterceptionProxy:
    """Mixin for generated proxy classes.

    Attribute reads that the proxy class doesn't define go to the target
    instance, as do all attribute writes.
    """

    _ddd_target: Any
    _ddd_interceptors: list[Any]

    def __getattr__(self, name: str) -> Any:
        return getattr(object.__getattribute__(self, "_ddd_target"), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(object.__getattribute__(self, "_ddd_target"), name, value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} for {object.__getattribute__(self, '_ddd_target')!r}>"


def _make_sync_method(name: str) -> Any:
    def method(self: InterceptionProxy, *args: Any, **kwargs: Any) -> Any:
        target = object.__getattribute__(self, "_ddd_target")
        interceptors = [
            i
            for i in object.__getattribute__(self, "_ddd_interceptors")
            if not isinstance(i, AsyncInterceptorAdapter)
        ]
        invocation = Invocation(
            target, name, getattr(target, name), args, kwargs, interceptors
        )
        return invocation.proceed()

    return method


def _make_async_method(name: str) -> Any:
    async def method(self: InterceptionProxy, *args: Any, **kwargs: Any) -> Any:
        target = object.__getattribute__(self, "_ddd_target")
        interceptors = object.__getattribute__(self, "_ddd_interceptors")
        invocation = Invocation(
            target, name, getattr(target, name), args, kwargs, list(interceptors)
        )
        return await invocation.proceed_async()

    return method


@functools.cache
def proxy_type_for(cls: type[Any]) -> type[Any]:
    """Build (once per class) the proxy subclass for ``cls``."""
    namespace: dict[str, Any] = {"__module__": cls.__module__}
    for name, member in inspect.getmembers(cls):
        if name.startswith("_") or not inspect.isfunction(member):
            continue
        if inspect.iscoroutinefunction(member):
            wrapper = _make_async_method(name)
        else:
            wrapper = _make_sync_method(name)
        functools.update_wrapper(wrapper, member)
        namespace[name] = wrapper
    return type(f"{cls.__name__}Proxy", (cls, InterceptionProxy), namespace)


def create_proxy(target: Any, interceptors: list[Any]) -> Any:
    """Wrap ``target`` in a proxy running ``interceptors`` in order."""
    proxy = object.__new__(proxy_type_for(type(target)))
    object.__setattr__(proxy, "_ddd_target", target)
    object.__setattr__(proxy, "_ddd_interceptors", list(interceptors))
    return proxy
