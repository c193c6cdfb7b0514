# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Module scanning helpers used by the registration layers.
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from collections.abc import Iterable, Iterator
from types import ModuleType
from typing import Any, Generic, Protocol, TypeVar, get_args, get_origin

ModuleRef = str | ModuleType


def iter_modules(modules: Iterable[ModuleRef]) -> Iterator[ModuleType]:
    """Import each module, recursing into packages, yielding each once."""
    seen: set[str] = set()
    for ref in modules:
        module = importlib.import_module(ref) if isinstance(ref, str) else ref
        if module.__name__ not in seen:
            seen.add(module.__name__)
            yield module
        path = getattr(module, "__path__", None)
        if path is None:
            continue
        for info in pkgutil.walk_packages(path, prefix=f"{module.__name__}."):
            if info.name in seen:
                continue
            seen.add(info.name)
            yield importlib.import_module(info.name)


def iter_classes(modules: Iterable[ModuleRef]) -> Iterator[type]:
    """Yield the classes defined (not just imported) in ``modules``."""
    seen: set[type] = set()
    for module in iter_modules(modules):
        for _, member in inspect.getmembers(module, inspect.isclass):
            if member.__module__ != module.__name__ or member in seen:
                continue
            seen.add(member)
            yield member


def is_open_generic(cls: type) -> bool:
    return bool(getattr(cls, "__parameters__", ()))


def is_concrete(cls: Any) -> bool:
    """True for instantiable, non-protocol, non-generic classes."""
    return (
        isinstance(cls, type)
        and not inspect.isabstract(cls)
        and Protocol not in cls.__bases__
        and not is_open_generic(cls)
    )


def closed_interfaces_of(cls: Any, open_generic: type) -> list[Any]:
    """Closed parameterisations of ``open_generic`` that ``cls`` implements.

    ``cls`` may be a class or a closed generic alias. Type variables bound by
    intermediate generic bases are substituted, so ``class Impl(Base[int])``
    with ``class Base(Handler[T])`` yields ``Handler[int]``.
    """
    found: list[Any] = []

    def visit(klass: type, substitutions: dict[Any, Any]) -> None:
        for base in klass.__dict__.get("__orig_bases__", klass.__bases__):
            origin = get_origin(base)
            if origin is None:
                if isinstance(base, type) and base is not object:
                    visit(base, {})
                continue
            if origin in (Generic, Protocol):
                continue
            args = tuple(
                substitutions.get(arg, arg) if isinstance(arg, TypeVar) else arg
                for arg in get_args(base)
            )
            if origin is open_generic:
                if not any(isinstance(arg, TypeVar) for arg in args):
                    closed = open_generic[args]
                    if closed not in found:
                        found.append(closed)
                continue
            if isinstance(origin, type):
                parameters = getattr(origin, "__parameters__", ())
                visit(origin, dict(zip(parameters, args)))

    origin = get_origin(cls)
    if origin is None:
        visit(cls, {})
    elif origin is open_generic:
        found.append(cls)
    elif isinstance(origin, type):
        parameters = getattr(origin, "__parameters__", ())
        visit(origin, dict(zip(parameters, get_args(cls))))
    return found


def resolve_type_argument(instance: Any, open_generic: type, index: int = 0) -> Any | None:
    """Type argument ``index`` of ``open_generic`` as bound for ``instance``.

    Looks at the alias the instance was created through (``Service[X]()``)
    before the class hierarchy.
    """
    source = getattr(instance, "__orig_class__", None) or type(instance)
    closed = closed_interfaces_of(source, open_generic)
    if not closed:
        return None
    arg = get_args(closed[0])[index]
    return None if isinstance(arg, TypeVar) else arg
