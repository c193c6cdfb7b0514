# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Object mapper between entities and DTOs.

Maps must be declared with ``create_map`` (usually inside a
``MappingProfile``); mapping an undeclared pair raises MappingError.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ddd_common.di.scanning import ModuleRef, is_concrete, iter_classes
from ddd_common.domain.entity import EntityBase, get_unproxied_type
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger
from ddd_common.mapping import projection
from ddd_common.mapping.errors import MappingError
from ddd_common.mapping.profile import MappingProfile

TDestination = TypeVar("TDestination")

Converter = Callable[[Any], Any]


def _source_values(obj: Any) -> dict[str, Any]:
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, dict):
        return dict(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    return {k: v for k, v in vars(obj).items() if not k.startswith("_")}


class Mapper:
    """Maps objects between configured source and destination types."""

    def __init__(self, profiles: Iterable[MappingProfile] = ()) -> None:
        self._maps: dict[tuple[type, type], Converter | None] = {}
        self._logger = get_logger(__name__)
        for profile in profiles:
            self.add_profile(profile)

    @classmethod
    def from_modules(cls, modules: Iterable[ModuleRef]) -> Mapper:
        """Build a mapper from every concrete MappingProfile found in ``modules``."""
        profiles = [
            klass()
            for klass in iter_classes(modules)
            if issubclass(klass, MappingProfile) and is_concrete(klass)
        ]
        return cls(profiles)

    def add_profile(self, profile: MappingProfile) -> Mapper:
        profile.configure(self)
        self._logger.debug("Mapping profile added", profile=type(profile).__name__)
        return self

    def create_map(
        self,
        source: type,
        destination: type,
        converter: Converter | None = None,
        reverse: bool = False,
    ) -> Mapper:
        """Declare that ``source`` objects may be mapped to ``destination``.

        ``converter`` replaces the default member-wise mapping. ``reverse``
        also declares the opposite direction (member-wise).
        """
        ensure_not_none(source, "source")
        ensure_not_none(destination, "destination")
        self._maps[(source, destination)] = converter
        if reverse:
            self._maps.setdefault((destination, source), None)
        return self

    def has_map(self, source: type, destination: type) -> bool:
        return self._find(source, destination) is not None

    def _find(self, source: type, destination: type) -> tuple[Converter | None] | None:
        for klass in source.__mro__:
            if (klass, destination) in self._maps:
                return (self._maps[(klass, destination)],)
        return None

    def map(self, obj: Any, destination: type[TDestination]) -> TDestination:
        """Map ``obj`` to an instance of ``destination``.

        Raises:
            ArgumentNoneError: If ``obj`` is None
            MappingError: If the pair isn't configured or construction fails
        """
        ensure_not_none(obj, "obj")
        if isinstance(obj, destination):
            return obj
        source = get_unproxied_type(obj)
        found = self._find(source, destination)
        if found is None:
            raise MappingError(source, destination)
        (converter,) = found
        if converter is not None:
            return converter(obj)
        try:
            return self._map_members(obj, destination)
        except (ValidationError, TypeError, ValueError) as exc:
            raise MappingError(source, destination, str(exc)) from exc

    def _map_members(self, obj: Any, destination: type[TDestination]) -> TDestination:
        if issubclass(destination, BaseModel):
            return destination.model_validate(obj, from_attributes=True)
        if issubclass(destination, EntityBase):
            columns = set(projection.column_names(destination))
            values = {k: v for k, v in _source_values(obj).items() if k in columns}
            return destination(**values)
        fields = projection.field_names(destination)
        values = {k: v for k, v in _source_values(obj).items() if k in fields}
        return destination(**values)

    def map_many(
        self, objs: Iterable[Any], destination: type[TDestination]
    ) -> list[TDestination]:
        ensure_not_none(objs, "objs")
        return [self.map(obj, destination) for obj in objs]

    def projection_columns(self, entity_type: type, result_type: type) -> list[Any]:
        return projection.projection_columns(entity_type, result_type)

    def project(self, row: Any, result_type: type[TDestination]) -> TDestination:
        return projection.project(row, result_type)
