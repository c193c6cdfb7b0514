# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Generic read-only data service.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from ddd_common.application.services.base import DataServiceBase
from ddd_common.application.services.protocols import ReadOnlyDataServiceProtocol
from ddd_common.data_access.repositories import ReadOnlyRepository
from ddd_common.data_access.specifications import ProjectionSpecification, Specification
from ddd_common.data_access.unit_of_work import UnitOfWork
from ddd_common.di.scanning import resolve_type_argument
from ddd_common.domain.entity import AggregateRootEntity
from ddd_common.errors import ensure_not_none
from ddd_common.mapping import Mapper
from ddd_common.results import NotFoundError, Result

TEntity = TypeVar("TEntity", bound=AggregateRootEntity)
TResult = TypeVar("TResult")


class ReadOnlyDataService(
    DataServiceBase, ReadOnlyDataServiceProtocol[TEntity], Generic[TEntity]
):
    """Queries for one aggregate type, mapped to results with the mapper.

    The aggregate type comes from the generic parameters, either of the
    alias the service was created through (``ReadOnlyDataService[Product]``)
    or of a subclass (``class ProductQueries(ReadOnlyDataService[Product])``).
    """

    repository_type: type[ReadOnlyRepository[Any]] = ReadOnlyRepository

    def __init__(self, uow: UnitOfWork, mapper: Mapper) -> None:
        super().__init__(uow, mapper)

    @property
    def entity_type(self) -> type[TEntity]:
        entity_type = resolve_type_argument(self, ReadOnlyDataService)
        if entity_type is None:
            raise TypeError(f"{type(self).__name__} is not bound to an entity type")
        return entity_type

    @property
    def repository(self) -> Any:
        """The unit of work's repository for the aggregate type."""
        return self.uow.get_repository(self.repository_type[self.entity_type])

    def _not_found(self, **context: Any) -> Result[Any]:
        return Result.from_error(
            NotFoundError(f"{self.entity_type.__name__} not found", **context)
        )

    async def get(self, *key_values: Any) -> Result[TEntity]:
        """Get the aggregate by primary key; Failure(NotFoundError) if missing."""
        entity = await self.repository.get(*key_values)
        if entity is None:
            return self._not_found(key=list(key_values))
        return Result.from_success(entity)

    async def get_as(
        self, result_type: type[TResult], *key_values: Any, should_project: bool = False
    ) -> Result[TResult]:
        """Get by primary key as ``result_type``.

        With ``should_project`` only the result type's columns are selected;
        otherwise the entity is loaded and mapped.
        """
        ensure_not_none(result_type, "result_type")
        if should_project:
            projected = await self.repository.get_projected(result_type, *key_values)
            if projected is None:
                return self._not_found(key=list(key_values))
            return Result.from_success(projected)
        entity = await self.repository.get(*key_values)
        if entity is None:
            return self._not_found(key=list(key_values))
        return Result.from_success(self.mapper.map(entity, result_type))

    async def get_single_by_spec(
        self, specification: Specification[TEntity]
    ) -> Result[TEntity]:
        entity = await self.repository.get_single_by_spec(specification)
        if entity is None:
            return self._not_found()
        return Result.from_success(entity)

    async def get_single_by_spec_as(
        self, result_type: type[TResult], specification: Specification[TEntity]
    ) -> Result[TResult]:
        ensure_not_none(result_type, "result_type")
        entity = await self.repository.get_single_by_spec(specification)
        if entity is None:
            return self._not_found()
        return Result.from_success(self.mapper.map(entity, result_type))

    async def get_single_by_spec_projected(
        self, specification: ProjectionSpecification[TEntity, TResult]
    ) -> Result[TResult]:
        projected = await self.repository.get_single_by_spec_projected(specification)
        if projected is None:
            return self._not_found()
        return Result.from_success(projected)

    async def get_by_spec(
        self, specification: Specification[TEntity]
    ) -> Result[list[TEntity]]:
        return Result.from_success(await self.repository.get_by_spec(specification))

    async def get_by_spec_as(
        self, result_type: type[TResult], specification: Specification[TEntity]
    ) -> Result[list[TResult]]:
        ensure_not_none(result_type, "result_type")
        entities = await self.repository.get_by_spec(specification)
        return Result.from_success(self.mapper.map_many(entities, result_type))

    async def get_by_spec_projected(
        self, specification: ProjectionSpecification[TEntity, TResult]
    ) -> Result[list[TResult]]:
        return Result.from_success(
            await self.repository.get_by_spec_projected(specification)
        )

    async def get_all(self) -> Result[list[TEntity]]:
        return Result.from_success(await self.repository.get_all())

    async def get_all_as(
        self, result_type: type[TResult], should_project: bool = False
    ) -> Result[list[TResult]]:
        ensure_not_none(result_type, "result_type")
        if should_project:
            return Result.from_success(
                await self.repository.get_all_projected(result_type)
            )
        entities = await self.repository.get_all()
        return Result.from_success(self.mapper.map_many(entities, result_type))

    async def long_count(
        self, specification: Specification[TEntity] | None = None
    ) -> Result[int]:
        return Result.from_success(await self.repository.long_count(specification))
