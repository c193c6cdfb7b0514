# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Generic repositories over an AsyncSession.

Repositories are obtained from a unit of work
(``uow.get_repository(Repository[Product])``) and never commit: changes are
written when the unit of work commits.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, ClassVar, Generic, TypeVar, get_origin

from sqlalchemy import func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import make_transient_to_detached

from ddd_common.data_access.errors import RepositoryError
from ddd_common.data_access.specifications import (
    ProjectionSpecification,
    Specification,
)
from ddd_common.di.scanning import closed_interfaces_of, is_open_generic, resolve_type_argument
from ddd_common.domain.entity import AggregateRootEntity
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger
from ddd_common.mapping import projection

TEntity = TypeVar("TEntity", bound=AggregateRootEntity)
TResult = TypeVar("TResult")


class RepositoryCache:
    """Concrete repository subclasses, registered as they are defined."""

    _types: ClassVar[list[type]] = []

    @classmethod
    def register(cls, repository_type: type) -> None:
        if repository_type not in cls._types:
            cls._types.append(repository_type)

    @classmethod
    def types(cls) -> list[type]:
        return list(cls._types)

    @classmethod
    def find(cls, requested: Any) -> type | None:
        """Most specific cached subclass implementing ``requested``.

        ``requested`` is a closed alias such as ``Repository[Product]``.
        """
        origin = get_origin(requested)
        if origin is None:
            return None
        candidates = [
            t for t in cls._types if requested in closed_interfaces_of(t, origin)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda t: len(t.__mro__))


class ReadOnlyRepository(Generic[TEntity]):
    """Queries over one aggregate type."""

    def __init__(self, session: AsyncSession, entity_type: type[TEntity] | None = None) -> None:
        self.session = session
        self._entity_type = entity_type
        self._logger = get_logger(__name__)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not is_open_generic(cls):
            RepositoryCache.register(cls)

    @property
    def entity_type(self) -> type[TEntity]:
        """The aggregate type, from the constructor or the generic parameters."""
        entity_type = self.__dict__.get("_entity_type") or resolve_type_argument(
            self, ReadOnlyRepository
        )
        if entity_type is None:
            raise RepositoryError(
                f"{type(self).__name__} is not bound to an entity type",
                repository=type(self).__name__,
            )
        return entity_type

    async def get(self, *key_values: Any) -> TEntity | None:
        """Get an entity by primary key (composite keys as several values)."""
        if not key_values:
            raise ValueError("At least one key value is required")
        key = key_values[0] if len(key_values) == 1 else tuple(key_values)
        return await self.session.get(self.entity_type, key)

    async def get_single_by_spec(self, specification: Specification[TEntity]) -> TEntity | None:
        ensure_not_none(specification, "specification")
        statement = specification.apply(select(self.entity_type), self.entity_type)
        result = await self.session.execute(statement.limit(1))
        return result.scalars().first()

    async def get_by_spec(self, specification: Specification[TEntity]) -> list[TEntity]:
        ensure_not_none(specification, "specification")
        statement = specification.apply(select(self.entity_type), self.entity_type)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_all(self) -> list[TEntity]:
        result = await self.session.execute(select(self.entity_type))
        return list(result.scalars().all())

    def _projection_select(self, result_type: type) -> Any:
        return select(*projection.projection_columns(self.entity_type, result_type))

    async def get_projected(self, result_type: type[TResult], *key_values: Any) -> TResult | None:
        """Get one row by primary key, selecting only ``result_type``'s columns."""
        primary_key = sa_inspect(self.entity_type).primary_key
        if len(key_values) != len(primary_key):
            raise ValueError(
                f"Expected {len(primary_key)} key value(s), got {len(key_values)}"
            )
        statement = self._projection_select(result_type).where(
            *(column == value for column, value in zip(primary_key, key_values))
        )
        row = (await self.session.execute(statement)).first()
        return None if row is None else projection.project(row, result_type)

    async def get_all_projected(self, result_type: type[TResult]) -> list[TResult]:
        result = await self.session.execute(self._projection_select(result_type))
        return [projection.project(row, result_type) for row in result]

    async def get_by_spec_projected(
        self, specification: ProjectionSpecification[TEntity, TResult]
    ) -> list[TResult]:
        ensure_not_none(specification, "specification")
        result_type = specification.result_type
        statement = specification.apply(self._projection_select(result_type), self.entity_type)
        result = await self.session.execute(statement)
        return [projection.project(row, result_type) for row in result]

    async def get_single_by_spec_projected(
        self, specification: ProjectionSpecification[TEntity, TResult]
    ) -> TResult | None:
        ensure_not_none(specification, "specification")
        result_type = specification.result_type
        statement = specification.apply(self._projection_select(result_type), self.entity_type)
        row = (await self.session.execute(statement.limit(1))).first()
        return None if row is None else projection.project(row, result_type)

    async def long_count(self, specification: Specification[TEntity] | None = None) -> int:
        """Count rows, optionally filtered by the specification's criteria."""
        statement = select(func.count()).select_from(self.entity_type)
        if specification is not None:
            statement = specification.apply_criteria(statement, self.entity_type)
        return int((await self.session.execute(statement)).scalar_one())


class Repository(ReadOnlyRepository[TEntity], Generic[TEntity]):
    """Read-write repository; writes are tracked by the session until commit."""

    def add(self, entity: TEntity) -> None:
        ensure_not_none(entity, "entity")
        self.session.add(entity)

    def add_range(self, entities: Iterable[TEntity]) -> None:
        ensure_not_none(entities, "entities")
        self.session.add_all(list(entities))

    def _attached(self, entity: TEntity, should_swap_attached: bool | None) -> TEntity:
        """Return the session-tracked instance for ``entity``, attaching it if needed.

        When another instance with the same identity is already tracked it is
        swapped out if ``should_swap_attached``, returned in place of
        ``entity`` if ``should_swap_attached`` is None, and otherwise a
        RepositoryError is raised.
        """
        state = sa_inspect(entity)
        if state.session_id == self.session.sync_session.hash_key:
            return entity
        if state.identity is None and getattr(entity, "id", None) is None:
            raise RepositoryError(
                "Only entities with an id can be attached",
                entity_type=type(entity).__name__,
            )
        key = self.session.sync_session.identity_key(instance=entity)
        existing = self.session.sync_session.identity_map.get(key)
        if existing is not None and existing is not entity:
            if should_swap_attached is None:
                return existing
            if not should_swap_attached:
                raise RepositoryError(
                    f"Another instance of {type(entity).__name__} with id "
                    f"{getattr(entity, 'id', None)!r} is already tracked",
                    entity_type=type(entity).__name__,
                    entity_id=getattr(entity, "id", None),
                )
            self.session.expunge(existing)
        if state.transient:
            make_transient_to_detached(entity)
        self.session.add(entity)
        return entity

    def begin_update(self, entity: TEntity, should_swap_attached: bool = False) -> None:
        """Start tracking ``entity`` so later changes are written on commit."""
        ensure_not_none(entity, "entity")
        self._attached(entity, should_swap_attached)

    def begin_update_range(
        self, entities: Iterable[TEntity], should_swap_attached: bool = False
    ) -> None:
        ensure_not_none(entities, "entities")
        for entity in entities:
            self.begin_update(entity, should_swap_attached)

    async def delete(self, entity: TEntity) -> None:
        ensure_not_none(entity, "entity")
        if sa_inspect(entity).pending:
            self.session.expunge(entity)
            return
        await self.session.delete(self._attached(entity, None))

    async def delete_range(self, entities: Iterable[TEntity]) -> None:
        ensure_not_none(entities, "entities")
        for entity in list(entities):
            await self.delete(entity)

    async def delete_by_id(self, entity_id: Any) -> bool:
        """Delete by id; returns False when no such row exists."""
        entity = await self.get(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        return True

    async def _get_every(self, ids: Sequence[Any]) -> list[TEntity] | None:
        """The entity for each id, or None when any id has no row."""
        entities = [await self.get(entity_id) for entity_id in ids]
        if any(entity is None for entity in entities):
            return None
        return entities  # type: ignore[return-value]

    async def delete_range_by_ids(self, ids: Sequence[Any]) -> bool:
        """Delete every id, or nothing (returning False) when any id has no row."""
        ensure_not_none(ids, "ids")
        entities = await self._get_every(ids)
        if entities is None:
            return False
        for entity in entities:
            await self.session.delete(entity)
        return True

    def disable(self, entity: TEntity) -> None:
        """Soft-delete: mark the tracked instance as disabled."""
        ensure_not_none(entity, "entity")
        if sa_inspect(entity).pending:
            entity.is_disabled = True
            return
        self._attached(entity, None).is_disabled = True

    def disable_range(self, entities: Iterable[TEntity]) -> None:
        ensure_not_none(entities, "entities")
        for entity in entities:
            self.disable(entity)

    async def disable_by_id(self, entity_id: Any) -> bool:
        """Disable by id; returns False when no such row exists."""
        entity = await self.get(entity_id)
        if entity is None:
            return False
        entity.is_disabled = True
        return True

    async def disable_range_by_ids(self, ids: Sequence[Any]) -> bool:
        """Disable every id, or nothing (returning False) when any id has no row."""
        ensure_not_none(ids, "ids")
        entities = await self._get_every(ids)
        if entities is None:
            return False
        for entity in entities:
            entity.is_disabled = True
        return True
