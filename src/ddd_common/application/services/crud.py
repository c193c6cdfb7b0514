# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Generic create/update/delete data service.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from ddd_common.application.services.protocols import CrudDataServiceProtocol
from ddd_common.application.services.read_only import ReadOnlyDataService
from ddd_common.data_access.repositories import Repository
from ddd_common.data_access.unit_of_work import UnitOfWork
from ddd_common.domain.entity import AggregateRootEntity
from ddd_common.errors import ensure_not_none
from ddd_common.mapping import Mapper
from ddd_common.results import Result

TEntity = TypeVar("TEntity", bound=AggregateRootEntity)


class CrudDataService(
    ReadOnlyDataService[TEntity], CrudDataServiceProtocol[TEntity], Generic[TEntity]
):
    """Writes for one aggregate type through the unit of work.

    Entries that aren't instances of the aggregate type are mapped to it.
    An entry that is neither an aggregate nor mappable to one is taken to be
    an id. Nothing is committed unless ``should_save`` is set.
    """

    repository_type = Repository

    def __init__(self, uow: UnitOfWork, mapper: Mapper) -> None:
        super().__init__(uow, mapper)

    def _to_entity(self, entry: Any) -> TEntity:
        if isinstance(entry, self.entity_type):
            return entry
        return self.mapper.map(entry, self.entity_type)

    def _to_entities(self, entries: Iterable[Any]) -> list[TEntity]:
        entities = []
        for entry in entries:
            ensure_not_none(entry, "entry")
            entities.append(self._to_entity(entry))
        return entities

    def _is_entry(self, entry: Any) -> bool:
        return isinstance(entry, self.entity_type) or self.mapper.has_map(
            type(entry), self.entity_type
        )

    def _split(self, entries: Iterable[Any]) -> tuple[list[TEntity], list[Any]]:
        """Separate entries into aggregates and ids."""
        entities: list[TEntity] = []
        ids: list[Any] = []
        for entry in entries:
            ensure_not_none(entry, "entry")
            if self._is_entry(entry):
                entities.append(self._to_entity(entry))
            else:
                ids.append(entry)
        return entities, ids

    async def _save(self, should_save: bool, user_id: Any | None) -> None:
        if should_save:
            await self.uow.commit(user_id)

    async def add(
        self, entry: Any, should_save: bool = False, user_id: Any | None = None
    ) -> Result[Any]:
        """Add an aggregate.

        Returns:
            Success holding the new id (None until saved)
        """
        ensure_not_none(entry, "entry")
        entity = self._to_entity(entry)
        self.repository.add(entity)
        await self._save(should_save, user_id)
        self._logger.debug("Added", entity_type=self.entity_type.__name__, id=entity.id)
        return Result.from_success(entity.id)

    async def add_range(
        self, entries: Iterable[Any], should_save: bool = False, user_id: Any | None = None
    ) -> Result[list[Any]]:
        ensure_not_none(entries, "entries")
        entities = self._to_entities(entries)
        self.repository.add_range(entities)
        await self._save(should_save, user_id)
        return Result.from_success([entity.id for entity in entities])

    async def begin_update(
        self, entry: Any, should_swap_attached: bool = False
    ) -> Result[None]:
        """Track ``entry`` so that its changes are written by the next commit."""
        ensure_not_none(entry, "entry")
        self.repository.begin_update(self._to_entity(entry), should_swap_attached)
        return Result.from_success()

    async def begin_update_range(
        self, entries: Iterable[Any], should_swap_attached: bool = False
    ) -> Result[None]:
        ensure_not_none(entries, "entries")
        entities = self._to_entities(entries)
        self.repository.begin_update_range(entities, should_swap_attached)
        return Result.from_success()

    async def delete(
        self, entry: Any, should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]:
        """Delete an aggregate, given the aggregate, a mappable entry or its id."""
        ensure_not_none(entry, "entry")
        if self._is_entry(entry):
            await self.repository.delete(self._to_entity(entry))
        elif not await self.repository.delete_by_id(entry):
            return self._not_found(id=entry)
        await self._save(should_save, user_id)
        return Result.from_success()

    async def delete_range(
        self, entries: Iterable[Any], should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]:
        ensure_not_none(entries, "entries")
        entities, ids = self._split(entries)
        if ids and not await self.repository.delete_range_by_ids(ids):
            return self._not_found(ids=ids)
        if entities:
            await self.repository.delete_range(entities)
        await self._save(should_save, user_id)
        return Result.from_success()

    async def disable(
        self, entry: Any, should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]:
        """Soft-delete an aggregate, given the aggregate, a mappable entry or its id."""
        ensure_not_none(entry, "entry")
        if self._is_entry(entry):
            self.repository.disable(self._to_entity(entry))
        elif not await self.repository.disable_by_id(entry):
            return self._not_found(id=entry)
        await self._save(should_save, user_id)
        return Result.from_success()

    async def disable_range(
        self, entries: Iterable[Any], should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]:
        ensure_not_none(entries, "entries")
        entities, ids = self._split(entries)
        if ids and not await self.repository.disable_range_by_ids(ids):
            return self._not_found(ids=ids)
        if entities:
            self.repository.disable_range(entities)
        await self._save(should_save, user_id)
        return Result.from_success()

