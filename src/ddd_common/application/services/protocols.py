# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Protocols for the generic data services.

Resolve ``ReadOnlyDataServiceProtocol[Product]`` or
``CrudDataServiceProtocol[Product]`` from a scope to get the data service
for an aggregate.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, TypeVar

from ddd_common.data_access.specifications import ProjectionSpecification, Specification
from ddd_common.results import Result

TEntity = TypeVar("TEntity")
TResult = TypeVar("TResult")


class ReadOnlyDataServiceProtocol(Protocol[TEntity]):
    """Read operations over one aggregate type."""

    async def get(self, *key_values: Any) -> Result[TEntity]: ...

    async def get_as(
        self, result_type: type[TResult], *key_values: Any, should_project: bool = False
    ) -> Result[TResult]: ...

    async def get_single_by_spec(
        self, specification: Specification[TEntity]
    ) -> Result[TEntity]: ...

    async def get_single_by_spec_as(
        self, result_type: type[TResult], specification: Specification[TEntity]
    ) -> Result[TResult]: ...

    async def get_single_by_spec_projected(
        self, specification: ProjectionSpecification[TEntity, TResult]
    ) -> Result[TResult]: ...

    async def get_by_spec(
        self, specification: Specification[TEntity]
    ) -> Result[list[TEntity]]: ...

    async def get_by_spec_as(
        self, result_type: type[TResult], specification: Specification[TEntity]
    ) -> Result[list[TResult]]: ...

    async def get_by_spec_projected(
        self, specification: ProjectionSpecification[TEntity, TResult]
    ) -> Result[list[TResult]]: ...

    async def get_all(self) -> Result[list[TEntity]]: ...

    async def get_all_as(
        self, result_type: type[TResult], should_project: bool = False
    ) -> Result[list[TResult]]: ...

    async def long_count(
        self, specification: Specification[TEntity] | None = None
    ) -> Result[int]: ...

    async def commit(self, audit_user_id: Any | None = None) -> Result[int]: ...

    async def rollback(self) -> Result[None]: ...

    async def begin_transaction(self) -> Result[None]: ...

    async def dispose(self) -> None: ...


class CrudDataServiceProtocol(ReadOnlyDataServiceProtocol[TEntity], Protocol[TEntity]):
    """Read and write operations over one aggregate type.

    Entries may be the aggregate itself or any object the mapper can map to
    it; ids are accepted wherever an entry is.
    """

    async def add(
        self, entry: Any, should_save: bool = False, user_id: Any | None = None
    ) -> Result[Any]: ...

    async def add_range(
        self, entries: Iterable[Any], should_save: bool = False, user_id: Any | None = None
    ) -> Result[list[Any]]: ...

    async def begin_update(
        self, entry: Any, should_swap_attached: bool = False
    ) -> Result[None]: ...

    async def begin_update_range(
        self, entries: Iterable[Any], should_swap_attached: bool = False
    ) -> Result[None]: ...

    async def delete(
        self, entry: Any, should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]: ...

    async def delete_range(
        self, entries: Iterable[Any], should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]: ...

    async def disable(
        self, entry: Any, should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]: ...

    async def disable_range(
        self, entries: Iterable[Any], should_save: bool = False, user_id: Any | None = None
    ) -> Result[None]: ...
