# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Base classes for services working through a unit of work.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from ddd_common.data_access.unit_of_work import UnitOfWork
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger
from ddd_common.mapping import Mapper
from ddd_common.results import Result


class ServiceBase:
    """Holds a unit of work and controls its transaction.

    Disposing the service disposes its unit of work.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        ensure_not_none(uow, "uow")
        self.uow = uow
        self._disposed = False
        self._logger = get_logger(type(self).__module__)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    async def commit(self, audit_user_id: Any | None = None) -> Any:
        return await self.uow.commit(audit_user_id)

    async def rollback(self) -> Any:
        await self.uow.rollback()

    async def begin_transaction(self) -> Any:
        await self.uow.use_transaction()

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        await self.uow.dispose()

    async def __aenter__(self) -> ServiceBase:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.dispose()


class DataServiceBase(ServiceBase):
    """Service base with a mapper whose transaction methods return results."""

    def __init__(self, uow: UnitOfWork, mapper: Mapper) -> None:
        super().__init__(uow)
        ensure_not_none(mapper, "mapper")
        self.mapper = mapper

    async def commit(self, audit_user_id: Any | None = None) -> Result[int]:
        """Commit the unit of work.

        Returns:
            Success holding the number of written entities
        """
        return Result.from_success(await super().commit(audit_user_id))

    async def rollback(self) -> Result[None]:
        await super().rollback()
        return Result.from_success()

    async def begin_transaction(self) -> Result[None]:
        await super().begin_transaction()
        return Result.from_success()
