# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Unit of Work over a single AsyncSession.

Repositories handed out by a unit of work share its session, so every change
made through them is written together by ``commit``.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, TypeVar, get_origin

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ddd_common.data_access.database import SessionFactory
from ddd_common.data_access.errors import (
    RepositoryError,
    UnitOfWorkCommitError,
    UnitOfWorkDisposedError,
    UnitOfWorkRollbackError,
)
from ddd_common.data_access.repositories import ReadOnlyRepository, RepositoryCache
from ddd_common.domain.entity import EntityBase, utc_now
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger

TRepository = TypeVar("TRepository", bound=ReadOnlyRepository[Any])


class UnitOfWork:
    """Owns one session and the repositories created on it."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._repositories: dict[Any, ReadOnlyRepository[Any]] = {}
        self._disposed = False
        self._logger = get_logger(__name__)

    @property
    def session(self) -> AsyncSession:
        """The session, opened on first use."""
        self._check_not_disposed("session")
        if self._session is None:
            self._session = self._session_factory()
        return self._session

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def _check_not_disposed(self, operation: str) -> None:
        if self._disposed:
            raise UnitOfWorkDisposedError(operation)

    def get_repository(self, repository_type: type[TRepository] | Any) -> TRepository:
        """Get the repository for ``repository_type``.

        ``repository_type`` is either a closed generic such as
        ``Repository[Product]`` or a concrete repository class. For a closed
        generic, the most specific repository subclass defined for it is used
        when one exists.
        """
        ensure_not_none(repository_type, "repository_type")
        self._check_not_disposed("get_repository")
        if repository_type in self._repositories:
            return self._repositories[repository_type]  # type: ignore[return-value]

        factory = repository_type
        if get_origin(repository_type) is not None:
            factory = RepositoryCache.find(repository_type) or repository_type
        elif not (
            isinstance(repository_type, type)
            and issubclass(repository_type, ReadOnlyRepository)
        ):
            raise RepositoryError(
                f"{repository_type!r} is not a repository type",
                repository=repr(repository_type),
            )

        repository = factory(self.session)
        self._repositories[repository_type] = repository
        self._logger.debug(
            "Repository created",
            requested=repr(repository_type),
            implementation=type(repository).__name__,
        )
        return repository

    async def use_transaction(self) -> None:
        """Begin an explicit transaction unless one is already active."""
        self._check_not_disposed("use_transaction")
        if not self.session.in_transaction():
            await self.session.begin()

    async def commit(self, audit_user_id: Any | None = None) -> int:
        """Write all pending changes.

        Modified entities get ``updated_at`` stamped before flushing.

        Returns:
            The number of added, modified and deleted entities
        """
        self._check_not_disposed("commit")
        session = self.session
        now = utc_now()
        modified = [
            obj
            for obj in session.dirty
            if isinstance(obj, EntityBase) and session.is_modified(obj)
        ]
        for entity in modified:
            entity.updated_at = now
        count = len(session.new) + len(modified) + len(session.deleted)

        try:
            await session.commit()
        except SQLAlchemyError as e:
            self._logger.error("Commit failed", error=str(e), audit_user_id=audit_user_id)
            await session.rollback()
            raise UnitOfWorkCommitError(
                f"Failed to commit unit of work: {e}", audit_user_id=audit_user_id
            ) from e

        self._logger.debug("Committed", changes=count, audit_user_id=audit_user_id)
        return count

    async def rollback(self) -> None:
        """Discard pending changes and end the current transaction."""
        self._check_not_disposed("rollback")
        if self._session is None:
            return
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            raise UnitOfWorkRollbackError(f"Failed to roll back unit of work: {e}") from e
        self._logger.debug("Rolled back")

    async def dispose(self) -> None:
        """Close the session. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._repositories.clear()
        if self._session is not None:
            await self._session.close()
            self._session = None
        self._logger.debug("Unit of work disposed")

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.dispose()
