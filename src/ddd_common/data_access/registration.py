# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Container registration for the data access layer.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from ddd_common.config import ApplicationSettings
from ddd_common.data_access.database import (
    SessionFactory,
    create_engine,
    create_session_factory,
)
from ddd_common.data_access.unit_of_work import UnitOfWork
from ddd_common.di import Container, ScopeProtocol
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger

logger = get_logger(__name__)


async def add_data_access_layer(
    container: Container, settings: ApplicationSettings | None = None
) -> Container:
    """Register settings, engine, session factory and ``UnitOfWork``.

    The engine and session factory are singletons; each lifetime scope gets
    its own unit of work.
    """
    ensure_not_none(container, "container")
    settings = settings or ApplicationSettings.load()

    if not await container.has_registration(ApplicationSettings):
        await container.register_instance(ApplicationSettings, settings)

    async def engine_factory(scope: ScopeProtocol) -> AsyncEngine:
        return create_engine(await scope.resolve(ApplicationSettings))

    async def session_factory(scope: ScopeProtocol) -> SessionFactory:
        return create_session_factory(await scope.resolve(AsyncEngine))

    await container.register_singleton(AsyncEngine, engine_factory)
    await container.register_singleton(SessionFactory, session_factory)
    await container.register_scoped(UnitOfWork)
    logger.debug("Data access layer registered", database_url_is_sqlite=settings.is_sqlite)
    return container
