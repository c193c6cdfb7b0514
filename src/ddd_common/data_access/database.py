# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Engine and session factory construction.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ddd_common.config import ApplicationSettings
from ddd_common.domain.base import Base
from ddd_common.logging import get_logger

logger = get_logger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.endswith("://"))


def create_engine(settings: ApplicationSettings | None = None, **options: Any) -> AsyncEngine:
    """Create the async engine described by ``settings``.

    In-memory SQLite databases share one connection so every session sees
    the same database.
    """
    settings = settings or ApplicationSettings.load()
    engine_options: dict[str, Any] = {"echo": settings.echo_sql}
    if _is_memory_sqlite(settings.database_url):
        engine_options["poolclass"] = StaticPool
        engine_options["connect_args"] = {"check_same_thread": False}
    engine_options.update(options)
    engine = create_async_engine(settings.database_url, **engine_options)
    logger.debug("Engine created", url=engine.url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """Session factory used by units of work.

    Changes are only written on commit (no autoflush), and committed objects
    keep their loaded state.
    """
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def create_schema(engine: AsyncEngine, metadata: MetaData | None = None) -> None:
    """Create all tables of ``metadata`` (default: every ``Base`` model)."""
    async with engine.begin() as conn:
        await conn.run_sync((metadata or Base.metadata).create_all)


async def drop_schema(engine: AsyncEngine, metadata: MetaData | None = None) -> None:
    async with engine.begin() as conn:
        await conn.run_sync((metadata or Base.metadata).drop_all)


__all__ = [
    "Base",
    "SessionFactory",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "drop_schema",
]
