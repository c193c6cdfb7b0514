# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""Top-level pytest configuration for ddd_common."""

import pytest

from ddd_common.config import ApplicationSettings
from ddd_common.data_access import (
    UnitOfWork,
    create_engine,
    create_schema,
    create_session_factory,
)
from ddd_common.mapping import Mapper

from tests.fixtures.shop.models import Product
from tests.fixtures.shop.profiles import ShopProfile
from tests.fixtures.shop.repositories import ProductRepository

MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> ApplicationSettings:
    return ApplicationSettings(database_url=MEMORY_DATABASE_URL)


@pytest.fixture
async def engine(settings):
    engine = create_engine(settings)
    await create_schema(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def uow(session_factory):
    async with UnitOfWork(session_factory) as uow:
        yield uow


@pytest.fixture
def mapper() -> Mapper:
    return Mapper([ShopProfile()])


@pytest.fixture
async def products(session_factory) -> list[Product]:
    """Three committed, detached products: Pen (3), Ink (12) and Pad (7)."""
    items = [
        Product(name="Pen", price=3),
        Product(name="Ink", price=12),
        Product(name="Pad", price=7),
    ]
    async with UnitOfWork(session_factory) as seed:
        seed.get_repository(ProductRepository).add_range(items)
        await seed.commit()
    return items
