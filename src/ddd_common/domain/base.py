# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Declarative base for ddd_common models.

All entities derive from ``Base``; it carries a metadata object with a
consistent constraint naming convention and the Python-to-SQL type map.
"""

from __future__ import annotations

import datetime
import decimal
from typing import TypeVar

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Integer,
    LargeBinary,
    MetaData,
    Numeric,
    String,
)
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T", bound="Base")

# BIGINT autoincrement isn't supported by SQLite; fall back to INTEGER there.
BigIntegerId = BigInteger().with_variant(Integer, "sqlite")


class MetadataFactory:
    """Factory for creating SQLAlchemy metadata with consistent configuration."""

    default_naming_convention = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s",
        "pk": "pk_%(table_name)s",
    }

    @classmethod
    def create_metadata(
        cls, schema: str | None = None, naming_convention: dict[str, str] | None = None
    ) -> MetaData:
        """Create a MetaData with the given schema and naming convention."""
        return MetaData(
            naming_convention=naming_convention or cls.default_naming_convention,
            schema=schema,
        )


class Base(AsyncAttrs, DeclarativeBase):
    """
    Base class for all database models.

    ``AsyncAttrs`` exposes ``awaitable_attrs`` for loading lazy attributes
    under an AsyncSession.
    """

    metadata = MetadataFactory.create_metadata()

    type_annotation_map = {
        int: BigIntegerId,
        str: String(),
        bool: Boolean(),
        bytes: LargeBinary(),
        decimal.Decimal: Numeric(),
        datetime.datetime: DateTime(timezone=True),
    }
