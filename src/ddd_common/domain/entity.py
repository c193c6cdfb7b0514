# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Entity base classes.

Entities compare by identity: two entities are equal when they are the same
object, or when they have the same (unproxied) type and the same assigned
id. An id of ``None`` means the entity hasn't been persisted yet.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from ddd_common.domain.base import Base, BigIntegerId

PROXY_MODULE_SUFFIX = ".proxies"


def utc_now() -> datetime:
    return datetime.now(UTC)


def get_unproxied_type(obj: Any) -> type:
    """Return the class of ``obj``, looking through generated proxy subclasses."""
    cls = obj if isinstance(obj, type) else type(obj)
    if cls.__name__.endswith("Proxy") or cls.__module__.endswith(PROXY_MODULE_SUFFIX):
        return cls.__bases__[0]
    return cls


class EntityBase(Base):
    """Abstract mapped base with audit timestamps.

    Concrete subclasses declare the ``id`` column.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None, nullable=True
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("created_at", utc_now())
        kwargs.setdefault("updated_at", None)
        super().__init__(**kwargs)

    @property
    def is_transient(self) -> bool:
        """True until an id has been assigned."""
        return getattr(self, "id", None) is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityBase):
            return False
        if self is other:
            return True
        if get_unproxied_type(self) is not get_unproxied_type(other):
            return False
        self_id = getattr(self, "id", None)
        other_id = getattr(other, "id", None)
        if self_id is None or other_id is None:
            return False
        return bool(self_id == other_id)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        entity_id = getattr(self, "id", None)
        if entity_id is None:
            return object.__hash__(self)
        return hash((get_unproxied_type(self).__qualname__, entity_id))

    def __repr__(self) -> str:
        return f"{get_unproxied_type(self).__name__}(id={getattr(self, 'id', None)!r})"


class Entity(EntityBase):
    """Entity with an auto-incrementing integer id."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)


class AggregateRootEntity(Entity):
    """Entity exposed as the unit of persistence through repositories and services.

    Disabled aggregates are soft-deleted: they stay in storage but queries
    built from a Specification skip them unless asked not to.
    """

    __abstract__ = True

    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("is_disabled", False)
        super().__init__(**kwargs)

    def disable(self) -> None:
        self.is_disabled = True
