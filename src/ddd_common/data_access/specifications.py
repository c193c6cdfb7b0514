# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Query specifications.

A ``Specification`` collects criteria, ordering, loader options and paging
for one entity type and applies them to a SQLAlchemy ``Select``. Criteria are
either SQLAlchemy boolean expressions or callables receiving the entity
class::

    spec = (
        Specification[Product]()
        .where(lambda p: p.price > 10)
        .order_by_descending(lambda p: p.price)
        .apply_paging(PaginationFilter(page_number=2, page_size=20))
    )

Unless ``include_disabled`` is set, specifications over aggregates that have
an ``is_disabled`` column skip disabled rows.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Select

from ddd_common.di.scanning import resolve_type_argument

TEntity = TypeVar("TEntity")
TResult = TypeVar("TResult")

# A SQLAlchemy expression, or a callable building one from the entity class.
Criterion = Any


class PaginationFilter(BaseModel):
    """1-based page request."""

    model_config = ConfigDict(frozen=True)

    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def take(self) -> int:
        return self.page_size


class Specification(Generic[TEntity]):
    """Criteria, ordering and paging for queries over ``TEntity``."""

    def __init__(self, *criteria: Criterion, include_disabled: bool = False) -> None:
        self._criteria: list[Criterion] = list(criteria)
        self._order_by: list[tuple[Criterion, bool]] = []
        self._options: list[Any] = []
        self.skip: int | None = None
        self.take: int | None = None
        self.include_disabled = include_disabled

    def where(self, *criteria: Criterion) -> Specification[TEntity]:
        self._criteria.extend(criteria)
        return self

    def order_by(self, *columns: Criterion) -> Specification[TEntity]:
        self._order_by.extend((column, False) for column in columns)
        return self

    def order_by_descending(self, *columns: Criterion) -> Specification[TEntity]:
        self._order_by.extend((column, True) for column in columns)
        return self

    def include(self, *options: Any) -> Specification[TEntity]:
        """Add loader options such as ``selectinload(Order.lines)``."""
        self._options.extend(options)
        return self

    def paginate(self, skip: int | None = None, take: int | None = None) -> Specification[TEntity]:
        if skip is not None and skip < 0:
            raise ValueError("skip must not be negative")
        if take is not None and take < 1:
            raise ValueError("take must be positive")
        self.skip = skip
        self.take = take
        return self

    def apply_paging(self, pagination: PaginationFilter) -> Specification[TEntity]:
        return self.paginate(pagination.skip, pagination.take)

    @property
    def is_paged(self) -> bool:
        return self.skip is not None or self.take is not None

    @staticmethod
    def _resolve(term: Criterion, entity_type: type) -> Any:
        if callable(term) and not hasattr(term, "__clause_element__"):
            return term(entity_type)
        return term

    def criteria_for(self, entity_type: type) -> list[Any]:
        """Resolved WHERE expressions, including the disabled filter."""
        clauses = [self._resolve(c, entity_type) for c in self._criteria]
        if not self.include_disabled and hasattr(entity_type, "is_disabled"):
            clauses.append(entity_type.is_disabled.is_(False))
        return clauses

    def apply_criteria(self, statement: Select[Any], entity_type: type) -> Select[Any]:
        """Apply only the WHERE clauses (used for counting)."""
        clauses = self.criteria_for(entity_type)
        return statement.where(*clauses) if clauses else statement

    def apply(self, statement: Select[Any], entity_type: type) -> Select[Any]:
        """Apply criteria, ordering, loader options and paging."""
        statement = self.apply_criteria(statement, entity_type)
        for column, descending in self._order_by:
            resolved = self._resolve(column, entity_type)
            statement = statement.order_by(resolved.desc() if descending else resolved)
        if self._options:
            statement = statement.options(*self._options)
        if self.skip:
            statement = statement.offset(self.skip)
        if self.take is not None:
            statement = statement.limit(self.take)
        return statement


class ProjectionSpecification(Specification[TEntity], Generic[TEntity, TResult]):
    """A specification whose results are projected onto ``TResult``.

    The result type comes from the ``result_type`` argument or from the
    generic parameters (``ProjectionSpecification[Product, ProductDto]`` or a
    subclass binding them).
    """

    def __init__(
        self,
        *criteria: Criterion,
        result_type: type[TResult] | None = None,
        include_disabled: bool = False,
    ) -> None:
        super().__init__(*criteria, include_disabled=include_disabled)
        self._result_type = result_type

    @property
    def result_type(self) -> type[TResult]:
        result_type = self._result_type or resolve_type_argument(
            self, ProjectionSpecification, 1
        )
        if result_type is None:
            raise TypeError(
                f"{type(self).__name__} has no result type; pass result_type or "
                "bind the generic parameters"
            )
        return result_type
