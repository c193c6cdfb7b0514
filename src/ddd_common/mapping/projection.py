# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Column-level projection of mapped entities onto result types.

Only the result type's fields that match mapped columns are selected.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstrumentedAttribute

from ddd_common.mapping.errors import MappingError


def column_names(entity_type: type) -> list[str]:
    """Names of the mapped column attributes of an entity class."""
    return [attr.key for attr in sa_inspect(entity_type).column_attrs]


def field_names(result_type: type) -> list[str]:
    """Field names of a pydantic model, dataclass, or annotated class."""
    if isinstance(result_type, type) and issubclass(result_type, BaseModel):
        return list(result_type.model_fields)
    if dataclasses.is_dataclass(result_type):
        return [f.name for f in dataclasses.fields(result_type)]
    return [
        name
        for name in typing.get_type_hints(result_type)
        if not name.startswith("_")
    ]


def projection_columns(
    entity_type: type, result_type: type
) -> list[InstrumentedAttribute[Any]]:
    """Entity column attributes matching the fields of ``result_type``.

    Raises:
        MappingError: If no field of the result type is a mapped column
    """
    available = set(column_names(entity_type))
    columns = [
        getattr(entity_type, name) for name in field_names(result_type) if name in available
    ]
    if not columns:
        raise MappingError(entity_type, result_type, "no fields match mapped columns")
    return columns


def build(result_type: type, values: Mapping[str, Any]) -> Any:
    """Construct ``result_type`` from a mapping of field values."""
    if isinstance(result_type, type) and issubclass(result_type, BaseModel):
        return result_type.model_validate(dict(values))
    return result_type(**values)


def project(row: Any, result_type: type) -> Any:
    """Build ``result_type`` from a row selected with ``projection_columns``."""
    return build(result_type, row._mapping)
