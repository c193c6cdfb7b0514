# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Domain model base classes.
"""

from __future__ import annotations

from ddd_common.domain.base import Base, MetadataFactory
from ddd_common.domain.entity import (
    AggregateRootEntity,
    Entity,
    EntityBase,
    get_unproxied_type,
)

__all__ = [
    "AggregateRootEntity",
    "Base",
    "Entity",
    "EntityBase",
    "MetadataFactory",
    "get_unproxied_type",
]
