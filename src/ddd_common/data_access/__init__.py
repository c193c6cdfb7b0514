# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Data access for ddd_common: SQLAlchemy engine and sessions, specifications,
generic repositories and the unit of work.
"""

from __future__ import annotations

from ddd_common.data_access.database import (
    Base,
    SessionFactory,
    create_engine,
    create_schema,
    create_session_factory,
    drop_schema,
)
from ddd_common.data_access.errors import (
    DataAccessError,
    RepositoryError,
    UnitOfWorkCommitError,
    UnitOfWorkDisposedError,
    UnitOfWorkRollbackError,
)
from ddd_common.data_access.repositories import (
    ReadOnlyRepository,
    Repository,
    RepositoryCache,
)
from ddd_common.data_access.specifications import (
    PaginationFilter,
    ProjectionSpecification,
    Specification,
)
from ddd_common.data_access.unit_of_work import UnitOfWork
from ddd_common.data_access.registration import add_data_access_layer

__all__ = [
    "Base",
    "DataAccessError",
    "PaginationFilter",
    "ProjectionSpecification",
    "ReadOnlyRepository",
    "Repository",
    "RepositoryCache",
    "RepositoryError",
    "SessionFactory",
    "Specification",
    "UnitOfWork",
    "UnitOfWorkCommitError",
    "UnitOfWorkDisposedError",
    "UnitOfWorkRollbackError",
    "add_data_access_layer",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "drop_schema",
]
