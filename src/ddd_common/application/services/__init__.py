# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Generic data services.
"""

from __future__ import annotations

from ddd_common.application.services.base import DataServiceBase, ServiceBase
from ddd_common.application.services.crud import CrudDataService
from ddd_common.application.services.protocols import (
    CrudDataServiceProtocol,
    ReadOnlyDataServiceProtocol,
)
from ddd_common.application.services.read_only import ReadOnlyDataService

__all__ = [
    "CrudDataService",
    "CrudDataServiceProtocol",
    "DataServiceBase",
    "ReadOnlyDataService",
    "ReadOnlyDataServiceProtocol",
    "ServiceBase",
]
