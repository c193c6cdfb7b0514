# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Result type and failure payloads.
"""

from __future__ import annotations

from ddd_common.results.errors import (
    ArgumentInvalidError,
    ExceptionError,
    InvalidOperationError,
    NotFoundError,
    ResultError,
)
from ddd_common.results.result import Failure, Result, Success

__all__ = [
    "ArgumentInvalidError",
    "ExceptionError",
    "Failure",
    "InvalidOperationError",
    "NotFoundError",
    "Result",
    "ResultError",
    "Success",
]
