# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Error handling for ddd_common.
"""

from __future__ import annotations

from ddd_common.errors.base import (
    ArgumentNoneError,
    DddError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    ensure_not_none,
)
from ddd_common.errors.registry import registry

__all__ = [
    "ArgumentNoneError",
    "DddError",
    "ErrorCategory",
    "ErrorCode",
    "ErrorSeverity",
    "ensure_not_none",
    "registry",
]
