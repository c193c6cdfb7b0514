# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Public API for the ddd_common logging system.
"""

from __future__ import annotations

from ddd_common.logging.config import LoggingSettings, LogLevel
from ddd_common.logging.logger import (
    DddLogger,
    StructuredFormatter,
    configure_logging,
    get_logger,
)
from ddd_common.logging.protocols import LoggerProtocol

__all__ = [
    "DddLogger",
    "LogLevel",
    "LoggerProtocol",
    "LoggingSettings",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
]
