# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Logging levels and settings.

Settings are environment driven (``DDD_LOGGING_*``) through pydantic-settings,
e.g. ``DDD_LOGGING_LEVEL=debug`` or
``DDD_LOGGING_LOGGER_LEVELS='{"sqlalchemy.engine": "info"}'``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def stdlib_level(self) -> int:
        return logging.getLevelNamesMapping()[self.value]

    @classmethod
    def parse(cls, value: Any) -> LogLevel:
        """Accept a LogLevel, a stdlib level number or a level name in any case.

        Raises:
            ValueError: If ``value`` names no known level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            for level in cls:
                if level.stdlib_level == value:
                    return level
        elif isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
        raise ValueError(f"Invalid log level: {value!r}")


Level = Annotated[LogLevel, BeforeValidator(LogLevel.parse)]


class LoggingSettings(BaseSettings):
    """Settings read by ``configure_logging``."""

    model_config = SettingsConfigDict(
        env_prefix="DDD_LOGGING_",
        extra="ignore",
        case_sensitive=False,
    )

    level: Level = Field(default=LogLevel.INFO, description="Level of the ddd_common logger")
    logger_levels: dict[str, Level] = Field(
        default_factory=dict,
        description="Levels for other loggers, e.g. sqlalchemy.engine",
    )
    json_format: bool = Field(default=False, description="Enable JSON log format")
    include_timestamp: bool = Field(default=True, description="Include timestamp in logs")
    console_enabled: bool = Field(default=True, description="Enable console logging")
    file_path: str | None = Field(default=None, description="Path to log file")
