# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Application settings for ddd_common.

Values come from ``DDD_*`` environment variables (or a ``.env`` file);
list values such as ``DDD_SCAN_MODULES`` are given as JSON.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ddd_common.di.lifetime import Lifetime


class ApplicationSettings(BaseSettings):
    """Settings consumed by the data access and application registration layers."""

    model_config = SettingsConfigDict(
        env_prefix="DDD_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        validate_assignment=True,
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///:memory:",
        description="SQLAlchemy async database URL",
    )
    echo_sql: bool = Field(default=False, description="Log emitted SQL")
    scan_modules: list[str] = Field(
        default_factory=list,
        description="Modules scanned for services, handlers and mapping profiles",
    )
    default_service_lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE
    default_command_handler_lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE

    @field_validator("default_service_lifetime", "default_command_handler_lifetime", mode="before")
    @classmethod
    def parse_lifetime(cls, v: Any) -> Any:
        """Accept lifetime names (``SINGLE_INSTANCE``) as well as values."""
        if isinstance(v, str) and v.upper() in Lifetime.__members__:
            return Lifetime[v.upper()]
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def load(cls) -> ApplicationSettings:
        """Load settings from environment variables or defaults."""
        return cls()
