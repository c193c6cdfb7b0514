# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Command messages.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

TResult = TypeVar("TResult")


class Command(BaseModel):
    """Base class for commands; ``str()`` renders the command as JSON."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.model_dump_json()


class ResultCommand(Command, Generic[TResult]):
    """A command whose handler produces a ``TResult``."""
