# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from __future__ import annotations

from typing import Any

from ddd_common.errors import DddError


def _name(t: Any) -> str:
    return getattr(t, "__qualname__", str(t))


class MappingError(DddError):
    """Raised when an object can't be mapped to the requested type."""

    category_name = "MAPPING"

    def __init__(self, source: Any, destination: Any, reason: str | None = None) -> None:
        message = f"No mapping configured from {_name(source)} to {_name(destination)}"
        if reason:
            message = f"Cannot map {_name(source)} to {_name(destination)}: {reason}"
        super().__init__(
            message,
            code="MAPPING_ERROR",
            source=_name(source),
            destination=_name(destination),
        )
        self.source = source
        self.destination = destination
