# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Service disposal implementation for the ddd_common DI system.
"""

from __future__ import annotations

import inspect
from typing import Any

from ddd_common.di.errors import DIError


class DisposalError(DIError):
    """Raised when one or more services fail to dispose."""

    def __init__(self, message: str, errors: list[BaseException]) -> None:
        super().__init__(
            message, code="DISPOSAL_FAILED", errors=[repr(e) for e in errors]
        )
        self.errors = errors


def is_disposable(service: Any) -> bool:
    return callable(getattr(service, "dispose", None)) or callable(
        getattr(service, "aclose", None)
    )


class _DisposalManager:
    """Disposes services that expose ``dispose()`` or ``aclose()``."""

    async def dispose_service(self, service: Any) -> None:
        """Safely dispose a service if it supports disposal."""
        dispose = getattr(service, "dispose", None) or getattr(service, "aclose", None)
        if dispose is None:
            return
        result = dispose()
        if inspect.isawaitable(result):
            await result

    async def dispose_services(self, services: list[Any]) -> None:
        """Dispose services in reverse creation order.

        Every service is attempted; failures are raised together afterwards.
        """
        errors: list[BaseException] = []
        for service in reversed(services):
            try:
                await self.dispose_service(service)
            except Exception as exc:
                errors.append(exc)
        if errors:
            raise DisposalError(f"Failed to dispose {len(errors)} service(s)", errors)
