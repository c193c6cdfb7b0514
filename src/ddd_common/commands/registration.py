# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Scanning registration of command handlers.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from ddd_common.commands.configuration import CommandHandlerConfiguration
from ddd_common.commands.factory import CommandHandlerFactory
from ddd_common.commands.handlers import HANDLER_INTERFACES
from ddd_common.di import Container, UnsupportedLifetimeError, get_attributes
from ddd_common.di.scanning import ModuleRef, closed_interfaces_of, is_concrete, iter_classes
from ddd_common.errors import ensure_not_none
from ddd_common.logging import get_logger

logger = get_logger(__name__)


def handler_interfaces_of(cls: type) -> list[Any]:
    """Every closed handler interface ``cls`` implements."""
    interfaces: list[Any] = []
    for open_interface in HANDLER_INTERFACES:
        interfaces.extend(closed_interfaces_of(cls, open_interface))
    return interfaces


async def add_command_handlers(
    container: Container,
    modules: Iterable[ModuleRef],
    configure: Callable[[CommandHandlerConfiguration], None] | None = None,
) -> CommandHandlerConfiguration:
    """Register every concrete command handler found in ``modules``.

    Each handler is registered under every closed handler interface it
    implements, with its ``lifetime`` decorator if present and the default
    lifetime otherwise. ``intercepted_by`` interceptors apply when the handler
    enables interception. The ``CommandHandlerFactory`` is registered as
    scoped.

    Raises:
        UnsupportedLifetimeError: If the default lifetime needs per-type data
    """
    ensure_not_none(container, "container")
    ensure_not_none(modules, "modules")
    config = CommandHandlerConfiguration()
    if configure is not None:
        configure(config)

    count = 0
    for cls in iter_classes(modules):
        if not is_concrete(cls):
            continue
        interfaces = handler_interfaces_of(cls)
        if not interfaces:
            continue
        attributes = get_attributes(cls)
        if attributes is not None and attributes.lifetime is not None:
            lifetime = attributes.lifetime
        elif config.default_lifetime.supports_bulk_registration:
            lifetime = config.default_lifetime
        else:
            raise UnsupportedLifetimeError(config.default_lifetime, handler=cls.__qualname__)

        for interface in interfaces:
            await container.register(
                interface,
                cls,
                lifetime,
                tags=attributes.tags if attributes else (),
                owned=attributes.owned if attributes else None,
                interceptors=attributes.interceptors if attributes else (),
            )
        count += 1

    await container.register_scoped(CommandHandlerFactory)
    logger.debug("Command handlers registered", count=count)
    return config
