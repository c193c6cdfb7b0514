# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
import asyncio
import json

import pytest
from pydantic import ValidationError

from ddd_common.commands import (
    Command,
    CommandHandler,
    CommandHandlerConfiguration,
    CommandHandlerFactory,
    InvalidHandlerTypeError,
    ResultCommand,
    ResultCommandHandler,
    add_command_handlers,
    handler_interfaces_of,
)
from ddd_common.di import (
    Container,
    Lifetime,
    ServiceNotRegisteredError,
    UnsupportedLifetimeError,
)
from ddd_common.results import Result, Success

from tests.fixtures.shop.handlers import (
    CreateProduct,
    CreateProductHandler,
    GetProductPrice,
    GetProductPriceHandler,
)


class Ping(Command):
    message: str


class Echo(ResultCommand[str]):
    text: str


class PingHandlerBase(CommandHandler[Ping]):
    pass


class PingHandler(PingHandlerBase):
    created = 0

    def __init__(self):
        PingHandler.created += 1

    async def handle(self, command: Ping) -> Result[None]:
        return Success(None)


async def _create_ping_handler(scope) -> PingHandler:
    await asyncio.sleep(0)
    return PingHandler()


class EchoHandler(ResultCommandHandler[Echo, str]):
    async def handle(self, command: Echo) -> Result[str]:
        return Success(command.text)


class PingAndEchoHandler(CommandHandler[Ping], ResultCommandHandler[Echo, str]):
    async def handle(self, command):
        return Success(None)


@pytest.fixture
async def container():
    container = Container()
    await container.register_transient(CommandHandler[Ping], _create_ping_handler)
    await container.register_transient(PingHandlerBase, PingHandler)
    await container.register_transient(ResultCommandHandler[Echo, str], EchoHandler)
    yield container
    await container.dispose()


def test_command_str_is_json():
    command = Ping(message="hello")
    assert json.loads(str(command)) == {"message": "hello"}


def test_commands_are_frozen():
    command = Ping(message="hello")
    with pytest.raises(ValidationError):
        command.message = "changed"


def test_handler_interfaces_of():
    assert handler_interfaces_of(PingHandler) == [CommandHandler[Ping]]
    assert handler_interfaces_of(EchoHandler) == [ResultCommandHandler[Echo, str]]
    assert handler_interfaces_of(PingAndEchoHandler) == [
        CommandHandler[Ping],
        ResultCommandHandler[Echo, str],
    ]
    assert handler_interfaces_of(Ping) == []


@pytest.mark.asyncio
async def test_factory_caches_handlers_per_type(container):
    async with container.create_scope() as scope:
        factory = CommandHandlerFactory(scope)
        first = await factory.get_handler(CommandHandler[Ping])
        second = await factory.get_handler(CommandHandler[Ping])
        assert isinstance(first, PingHandler)
        assert first is second


@pytest.mark.asyncio
async def test_factories_do_not_share_handlers(container):
    async with container.create_scope() as scope:
        first = await CommandHandlerFactory(scope).get_handler(CommandHandler[Ping])
        second = await CommandHandlerFactory(scope).get_handler(CommandHandler[Ping])
        assert first is not second


@pytest.mark.asyncio
async def test_concurrent_first_requests_share_one_handler(container):
    async with container.create_scope() as scope:
        factory = CommandHandlerFactory(scope)
        before = PingHandler.created
        handlers = await asyncio.gather(
            *(factory.get_handler(CommandHandler[Ping]) for _ in range(10))
        )
        assert all(handler is handlers[0] for handler in handlers)
        assert PingHandler.created == before + 1


@pytest.mark.asyncio
async def test_abstract_handler_type_reuses_cached_interface(container):
    async with container.create_scope() as scope:
        factory = CommandHandlerFactory(scope)
        by_interface = await factory.get_handler(CommandHandler[Ping])
        assert await factory.get_handler(PingHandlerBase) is by_interface


@pytest.mark.asyncio
async def test_get_handler_for_command_type(container):
    async with container.create_scope() as scope:
        factory = CommandHandlerFactory(scope)
        ping = await factory.get_handler_for(Ping)
        echo = await factory.get_handler_for(Echo, str)
        assert isinstance(ping, PingHandler)
        assert (await echo.handle(Echo(text="hi"))).unwrap() == "hi"


@pytest.mark.asyncio
@pytest.mark.parametrize("handler_type", [int, CommandHandler, PingHandler, Ping])
async def test_invalid_handler_types_are_rejected(container, handler_type):
    async with container.create_scope() as scope:
        with pytest.raises(InvalidHandlerTypeError) as exc_info:
            await CommandHandlerFactory(scope).get_handler(handler_type)
        assert exc_info.value.code == "INVALID_HANDLER_TYPE"
        assert isinstance(exc_info.value, TypeError)


@pytest.mark.asyncio
async def test_unregistered_handler_raises(container):
    async with container.create_scope() as scope:
        with pytest.raises(ServiceNotRegisteredError):
            await CommandHandlerFactory(scope).get_handler(CommandHandler[Echo])


@pytest.mark.asyncio
async def test_add_command_handlers_scans_modules():
    container = Container()
    config = await add_command_handlers(container, ["tests.fixtures.shop"])

    assert config.default_lifetime is Lifetime.INSTANCE_PER_LIFETIME_SCOPE
    create = container.get_registration(CommandHandler[CreateProduct])
    assert create.implementation is CreateProductHandler
    assert create.lifetime is Lifetime.INSTANCE_PER_LIFETIME_SCOPE
    price = container.get_registration(ResultCommandHandler[GetProductPrice, int])
    assert price.implementation is GetProductPriceHandler
    assert price.lifetime is Lifetime.INSTANCE_PER_DEPENDENCY
    assert await container.has_registration(CommandHandlerFactory)


@pytest.mark.asyncio
async def test_add_command_handlers_uses_configured_default():
    container = Container()

    def configure(config: CommandHandlerConfiguration) -> None:
        config.default_lifetime = Lifetime.INSTANCE_PER_DEPENDENCY

    await add_command_handlers(container, ["tests.fixtures.shop.handlers"], configure)
    registration = container.get_registration(CommandHandler[CreateProduct])
    assert registration.lifetime is Lifetime.INSTANCE_PER_DEPENDENCY


@pytest.mark.asyncio
async def test_add_command_handlers_rejects_non_bulk_default():
    container = Container()

    def configure(config: CommandHandlerConfiguration) -> None:
        config.default_lifetime = Lifetime.INSTANCE_PER_OWNED

    with pytest.raises(UnsupportedLifetimeError) as exc_info:
        await add_command_handlers(container, ["tests.fixtures.shop.handlers"], configure)
    assert exc_info.value.context["handler"] == "CreateProductHandler"
