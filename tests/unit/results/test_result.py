# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
import pytest

from ddd_common.results import (
    ArgumentInvalidError,
    ExceptionError,
    Failure,
    NotFoundError,
    Result,
    Success,
)


def test_success_basics():
    result = Result.from_success(5)
    assert isinstance(result, Success)
    assert result.is_success and not result.is_failure
    assert result.unwrap() == 5
    assert result.error is None
    assert result.is_defined()


def test_from_success_defaults_to_none():
    result = Result.from_success()
    assert result.is_success
    assert result.value is None
    assert not result.is_defined()


def test_failure_basics():
    error = NotFoundError(entity_id=3)
    result = Result.from_error(error)
    assert isinstance(result, Failure)
    assert result.is_failure
    assert result.value is None
    assert result.unwrap_or(7) == 7
    assert result.unwrap_or_else(lambda e: e.context["entity_id"]) == 3
    with pytest.raises(NotFoundError):
        result.unwrap()


def test_map_and_flat_map():
    assert Success(2).map(lambda v: v * 3).unwrap() == 6
    assert Success(2).flat_map(lambda v: Success(v + 1)).unwrap() == 3
    failure = Failure(NotFoundError())
    assert failure.map(lambda v: v * 3) is failure
    assert failure.flat_map(lambda v: Success(v)) is failure


def test_map_captures_exceptions():
    result = Success(0).map(lambda v: 1 / v)
    assert result.is_failure
    assert isinstance(result.error, ZeroDivisionError)


def test_ensure():
    assert Success(3).ensure(lambda v: v > 1, ArgumentInvalidError("v")).is_success
    failed = Success(0).ensure(lambda v: v > 1, ArgumentInvalidError("v"))
    assert isinstance(failed.error, ArgumentInvalidError)


@pytest.mark.asyncio
async def test_async_combinators():
    async def double(v):
        return v * 2

    async def fail(v):
        raise ValueError("bad")

    assert (await Success(4).map_async(double)).unwrap() == 8
    assert isinstance((await Success(4).map_async(fail)).error, ValueError)
    assert (await Success(4).flat_map_async(lambda v: double_result(v))).unwrap() == 8


async def double_result(v):
    return Success(v * 2)


def test_to_dict():
    assert Success(1).to_dict() == {"status": "success", "data": 1}
    data = Failure(ValueError("boom")).to_dict()
    assert data["status"] == "error"
    assert data["error"]["code"] == "EXCEPTION"
    assert data["error"]["context"]["exception_type"] == "ValueError"
    assert Failure(NotFoundError()).to_dict()["error"]["code"] == "NOT_FOUND"


def test_error_payloads():
    assert NotFoundError().severity.value == "warning"
    assert ArgumentInvalidError("name").message == "Argument 'name' is invalid"
    wrapped = ExceptionError(KeyError())
    assert wrapped.message == "KeyError"
