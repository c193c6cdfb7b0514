# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
import pytest

from ddd_common.application import CrudDataService
from ddd_common.data_access import Repository, Specification, UnitOfWork
from ddd_common.errors import ArgumentNoneError
from ddd_common.mapping import MappingError
from ddd_common.results import NotFoundError

from tests.fixtures.shop.dtos import CreateProductRequest, ProductDto, ProductSummary
from tests.fixtures.shop.models import Product
from tests.fixtures.shop.services import ProductService


@pytest.fixture
def service(uow, mapper):
    return CrudDataService[Product](uow, mapper)


async def _stored(session_factory):
    async with UnitOfWork(session_factory) as check:
        products = await check.get_repository(Repository[Product]).get_all()
        return {p.name: p for p in products}


@pytest.mark.asyncio
async def test_add_and_save_returns_id(service, session_factory):
    result = await service.add(Product(name="Pen", price=3), should_save=True)
    assert result.is_success
    assert result.value is not None
    assert (await _stored(session_factory))["Pen"].id == result.value


@pytest.mark.asyncio
async def test_add_without_save_defers_commit(service, session_factory):
    result = await service.add(CreateProductRequest(name="Ink", price=12))
    assert result.is_success
    assert result.value is None
    assert await _stored(session_factory) == {}

    assert (await service.commit(audit_user_id=7)).unwrap() == 1
    assert (await _stored(session_factory))["Ink"].price == 12


@pytest.mark.asyncio
async def test_add_rejects_bad_entries(service):
    with pytest.raises(ArgumentNoneError):
        await service.add(None)
    with pytest.raises(MappingError):
        await service.add(ProductSummary(id=1, name="x"))


@pytest.mark.asyncio
async def test_add_range_maps_entries(service, session_factory):
    result = await service.add_range(
        [Product(name="Pen"), ProductDto(name="Pad", price=7)], should_save=True
    )
    assert len(result.unwrap()) == 2
    assert all(i is not None for i in result.unwrap())
    assert set(await _stored(session_factory)) == {"Pen", "Pad"}
    with pytest.raises(ArgumentNoneError):
        await service.add_range([None])


@pytest.mark.asyncio
async def test_begin_update(service, session_factory, products):
    dto = ProductDto(id=products[0].id, name="Fountain pen", price=40)
    assert (await service.begin_update(dto)).is_success
    entity = (await service.get(products[0].id)).unwrap()
    entity.price = 45
    await service.commit()
    assert (await _stored(session_factory))["Pen"].price == 45


@pytest.mark.asyncio
async def test_begin_update_range(service, session_factory, products):
    await service.begin_update_range(products[:2])
    products[0].price = 1
    products[1].price = 2
    assert (await service.commit()).unwrap() == 2
    stored = await _stored(session_factory)
    assert (stored["Pen"].price, stored["Ink"].price) == (1, 2)


@pytest.mark.asyncio
async def test_delete_by_entity_and_id(service, session_factory, products):
    assert (await service.delete(products[0], should_save=True)).is_success
    assert (await service.delete(products[1].id, should_save=True)).is_success
    assert set(await _stored(session_factory)) == {"Pad"}


@pytest.mark.asyncio
async def test_delete_missing_id_is_not_found(service, session_factory, products):
    result = await service.delete(999, should_save=True)
    assert isinstance(result.error, NotFoundError)
    assert result.error.context["id"] == 999
    assert len(await _stored(session_factory)) == 3


@pytest.mark.asyncio
async def test_delete_range_mixes_entities_and_ids(service, session_factory, products):
    result = await service.delete_range([products[0], products[1].id], should_save=True)
    assert result.is_success
    assert set(await _stored(session_factory)) == {"Pad"}

    failed = await service.delete_range([products[2].id, 998], should_save=True)
    assert failed.error.context["ids"] == [products[2].id, 998]
    assert set(await _stored(session_factory)) == {"Pad"}


@pytest.mark.asyncio
async def test_failed_delete_range_changes_nothing(service, session_factory, products):
    failed = await service.delete_range([products[1], products[0].id, 9999], should_save=True)
    assert failed.is_failure
    assert failed.error.context["ids"] == [products[0].id, 9999]

    assert (await service.add(Product(name="New"), should_save=True)).is_success
    assert set(await _stored(session_factory)) == {"Pen", "Ink", "Pad", "New"}


@pytest.mark.asyncio
async def test_failed_disable_range_changes_nothing(service, session_factory, products):
    failed = await service.disable_range([products[1], products[0].id, 9999])
    assert failed.is_failure

    assert (await service.commit()).unwrap() == 0
    stored = await _stored(session_factory)
    assert not any(product.is_disabled for product in stored.values())


@pytest.mark.asyncio
async def test_disable(service, session_factory, products):
    assert (await service.disable(products[0].id, should_save=True)).is_success
    assert (await service.disable_range([products[1]], should_save=True)).is_success
    assert (await service.disable(999)).is_failure
    assert (await service.disable_range([998])).is_failure

    stored = await _stored(session_factory)
    assert stored["Pen"].is_disabled and stored["Ink"].is_disabled
    assert not stored["Pad"].is_disabled
    assert (await service.long_count(Specification[Product]())).unwrap() == 1


@pytest.mark.asyncio
async def test_custom_service(uow, mapper, products):
    service = ProductService(uow, mapper)
    assert service.entity_type is Product
    result = await service.get_priced_above(5)
    assert [p.name for p in result.unwrap()] == ["Pad", "Ink"]
