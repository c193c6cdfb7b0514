# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from dataclasses import dataclass

import pytest

from ddd_common.errors import ArgumentNoneError
from ddd_common.mapping import Mapper, MappingError, projection_columns

from tests.fixtures.shop.dtos import (
    CategoryName,
    CreateProductRequest,
    ProductDto,
    ProductSummary,
)
from tests.fixtures.shop.models import Category, Product


class Unrelated:
    other: int


@dataclass
class Label:
    text: str


def test_entity_to_model(mapper):
    dto = mapper.map(Product(id=4, name="Pen", price=3), ProductDto)
    assert dto == ProductDto(id=4, name="Pen", price=3)


def test_reverse_map_builds_entity(mapper):
    product = mapper.map(ProductDto(id=None, name="Pen", price=3), Product)
    assert isinstance(product, Product)
    assert product.name == "Pen"
    assert product.price == 3
    assert product.is_transient


def test_request_to_entity(mapper):
    product = mapper.map(CreateProductRequest(name="Ink"), Product)
    assert product.name == "Ink"
    assert product.price == 0


def test_dataclass_maps_both_ways(mapper):
    assert mapper.map(Category(name="Office"), CategoryName) == CategoryName("Office")
    category = mapper.map(CategoryName("Garden"), Category)
    assert category.name == "Garden"


def test_unmapped_pair_raises(mapper):
    assert not mapper.has_map(ProductSummary, Product)
    with pytest.raises(MappingError) as exc:
        mapper.map(ProductSummary(id=1, name="x"), Product)
    assert exc.value.context["destination"] == "Product"


def test_map_to_own_type_returns_same_object(mapper):
    dto = ProductDto(name="a", price=1)
    assert mapper.map(dto, ProductDto) is dto


def test_map_none_raises(mapper):
    with pytest.raises(ArgumentNoneError):
        mapper.map(None, ProductDto)


def test_converter_and_validation_errors():
    mapper = Mapper()
    mapper.create_map(Label, ProductSummary, lambda label: ProductSummary(id=0, name=label.text))
    mapper.create_map(dict, ProductDto)
    assert mapper.map(Label("x"), ProductSummary) == ProductSummary(id=0, name="x")
    assert mapper.map_many([{"name": "a", "price": 1}], ProductDto)[0].price == 1
    with pytest.raises(MappingError):
        mapper.map({"name": "a"}, ProductDto)


def test_from_modules_discovers_profiles():
    mapper = Mapper.from_modules(["tests.fixtures.shop"])
    assert mapper.has_map(Product, ProductDto)
    assert mapper.has_map(ProductDto, Product)


def test_projection_columns():
    columns = projection_columns(Product, ProductSummary)
    assert [column.key for column in columns] == ["id", "name"]
    with pytest.raises(MappingError):
        projection_columns(Product, Unrelated)
