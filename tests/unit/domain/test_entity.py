# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from ddd_common.domain import get_unproxied_type

from tests.fixtures.shop.models import Category, Product


def test_new_entity_is_transient_with_defaults():
    product = Product(name="Pen")
    assert product.is_transient
    assert product.id is None
    assert product.is_disabled is False
    assert product.created_at is not None
    assert product.updated_at is None


def test_entities_with_same_id_are_equal():
    assert Product(id=1, name="a") == Product(id=1, name="b")
    assert Product(id=1, name="a") != Product(id=2, name="a")
    assert hash(Product(id=1, name="a")) == hash(Product(id=1, name="b"))


def test_different_types_are_never_equal():
    assert Product(id=1, name="a") != Category(id=1, name="a")
    assert Product(id=1, name="a") != 1


def test_transient_entities_are_equal_only_to_themselves():
    first = Product(name="a")
    second = Product(name="a")
    assert first == first
    assert first != second
    assert len({first, second}) == 2


def test_disable_marks_entity():
    product = Product(id=3, name="a")
    product.disable()
    assert product.is_disabled
    assert repr(product) == "Product(id=3)"


def test_get_unproxied_type_looks_through_proxies():
    class Widget:
        pass

    class WidgetProxy(Widget):
        pass

    assert get_unproxied_type(WidgetProxy) is Widget
    assert get_unproxied_type(WidgetProxy()) is Widget
    assert get_unproxied_type(Product(name="a")) is Product
