# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from ddd_common.mapping import Mapper, MappingProfile

from tests.fixtures.shop.dtos import (
    CategoryName,
    CreateProductRequest,
    ProductDto,
    ProductSummary,
)
from tests.fixtures.shop.models import Category, Product


class ShopProfile(MappingProfile):
    def configure(self, mapper: Mapper) -> None:
        mapper.create_map(Product, ProductDto, reverse=True)
        mapper.create_map(Product, ProductSummary)
        mapper.create_map(CreateProductRequest, Product)
        mapper.create_map(Category, CategoryName, reverse=True)
