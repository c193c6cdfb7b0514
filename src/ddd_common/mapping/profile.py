# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ddd_common.mapping.mapper import Mapper


class MappingProfile(ABC):
    """A group of map declarations, discovered by module scanning.

    Example:
        ```python
        class ProductProfile(MappingProfile):
            def configure(self, mapper: Mapper) -> None:
                mapper.create_map(Product, ProductDto, reverse=True)
        ```
    """

    @abstractmethod
    def configure(self, mapper: Mapper) -> None: ...
