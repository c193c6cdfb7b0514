# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Entity <-> DTO mapping.
"""

from __future__ import annotations

from ddd_common.mapping.errors import MappingError
from ddd_common.mapping.mapper import Mapper
from ddd_common.mapping.profile import MappingProfile
from ddd_common.mapping.projection import project, projection_columns

__all__ = ["Mapper", "MappingError", "MappingProfile", "project", "projection_columns"]
