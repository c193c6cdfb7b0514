# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Service lifetimes supported by the ddd_common container.
"""

from __future__ import annotations

from enum import Enum

REQUEST_SCOPE_TAG = "request"


class Lifetime(str, Enum):
    """How long a resolved instance is shared."""

    SINGLE_INSTANCE = "single_instance"
    INSTANCE_PER_REQUEST = "instance_per_request"
    INSTANCE_PER_LIFETIME_SCOPE = "instance_per_lifetime_scope"
    INSTANCE_PER_DEPENDENCY = "instance_per_dependency"
    INSTANCE_PER_MATCHING_LIFETIME_SCOPE = "instance_per_matching_lifetime_scope"
    INSTANCE_PER_OWNED = "instance_per_owned"

    @property
    def supports_bulk_registration(self) -> bool:
        """Matching-scope and owned lifetimes need per-type data and can't be defaults."""
        return self not in (
            Lifetime.INSTANCE_PER_MATCHING_LIFETIME_SCOPE,
            Lifetime.INSTANCE_PER_OWNED,
        )
