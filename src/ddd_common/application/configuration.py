# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Options for application layer registration.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from ddd_common.di.interception import InterceptorReference
from ddd_common.di.lifetime import Lifetime
from ddd_common.errors import ensure_not_none


class DataInterceptorConfiguration(str, Enum):
    """Which generic data services an interceptor wraps."""

    CRUD_AND_READ_ONLY = "crud_and_read_only"
    CRUD = "crud"
    READ_ONLY = "read_only"

    @property
    def applies_to_crud(self) -> bool:
        return self is not DataInterceptorConfiguration.READ_ONLY

    @property
    def applies_to_read_only(self) -> bool:
        return self is not DataInterceptorConfiguration.CRUD


@dataclasses.dataclass
class ServiceRegistrationConfiguration:
    """Options for data service registration.

    Attributes:
        base_generic_data_service_lifetime: Lifetime of the open generic
            ``ReadOnlyDataService`` / ``CrudDataService`` registrations
        data_service_lifetime: Lifetime of custom data services without a
            ``lifetime`` decorator
    """

    base_generic_data_service_lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE
    data_service_lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE
    data_interceptors: dict[InterceptorReference, DataInterceptorConfiguration] = (
        dataclasses.field(default_factory=dict)
    )

    def add_data_service_interceptor(
        self,
        interceptor: type[Any],
        configuration: DataInterceptorConfiguration = DataInterceptorConfiguration.CRUD_AND_READ_ONLY,
        is_async: bool = False,
    ) -> ServiceRegistrationConfiguration:
        """Intercept data services with ``interceptor``.

        The first configuration given for an interceptor is kept.
        """
        ensure_not_none(interceptor, "interceptor")
        self.data_interceptors.setdefault(
            InterceptorReference(interceptor, is_async),
            DataInterceptorConfiguration(configuration),
        )
        return self

    def interceptors_for(self, crud: bool) -> tuple[InterceptorReference, ...]:
        """Interceptors configured for CRUD (``crud``) or read-only services."""
        return tuple(
            reference
            for reference, configuration in self.data_interceptors.items()
            if (configuration.applies_to_crud if crud else configuration.applies_to_read_only)
        )


@dataclasses.dataclass
class AttributeRegistrationConfiguration:
    """Options for registering ``register_service`` classes.

    Attributes:
        default_lifetime: Lifetime of services without a ``lifetime`` decorator
    """

    default_lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE
