# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Application layer: generic data services and their registration.
"""

from __future__ import annotations

from ddd_common.application.configuration import (
    AttributeRegistrationConfiguration,
    DataInterceptorConfiguration,
    ServiceRegistrationConfiguration,
)
from ddd_common.application.registration import (
    ApplicationConfiguration,
    add_application_layer,
    add_attribute_services,
    add_data_services,
)
from ddd_common.application.services import (
    CrudDataService,
    CrudDataServiceProtocol,
    DataServiceBase,
    ReadOnlyDataService,
    ReadOnlyDataServiceProtocol,
    ServiceBase,
)

__all__ = [
    "ApplicationConfiguration",
    "AttributeRegistrationConfiguration",
    "CrudDataService",
    "CrudDataServiceProtocol",
    "DataInterceptorConfiguration",
    "DataServiceBase",
    "ReadOnlyDataService",
    "ReadOnlyDataServiceProtocol",
    "ServiceBase",
    "ServiceRegistrationConfiguration",
    "add_application_layer",
    "add_attribute_services",
    "add_data_services",
]
