# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

"""
Generic data access and application service scaffolding for CRUD
applications on SQLAlchemy, with an async dependency injection container
and command handler dispatch.
"""

__version__ = "0.1.0"
