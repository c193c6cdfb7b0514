# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common

from __future__ import annotations

from ddd_common.config.settings import ApplicationSettings

__all__ = ["ApplicationSettings"]
