# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: ddd_common
"""
Command handler registration options.
"""

from __future__ import annotations

import dataclasses

from ddd_common.di.lifetime import Lifetime


@dataclasses.dataclass
class CommandHandlerConfiguration:
    """Options for ``add_command_handlers``.

    Attributes:
        default_lifetime: Lifetime of handlers without a ``lifetime`` decorator
    """

    default_lifetime: Lifetime = Lifetime.INSTANCE_PER_LIFETIME_SCOPE
