# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Reaction roles module.

Rolesets map emoji to roles; binding a roleset to a message lets members
pick up roles by reacting to it.
"""

from .binding import enable
from .events import ReactionEvent, ReactionEventHandler
from .gateway import PersistenceGateway
from .models import GuildConfig, MessageBinding, ReactionRoleSet
from .store import GuildConfigStore, MemoryGuildConfigStore

__all__ = [
    "enable",
    "ReactionEvent",
    "ReactionEventHandler",
    "PersistenceGateway",
    "GuildConfig",
    "MessageBinding",
    "ReactionRoleSet",
    "GuildConfigStore",
    "MemoryGuildConfigStore",
]
