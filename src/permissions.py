# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Command permission checks.

Resolution order for a member running a command:
1. The guild owner and members with Administrator are always allowed.
2. If the guild's config defines roles for the command's permission node,
   the member needs one of them.
3. Otherwise the command's permission_default applies.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from command.base import Command
    from reactionroles.gateway import PersistenceGateway

logger = logging.getLogger("reactroles.permissions")


class PermissionService:
    """Decides whether a member may run a command."""

    def __init__(self, gateway: "PersistenceGateway"):
        self.gateway = gateway

    async def can_execute(self, guild: Any, member: Any, command: "Command") -> bool:
        if guild is None:
            return False

        if member.id == guild.owner_id:
            return True

        guild_permissions = getattr(member, "guild_permissions", None)
        if guild_permissions is not None and guild_permissions.administrator:
            return True

        async with self.gateway.guild(guild.id) as config:
            allowed_roles = config.permission_roles(command.permission_node)

        if allowed_roles is None:
            return command.permission_default

        member_roles = {str(r.id) for r in getattr(member, "roles", [])}
        allowed = bool(member_roles & set(allowed_roles))
        if not allowed:
            logger.debug(
                f"User {member.id} lacks roles for {command.permission_node} in guild {guild.id}"
            )
        return allowed
