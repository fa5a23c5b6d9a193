# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Reaction Event Handling

Grants and revokes roles when members react on bound messages.

A message is either unbound (events are ignored) or bound to exactly one
roleset. Reactions from bots are ignored, which covers the reactions the
bot itself adds when a message is enabled.

Exclusive sets: before granting a role, every other role of the set the
member holds is revoked and the member's reaction for that role's emoji
is removed from the message, so the visible reactions match the roles.
The member object delivered with an event can predate grants made by
earlier events, so the handler also remembers the last emoji each member
pressed on each bound message and treats that entry as held.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import discord

from .models import MessageBinding, ReactionRoleSet

if TYPE_CHECKING:
    from chat_platform import ChatPlatform

    from .gateway import PersistenceGateway
    from .models import GuildConfig

logger = logging.getLogger("reactroles.reactionroles.events")


@dataclass(frozen=True)
class ReactionEvent:
    """A reaction added to or removed from a guild message."""

    guild_id: int
    channel_id: int
    message_id: int
    user_id: int
    emoji: str
    # Only populated for additions
    member: Optional[Any] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: discord.RawReactionActionEvent) -> "ReactionEvent":
        return cls(
            guild_id=payload.guild_id,
            channel_id=payload.channel_id,
            message_id=payload.message_id,
            user_id=payload.user_id,
            emoji=str(payload.emoji),
            member=payload.member,
        )


class ReactionEventHandler:
    """Reaction role state machine driven by reaction add/remove events."""

    def __init__(self, gateway: "PersistenceGateway", platform: "ChatPlatform"):
        self.gateway = gateway
        self.platform = platform
        # (message_id, user_id) -> last emoji pressed on an exclusive set
        self._last_pick: dict[tuple[str, int], str] = {}

    def _resolve(
        self, config: "GuildConfig", event: ReactionEvent
    ) -> Optional[tuple[MessageBinding, ReactionRoleSet, str]]:
        """Follow message -> binding -> roleset -> role. None if any link is missing."""
        binding = config.binding_for(event.message_id)
        if binding is None:
            return None

        fetched = config.fetch_set(binding.roleset)
        if not fetched.ok:
            logger.debug(
                f"Message {event.message_id} is bound to missing roleset '{binding.roleset}'"
            )
            return None
        roleset = fetched.value

        role_id = roleset.get_entry(event.emoji)
        if role_id is None:
            return None

        return binding, roleset, role_id

    async def _member(self, guild: Any, event: ReactionEvent) -> Optional[Any]:
        """The reacting member, or None for bots and members that can't be found."""
        member = event.member
        if member is None:
            member = await self.platform.fetch_member(guild, event.user_id)
        if member is None or member.bot:
            return None
        return member

    async def on_reaction_add(self, guild: Any, event: ReactionEvent) -> bool:
        """
        Grant the role for a reaction on a bound message.

        Returns:
            True if the role was granted
        """
        if event.member is not None and event.member.bot:
            return False

        async with self.gateway.guild(event.guild_id) as config:
            resolved = self._resolve(config, event)
            if resolved is None:
                return False
            binding, roleset, role_id = resolved

            member = await self._member(guild, event)
            if member is None:
                return False

            pick_key = (binding.message_id, member.id)
            if roleset.exclusive:
                await self._revoke_others(
                    guild, binding, roleset, event.emoji, role_id, member,
                    self._last_pick.get(pick_key),
                )

            granted = await self.platform.grant_role(member, role_id)
            if granted:
                if roleset.exclusive:
                    self._last_pick[pick_key] = event.emoji
                logger.info(
                    f"Granted role {role_id} to user {member.id} via {event.emoji} "
                    f"on message {event.message_id} (set '{roleset.name}')"
                )
            return granted

    async def _revoke_others(
        self,
        guild: Any,
        binding: MessageBinding,
        roleset: ReactionRoleSet,
        keep_react: str,
        keep_role: str,
        member: Any,
        last_pick: Optional[str],
    ) -> None:
        for react, other_role in list(roleset.entries.items()):
            if react == keep_react or other_role == keep_role:
                continue
            if react != last_pick and not self.platform.member_has_role(member, other_role):
                continue

            await self.platform.revoke_role(member, other_role)
            await self.platform.remove_reaction(
                guild, binding.channel_id, binding.message_id, react, member
            )
            logger.info(
                f"Revoked role {other_role} from user {member.id} "
                f"(exclusive set '{roleset.name}')"
            )

    async def on_reaction_remove(self, guild: Any, event: ReactionEvent) -> bool:
        """
        Revoke the role for a reaction removed from a bound message.

        Returns:
            True if the role was revoked
        """
        async with self.gateway.guild(event.guild_id) as config:
            resolved = self._resolve(config, event)
            if resolved is None:
                return False
            _, roleset, role_id = resolved

            member = await self._member(guild, event)
            if member is None:
                return False

            pick_key = (str(event.message_id), member.id)
            if self._last_pick.get(pick_key) == event.emoji:
                del self._last_pick[pick_key]

            revoked = await self.platform.revoke_role(member, role_id)
            if revoked:
                logger.info(
                    f"Revoked role {role_id} from user {member.id} via {event.emoji} "
                    f"on message {event.message_id} (set '{roleset.name}')"
                )
            return revoked

    async def init_guild(self, guild: Any) -> int:
        """
        Re-fetch every bound message in a guild, e.g. after joining or a restart.

        Bindings whose channel or message can't be fetched are logged and kept.

        Returns:
            Number of bound messages that were fetched
        """
        async with self.gateway.guild(guild.id) as config:
            bindings = config.bindings

        fetched = 0
        for binding in bindings:
            channel = await self.platform.fetch_channel(guild, binding.channel_id)
            if channel is None:
                logger.error(
                    f"Failed to fetch channel '{binding.channel_id}' for bound message "
                    f"'{binding.message_id}' in guild {guild.id}"
                )
                continue

            message = await self.platform.fetch_message(channel, binding.message_id)
            if message is None:
                logger.error(f"Failed to fetch message '{binding.message_id}' in guild {guild.id}")
                continue

            fetched += 1

        logger.info(
            f"Guild {guild.id} ({getattr(guild, 'name', '?')}): "
            f"{fetched}/{len(bindings)} bound messages fetched"
        )
        return fetched
