# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Chat Platform

The narrow set of Discord operations the bot relies on. Every API call is
bounded by a timeout; Discord errors and timeouts are logged and reported
as None / False so callers never see discord.py exceptions.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional, Union

import discord

logger = logging.getLogger("reactroles.platform")

# Discord message length limit
DISCORD_MAX_LENGTH = 2000

Snowflake = Union[int, str]

_FAILED = object()


def chunk_message(content: str) -> list[str]:
    """Split a message into chunks that fit Discord's 2000 char limit, on line breaks where possible."""
    if len(content) <= DISCORD_MAX_LENGTH:
        return [content]

    chunks = []
    current: Optional[str] = None
    for line in content.split("\n"):
        while len(line) > DISCORD_MAX_LENGTH:
            if current is not None:
                chunks.append(current)
                current = None
            chunks.append(line[:DISCORD_MAX_LENGTH])
            line = line[DISCORD_MAX_LENGTH:]

        candidate = line if current is None else f"{current}\n{line}"
        if len(candidate) > DISCORD_MAX_LENGTH:
            chunks.append(current)
            current = line
        else:
            current = candidate

    if current is not None:
        chunks.append(current)
    return chunks


class ChatPlatform:
    """Discord operations used by commands and reaction handling."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def _call(self, awaitable: Awaitable[Any], action: str) -> Any:
        """Await a Discord API call. Returns _FAILED on timeout or HTTP error."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out after {self.timeout}s: {action}")
        except discord.NotFound:
            logger.info(f"Not found: {action}")
        except discord.Forbidden:
            logger.warning(f"Missing permissions: {action}")
        except discord.HTTPException as e:
            logger.error(f"Discord API error ({e.status}): {action}: {e.text}")
        return _FAILED

    # --- Messages ---

    async def send(self, channel: discord.abc.Messageable, content: str) -> Optional[discord.Message]:
        """Send a message, splitting into chunks if needed. Returns the last message sent."""
        last_msg = None
        for chunk in chunk_message(content):
            sent = await self._call(channel.send(chunk), f"send to channel {getattr(channel, 'id', '?')}")
            if sent is _FAILED:
                return None
            last_msg = sent
        return last_msg

    async def fetch_channel(self, guild: discord.Guild, channel_id: Snowflake) -> Optional[Any]:
        """Get a message channel belonging to `guild`, or None."""
        channel = guild.get_channel(int(channel_id))
        if channel is None:
            channel = await self._call(
                guild.fetch_channel(int(channel_id)), f"fetch channel {channel_id}"
            )
            if channel is _FAILED:
                return None

        if getattr(channel, "guild", None) is None or channel.guild.id != guild.id:
            return None
        if not hasattr(channel, "fetch_message"):
            return None
        return channel

    async def fetch_message(self, channel: Any, message_id: Snowflake) -> Optional[discord.Message]:
        message = await self._call(
            channel.fetch_message(int(message_id)), f"fetch message {message_id}"
        )
        return None if message is _FAILED else message

    def reaction_count(self, message: discord.Message) -> int:
        """Number of distinct reactions currently on a message."""
        return len(message.reactions)

    async def add_reaction(self, message: discord.Message, emoji: str) -> bool:
        result = await self._call(
            message.add_reaction(emoji), f"add {emoji} to message {message.id}"
        )
        return result is not _FAILED

    async def remove_reaction(
        self,
        guild: discord.Guild,
        channel_id: Snowflake,
        message_id: Snowflake,
        emoji: str,
        member: discord.abc.Snowflake,
    ) -> bool:
        """Remove `member`'s reaction from a message, without fetching the message."""
        channel = guild.get_channel(int(channel_id))
        if channel is None or not hasattr(channel, "get_partial_message"):
            logger.info(f"Channel {channel_id} not available to remove {emoji}")
            return False

        message = channel.get_partial_message(int(message_id))
        result = await self._call(
            message.remove_reaction(emoji, member),
            f"remove {emoji} by user {member.id} from message {message_id}",
        )
        return result is not _FAILED

    # --- Members & roles ---

    async def fetch_member(self, guild: discord.Guild, user_id: Snowflake) -> Optional[discord.Member]:
        member = guild.get_member(int(user_id))
        if member is not None:
            return member
        member = await self._call(guild.fetch_member(int(user_id)), f"fetch member {user_id}")
        return None if member is _FAILED else member

    def get_role(self, guild: discord.Guild, role_id: Snowflake) -> Optional[discord.Role]:
        try:
            return guild.get_role(int(role_id))
        except ValueError:
            return None

    def resolve_role(self, guild: discord.Guild, token: str) -> Optional[discord.Role]:
        """Find a role by ID, falling back to an exact name match."""
        if token.isdigit():
            found = guild.get_role(int(token))
            if found is not None:
                return found
        return discord.utils.get(guild.roles, name=token)

    def member_has_role(self, member: discord.Member, role_id: Snowflake) -> bool:
        return any(str(r.id) == str(role_id) for r in member.roles)

    async def grant_role(self, member: discord.Member, role_id: Snowflake) -> bool:
        role = self.get_role(member.guild, role_id)
        if role is None:
            logger.warning(f"Role {role_id} no longer exists in guild {member.guild.id}")
            return False
        result = await self._call(
            member.add_roles(role, reason="Reaction role"),
            f"grant role {role_id} to user {member.id}",
        )
        return result is not _FAILED

    async def revoke_role(self, member: discord.Member, role_id: Snowflake) -> bool:
        role = self.get_role(member.guild, role_id)
        if role is None:
            logger.warning(f"Role {role_id} no longer exists in guild {member.guild.id}")
            return False
        result = await self._call(
            member.remove_roles(role, reason="Reaction role"),
            f"revoke role {role_id} from user {member.id}",
        )
        return result is not _FAILED
