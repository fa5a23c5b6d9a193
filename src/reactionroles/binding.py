# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Binding a roleset to a message."""

import logging
from typing import TYPE_CHECKING, Any, Union

from results import Result

from .models import GuildConfig, MessageBinding

if TYPE_CHECKING:
    from chat_platform import ChatPlatform

logger = logging.getLogger("reactroles.reactionroles.binding")


async def enable(
    config: GuildConfig,
    platform: "ChatPlatform",
    guild: Any,
    channel_id: Union[int, str],
    message_id: Union[int, str],
    set_name: str,
) -> Result[MessageBinding]:
    """
    Bind a roleset to a message and pre-populate the message's reactions.

    The message must have no reactions yet: reactions already on it could
    not be told apart from reactions made for the roleset.

    The caller holds the guild lock and commits afterwards.

    Args:
        config: The guild's configuration aggregate
        platform: Discord operations
        guild: The discord.Guild the command ran in
        channel_id: Channel containing the message
        message_id: Message to bind
        set_name: Roleset to bind it to

    Returns:
        Result holding the new binding, NOT_FOUND for an unknown
        channel/message/set, or CONFLICT if the message has reactions or
        is already bound
    """
    channel = await platform.fetch_channel(guild, channel_id)
    if channel is None:
        return Result.not_found(f"Invalid channel <#{channel_id}>.")

    message = await platform.fetch_message(channel, message_id)
    if message is None:
        return Result.not_found(f"Invalid message `{message_id}`.")

    if platform.reaction_count(message) > 0:
        return Result.conflict(
            "Existing reactions must be cleared before you can enable a new roleset for this message."
        )

    fetched = config.fetch_set(set_name)
    if not fetched.ok:
        return Result(error=fetched.error)
    roleset = fetched.value

    bound = config.bind(message.id, channel.id, set_name)
    if not bound.ok:
        return bound

    for react in list(roleset.entries):
        if not await platform.add_reaction(message, react):
            logger.warning(
                f"Could not add {react} to message {message.id} in guild {config.guild_id}"
            )

    logger.info(
        f"Bound message {message.id} (channel {channel.id}) to roleset "
        f"'{set_name}' in guild {config.guild_id}"
    )
    return bound

