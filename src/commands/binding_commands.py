# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Binding Commands

Bind a roleset to a message, so members get roles by reacting to it.
"""

import logging

from command import ArgumentList, Command, CommandContext, channel, snowflake, string
from reactionroles import enable

logger = logging.getLogger("reactroles.commands.binding")


class RREnableCommand(Command):
    """rrenable <channel> <message> <roleset>"""

    def __init__(self):
        super().__init__(
            "rrenable",
            "Bind a roleset to a message.",
            "gagbot:reactionroles:message",
            False,
            {
                "channel": channel,
                "message": snowflake,
                "roleset": string,
            },
        )

    async def execute(self, ctx: CommandContext, args: ArgumentList) -> bool:
        channel_id = args.get("channel")
        message_id = args.get("message")
        set_name = args.get("roleset")

        async with ctx.gateway.guild(ctx.guild.id) as config:
            result = await enable(
                config, ctx.platform, ctx.guild, channel_id, message_id, set_name
            )
            if not result.ok:
                logger.info(
                    f"rrenable rejected in guild {ctx.guild.id}: {result.error.message}"
                )
                await ctx.reply(result.error.message)
                return True

            await ctx.commit(
                config, f"Enabled the roleset `{set_name}` on message `{message_id}`."
            )
        return True
