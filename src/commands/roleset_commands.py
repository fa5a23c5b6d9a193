# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Roleset Commands

Text command for managing the rolesets used by reaction role messages.
"""

import logging
from typing import Awaitable, Callable, Optional

from command import ArgumentList, Command, CommandContext, choice, emoji, optional, role, string

logger = logging.getLogger("reactroles.commands.roleset")


class RRSetCommand(Command):
    """
    Manipulate rolesets for reaction menus.

    Subcommands:
    - add <set> <react> <role> - Add an emoji/role pair, creating the set if needed
    - update <set> <react> <role> - Change the role granted by an existing emoji
    - delete <set> <react> - Remove an emoji (an emptied set is dropped)
    - drop <set> - Remove the whole set
    - list <set> - Show every emoji and the role it grants
    - togglex <set> - Toggle whether members may hold only one role of the set
    """

    def __init__(self):
        super().__init__(
            "rrset",
            "Manipulate rolesets for reaction menus.",
            "gagbot:reactionroles:roleset",
            False,
            {
                "cmd": choice("add", "update", "delete", "drop", "list", "togglex"),
                "set": string,
                "react": optional(emoji),
                "role": optional(role),
            },
        )
        self._subcommands: dict[str, Callable[[CommandContext, ArgumentList], Awaitable[bool]]] = {
            "add": self.add_entry,
            "update": self.update_entry,
            "delete": self.delete_entry,
            "drop": self.drop_set,
            "list": self.list_set,
            "togglex": self.toggle_exclusive,
        }

    async def execute(self, ctx: CommandContext, args: ArgumentList) -> bool:
        handler = self._subcommands.get(args.get("cmd"))
        if handler is None:
            return False
        return await handler(ctx, args)

    async def _resolve_role_id(self, ctx: CommandContext, token: str) -> Optional[str]:
        found = ctx.platform.resolve_role(ctx.guild, token)
        if found is None:
            await ctx.reply(f"No such role `{token}`.")
            return None
        return str(found.id)

    # =========================================================================
    # rrset add / update
    # =========================================================================

    async def add_entry(self, ctx: CommandContext, args: ArgumentList) -> bool:
        react, role_token = args.get("react"), args.get("role")
        if react is None or role_token is None:
            return False

        role_id = await self._resolve_role_id(ctx, role_token)
        if role_id is None:
            return True

        set_name = args.get("set")
        async with ctx.gateway.guild(ctx.guild.id) as config:
            roleset = config.fetch_or_create_set(set_name)
            result = roleset.add_entry(react, role_id)
            if not result.ok:
                await ctx.reply(result.error.message)
                return True

            await ctx.commit(config, f"Added {react} to `{set_name}`.")
        return True

    async def update_entry(self, ctx: CommandContext, args: ArgumentList) -> bool:
        react, role_token = args.get("react"), args.get("role")
        if react is None or role_token is None:
            return False

        role_id = await self._resolve_role_id(ctx, role_token)
        if role_id is None:
            return True

        set_name = args.get("set")
        async with ctx.gateway.guild(ctx.guild.id) as config:
            fetched = config.fetch_set(set_name)
            if not fetched.ok:
                await ctx.reply(fetched.error.message)
                return True

            result = fetched.value.update_entry(react, role_id)
            if not result.ok:
                await ctx.reply(result.error.message)
                return True

            old_role, new_role = result.value
            await ctx.commit(config, f"Updated <@&{old_role}> to <@&{new_role}> in `{set_name}`.")
        return True

    # =========================================================================
    # rrset delete / drop
    # =========================================================================

    async def delete_entry(self, ctx: CommandContext, args: ArgumentList) -> bool:
        react = args.get("react")
        if react is None:
            return False

        set_name = args.get("set")
        async with ctx.gateway.guild(ctx.guild.id) as config:
            fetched = config.fetch_set(set_name)
            if not fetched.ok:
                await ctx.reply(fetched.error.message)
                return True
            roleset = fetched.value

            result = roleset.remove_entry(react)
            if not result.ok:
                await ctx.reply(result.error.message)
                return True

            message = f"Deleted {react} from `{set_name}`."
            if roleset.is_empty():
                config.drop_set(set_name)
                message += f" The set `{set_name}` is now empty and has been removed."

            await ctx.commit(config, message)
        return True

    async def drop_set(self, ctx: CommandContext, args: ArgumentList) -> bool:
        set_name = args.get("set")
        async with ctx.gateway.guild(ctx.guild.id) as config:
            result = config.drop_set(set_name)
            if not result.ok:
                await ctx.reply(result.error.message)
                return True

            bound = config.bindings_for_set(set_name)
            if bound:
                logger.warning(
                    f"Dropped set '{set_name}' in guild {ctx.guild.id} "
                    f"still bound to {len(bound)} message(s)"
                )

            await ctx.commit(config, f"Cleared the set `{set_name}`.")
        return True

    # =========================================================================
    # rrset list / togglex
    # =========================================================================

    async def list_set(self, ctx: CommandContext, args: ArgumentList) -> bool:
        set_name = args.get("set")
        async with ctx.gateway.guild(ctx.guild.id) as config:
            fetched = config.fetch_set(set_name)
            if not fetched.ok:
                await ctx.reply(fetched.error.message)
                return True
            roleset = fetched.value
            entries = list(roleset.entries.items())
            exclusive = roleset.exclusive

        if not entries:
            await ctx.reply(f"There are no items in the set `{set_name}`.")
            return True

        lines = [f"**Reaction Roles in `{set_name}`:**"]
        if exclusive:
            lines.append("*Exclusive: members can hold only one of these roles.*")
        for react, role_id in entries:
            lines.append(f"{react} grants <@&{role_id}>")
        await ctx.reply("\n".join(lines))
        return True

    async def toggle_exclusive(self, ctx: CommandContext, args: ArgumentList) -> bool:
        set_name = args.get("set")
        async with ctx.gateway.guild(ctx.guild.id) as config:
            fetched = config.fetch_set(set_name)
            if not fetched.ok:
                await ctx.reply(fetched.error.message)
                return True
            roleset = fetched.value

            roleset.set_exclusive(not roleset.exclusive)
            state = "now" if roleset.exclusive else "no longer"
            await ctx.commit(config, f"The set `{set_name}` is {state} exclusive.")
        return True
