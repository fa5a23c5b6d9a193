# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Command Dispatcher

Turns an incoming chat message of the form `<prefix><command> <args...>`
into a typed command invocation.

Ignored without a reply:
- messages that match no prefix, or carry nothing after it
- unknown command names
- users the permission service rejects

Parse failures and unhandled invocations get a usage hint in the channel.
Parse failures are also returned to the caller for logging.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Optional

from results import RoleError

from .base import Command, CommandContext
from .registry import CommandRegistry

if TYPE_CHECKING:
    from chat_platform import ChatPlatform
    from config import BotConfig
    from permissions import PermissionService
    from reactionroles.gateway import PersistenceGateway

logger = logging.getLogger("reactroles.command.dispatcher")

WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class DispatchOptions:
    """How messages are recognized as commands."""

    prefixes: tuple[str, ...] = field(default_factory=lambda: ("gb!",))
    allow_leading_whitespace: bool = True

    @classmethod
    def from_config(cls, config: "BotConfig") -> "DispatchOptions":
        return cls(
            prefixes=tuple(config.prefixes),
            allow_leading_whitespace=config.allow_leading_whitespace,
        )


def match_prefix(content: str, prefixes: Iterable[str]) -> Optional[str]:
    """
    Return the longest prefix that starts `content`, or None.

    Ties keep the first declared prefix.
    """
    best = None
    for prefix in prefixes:
        if content.startswith(prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    return best


def usage_hint(prefix: str, command: Command) -> str:
    return f"**Usage:** `{prefix}{command.get_usage()}` - {command.description}"


class Dispatcher:
    """Routes chat messages to registered commands."""

    def __init__(
        self,
        registry: CommandRegistry,
        permissions: "PermissionService",
        platform: "ChatPlatform",
        gateway: "PersistenceGateway",
        config: "BotConfig",
        options: Optional[DispatchOptions] = None,
    ):
        self.registry = registry
        self.permissions = permissions
        self.platform = platform
        self.gateway = gateway
        self.config = config
        self.options = options or DispatchOptions.from_config(config)

    async def dispatch(self, message: Any) -> Optional[RoleError]:
        """
        Check a message for a command and run it.

        Args:
            message: Incoming discord.Message

        Returns:
            The parse error if the arguments were malformed, otherwise None
        """
        if message.guild is None:
            return None

        content = message.content or ""
        prefix = match_prefix(content, self.options.prefixes)
        if prefix is None:
            return None

        tail = content[len(prefix):]
        if self.options.allow_leading_whitespace:
            tail = tail.lstrip()
        if not tail:
            return None

        name = WHITESPACE.split(tail, maxsplit=1)[0]
        tail = tail[len(name):].lstrip()

        command = self.registry.get(name)
        if command is None:
            return None

        if not await self.permissions.can_execute(message.guild, message.author, command):
            logger.debug(
                f"User {message.author.id} may not run '{command.name}' "
                f"in guild {message.guild.id}"
            )
            return None

        parsed = command.parse_args(tail)
        if not parsed.ok:
            await self.platform.send(message.channel, usage_hint(prefix, command))
            return parsed.error

        ctx = CommandContext(
            message=message,
            prefix=prefix,
            platform=self.platform,
            gateway=self.gateway,
            config=self.config,
        )

        logger.info(
            f"Running '{command.name}' for user {message.author.id} in guild {message.guild.id}"
        )
        if not await command.execute(ctx, parsed.value):
            await self.platform.send(message.channel, usage_hint(prefix, command))

        return None
