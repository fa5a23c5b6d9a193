# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Command Base

Abstract text command plus the context handed to it on execution.

A command declares an argument schema:
    None / {}        no arguments
    {name: type}     typed arguments, parsed in declaration order
    UNTYPED          whitespace-split raw string tokens, named 0..n-1
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from results import ErrorKind, Result

from .argument_list import ArgumentList
from .arguments import TypeMatcher, next_token, string

if TYPE_CHECKING:
    from chat_platform import ChatPlatform
    from config import BotConfig
    from reactionroles.gateway import PersistenceGateway
    from reactionroles.models import GuildConfig

logger = logging.getLogger("reactroles.command")


class _Untyped:
    """Marker schema: split remaining text on whitespace."""

    def __repr__(self) -> str:
        return "UNTYPED"


UNTYPED = _Untyped()

ArgSchema = Union[None, Mapping[str, TypeMatcher], _Untyped]


@dataclass
class CommandContext:
    """Everything a command needs to run against one incoming message."""

    message: Any
    prefix: str
    platform: "ChatPlatform"
    gateway: "PersistenceGateway"
    config: "BotConfig"

    @property
    def guild(self) -> Any:
        return self.message.guild

    @property
    def channel(self) -> Any:
        return self.message.channel

    @property
    def author(self) -> Any:
        return self.message.author

    async def reply(self, content: str) -> None:
        """Send a message to the channel the command came from."""
        await self.platform.send(self.channel, content)

    async def report_failure(self) -> None:
        """Tell the user that something went wrong, without details."""
        await self.reply(f"***{self.config.error_message}***\n Something went wrong...")

    async def commit(self, guild_config: "GuildConfig", success_message: Optional[str] = None) -> bool:
        """
        Persist a guild's configuration, then confirm to the user.

        A failed write is logged and reported generically.

        Returns:
            True unless the write failed
        """
        result = await self.gateway.commit(guild_config)
        if not result.ok:
            logger.error(f"{result.error.message} (command from user {self.author.id})")
            await self.report_failure()
            return False

        if success_message:
            await self.reply(success_message)
        return True


class Command(ABC):
    """
    Abstract text command.

    Attributes are fixed at construction and exposed read-only.
    """

    def __init__(
        self,
        name: str,
        description: str,
        permission_node: str,
        permission_default: bool,
        args: ArgSchema = None,
    ):
        if not name or name != name.lower() or any(ch.isspace() for ch in name):
            raise ValueError(f"Invalid command name {name!r}")

        self._name = name
        self._description = description
        self._permission_node = permission_node
        self._permission_default = permission_default
        self._args = dict(args) if isinstance(args, Mapping) else args

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def permission_node(self) -> str:
        return self._permission_node

    @property
    def permission_default(self) -> bool:
        return self._permission_default

    @property
    def args(self) -> ArgSchema:
        return self._args

    @property
    def takes_args(self) -> bool:
        return self._args is UNTYPED or bool(self._args)

    def parse_args(self, tail: str) -> Result[ArgumentList]:
        """
        Parse an ArgumentList from the text after the command name.

        Args:
            tail: Argument text

        Returns:
            Result holding the ArgumentList, or a PARSE error
        """
        args = ArgumentList()

        if self.takes_args and not tail.strip():
            return Result.failure(
                ErrorKind.PARSE, f"Command '{self.name}' can't be called without args."
            )

        if isinstance(self._args, dict) and self._args:
            for arg_name, arg_type in self._args.items():
                match = arg_type(tail)
                if match is None:
                    return Result.failure(
                        ErrorKind.PARSE,
                        f"Expected `{arg_name}`:`{arg_type.name}`, found '{next_token(tail)}'",
                    )
                args.add(arg_name, match.value, arg_type)
                tail = match.rest.lstrip()
        else:
            for index, token in enumerate(tail.split()):
                args.add(index, token, string)

        return Result.success(args)

    @abstractmethod
    async def execute(self, ctx: CommandContext, args: ArgumentList) -> bool:
        """
        Run the command.

        Returns:
            False to have the dispatcher reply with usage help, True otherwise
        """
        ...

    def get_usage(self) -> str:
        """Command name and expected arguments, e.g. `rrset <cmd:add|list> [react:Emoji]`."""
        usage = self.name

        if self._args is UNTYPED:
            usage += " <args>"
        elif self._args:
            for arg_name, arg_type in self._args.items():
                if arg_type.is_optional:
                    usage += f" [{arg_name}:{arg_type.display_name}]"
                else:
                    usage += f" <{arg_name}:{arg_type.name}>"

        return usage

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

