# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Table of loaded commands keyed by invocation name."""

import logging
from typing import Iterable, Iterator, Optional

from .base import Command

logger = logging.getLogger("reactroles.command.registry")


class CommandRegistry:
    """Maps command names to Command instances."""

    def __init__(self, commands: Iterable[Command] = ()):
        self._commands: dict[str, Command] = {}
        for command in commands:
            self.register(command)

    def register(self, command: Command) -> None:
        """Add a command. A later command with the same name replaces the earlier one."""
        if command.name in self._commands:
            logger.warning(
                f"Command '{command.name}' registered twice, "
                f"replacing {type(self._commands[command.name]).__name__}"
            )
        self._commands[command.name] = command
        logger.info(f"  + command {command.name}")

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def command_names(self) -> frozenset:
        return frozenset(self._commands)
