# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Bot Commands

Every command the bot serves, registered at startup.
"""

from command import Command, CommandRegistry

from .binding_commands import RREnableCommand
from .roleset_commands import RRSetCommand


def all_commands() -> list[Command]:
    return [
        RREnableCommand(),
        RRSetCommand(),
    ]


def build_registry() -> CommandRegistry:
    """Create the registry of all commands."""
    return CommandRegistry(all_commands())


__all__ = [
    "RREnableCommand",
    "RRSetCommand",
    "all_commands",
    "build_registry",
]
