# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Text Command Framework

Prefix-based command dispatch with typed argument parsing.
"""

from .argument_list import Argument, ArgumentList
from .arguments import (
    END_OF_INPUT,
    LIBRARY,
    Match,
    TypeMatcher,
    channel,
    choice,
    emoji,
    integer,
    literal,
    optional,
    role,
    snowflake,
    string,
    user,
)
from .base import UNTYPED, Command, CommandContext
from .dispatcher import DispatchOptions, Dispatcher, match_prefix, usage_hint
from .registry import CommandRegistry

__all__ = [
    "Argument",
    "ArgumentList",
    "END_OF_INPUT",
    "LIBRARY",
    "Match",
    "TypeMatcher",
    "channel",
    "choice",
    "emoji",
    "integer",
    "literal",
    "optional",
    "role",
    "snowflake",
    "string",
    "user",
    "UNTYPED",
    "Command",
    "CommandContext",
    "CommandRegistry",
    "DispatchOptions",
    "Dispatcher",
    "match_prefix",
    "usage_hint",
]
