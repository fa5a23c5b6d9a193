# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Bot Configuration

Runtime settings for the bot. Values can be overridden via environment
variables (a .env file is loaded by discord_bot.py before from_env runs).
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _parse_prefixes(raw: str) -> tuple[str, ...]:
    prefixes = tuple(p for p in (part.strip() for part in raw.split(",")) if p)
    return prefixes or ("gb!",)


@dataclass
class BotConfig:
    """Configuration for the bot process."""

    discord_token: Optional[str] = None
    database_url: Optional[str] = None

    # Command dispatch
    prefixes: tuple[str, ...] = field(default_factory=lambda: ("gb!",))
    allow_leading_whitespace: bool = True

    # Shown in bold when a storage write fails
    error_message: str = "Oops!"

    # Seconds to wait on any single Discord API call
    platform_timeout: float = 10.0

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Create config from environment variables with defaults."""
        return cls(
            discord_token=os.getenv("DISCORD_BOT_TOKEN"),
            database_url=os.getenv("DATABASE_URL") or None,
            prefixes=_parse_prefixes(os.getenv("COMMAND_PREFIXES", "gb!")),
            allow_leading_whitespace=os.getenv(
                "ALLOW_LEADING_WHITESPACE", "true"
            ).lower()
            == "true",
            error_message=os.getenv("ERROR_MESSAGE", "Oops!"),
            platform_timeout=float(os.getenv("PLATFORM_TIMEOUT_SECONDS", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
