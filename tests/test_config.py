# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Tests for bot configuration and message chunking."""

import sys
from pathlib import Path
from unittest.mock import patch

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chat_platform import DISCORD_MAX_LENGTH, chunk_message
from config import BotConfig


class TestBotConfig:
    """Test configuration defaults and environment overrides."""

    def test_default_config(self):
        config = BotConfig()
        assert config.prefixes == ("gb!",)
        assert config.allow_leading_whitespace is True
        assert config.error_message == "Oops!"
        assert config.platform_timeout == 10.0

    def test_config_from_env_default(self):
        with patch.dict("os.environ", {}, clear=True):
            config = BotConfig.from_env()
            assert config.discord_token is None
            assert config.database_url is None
            assert config.prefixes == ("gb!",)
            assert config.log_level == "INFO"

    def test_config_from_env_custom_values(self):
        with patch.dict("os.environ", {
            "DISCORD_BOT_TOKEN": "token",
            "DATABASE_URL": "postgresql://localhost/rr",
            "COMMAND_PREFIXES": "g!, g!!,,",
            "ALLOW_LEADING_WHITESPACE": "false",
            "ERROR_MESSAGE": "Uh oh",
            "PLATFORM_TIMEOUT_SECONDS": "2.5",
            "LOG_LEVEL": "debug",
        }, clear=True):
            config = BotConfig.from_env()
            assert config.discord_token == "token"
            assert config.database_url == "postgresql://localhost/rr"
            assert config.prefixes == ("g!", "g!!")
            assert config.allow_leading_whitespace is False
            assert config.error_message == "Uh oh"
            assert config.platform_timeout == 2.5
            assert config.log_level == "DEBUG"

    def test_blank_prefixes_fall_back(self):
        with patch.dict("os.environ", {"COMMAND_PREFIXES": " , "}, clear=True):
            assert BotConfig.from_env().prefixes == ("gb!",)


class TestChunkMessage:
    """Test splitting long replies."""

    def test_short_message_unchanged(self):
        assert chunk_message("hello") == ["hello"]

    def test_splits_on_lines(self):
        line = "x" * 1500
        chunks = chunk_message(f"{line}\n{line}")
        assert chunks == [line, line]

    def test_keeps_blank_line_after_full_chunk(self):
        line = "x" * DISCORD_MAX_LENGTH
        chunks = chunk_message(f"{line}\n\ntail")
        assert chunks == [line, "\ntail"]

    def test_keeps_leading_blank_lines(self):
        chunks = chunk_message("\n\n" + "z" * (DISCORD_MAX_LENGTH + 5))
        assert chunks == ["\n", "z" * DISCORD_MAX_LENGTH, "z" * 5]

    def test_splits_overlong_line(self):
        chunks = chunk_message("y" * (DISCORD_MAX_LENGTH + 10))
        assert [len(c) for c in chunks] == [DISCORD_MAX_LENGTH, 10]
