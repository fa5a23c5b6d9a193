# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Shared fixtures: mocked Discord objects and an in-memory store."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chat_platform import ChatPlatform
from config import BotConfig
from reactionroles import MemoryGuildConfigStore, PersistenceGateway

GUILD_ID = 1000
OWNER_ID = 1


@pytest.fixture
def platform():
    """ChatPlatform mock whose Discord calls all succeed."""
    mock = MagicMock(spec=ChatPlatform)
    mock.send = AsyncMock(return_value=None)
    mock.fetch_channel = AsyncMock(return_value=None)
    mock.fetch_message = AsyncMock(return_value=None)
    mock.reaction_count = MagicMock(return_value=0)
    mock.add_reaction = AsyncMock(return_value=True)
    mock.remove_reaction = AsyncMock(return_value=True)
    mock.fetch_member = AsyncMock(return_value=None)
    mock.resolve_role = MagicMock(return_value=None)
    mock.member_has_role = MagicMock(return_value=False)
    mock.grant_role = AsyncMock(return_value=True)
    mock.revoke_role = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def store():
    return MemoryGuildConfigStore()


@pytest.fixture
def gateway(store):
    return PersistenceGateway(store)


@pytest.fixture
def bot_config():
    return BotConfig(prefixes=("gb!",), error_message="Oops!")


@pytest.fixture
def make_member():
    """Factory for mocked guild members."""

    def _make(user_id=42, role_ids=(), bot=False, admin=False):
        member = MagicMock()
        member.id = user_id
        member.bot = bot
        member.roles = [MagicMock(id=rid) for rid in role_ids]
        member.guild_permissions = MagicMock(administrator=admin)
        return member

    return _make


@pytest.fixture
def guild():
    mock = MagicMock()
    mock.id = GUILD_ID
    mock.name = "Test Guild"
    mock.owner_id = OWNER_ID
    return mock


@pytest.fixture
def make_message(guild, make_member):
    """Factory for mocked incoming chat messages."""

    def _make(content, author=None, in_guild=True):
        message = MagicMock()
        message.content = content
        message.guild = guild if in_guild else None
        message.author = author or make_member()
        message.channel = MagicMock(id=555)
        return message

    return _make
