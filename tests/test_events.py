# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Tests for reaction-driven role grants and revocations."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import discord
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reactionroles import ReactionEvent, ReactionEventHandler

GUILD_ID = 1000
CHANNEL_ID = 600
MESSAGE_ID = 500


def guild_document(exclusive=False):
    return {
        "reactionroles": {
            "sets": {
                "colours": {"exclusive": exclusive, "entries": {"🔴": "11", "🟢": "12"}},
            },
            "messages": {
                str(MESSAGE_ID): {"channel": str(CHANNEL_ID), "roleset": "colours"},
                "501": {"channel": str(CHANNEL_ID), "roleset": "gone"},
            },
        }
    }


def reaction(emoji, member=None, message_id=MESSAGE_ID, user_id=42):
    return ReactionEvent(
        guild_id=GUILD_ID,
        channel_id=CHANNEL_ID,
        message_id=message_id,
        user_id=user_id,
        emoji=emoji,
        member=member,
    )


@pytest.fixture
def handler(gateway, platform):
    return ReactionEventHandler(gateway, platform)


class TestReactionEvent:
    """Test building events from gateway payloads."""

    def test_from_payload(self):
        payload = MagicMock()
        payload.guild_id = GUILD_ID
        payload.channel_id = CHANNEL_ID
        payload.message_id = MESSAGE_ID
        payload.user_id = 42
        payload.emoji = discord.PartialEmoji(name="🔴")
        payload.member = None

        event = ReactionEvent.from_payload(payload)

        assert event == reaction("🔴")
        assert event.emoji == "🔴"

    def test_custom_emoji_text(self):
        payload = MagicMock()
        payload.emoji = discord.PartialEmoji(name="blob", id=99)
        assert ReactionEvent.from_payload(payload).emoji == "<:blob:99>"


class TestReactionAdd:
    """Test granting roles on reaction add."""

    @pytest.mark.asyncio
    async def test_grants_role(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()
        member = make_member()

        assert await handler.on_reaction_add(guild, reaction("🔴", member)) is True

        platform.grant_role.assert_awaited_once_with(member, "11")
        platform.revoke_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_exclusive_keeps_other_roles(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()
        platform.member_has_role.return_value = True

        await handler.on_reaction_add(guild, reaction("🟢", make_member()))

        platform.revoke_role.assert_not_called()
        platform.remove_reaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_exclusive_swaps_role(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document(exclusive=True)
        member = make_member()
        calls = []
        platform.member_has_role.side_effect = lambda m, role_id: role_id == "11"
        platform.revoke_role.side_effect = lambda m, role_id: calls.append(("revoke", role_id)) or True
        platform.grant_role.side_effect = lambda m, role_id: calls.append(("grant", role_id)) or True

        assert await handler.on_reaction_add(guild, reaction("🟢", member)) is True

        assert calls == [("revoke", "11"), ("grant", "12")]
        platform.remove_reaction.assert_awaited_once_with(
            guild, str(CHANNEL_ID), str(MESSAGE_ID), "🔴", member
        )

    @pytest.mark.asyncio
    async def test_exclusive_round_trip(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document(exclusive=True)
        member = make_member()
        held = set()
        platform.member_has_role.side_effect = lambda m, role_id: role_id in held
        platform.grant_role.side_effect = lambda m, role_id: held.add(role_id) or True
        platform.revoke_role.side_effect = lambda m, role_id: held.discard(role_id) or True

        await handler.on_reaction_add(guild, reaction("🔴", member))
        assert held == {"11"}

        await handler.on_reaction_add(guild, reaction("🟢", member))
        assert held == {"12"}

        platform.fetch_member.return_value = member
        await handler.on_reaction_remove(guild, reaction("🟢"))
        assert held == set()
        platform.fetch_member.assert_awaited_with(guild, 42)

    @pytest.mark.asyncio
    async def test_exclusive_with_stale_member_snapshots(
        self, handler, store, platform, guild, make_member
    ):
        store.documents[GUILD_ID] = guild_document(exclusive=True)
        server_roles = set()
        # Each event carries a member object that predates every grant
        platform.member_has_role.return_value = False
        platform.grant_role.side_effect = lambda m, role_id: server_roles.add(role_id) or True
        platform.revoke_role.side_effect = lambda m, role_id: server_roles.discard(role_id) or True
        first, second = make_member(), make_member()

        await handler.on_reaction_add(guild, reaction("🔴", first))
        await handler.on_reaction_add(guild, reaction("🟢", second))

        assert server_roles == {"12"}
        platform.remove_reaction.assert_awaited_once_with(
            guild, str(CHANNEL_ID), str(MESSAGE_ID), "🔴", second
        )

    @pytest.mark.asyncio
    async def test_removing_last_pick_clears_it(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document(exclusive=True)
        member = make_member()
        platform.fetch_member.return_value = member

        await handler.on_reaction_add(guild, reaction("🔴", member))
        await handler.on_reaction_remove(guild, reaction("🔴"))
        platform.revoke_role.reset_mock()

        await handler.on_reaction_add(guild, reaction("🟢", make_member()))

        platform.revoke_role.assert_not_called()
        platform.remove_reaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignores_bots(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()

        assert await handler.on_reaction_add(guild, reaction("🔴", make_member(bot=True))) is False

        platform.grant_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignores_fetched_bot(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()
        platform.fetch_member.return_value = make_member(bot=True)

        assert await handler.on_reaction_add(guild, reaction("🔴")) is False
        platform.grant_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_unbound_message(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()

        assert await handler.on_reaction_add(guild, reaction("🔴", make_member(), message_id=999)) is False
        platform.grant_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_emoji_not_in_set(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()

        assert await handler.on_reaction_add(guild, reaction("🔵", make_member())) is False
        platform.grant_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_binding_to_dropped_set(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()

        assert await handler.on_reaction_add(guild, reaction("🔴", make_member(), message_id=501)) is False

    @pytest.mark.asyncio
    async def test_unknown_guild_document(self, handler, platform, guild, make_member):
        assert await handler.on_reaction_add(guild, reaction("🔴", make_member())) is False


class TestReactionRemove:
    """Test revoking roles on reaction remove."""

    @pytest.mark.asyncio
    async def test_revokes_role(self, handler, store, platform, guild, make_member):
        store.documents[GUILD_ID] = guild_document()
        member = make_member()
        platform.fetch_member.return_value = member

        assert await handler.on_reaction_remove(guild, reaction("🔴")) is True

        platform.revoke_role.assert_awaited_once_with(member, "11")

    @pytest.mark.asyncio
    async def test_member_gone(self, handler, store, platform, guild):
        store.documents[GUILD_ID] = guild_document()
        platform.fetch_member.return_value = None

        assert await handler.on_reaction_remove(guild, reaction("🔴")) is False
        platform.revoke_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_unbound_message(self, handler, store, platform, guild):
        store.documents[GUILD_ID] = guild_document()

        assert await handler.on_reaction_remove(guild, reaction("🔴", message_id=999)) is False
        platform.fetch_member.assert_not_called()


class TestInitGuild:
    """Test re-fetching bound messages."""

    @pytest.mark.asyncio
    async def test_fetches_bound_messages(self, handler, store, platform, guild):
        store.documents[GUILD_ID] = guild_document()
        channel = MagicMock(id=CHANNEL_ID)
        platform.fetch_channel.return_value = channel
        platform.fetch_message.side_effect = [MagicMock(id=MESSAGE_ID), None]

        assert await handler.init_guild(guild) == 1
        assert platform.fetch_message.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_channel_keeps_binding(self, handler, gateway, store, platform, guild):
        store.documents[GUILD_ID] = guild_document()
        platform.fetch_channel.return_value = None

        assert await handler.init_guild(guild) == 0

        platform.fetch_message.assert_not_called()
        async with gateway.guild(GUILD_ID) as config:
            assert len(config.bindings) == 2
            assert not config.modified
