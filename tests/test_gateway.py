# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Tests for the persistence gateway."""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reactionroles import PersistenceGateway
from results import ErrorKind


def make_store(document=None, saved=True):
    store = MagicMock()
    store.load = AsyncMock(return_value=document)
    store.save = AsyncMock(return_value=saved)
    return store


class TestLoading:
    """Test aggregate loading and caching."""

    @pytest.mark.asyncio
    async def test_new_guild_starts_empty_and_unwritten(self):
        store = make_store(document=None)
        gateway = PersistenceGateway(store)

        async with gateway.guild(1000) as config:
            assert config.guild_id == "1000"
            assert config.sets == {}
            result = await gateway.commit(config)

        assert result.ok
        assert result.value is False
        store.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_aggregate_is_cached(self):
        store = make_store(document={"reactionroles": {"sets": {"s": {"entries": {}}}}})
        gateway = PersistenceGateway(store)

        async with gateway.guild(1000) as first:
            pass
        async with gateway.guild("1000") as second:
            pass

        assert first is second
        store.load.assert_awaited_once_with("1000")

    @pytest.mark.asyncio
    async def test_load_errors_propagate(self):
        store = make_store()
        store.load.side_effect = ConnectionError("db down")
        gateway = PersistenceGateway(store)

        with pytest.raises(ConnectionError):
            async with gateway.guild(1000):
                pass

        # Nothing cached, so the next access retries the read
        store.load.side_effect = None
        store.load.return_value = None
        async with gateway.guild(1000) as config:
            assert config.sets == {}

    @pytest.mark.asyncio
    async def test_forget_reloads(self):
        store = make_store(document=None)
        gateway = PersistenceGateway(store)

        async with gateway.guild(1000):
            pass
        gateway.forget(1000)
        async with gateway.guild(1000):
            pass

        assert store.load.await_count == 2

    @pytest.mark.asyncio
    async def test_forget_drops_idle_lock(self):
        gateway = PersistenceGateway(make_store())

        async with gateway.guild(1000):
            pass
        assert "1000" in gateway._locks

        gateway.forget(1000)
        assert "1000" not in gateway._locks
        assert "1000" not in gateway._configs

    @pytest.mark.asyncio
    async def test_forget_keeps_held_lock(self):
        gateway = PersistenceGateway(make_store())

        async with gateway.guild(1000):
            gateway.forget(1000)
            assert "1000" in gateway._locks
            assert gateway._locks["1000"].locked()


class TestCommit:
    """Test dirty-flag writes."""

    @pytest.mark.asyncio
    async def test_commit_writes_once(self):
        store = make_store()
        gateway = PersistenceGateway(store)

        async with gateway.guild(1000) as config:
            config.fetch_or_create_set("colours").add_entry("🔴", "11")
            first = await gateway.commit(config)
            second = await gateway.commit(config)

        assert first.value is True
        assert second.value is False
        assert not config.modified
        store.save.assert_awaited_once()
        guild_id, document = store.save.await_args.args
        assert guild_id == "1000"
        assert document["reactionroles"]["sets"]["colours"]["entries"] == {"🔴": "11"}

    @pytest.mark.asyncio
    async def test_failed_save_keeps_modified(self):
        store = make_store(saved=False)
        gateway = PersistenceGateway(store)

        async with gateway.guild(1000) as config:
            config.create_set("colours")
            result = await gateway.commit(config)

        assert result.error.kind == ErrorKind.PERSISTENCE
        assert config.modified
        assert config.exists("colours")

        store.save.return_value = True
        async with gateway.guild(1000) as config:
            retry = await gateway.commit(config)
        assert retry.value is True
        assert store.save.await_count == 2

    @pytest.mark.asyncio
    async def test_round_trip_through_memory_store(self, store):
        gateway = PersistenceGateway(store)
        async with gateway.guild(1000) as config:
            config.fetch_or_create_set("colours").add_entry("🔴", "11")
            await gateway.commit(config)

        fresh = PersistenceGateway(store)
        async with fresh.guild(1000) as config:
            assert config.fetch_set("colours").value.get_entry("🔴") == "11"


class TestLocking:
    """Test per-guild serialization."""

    @pytest.mark.asyncio
    async def test_same_guild_is_serialized_in_order(self):
        gateway = PersistenceGateway(make_store())
        order = []

        async def worker(name, delay):
            async with gateway.guild(1000):
                order.append(f"{name}-start")
                await asyncio.sleep(delay)
                order.append(f"{name}-end")

        first = asyncio.create_task(worker("a", 0.02))
        await asyncio.sleep(0)
        second = asyncio.create_task(worker("b", 0))
        await asyncio.gather(first, second)

        assert order == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_guilds_do_not_block(self):
        gateway = PersistenceGateway(make_store())
        entered = asyncio.Event()

        async def holder():
            async with gateway.guild(1):
                await asyncio.wait_for(entered.wait(), timeout=1)

        async def other():
            async with gateway.guild(2):
                entered.set()

        await asyncio.gather(holder(), other())
        assert entered.is_set()
