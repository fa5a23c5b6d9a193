# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Persistence Gateway

Caches one GuildConfig aggregate per guild, serializes access to it, and
writes it back only when it was actually modified.

Usage:
    async with gateway.guild(guild_id) as config:
        roleset = config.fetch_or_create_set("colours")
        roleset.add_entry("🔴", role_id)
        result = await gateway.commit(config)

All work on one guild's aggregate, commands and reaction events alike,
must happen inside gateway.guild(). The per-guild lock is FIFO, so events
for a guild are handled in the order they arrived.

A failed write is reported and the aggregate stays modified; the
in-memory change is not rolled back and is retried by the next commit.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Union

from results import ErrorKind, Result

from .models import GuildConfig

logger = logging.getLogger("reactroles.reactionroles.gateway")


class PersistenceGateway:
    """Per-guild access to configuration aggregates with dirty-flag writes."""

    def __init__(self, store):
        """
        Args:
            store: GuildConfigStore or MemoryGuildConfigStore
        """
        self.store = store
        self._configs: dict[str, GuildConfig] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, guild_id: str) -> asyncio.Lock:
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = self._locks[guild_id] = asyncio.Lock()
        return lock

    async def _load(self, guild_id: str) -> GuildConfig:
        config = self._configs.get(guild_id)
        if config is not None:
            return config

        document = await self.store.load(guild_id)
        if document is None:
            logger.info(f"No stored config for guild {guild_id}, starting empty")
        config = GuildConfig.from_document(guild_id, document)
        self._configs[guild_id] = config
        return config

    @asynccontextmanager
    async def guild(self, guild_id: Union[int, str]) -> AsyncIterator[GuildConfig]:
        """Hold the guild's lock and yield its aggregate."""
        key = str(guild_id)
        async with self._lock_for(key):
            yield await self._load(key)

    async def commit(self, config: GuildConfig) -> Result[bool]:
        """
        Write the aggregate if it was modified.

        Returns:
            Result holding True if a write happened, False for a no-op,
            or a PERSISTENCE error if the write failed
        """
        if not config.modified:
            return Result.success(False)

        saved = await self.store.save(config.guild_id, config.to_document())
        if not saved:
            return Result.failure(
                ErrorKind.PERSISTENCE,
                f"Failed to save configuration for guild {config.guild_id}",
            )

        config.mark_clean()
        logger.debug(f"Saved configuration for guild {config.guild_id}")
        return Result.success(True)

    def forget(self, guild_id: Union[int, str]) -> None:
        """Drop a cached aggregate, e.g. after leaving a guild."""
        key = str(guild_id)
        self._configs.pop(key, None)
        # A held lock stays until its holder releases it
        lock = self._locks.get(key)
        if lock is not None and not lock.locked():
            del self._locks[key]
