# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Database operations for guild configuration documents.

One JSONB document per guild in the guild_configs table. Documents are
always written whole.
"""

import copy
import json
import logging
from typing import Any, Optional, Union

import asyncpg

logger = logging.getLogger("reactroles.reactionroles.store")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS guild_configs (
    guild_id BIGINT PRIMARY KEY,
    data JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class GuildConfigStore:
    """Database operations for guild configuration documents."""

    def __init__(self, db_pool: asyncpg.Pool):
        """
        Initialize the store.

        Args:
            db_pool: AsyncPG connection pool
        """
        self.db = db_pool

    async def init_schema(self) -> None:
        """Create the guild_configs table if it does not exist."""
        await self.db.execute(SCHEMA_SQL)
        logger.info("guild_configs schema ready")

    async def load(self, guild_id: Union[int, str]) -> Optional[dict]:
        """
        Load the stored document for a guild.

        Database errors propagate: a failed read must not be mistaken
        for a guild without a document.

        Args:
            guild_id: Discord guild ID

        Returns:
            The document, or None if the guild has none
        """
        row = await self.db.fetchrow(
            """
            SELECT data FROM guild_configs
            WHERE guild_id = $1
            """,
            int(guild_id),
        )
        if row is None:
            return None

        data = row["data"]
        if isinstance(data, str):
            data = json.loads(data)
        return data or {}

    async def save(self, guild_id: Union[int, str], document: dict[str, Any]) -> bool:
        """
        Write a guild's whole document (insert or replace).

        Args:
            guild_id: Discord guild ID
            document: Full configuration document

        Returns:
            True on success, False if the write failed
        """
        try:
            await self.db.execute(
                """
                INSERT INTO guild_configs (guild_id, data, updated_at)
                VALUES ($1, $2::jsonb, NOW())
                ON CONFLICT (guild_id)
                DO UPDATE SET data = EXCLUDED.data, updated_at = NOW()
                """,
                int(guild_id),
                json.dumps(document),
            )
            return True

        except Exception as e:
            logger.error(f"Error saving config for guild {guild_id}: {e}", exc_info=True)
            return False


class MemoryGuildConfigStore:
    """In-process store with the GuildConfigStore interface, for running without a database."""

    def __init__(self):
        self.documents: dict[int, dict] = {}

    async def init_schema(self) -> None:
        return None

    async def load(self, guild_id: Union[int, str]) -> Optional[dict]:
        document = self.documents.get(int(guild_id))
        return copy.deepcopy(document) if document is not None else None

    async def save(self, guild_id: Union[int, str], document: dict[str, Any]) -> bool:
        self.documents[int(guild_id)] = copy.deepcopy(document)
        return True
