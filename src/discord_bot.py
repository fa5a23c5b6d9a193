# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
reactroles Discord Bot

Maintains the Discord connection, routes prefixed text commands to the
command dispatcher, and drives reaction roles from reaction events.
"""

import asyncio
import logging
import os
from typing import Optional

import asyncpg
import discord
from discord.ext import commands
from dotenv import load_dotenv

from chat_platform import ChatPlatform
from command import Dispatcher, DispatchOptions
from commands import build_registry
from config import BotConfig
from permissions import PermissionService
from reactionroles import (
    GuildConfigStore,
    MemoryGuildConfigStore,
    PersistenceGateway,
    ReactionEvent,
    ReactionEventHandler,
)

load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("reactroles")


class DiscordBot(commands.Bot):
    """Discord bot serving prefixed text commands and reaction roles."""

    def __init__(self, config: Optional[BotConfig] = None):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.messages = True
        intents.members = True
        intents.reactions = True

        # Text commands go through our own dispatcher, not discord.ext
        super().__init__(
            command_prefix=commands.when_mentioned, intents=intents, help_command=None
        )

        self.config = config or BotConfig.from_env()
        self.db_pool: Optional[asyncpg.Pool] = None
        self.gateway: Optional[PersistenceGateway] = None
        self.dispatcher: Optional[Dispatcher] = None
        self.reactions: Optional[ReactionEventHandler] = None

    async def setup_hook(self):
        """Called when the bot is starting up."""
        logger.info(f"Setup: DATABASE_URL={'set' if self.config.database_url else 'missing'}")
        logger.info(f"Setup: COMMAND_PREFIXES={','.join(self.config.prefixes)}")

        store = await self._create_store()

        self.gateway = PersistenceGateway(store)
        platform = ChatPlatform(timeout=self.config.platform_timeout)
        self.dispatcher = Dispatcher(
            build_registry(),
            PermissionService(self.gateway),
            platform,
            self.gateway,
            self.config,
            DispatchOptions.from_config(self.config),
        )
        self.reactions = ReactionEventHandler(self.gateway, platform)
        logger.info(f"Loaded {len(self.dispatcher.registry)} command(s)")

    async def _create_store(self):
        """Database-backed store, or an in-memory one when no database is configured."""
        if self.config.database_url:
            try:
                self.db_pool = await asyncpg.create_pool(self.config.database_url)
                store = GuildConfigStore(self.db_pool)
                await store.init_schema()
                logger.info("Guild config store initialized successfully")
                return store
            except Exception as e:
                logger.error(f"Failed to initialize guild config store: {e}", exc_info=True)

        logger.warning("Using in-memory guild config store, changes will not survive a restart")
        return MemoryGuildConfigStore()

    async def on_ready(self):
        """Called when the bot has connected to Discord."""
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")

    async def _init_guild(self, guild: discord.Guild):
        if self.reactions is None:
            return
        try:
            await self.reactions.init_guild(guild)
        except Exception as e:
            logger.error(f"Failed to initialize guild {guild.id}: {e}", exc_info=True)

    async def on_guild_available(self, guild: discord.Guild):
        await self._init_guild(guild)

    async def on_guild_join(self, guild: discord.Guild):
        logger.info(f"Joined guild {guild.id} ({guild.name})")
        await self._init_guild(guild)

    async def on_guild_remove(self, guild: discord.Guild):
        logger.info(f"Removed from guild {guild.id} ({guild.name})")
        if self.gateway is not None:
            self.gateway.forget(guild.id)

    async def on_message(self, message: discord.Message):
        """Handle incoming messages as potential commands."""
        if message.author.bot or self.dispatcher is None:
            return

        try:
            error = await self.dispatcher.dispatch(message)
            if error is not None:
                logger.info(
                    f"Bad arguments from user {message.author.id} "
                    f"in channel {message.channel.id}: {error.message}"
                )
        except Exception as e:
            logger.error(f"Command error: {e}", exc_info=True)

    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent):
        await self._handle_reaction(payload, added=True)

    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent):
        await self._handle_reaction(payload, added=False)

    async def _handle_reaction(self, payload: discord.RawReactionActionEvent, added: bool):
        if payload.guild_id is None or self.reactions is None:
            return
        if payload.user_id == self.user.id:
            return

        guild = self.get_guild(payload.guild_id)
        if guild is None:
            return

        event = ReactionEvent.from_payload(payload)
        try:
            if added:
                await self.reactions.on_reaction_add(guild, event)
            else:
                await self.reactions.on_reaction_remove(guild, event)
        except Exception as e:
            logger.error(
                f"Reaction {'add' if added else 'remove'} error on message "
                f"{payload.message_id}: {e}",
                exc_info=True,
            )

    async def close(self):
        """Clean up resources on shutdown."""
        if self.db_pool:
            await self.db_pool.close()
        await super().close()


async def main():
    """Run the bot."""
    config = BotConfig.from_env()
    if not config.discord_token:
        print("Error: DISCORD_BOT_TOKEN environment variable not set")
        print("Please set it in your .env file")
        return

    bot = DiscordBot(config)
    await bot.start(config.discord_token)


def run():
    """Console entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
