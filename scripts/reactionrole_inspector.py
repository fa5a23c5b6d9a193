# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Reaction Role Inspector CLI

Debug tool for inspecting stored guild configuration.

Usage:
    # Create the guild_configs table
    python scripts/reactionrole_inspector.py init

    # List guilds with stored configuration
    python scripts/reactionrole_inspector.py guilds

    # List the rolesets of a guild
    python scripts/reactionrole_inspector.py sets --guild-id 123456789

    # Show every entry of one roleset
    python scripts/reactionrole_inspector.py sets --guild-id 123456789 --set colours

    # List the messages bound to rolesets in a guild
    python scripts/reactionrole_inspector.py bindings --guild-id 123456789

    # Dump a guild's raw document
    python scripts/reactionrole_inspector.py export --guild-id 123456789 --output guild.json
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import asyncpg
from dotenv import load_dotenv

from reactionroles.models import GuildConfig
from reactionroles.store import GuildConfigStore

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


async def list_guilds(conn: asyncpg.Connection):
    """List guilds that have a stored document."""
    rows = await conn.fetch(
        """
        SELECT guild_id, updated_at,
               (SELECT COUNT(*) FROM jsonb_object_keys(
                   COALESCE(data->'reactionroles'->'sets', '{}'::jsonb))) AS set_count,
               (SELECT COUNT(*) FROM jsonb_object_keys(
                   COALESCE(data->'reactionroles'->'messages', '{}'::jsonb))) AS message_count
        FROM guild_configs
        ORDER BY guild_id
        """
    )

    if not rows:
        logger.info("No guild configuration stored.")
        return

    logger.info(f"{'Guild':<22} {'Sets':>5} {'Bound':>6}  Updated")
    logger.info("-" * 60)
    for row in rows:
        logger.info(
            f"{row['guild_id']:<22} {row['set_count']:>5} {row['message_count']:>6}  "
            f"{row['updated_at'].strftime('%Y-%m-%d %H:%M:%S')}"
        )


async def load_config(store: GuildConfigStore, guild_id: int) -> GuildConfig:
    document = await store.load(guild_id)
    if document is None:
        logger.error(f"No configuration stored for guild {guild_id}")
        sys.exit(1)
    return GuildConfig.from_document(guild_id, document)


async def show_sets(store: GuildConfigStore, guild_id: int, set_name: str = None):
    """List rolesets, or the entries of one roleset."""
    config = await load_config(store, guild_id)

    if set_name:
        fetched = config.fetch_set(set_name)
        if not fetched.ok:
            logger.error(fetched.error.message)
            sys.exit(1)
        roleset = fetched.value
        logger.info(f"Set '{roleset.name}' (exclusive: {roleset.exclusive})")
        if roleset.is_empty():
            logger.info("  (no entries)")
        for react, role_id in roleset.entries.items():
            logger.info(f"  {react}  ->  role {role_id}")
        bound = config.bindings_for_set(roleset.name)
        logger.info(f"Bound to {len(bound)} message(s)")
        return

    if not config.sets:
        logger.info(f"Guild {guild_id} has no rolesets.")
        return

    logger.info(f"{'Set':<24} {'Entries':>7} {'Exclusive':>9} {'Bound':>6}")
    logger.info("-" * 50)
    for name, roleset in config.sets.items():
        logger.info(
            f"{name:<24} {len(roleset.entries):>7} {str(roleset.exclusive):>9} "
            f"{len(config.bindings_for_set(name)):>6}"
        )


async def show_bindings(store: GuildConfigStore, guild_id: int):
    """List bound messages, flagging bindings to sets that no longer exist."""
    config = await load_config(store, guild_id)

    if not config.bindings:
        logger.info(f"Guild {guild_id} has no bound messages.")
        return

    logger.info(f"{'Message':<22} {'Channel':<22} Set")
    logger.info("-" * 64)
    for binding in config.bindings:
        missing = "" if config.exists(binding.roleset) else "  (missing set)"
        logger.info(
            f"{binding.message_id:<22} {binding.channel_id:<22} {binding.roleset}{missing}"
        )


async def export_document(store: GuildConfigStore, guild_id: int, output_file: str):
    """Write a guild's raw document to a JSON file."""
    document = await store.load(guild_id)
    if document is None:
        logger.error(f"No configuration stored for guild {guild_id}")
        sys.exit(1)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)

    logger.info(f"Exported guild {guild_id} to {output_file}")


async def main_async(args):
    """Async main function."""
    db_url = os.environ.get("DATABASE_URL")
    if not db_url:
        logger.error("DATABASE_URL environment variable required")
        sys.exit(1)

    conn = await asyncpg.connect(db_url)
    store = GuildConfigStore(conn)

    try:
        if args.command == "init":
            await store.init_schema()
        elif args.command == "guilds":
            await list_guilds(conn)
        elif args.command == "sets":
            await show_sets(store, args.guild_id, set_name=args.set)
        elif args.command == "bindings":
            await show_bindings(store, args.guild_id)
        elif args.command == "export":
            await export_document(store, args.guild_id, args.output)
    finally:
        await conn.close()


def main():
    parser = argparse.ArgumentParser(
        description="Reaction Role Inspector CLI - Debug stored guild configuration"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Init command
    subparsers.add_parser("init", help="Create the guild_configs table")

    # Guilds command
    subparsers.add_parser("guilds", help="List guilds with stored configuration")

    # Sets command
    sets_parser = subparsers.add_parser("sets", help="List rolesets of a guild")
    sets_parser.add_argument("--guild-id", type=int, required=True, help="Guild ID")
    sets_parser.add_argument("--set", help="Show the entries of one set")

    # Bindings command
    bindings_parser = subparsers.add_parser("bindings", help="List bound messages of a guild")
    bindings_parser.add_argument("--guild-id", type=int, required=True, help="Guild ID")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export a guild's document to JSON")
    export_parser.add_argument("--guild-id", type=int, required=True, help="Guild ID")
    export_parser.add_argument(
        "--output", "-o", required=True, help="Output file path"
    )

    args = parser.parse_args()
    asyncio.run(main_async(args))


if __name__ == "__main__":
    main()
