# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Reaction Role Models

The per-guild configuration aggregate and the rolesets and message
bindings it owns.

Persisted document layout:

    {
        "reactionroles": {
            "sets": {name: {"exclusive": bool, "entries": {emoji: role_id}}},
            "messages": {message_id: {"channel": channel_id, "roleset": name}},
        },
        "permissions": {node: [role_id, ...]},
    }

Every mutation sets GuildConfig.modified; the gateway only writes a
document whose flag is set. Failed validation leaves state and flag alone.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from results import Result

Snowflake = Union[int, str]

MODULE_KEY = "reactionroles"
PERMISSIONS_KEY = "permissions"


@dataclass(frozen=True)
class MessageBinding:
    """A message whose reactions drive a roleset."""

    message_id: str
    channel_id: str
    roleset: str

    def to_document(self) -> dict:
        return {"channel": self.channel_id, "roleset": self.roleset}


class ReactionRoleSet:
    """A named collection of emoji -> role id entries."""

    def __init__(
        self,
        name: str,
        exclusive: bool = False,
        entries: Optional[Mapping[str, Snowflake]] = None,
        owner: Optional["GuildConfig"] = None,
    ):
        self.name = name
        self._exclusive = bool(exclusive)
        self._entries: dict[str, str] = {
            str(react): str(role) for react, role in (entries or {}).items()
        }
        self._owner = owner

    def _touch(self) -> None:
        if self._owner is not None:
            self._owner.mark_modified()

    @property
    def exclusive(self) -> bool:
        return self._exclusive

    @property
    def entries(self) -> Mapping[str, str]:
        """Read-only view of the entries, in insertion order."""
        return MappingProxyType(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def get_entry(self, react: str) -> Optional[str]:
        return self._entries.get(react)

    def react_for_role(self, role: Snowflake) -> Optional[str]:
        """The emoji that grants `role`, if any."""
        for react, granted in self._entries.items():
            if granted == str(role):
                return react
        return None

    def _role_taken(self, react: str, role: Snowflake) -> Optional[Result]:
        holder = self.react_for_role(role)
        if holder is not None and holder != react:
            return Result.conflict(
                f"The roleset `{self.name}` already grants <@&{role}> with the {holder} react."
            )
        return None

    def add_entry(self, react: str, role: Snowflake) -> Result[tuple[str, str]]:
        """
        Add an emoji -> role pair.

        Returns:
            Result holding (react, role), or CONFLICT if the emoji or the role
            is already used in this set
        """
        if react in self._entries:
            return Result.conflict(f"The roleset `{self.name}` already has the {react} react.")
        taken = self._role_taken(react, role)
        if taken is not None:
            return taken

        self._entries[react] = str(role)
        self._touch()
        return Result.success((react, str(role)))

    def update_entry(self, react: str, role: Snowflake) -> Result[tuple[str, str]]:
        """
        Change the role granted by an existing emoji.

        Returns:
            Result holding (old_role, new_role), NOT_FOUND, or CONFLICT if
            another emoji of the set already grants the role
        """
        if react not in self._entries:
            return Result.not_found(f"The roleset `{self.name}` doesn't have the {react} react.")

        taken = self._role_taken(react, role)
        if taken is not None:
            return taken

        old_role = self._entries[react]
        self._entries[react] = str(role)
        self._touch()
        return Result.success((old_role, str(role)))

    def remove_entry(self, react: str) -> Result[str]:
        """
        Remove an emoji. An emptied set is left in place.

        Returns:
            Result holding the role the emoji used to grant, or NOT_FOUND
        """
        if react not in self._entries:
            return Result.not_found(f"The roleset `{self.name}` doesn't have the {react} react.")

        old_role = self._entries.pop(react)
        self._touch()
        return Result.success(old_role)

    def set_exclusive(self, exclusive: bool) -> None:
        self._exclusive = bool(exclusive)
        self._touch()

    def to_document(self) -> dict:
        return {"exclusive": self._exclusive, "entries": dict(self._entries)}

    @classmethod
    def from_document(
        cls, name: str, data: Mapping[str, Any], owner: Optional["GuildConfig"] = None
    ) -> "ReactionRoleSet":
        return cls(
            name,
            exclusive=data.get("exclusive", False),
            entries=data.get("entries") or {},
            owner=owner,
        )

    def __repr__(self) -> str:
        return (
            f"ReactionRoleSet(name={self.name!r}, exclusive={self._exclusive}, "
            f"entries={self._entries!r})"
        )


class GuildConfig:
    """
    Configuration aggregate for one guild.

    Owns the rolesets (by name) and message bindings (by message id).
    Top-level document keys belonging to other features are carried
    through untouched.
    """

    def __init__(
        self,
        guild_id: Snowflake,
        extra: Optional[Mapping[str, Any]] = None,
    ):
        self.guild_id = str(guild_id)
        self.modified = False
        self._sets: dict[str, ReactionRoleSet] = {}
        self._messages: dict[str, MessageBinding] = {}
        self._permissions: dict[str, list[str]] = {}
        self._extra: dict[str, Any] = dict(extra or {})

    # ------------------------------------------------------------------
    # Dirty tracking
    # ------------------------------------------------------------------

    def mark_modified(self) -> None:
        self.modified = True

    def mark_clean(self) -> None:
        self.modified = False

    # ------------------------------------------------------------------
    # Rolesets
    # ------------------------------------------------------------------

    @property
    def sets(self) -> Mapping[str, ReactionRoleSet]:
        return MappingProxyType(self._sets)

    def exists(self, name: str) -> bool:
        return name in self._sets

    def create_set(self, name: str) -> Result[ReactionRoleSet]:
        if name in self._sets:
            return Result.conflict(f"The set `{name}` already exists.")

        roleset = ReactionRoleSet(name, owner=self)
        self._sets[name] = roleset
        self.mark_modified()
        return Result.success(roleset)

    def fetch_set(self, name: str) -> Result[ReactionRoleSet]:
        roleset = self._sets.get(name)
        if roleset is None:
            return Result.not_found(f"No such set `{name}`.")
        return Result.success(roleset)

    def fetch_or_create_set(self, name: str) -> ReactionRoleSet:
        """Fetch a set, creating an empty one on first reference."""
        if name in self._sets:
            return self._sets[name]
        return self.create_set(name).value

    def drop_set(self, name: str) -> Result[ReactionRoleSet]:
        """Remove a set. Dropping a missing set is NOT_FOUND."""
        if name not in self._sets:
            return Result.not_found(f"No such set `{name}`.")

        roleset = self._sets.pop(name)
        roleset._owner = None
        self.mark_modified()
        return Result.success(roleset)

    # ------------------------------------------------------------------
    # Message bindings
    # ------------------------------------------------------------------

    @property
    def bindings(self) -> list[MessageBinding]:
        return list(self._messages.values())

    def binding_for(self, message_id: Snowflake) -> Optional[MessageBinding]:
        return self._messages.get(str(message_id))

    def bindings_for_set(self, name: str) -> list[MessageBinding]:
        return [b for b in self._messages.values() if b.roleset == name]

    def bind(
        self, message_id: Snowflake, channel_id: Snowflake, roleset: str
    ) -> Result[MessageBinding]:
        """
        Bind a message to a roleset.

        Returns:
            Result holding the binding, or CONFLICT if the message is already bound
        """
        existing = self._messages.get(str(message_id))
        if existing is not None:
            return Result.conflict(
                f"This message is already bound to the roleset `{existing.roleset}`"
            )

        binding = MessageBinding(str(message_id), str(channel_id), roleset)
        self._messages[binding.message_id] = binding
        self.mark_modified()
        return Result.success(binding)

    # ------------------------------------------------------------------
    # Permission policy
    # ------------------------------------------------------------------

    def permission_roles(self, node: str) -> Optional[list[str]]:
        """Role ids allowed for a permission node, or None when no policy exists."""
        roles = self._permissions.get(node)
        return list(roles) if roles is not None else None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_document(self) -> dict:
        document = dict(self._extra)
        document[MODULE_KEY] = {
            "sets": {name: s.to_document() for name, s in self._sets.items()},
            "messages": {mid: b.to_document() for mid, b in self._messages.items()},
        }
        if self._permissions:
            document[PERMISSIONS_KEY] = {
                node: list(roles) for node, roles in self._permissions.items()
            }
        return document

    @classmethod
    def from_document(
        cls, guild_id: Snowflake, document: Optional[Mapping[str, Any]]
    ) -> "GuildConfig":
        """Build the aggregate from a stored document (None for a new guild)."""
        document = dict(document or {})
        data = document.pop(MODULE_KEY, None) or {}
        permissions = document.pop(PERMISSIONS_KEY, None) or {}

        config = cls(guild_id, extra=document)
        for name, set_data in (data.get("sets") or {}).items():
            config._sets[name] = ReactionRoleSet.from_document(name, set_data, owner=config)
        for mid, binding in (data.get("messages") or {}).items():
            config._messages[str(mid)] = MessageBinding(
                str(mid), str(binding.get("channel")), binding.get("roleset")
            )
        for node, roles in permissions.items():
            config._permissions[node] = [str(r) for r in roles]
        return config

    def __repr__(self) -> str:
        return (
            f"GuildConfig(guild_id={self.guild_id!r}, sets={len(self._sets)}, "
            f"messages={len(self._messages)}, modified={self.modified})"
        )
