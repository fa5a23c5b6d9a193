# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Result and error types shared by the command pipeline and the reaction role engine.

Validation failures are returned as values so that callers decide whether
(and how) to reply. Only unexpected collaborator failures are raised.

Usage:
    from results import ErrorKind, Result

    result = roleset.add_entry("🎉", "1234")
    if not result.ok:
        await ctx.reply(result.error.message)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Categories of recoverable failure."""

    PARSE = "parse"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True)
class RoleError:
    """A recoverable failure with a user-facing message."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a success value or a RoleError."""

    value: Optional[T] = None
    error: Optional[RoleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error=RoleError(kind, message))

    @classmethod
    def not_found(cls, message: str) -> "Result[T]":
        return cls.failure(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "Result[T]":
        return cls.failure(ErrorKind.CONFLICT, message)
