# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""Ordered, named collection of parsed command arguments."""

from dataclasses import dataclass
from typing import Any, Iterator, Union

from .arguments import TypeMatcher

ArgName = Union[str, int]


@dataclass(frozen=True)
class Argument:
    """One parsed argument. Positional arguments are named by index."""

    name: ArgName
    value: Any
    type: TypeMatcher


class ArgumentList:
    """Arguments produced by a single parse, in parse order."""

    def __init__(self):
        self._args: list[Argument] = []

    def add(self, name: ArgName, value: Any, type_: TypeMatcher) -> None:
        self._args.append(Argument(name, value, type_))

    def get(self, name: ArgName, default: Any = None) -> Any:
        """Value of the first argument called `name`, or `default`."""
        for arg in self._args:
            if arg.name == name:
                return arg.value
        return default

    def __getitem__(self, name: ArgName) -> Any:
        for arg in self._args:
            if arg.name == name:
                return arg.value
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(arg.name == name for arg in self._args)

    def __iter__(self) -> Iterator[Argument]:
        return iter(self._args)

    def __len__(self) -> int:
        return len(self._args)

    def names(self) -> list[ArgName]:
        return [arg.name for arg in self._args]

    def values(self) -> list[Any]:
        return [arg.value for arg in self._args]

    def as_dict(self) -> dict[ArgName, Any]:
        return {arg.name: arg.value for arg in self._args}

    def __repr__(self) -> str:
        return f"ArgumentList({self.as_dict()!r})"
