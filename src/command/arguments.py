# reactroles - Discord Reaction Role Bot
# Copyright (c) 2025-2026 reactroles contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# Full license: https://www.gnu.org/licenses/agpl-3.0.html

"""
Argument Type Library

Composable matchers that consume a prefix of a command's argument text.
Each matcher returns a Match (typed value plus the remaining text, with
leading whitespace stripped) or None when the input does not fit.

Primitive matchers consume exactly one whitespace-delimited token:

    string     any token
    integer    signed decimal integer
    snowflake  Discord ID (digits)
    channel    <#id> mention or raw ID
    user       <@id> / <@!id> mention or raw ID
    role       <@&id> mention, raw ID or role name
    emoji      unicode emoji or custom <:name:id> / <a:name:id>

Combinators:

    literal("add")           exact token, returned verbatim
    choice("add", "list")    one of several literals
    optional(emoji)          never fails; yields None and leaves input untouched
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

# Display names starting with this marker render as [name:Type] in usage strings
OPTIONAL_MARK = "?"

# Shown in parse errors when there is no input left
END_OF_INPUT = "END"

CHANNEL_MENTION = re.compile(r"^<#(\d+)>$")
ROLE_MENTION = re.compile(r"^<@&(\d+)>$")
USER_MENTION = re.compile(r"^<@!?(\d+)>$")
CUSTOM_EMOJI = re.compile(r"^<a?:\w{2,32}:\d+>$")
SNOWFLAKE = re.compile(r"^\d{1,21}$")
INTEGER = re.compile(r"^[+-]?\d+$")

# Keycap emoji such as 1️⃣ or #️⃣ carry ASCII characters
KEYCAP_ASCII = set("0123456789#*")
KEYCAP_MARK = chr(0x20E3)

# Code points that render as emoji on their own
EMOJI_BASE = re.compile(
    "["
    "\u00a9\u00ae\u203c\u2049\u2122\u2139\u2194-\u21aa\u231a-\u23ff"
    "\u24c2\u25aa-\u25fe\u2600-\u27bf\u2934\u2935\u2b05-\u2b55"
    "\u3030\u303d\u3297\u3299"
    "\U0001f000-\U0001faff"
    "]"
)

# Zero-width joiner, variation selectors, keycap, tag characters
EMOJI_JOINERS = re.compile("[\u200d\ufe0e\ufe0f\u20e3\U000e0020-\U000e007f]")


@dataclass(frozen=True)
class Match:
    """A successful match: the parsed value and the text left to parse."""

    value: Any
    rest: str


@dataclass(frozen=True)
class TypeMatcher:
    """A named argument type.

    Calling the matcher attempts a match against the start of the text.
    """

    name: str
    match_fn: Callable[[str], Optional[Match]] = field(repr=False, compare=False)

    def __call__(self, text: str) -> Optional[Match]:
        return self.match_fn(text)

    @property
    def is_optional(self) -> bool:
        return self.name.startswith(OPTIONAL_MARK)

    @property
    def display_name(self) -> str:
        """Name without the optional marker."""
        if self.is_optional:
            return self.name[len(OPTIONAL_MARK):]
        return self.name


def split_token(text: str) -> tuple[Optional[str], str]:
    """Split off the first whitespace-delimited token.

    Returns:
        (token, rest) where rest has no leading whitespace, or (None, "")
        when the text is blank
    """
    parts = text.split(maxsplit=1)
    if not parts:
        return None, ""
    return parts[0], parts[1] if len(parts) > 1 else ""


def next_token(text: str) -> str:
    """The next token for diagnostics, or END_OF_INPUT."""
    token, _ = split_token(text)
    return token if token is not None else END_OF_INPUT


def token_matcher(name: str, convert: Callable[[str], Any]) -> TypeMatcher:
    """
    Build a matcher that consumes a single token.

    Args:
        name: Display name for usage strings and errors
        convert: Maps the raw token to a value, or returns None to reject it
    """

    def match(text: str) -> Optional[Match]:
        token, rest = split_token(text)
        if token is None:
            return None
        value = convert(token)
        if value is None:
            return None
        return Match(value, rest)

    return TypeMatcher(name, match)


def _to_int(token: str) -> Optional[int]:
    return int(token) if INTEGER.match(token) else None


def _to_snowflake(token: str) -> Optional[int]:
    return int(token) if SNOWFLAKE.match(token) else None


def _mention_or_id(pattern: re.Pattern) -> Callable[[str], Optional[int]]:
    def convert(token: str) -> Optional[int]:
        mention = pattern.match(token)
        if mention:
            return int(mention.group(1))
        return _to_snowflake(token)

    return convert


def _to_role(token: str) -> str:
    mention = ROLE_MENTION.match(token)
    return mention.group(1) if mention else token


def is_emoji(token: str) -> bool:
    """Check if a token looks like a unicode or custom Discord emoji."""
    if CUSTOM_EMOJI.match(token):
        return True
    if not any(EMOJI_BASE.match(ch) or ch == KEYCAP_MARK for ch in token):
        return False
    return all(
        ch in KEYCAP_ASCII or EMOJI_BASE.match(ch) or EMOJI_JOINERS.match(ch)
        for ch in token
    )


def _to_emoji(token: str) -> Optional[str]:
    return token if is_emoji(token) else None


string = token_matcher("String", lambda token: token)
integer = token_matcher("Integer", _to_int)
snowflake = token_matcher("ID", _to_snowflake)
channel = token_matcher("Channel", _mention_or_id(CHANNEL_MENTION))
user = token_matcher("User", _mention_or_id(USER_MENTION))
role = token_matcher("Role", _to_role)
emoji = token_matcher("Emoji", _to_emoji)


def literal(word: str) -> TypeMatcher:
    """Match exactly `word` (case-sensitive) and return it."""
    return token_matcher(word, lambda token: token if token == word else None)


def choice(*options: Union[str, TypeMatcher]) -> TypeMatcher:
    """
    Match any one of several literal identifiers.

    Args:
        options: Plain strings or literal() matchers, tried in order
    """
    words = tuple(opt.name if isinstance(opt, TypeMatcher) else opt for opt in options)
    allowed = frozenset(words)
    return token_matcher(
        "|".join(words), lambda token: token if token in allowed else None
    )


def optional(matcher: TypeMatcher) -> TypeMatcher:
    """Wrap a matcher so that a miss yields None instead of failing the parse."""

    def match(text: str) -> Match:
        result = matcher(text)
        if result is None:
            return Match(None, text)
        return result

    return TypeMatcher(OPTIONAL_MARK + matcher.name, match)


# Library of the shared primitive types, by display name
LIBRARY: dict[str, TypeMatcher] = {
    matcher.name: matcher
    for matcher in (string, integer, snowflake, channel, user, role, emoji)
}
