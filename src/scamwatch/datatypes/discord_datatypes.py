"""
Type-safe wrappers for Discord identifiers.

Discord snowflakes arrive as free text in chat commands, so the helpers here
decide whether a token is shaped like a user ID before anything is sent to
the store or the Discord API.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

import discord

# Snowflakes of real accounts are 17 to 19 ASCII digits long
SNOWFLAKE_PATTERN = re.compile(r"^[0-9]{17,19}$", re.ASCII)


def is_valid_snowflake(value: str) -> bool:
    """Return True if ``value`` looks like a Discord user ID."""
    return bool(SNOWFLAKE_PATTERN.fullmatch(value or ""))


class UserID:
    """
    Type-safe wrapper for Discord user snowflake IDs.

    Discord snowflakes are 64-bit integers, but the registry stores them as
    strings. This class gives one consistent interface for both forms.

    Example:
        >>> uid = UserID(123456789012345678)
        >>> str(uid)
        '123456789012345678'
        >>> UserID("123456789012345678").to_int()
        123456789012345678
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "UserID"]) -> None:
        """
        Initialize a UserID from a string, int, or another UserID.

        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, UserID):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = str(value)
        elif isinstance(value, str):
            self._value = str(int(value.strip()))
        else:
            raise ValueError(f"Cannot create UserID from {type(value).__name__}: {value}")

    @classmethod
    def from_user(cls, member: Union[discord.Member, discord.User]) -> "UserID":
        """Create a UserID from a Discord Member or User object."""
        return cls(member.id)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"UserID({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserID):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Snapshot of a Discord account, detached from py-cord objects.

    Attributes:
        user_id: Account snowflake
        username: Unique handle (without ``@``)
        global_name: Display name chosen by the user, if any
        created_at: Account creation time (UTC)
        avatar_url: URL of the effective avatar
    """
    user_id: str
    username: str
    global_name: Optional[str]
    created_at: datetime
    avatar_url: Optional[str] = None

    @property
    def mention(self) -> str:
        return f"<@{self.user_id}>"


@dataclass(frozen=True, slots=True)
class MemberSnapshot:
    """Guild membership details for a user.

    Attributes:
        joined_at: When the user joined the guild, if Discord reports it
        role_ids: Role snowflakes held, excluding the implicit ``@everyone`` role
    """
    joined_at: Optional[datetime]
    role_ids: Tuple[int, ...] = ()
