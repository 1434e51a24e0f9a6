"""
Command, context, and reply types shared by the parser, the dispatcher, and
the Discord adapter.

The dispatcher only ever sees these plain values: the cogs translate py-cord
messages into a :class:`CommandContext` on the way in and render a
:class:`Reply` on the way out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union


class CommandName(Enum):
    """Commands understood by the dispatcher."""

    GREET = "greet-ping"
    HELP = "help"
    REGISTER_TRAINER = "register-trainer"
    GET_TRAINER = "get-trainer"
    REPORT_SCAMMER = "report-scammer"
    REMOVE_SCAMMER = "remove-scammer"
    CHECK_SCAMMER = "check-scammer"
    FIND_USER = "find-user"

    def __str__(self) -> str:
        return self.value


class CommandOutcome(Enum):
    """How a command invocation ended."""

    OK = "ok"
    UNAUTHORIZED = "unauthorized"
    MALFORMED_ARGS = "malformed_args"
    INVALID_ID = "invalid_id"
    UNKNOWN_TARGET = "unknown_target"
    DUPLICATE_REPORT = "duplicate_report"
    ALREADY_REGISTERED = "already_registered"
    NOT_FOUND = "not_found"
    EXTERNAL_FAILURE = "external_failure"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    """A chat line recognised as a command.

    Attributes:
        name: Command selected by the first token
        keyword: The command word as typed, without prefix, lower-cased
        args: Remaining whitespace-separated tokens, case preserved
    """
    name: CommandName
    keyword: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Who issued a command and where.

    Attributes:
        author_id: Snowflake of the caller
        author_display_name: Caller's display name in the guild
        guild_id: Guild the message was posted in
        guild_name: Name of that guild, if known
        is_admin: Caller holds the administrator permission in the guild
        author_avatar_url: Caller's avatar, used for embed footers
    """
    author_id: str
    author_display_name: str
    guild_id: Optional[int]
    guild_name: Optional[str]
    is_admin: bool = False
    author_avatar_url: Optional[str] = None


# -------------------- Replies --------------------

@dataclass(frozen=True, slots=True)
class PlainText:
    """A reply sent as a normal chat message."""
    content: str


@dataclass(frozen=True, slots=True)
class SummaryField:
    """One labelled entry of a :class:`StructuredSummary`."""
    label: str
    value: str
    inline: bool = False


class SummaryColor(Enum):
    """Palette for structured summaries, mapped to Discord colours by the renderer."""

    NEUTRAL = "neutral"
    INFO = "info"
    ALERT = "alert"


@dataclass(frozen=True, slots=True)
class StructuredSummary:
    """A reply rendered as an embed.

    ``fields`` keep their order when rendered.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    fields: Tuple[SummaryField, ...] = ()
    color: SummaryColor = SummaryColor.NEUTRAL
    author_name: Optional[str] = None
    author_icon_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    image_url: Optional[str] = None
    footer_text: Optional[str] = None
    footer_icon_url: Optional[str] = None
    timestamp: Optional[datetime] = None


Reply = Union[PlainText, StructuredSummary]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of dispatching one command, plus the reply to send."""
    command: CommandName
    outcome: CommandOutcome
    reply: Reply

    @property
    def ok(self) -> bool:
        return self.outcome is CommandOutcome.OK


@dataclass(frozen=True, slots=True)
class Broadcast:
    """A proactive message for a channel, optionally pinging ``@everyone``."""
    content: str
    summary: StructuredSummary = field(default_factory=StructuredSummary)
    mention_everyone: bool = True
