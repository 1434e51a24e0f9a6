"""
Text command parsing.

A command line is split on whitespace; the first token, lower-cased, must be
the prefix followed by a known command word. Anything else is ordinary chat
and parses to ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from scamwatch.datatypes.command_datatypes import CommandName, ParsedCommand

# Command words (without prefix) mapped to the command they select
COMMAND_KEYWORDS: Dict[str, CommandName] = {
    "hi": CommandName.GREET,
    "scamhelp": CommandName.HELP,
    "addtrainer": CommandName.REGISTER_TRAINER,
    "gettrainer": CommandName.GET_TRAINER,
    "add": CommandName.REPORT_SCAMMER,
    "remove": CommandName.REMOVE_SCAMMER,
    "check": CommandName.CHECK_SCAMMER,
    "finduser": CommandName.FIND_USER,
    "find": CommandName.FIND_USER,
}

# Usage strings shown on malformed arguments and in the help listing
COMMAND_USAGE: Dict[CommandName, str] = {
    CommandName.GREET: "hi",
    CommandName.HELP: "scamhelp",
    CommandName.REGISTER_TRAINER: "addtrainer <trainerCode> <trainerName>",
    CommandName.GET_TRAINER: "gettrainer",
    CommandName.REPORT_SCAMMER: (
        "add <discordID> <discordName> [code:<trainerCode>] [trainer:\"<trainer name>\"] <reason>"
    ),
    CommandName.REMOVE_SCAMMER: "remove <discordID>",
    CommandName.CHECK_SCAMMER: "check <discordID>",
    CommandName.FIND_USER: "finduser <discordID>",
}

# Longest reason accepted for a report; keeps the alert embed field and the
# confirmation message inside Discord limits
MAX_REASON_LENGTH = 1000

TRAINER_CODE_MARKER = "code:"
TRAINER_NAME_MARKER = "trainer:"


def parse_command(text: str, prefix: str = "!") -> Optional[ParsedCommand]:
    """Classify a chat line.

    Args:
        text: Raw message content.
        prefix: Command prefix, e.g. ``"!"``.

    Returns:
        The parsed command, or None when the line is not a known command.
    """
    if not text or not prefix:
        return None

    tokens = text.split()
    if not tokens:
        return None

    head = tokens[0].lower()
    if not head.startswith(prefix.lower()):
        return None

    keyword = head[len(prefix):]
    name = COMMAND_KEYWORDS.get(keyword)
    if name is None:
        return None

    return ParsedCommand(name=name, keyword=keyword, args=tuple(tokens[1:]))


def usage_for(name: CommandName, prefix: str = "!") -> str:
    return f"{prefix}{COMMAND_USAGE[name]}"


@dataclass(frozen=True, slots=True)
class ReportArguments:
    """Arguments of a scammer report after layout parsing.

    Optional trainer fields are None when the reporter left them out.
    """
    target_id: str
    display_name: str
    reason: str
    trainer_code: Optional[str] = None
    trainer_name: Optional[str] = None


def _take_marked(tokens: Sequence[str], marker: str) -> Tuple[Optional[str], Sequence[str]]:
    """Pop a ``marker:value`` token, or a ``marker:"quoted value"`` spanning tokens.

    Raises:
        ValueError: If a quoted value is never closed.
    """
    if not tokens or not tokens[0].lower().startswith(marker):
        return None, tokens

    value = tokens[0][len(marker):]
    if not value.startswith('"'):
        return (value or None), tokens[1:]

    for end, token in enumerate(tokens):
        closing = token[len(marker) + 1:] if end == 0 else token
        if closing.endswith('"'):
            quoted = " ".join([value, *tokens[1:end + 1]])[1:-1].strip()
            return (quoted or None), tokens[end + 1:]
    raise ValueError(f"unclosed quote after {marker}")


def parse_report_arguments(args: Sequence[str]) -> Optional[ReportArguments]:
    """Split report arguments into fields.

    Layout: ``<id> <displayName> [code:<trainerCode>] [trainer:<trainerName>] <reason...>``.
    The optional markers are only recognised right after the display name,
    in that order. A value wrapped in double quotes may span several words,
    e.g. ``trainer:"Ash Ketchum"``. The reason takes every remaining token.

    Returns:
        The parsed arguments, or None if the id, display name, or reason is missing,
        or a quoted value is left open.
    """
    if len(args) < 3:
        return None

    target_id, display_name = args[0], args[1]
    rest: Sequence[str] = args[2:]
    try:
        trainer_code, rest = _take_marked(rest, TRAINER_CODE_MARKER)
        trainer_name, rest = _take_marked(rest, TRAINER_NAME_MARKER)
    except ValueError:
        return None

    reason = " ".join(rest).strip()
    if not reason:
        return None

    return ReportArguments(
        target_id=target_id,
        display_name=display_name,
        reason=reason,
        trainer_code=trainer_code,
        trainer_name=trainer_name,
    )
