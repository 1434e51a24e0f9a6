"""
Rendering of reply values into Discord message payloads.

Discord refuses a whole message when any part is over its size limit, so
every text is clipped to the limit of the slot it goes into.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import discord

from scamwatch.datatypes.command_datatypes import (
    Broadcast,
    PlainText,
    Reply,
    StructuredSummary,
    SummaryColor,
)

SUMMARY_COLORS = {
    SummaryColor.NEUTRAL: discord.Color(0x2F3136),
    SummaryColor.INFO: discord.Color.blue(),
    SummaryColor.ALERT: discord.Color.red(),
}

# Discord message and embed size limits, in characters
CONTENT_LIMIT = 2000
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096
FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
FOOTER_LIMIT = 2048
AUTHOR_LIMIT = 256

ELLIPSIS = "…"


def clip(text: Optional[str], limit: int) -> Optional[str]:
    """Shorten ``text`` to at most ``limit`` characters, marking the cut with an ellipsis."""
    if text is None or len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def build_embed(summary: StructuredSummary) -> discord.Embed:
    """Build an embed from a structured summary, keeping field order."""
    embed = discord.Embed(
        title=clip(summary.title, TITLE_LIMIT),
        description=clip(summary.description, DESCRIPTION_LIMIT),
        color=SUMMARY_COLORS.get(summary.color, SUMMARY_COLORS[SummaryColor.NEUTRAL]),
        timestamp=summary.timestamp,
    )

    if summary.author_name:
        embed.set_author(name=clip(summary.author_name, AUTHOR_LIMIT), icon_url=summary.author_icon_url)
    if summary.thumbnail_url:
        embed.set_thumbnail(url=summary.thumbnail_url)
    if summary.image_url:
        embed.set_image(url=summary.image_url)

    for summary_field in summary.fields:
        embed.add_field(
            name=clip(summary_field.label, FIELD_NAME_LIMIT),
            value=clip(summary_field.value, FIELD_VALUE_LIMIT),
            inline=summary_field.inline,
        )

    if summary.footer_text:
        embed.set_footer(text=clip(summary.footer_text, FOOTER_LIMIT), icon_url=summary.footer_icon_url)

    return embed


def render_reply(reply: Reply) -> Dict[str, Any]:
    """Keyword arguments for ``Messageable.send`` / ``Message.reply``.

    Raises:
        TypeError: If ``reply`` is not a known reply type.
    """
    if isinstance(reply, PlainText):
        return {"content": clip(reply.content, CONTENT_LIMIT)}
    if isinstance(reply, StructuredSummary):
        return {"embed": build_embed(reply)}
    raise TypeError(f"Unsupported reply type: {type(reply).__name__}")


def render_broadcast(broadcast: Broadcast) -> Dict[str, Any]:
    """Keyword arguments for sending a broadcast, with ``@everyone`` allowed when requested."""
    return {
        "content": clip(broadcast.content, CONTENT_LIMIT),
        "embed": build_embed(broadcast.summary),
        "allowed_mentions": discord.AllowedMentions(everyone=broadcast.mention_everyone),
    }
