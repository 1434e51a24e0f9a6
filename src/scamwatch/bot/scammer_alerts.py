"""
Join-time reconciliation against the scammer registry.

When a member joins, their ID is looked up in the registry. A hit is
announced to the guild's alert channel: the system channel if the guild has
one, otherwise the first text channel whose name contains the configured
keyword. Nothing in here raises: a failed lookup or send is logged so that
the member-join listener keeps working for later events.
"""

from __future__ import annotations

from typing import Optional

import discord

from scamwatch.database.record_store import RecordStore
from scamwatch.datatypes.command_datatypes import Broadcast
from scamwatch.datatypes.discord_datatypes import UserID
from scamwatch.datatypes.record_datatypes import ScammerRecord
from scamwatch.ui.reply_renderer import render_broadcast
from scamwatch.ui.summaries import SCAMMER_ALERT_CONTENT, scammer_alert_summary
from scamwatch.util.logger import get_logger

logger = get_logger("scammer_alerts")


def resolve_alert_channel(guild: discord.Guild, keyword: str) -> Optional[discord.TextChannel]:
    """Pick the channel that receives scammer alerts, or None if there is none."""
    system_channel = guild.system_channel
    if system_channel is not None:
        return system_channel

    keyword = keyword.lower()
    for channel in guild.text_channels:
        if keyword in channel.name.lower():
            return channel
    return None


def build_scammer_alert(record: ScammerRecord) -> Broadcast:
    return Broadcast(content=SCAMMER_ALERT_CONTENT, summary=scammer_alert_summary(record))


class JoinAlertReconciler:
    """Checks joining members against the registry and broadcasts alerts.

    Args:
        store: Record store to look members up in.
        channel_keyword: Fallback alert channel name fragment, e.g. ``"general"``.
    """

    def __init__(self, store: RecordStore, channel_keyword: str) -> None:
        self.store = store
        self.channel_keyword = channel_keyword

    async def reconcile(self, member: discord.Member) -> bool:
        """Handle one member join.

        Returns:
            True if an alert was sent, False otherwise.
        """
        guild = member.guild
        logger.info("[JOIN ALERT] New member joined %s: %s (ID: %s)", guild.name, member, member.id)

        try:
            record = await self.store.get_scammer(str(UserID.from_user(member)))
        except Exception:
            logger.exception("[JOIN ALERT] Scammer lookup failed for %s", member.id)
            return False

        if record is None:
            return False

        channel = resolve_alert_channel(guild, self.channel_keyword)
        if channel is None:
            logger.warning(
                "[JOIN ALERT] Reported scammer %s joined %s but no alert channel was found; alert dropped",
                member.id, guild.name,
            )
            return False

        try:
            await channel.send(**render_broadcast(build_scammer_alert(record)))
        except Exception:
            logger.exception("[JOIN ALERT] Failed to send scammer alert for %s to #%s", member.id, channel.name)
            return False

        logger.info("[JOIN ALERT] Sent scammer alert for %s to #%s in %s", member.id, channel.name, guild.name)
        return True
