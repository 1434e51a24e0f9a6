"""Event listener Cog for Scamwatch.

This cog handles bot lifecycle events (on_ready) and member joins, which are
reconciled against the scammer registry.
"""

import discord
from discord.ext import commands

from scamwatch.bot.scammer_alerts import JoinAlertReconciler
from scamwatch.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing lifecycle and member-join handlers."""

    def __init__(self, discord_bot_instance, reconciler: JoinAlertReconciler):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        reconciler:
            Join-time scammer check.
        """
        self.bot = discord_bot_instance
        self.reconciler = reconciler
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Log the connection, the registry size, and set the bot presence."""
        if self.bot.user:
            await self._update_presence()
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        try:
            count = await self.reconciler.store.count_scammers()
            logger.info("Scammer registry holds %d record(s); watching %d guild(s)", count, len(self.bot.guilds))
        except Exception:
            logger.exception("Could not read scammer registry size")

        logger.info("--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--")

    async def _update_presence(self) -> None:
        if not self.bot.user:
            return

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="for known scammers",
            ),
        )

    @commands.Cog.listener(name="on_member_join")
    async def on_member_join(self, member: discord.Member):
        """Alert the guild if the joining member is a reported scammer."""
        await self.reconciler.reconcile(member)


def setup(discord_bot_instance, reconciler: JoinAlertReconciler):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, reconciler))
