"""Message listener Cog for Scamwatch.

This cog receives every guild message, hands it to the command dispatcher,
and sends back the rendered reply. Lines that are not commands get no reply.
"""

import discord
from discord.ext import commands

from scamwatch.bot.command_dispatcher import CommandDispatcher
from scamwatch.datatypes.command_datatypes import CommandContext
from scamwatch.ui.reply_renderer import render_reply
from scamwatch.util.logger import get_logger

logger = get_logger("message_listener_cog")


def build_command_context(message: discord.Message) -> CommandContext:
    """Describe the author and guild of a message for the dispatcher."""
    author = message.author
    permissions = getattr(author, "guild_permissions", None)
    avatar = getattr(author, "display_avatar", None)
    guild = message.guild

    return CommandContext(
        author_id=str(author.id),
        author_display_name=getattr(author, "display_name", None) or author.name,
        guild_id=guild.id if guild else None,
        guild_name=guild.name if guild else None,
        is_admin=bool(permissions is not None and permissions.administrator),
        author_avatar_url=str(avatar.url) if avatar is not None else None,
    )


class MessageListenerCog(commands.Cog):
    """Cog that turns chat messages into dispatcher calls."""

    def __init__(self, discord_bot_instance, dispatcher: CommandDispatcher):
        """
        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        dispatcher:
            Dispatcher executing the parsed commands.
        """
        self.bot = discord_bot_instance
        self.dispatcher = dispatcher
        logger.info("Message listener cog loaded")

    @staticmethod
    def _should_process_message(message: discord.Message) -> bool:
        # DMs and other bots (including ourselves) are ignored
        if message.guild is None:
            return False
        if message.author.bot:
            return False
        return bool(message.content)

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        """Dispatch a guild message and reply with the command result, if any."""
        if not self._should_process_message(message):
            return

        result = await self.dispatcher.dispatch(message.content, build_command_context(message))
        if result is None:
            return

        try:
            await message.reply(**render_reply(result.reply))
        except Exception:
            logger.exception(
                "Failed to send reply for %s in channel %s", result.command, getattr(message.channel, "id", "?")
            )


def setup(discord_bot_instance, dispatcher: CommandDispatcher):
    """Register the MessageListenerCog with the bot."""
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance, dispatcher))
