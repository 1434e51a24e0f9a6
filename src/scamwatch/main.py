"""
Scamwatch Discord Bot
=====================

A Discord bot that keeps a shared registry of reported scammers and trainer
profiles, answers lookup commands, and warns a server when a reported
account joins.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. SCAMWATCH_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("SCAMWATCH_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord

from scamwatch.bot.command_dispatcher import CommandDispatcher
from scamwatch.bot.platform_gateway import DiscordPlatformGateway
from scamwatch.bot.scammer_alerts import JoinAlertReconciler
from scamwatch.configuration.app_configuration import AppConfig, app_config
from scamwatch.configuration.environment import RuntimeSecrets, load_environment
from scamwatch.database.database import database
from scamwatch.util.logger import get_logger, handle_exception


logger = get_logger("main")


def build_intents() -> discord.Intents:
    """Construct the Discord intents required by the bot.

    Returns
    -------
    discord.Intents
        Intents enabling guild, member, and message content events.
    """
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.messages = True
    intents.members = True
    return intents


def load_cogs(
    discord_bot_instance: discord.Bot,
    dispatcher: CommandDispatcher,
    reconciler: JoinAlertReconciler,
) -> None:
    """Register all cogs with the provided Discord bot instance."""
    from scamwatch.bot.cogs import events_listener, message_listener

    events_listener.setup(discord_bot_instance, reconciler)
    message_listener.setup(discord_bot_instance, dispatcher)

    logger.info("All cogs loaded successfully.")


def create_bot(secrets: RuntimeSecrets, config: AppConfig) -> tuple[discord.Bot, DiscordPlatformGateway]:
    """Instantiate the Discord bot, its platform gateway, and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    gateway = DiscordPlatformGateway(
        bot,
        bot_token=secrets.bot_token,
        api_base=config.discord_api_base,
        cdn_base=config.discord_cdn_base,
    )
    dispatcher = CommandDispatcher(database.records, gateway, prefix=config.command_prefix)
    reconciler = JoinAlertReconciler(database.records, config.alert_channel_keyword)
    load_cogs(bot, dispatcher, reconciler)
    return bot, gateway


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(
    bot: discord.Bot | None = None,
    gateway: DiscordPlatformGateway | None = None,
) -> None:
    """Close the Discord connection, the HTTP session, and the database."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing Discord connection: %s", exc)

    if gateway is not None:
        try:
            await gateway.close()
        except Exception as exc:
            logger.exception("Error while closing HTTP session: %s", exc)

    try:
        await database.shutdown()
    except Exception as exc:
        logger.exception("Error during database shutdown: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap the database and the bot, returning an exit code.

    Returns
    -------
    int
        Process exit code reflecting success or failure of initialization.
    """
    secrets = load_environment(BASE_DIR / ".env")

    try:
        logger.info("Initializing database...")
        await database.initialize(secrets.database_url)
    except Exception as exc:
        logger.critical("Failed to initialize database: %s", exc)
        await database.shutdown()
        return 1

    try:
        bot, gateway = create_bot(secrets, app_config)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        await shutdown_runtime()
        return 1

    exit_code = 0
    try:
        await start_bot(bot, secrets.bot_token)
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the bot token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, gateway)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Scamwatch…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
