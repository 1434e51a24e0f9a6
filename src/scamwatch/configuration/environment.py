"""Process environment for Scamwatch.

Secrets never live in ``app_config.yml``; they come from the process
environment, optionally seeded from a ``.env`` file next to the project root.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from scamwatch.util.logger import get_logger

logger = get_logger("environment")

TOKEN_ENV_VAR = "DISCORD_BOT_TOKEN"
DATABASE_URL_ENV_VAR = "DATABASE_URL"


@dataclass(frozen=True, slots=True)
class RuntimeSecrets:
    """Credentials the bot cannot start without."""

    bot_token: str
    database_url: str


def load_environment(dotenv_path: Path | None = None) -> RuntimeSecrets:
    """Load environment variables and return the required secrets.

    Parameters
    ----------
    dotenv_path:
        Optional ``.env`` file to load before reading the environment. Values
        already present in the environment win.

    Returns
    -------
    RuntimeSecrets
        Bot token and database connection string.

    Raises
    ------
    SystemExit
        If ``DISCORD_BOT_TOKEN`` or ``DATABASE_URL`` is missing.
    """
    if dotenv_path is not None:
        load_dotenv(dotenv_path=dotenv_path)

    missing = [name for name in (TOKEN_ENV_VAR, DATABASE_URL_ENV_VAR) if not os.getenv(name)]
    if missing:
        for name in missing:
            logger.critical("'%s' environment variable not set. Bot cannot start.", name)
        sys.exit(1)

    return RuntimeSecrets(
        bot_token=os.environ[TOKEN_ENV_VAR],
        database_url=os.environ[DATABASE_URL_ENV_VAR],
    )
