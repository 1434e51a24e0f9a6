from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from scamwatch.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_COMMAND_PREFIX = "!"
DEFAULT_ALERT_CHANNEL_KEYWORD = "general"
DEFAULT_DISCORD_API_BASE = "https://discord.com/api/v10"
DEFAULT_DISCORD_CDN_BASE = "https://cdn.discordapp.com"


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml`` and exposes
    dictionary-like access helpers plus typed shortcuts for the keys the bot
    reads. Uses fcntl file locks for safe concurrent access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found, using defaults.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning("[APP CONFIGURATION] Config %s is not a mapping, ignoring it.", self.config_path)
            return {}
        return data

    def _get_str(self, key: str, default: str) -> str:
        value = self._data.get(key)
        if value is None:
            return default
        value = str(value).strip()
        return value or default

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (which will be an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def command_prefix(self) -> str:
        """Prefix every text command starts with (``!`` unless configured)."""
        return self._get_str("command_prefix", DEFAULT_COMMAND_PREFIX)

    @property
    def alert_channel_keyword(self) -> str:
        """Substring used to find a fallback alert channel when a guild has no system channel."""
        return self._get_str("alert_channel_keyword", DEFAULT_ALERT_CHANNEL_KEYWORD).lower()

    @property
    def discord_api_base(self) -> str:
        return self._get_str("discord_api_base", DEFAULT_DISCORD_API_BASE).rstrip("/")

    @property
    def discord_cdn_base(self) -> str:
        return self._get_str("discord_cdn_base", DEFAULT_DISCORD_CDN_BASE).rstrip("/")


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
