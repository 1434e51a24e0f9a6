"""
Platform gateway: the narrow set of Discord lookups the dispatcher needs.

The dispatcher talks to the :class:`PlatformGateway` protocol only, so tests
can substitute an in-memory fake. :class:`DiscordPlatformGateway` implements
it on top of a py-cord bot plus one direct REST call for profile banners,
which py-cord's cached user objects do not carry.
"""

from __future__ import annotations

from typing import Optional, Protocol

import aiohttp
import discord

from scamwatch.datatypes.discord_datatypes import MemberSnapshot, UserID, UserProfile
from scamwatch.util.format_utils import build_banner_url
from scamwatch.util.logger import get_logger

logger = get_logger("platform_gateway")


class PlatformGateway(Protocol):
    """Lookups against the chat platform."""

    async def fetch_user(self, user_id: str) -> Optional[UserProfile]:
        """Return the account for ``user_id``, or None if it does not exist."""
        ...

    async def fetch_member(self, guild_id: int, user_id: str) -> Optional[MemberSnapshot]:
        """Return the user's membership in the guild, or None if unavailable."""
        ...

    async def fetch_banner_url(self, user_id: str) -> Optional[str]:
        """Return the user's banner image URL, or None if they have none."""
        ...


def user_profile_from_discord(user: discord.abc.User) -> UserProfile:
    """Detach the fields the bot renders from a py-cord user object."""
    avatar = getattr(user, "display_avatar", None)
    return UserProfile(
        user_id=str(user.id),
        username=user.name,
        global_name=getattr(user, "global_name", None),
        created_at=user.created_at,
        avatar_url=str(avatar.url) if avatar is not None else None,
    )


def member_snapshot_from_discord(member: discord.Member) -> MemberSnapshot:
    """Membership details with the implicit ``@everyone`` role removed."""
    everyone_id = member.guild.id
    return MemberSnapshot(
        joined_at=member.joined_at,
        role_ids=tuple(role.id for role in member.roles if role.id != everyone_id),
    )


class DiscordPlatformGateway:
    """:class:`PlatformGateway` backed by py-cord and the Discord REST API.

    Args:
        bot: Connected py-cord client.
        bot_token: Credential sent with direct REST requests.
        api_base: Discord REST base URL, e.g. ``https://discord.com/api/v10``.
        cdn_base: Discord CDN base URL used for banner links.
    """

    def __init__(self, bot: discord.Client, bot_token: str, api_base: str, cdn_base: str) -> None:
        self._bot = bot
        self._token = bot_token
        self._api_base = api_base.rstrip("/")
        self._cdn_base = cdn_base.rstrip("/")
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the HTTP session opened for banner lookups."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def fetch_user(self, user_id: str) -> Optional[UserProfile]:
        """Resolve ``user_id`` to an account.

        Discord answers 404 for an unknown account and 400 for digits outside
        the snowflake range; both mean the ID does not belong to a real user.
        """
        try:
            user = await self._bot.fetch_user(UserID(user_id).to_int())
        except discord.NotFound:
            return None
        except discord.HTTPException as exc:
            if exc.status != 400:
                raise
            logger.info("[GATEWAY] Discord rejected %s as a user ID: %s", user_id, exc)
            return None
        return user_profile_from_discord(user)

    async def fetch_member(self, guild_id: int, user_id: str) -> Optional[MemberSnapshot]:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            return None

        try:
            member = await guild.fetch_member(UserID(user_id).to_int())
        except discord.NotFound:
            return None
        except discord.HTTPException as exc:
            logger.warning("[GATEWAY] Member lookup for %s in guild %s failed: %s", user_id, guild_id, exc)
            return None

        return member_snapshot_from_discord(member)

    async def fetch_banner_url(self, user_id: str) -> Optional[str]:
        """Fetch the raw user object from ``GET /users/{id}`` and derive the banner URL.

        Raises:
            aiohttp.ClientError: On transport errors or non-2xx responses other than 404.
        """
        url = f"{self._api_base}/users/{user_id}"
        headers = {"Authorization": f"Bot {self._token}"}

        async with self._get_session().get(url, headers=headers) as response:
            if response.status == 404:
                return None
            response.raise_for_status()
            payload = await response.json()

        return build_banner_url(self._cdn_base, user_id, payload.get("banner"))
