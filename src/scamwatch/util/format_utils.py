from datetime import datetime, timezone
from typing import Iterable, Optional

DISCORD_TIMESTAMP_STYLES = {"t", "T", "d", "D", "f", "F", "R"}

ANIMATED_ASSET_PREFIX = "a_"
BANNER_SIZE = 1024


def discord_timestamp(value: datetime, style: str = "f") -> str:
    """Return a Discord ``<t:unix:style>`` tag for ``value``.

    Naive datetimes are treated as UTC.

    Raises:
        ValueError: If ``style`` is not a Discord timestamp style.
    """
    if style not in DISCORD_TIMESTAMP_STYLES:
        raise ValueError(f"Invalid Discord timestamp style: {style}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return f"<t:{int(value.timestamp())}:{style}>"


def humanize_date(value: datetime) -> str:
    """Short human date in UTC, e.g. ``Mon Mar 03 2025``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%a %b %d %Y")


def role_mention(role_id: object) -> str:
    return f"<@&{role_id}>"


def format_role_list(role_ids: Iterable[int], empty: str = "No Roles") -> str:
    """Comma-separated role mentions, or ``empty`` when there are none."""
    mentions = [role_mention(role_id) for role_id in role_ids]
    return ", ".join(mentions) if mentions else empty


def build_banner_url(cdn_base: str, user_id: object, banner_asset: Optional[str]) -> Optional[str]:
    """Build the CDN URL of a profile banner.

    Animated banners (asset hash prefixed ``a_``) are served as GIF, all
    others as PNG.

    Returns:
        The URL, or None when the user has no banner.
    """
    if not banner_asset:
        return None
    extension = "gif" if banner_asset.startswith(ANIMATED_ASSET_PREFIX) else "png"
    return f"{cdn_base.rstrip('/')}/banners/{user_id}/{banner_asset}.{extension}?size={BANNER_SIZE}"
