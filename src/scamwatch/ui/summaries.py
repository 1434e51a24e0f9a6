"""
Reply builders for registry records and user lookups.

Everything here returns :mod:`~scamwatch.datatypes.command_datatypes` reply
values; turning them into Discord payloads is the renderer's job.
"""

from __future__ import annotations

from typing import Iterable, Optional

from scamwatch.bot.command_parser import COMMAND_USAGE
from scamwatch.datatypes.command_datatypes import (
    CommandContext,
    CommandName,
    PlainText,
    StructuredSummary,
    SummaryColor,
    SummaryField,
)
from scamwatch.datatypes.discord_datatypes import MemberSnapshot, UserProfile
from scamwatch.datatypes.record_datatypes import ScammerRecord, TrainerProfile, utc_now
from scamwatch.util.format_utils import discord_timestamp, format_role_list, humanize_date

SCAMMER_ALERT_CONTENT = "@everyone ⚠️ **Alert! A scammer has joined.**"

# Order and wording of the admin help listing
HELP_ENTRIES = (
    (CommandName.HELP, "🔹", "Displays this help message."),
    (CommandName.REPORT_SCAMMER, "🚨", "Marks a user as a scammer."),
    (CommandName.REMOVE_SCAMMER, "✅", "Removes a user from the scammer list."),
    (CommandName.CHECK_SCAMMER, "🔍", "Checks if a user is marked as a scammer."),
    (CommandName.FIND_USER, "🛡️", "Fetches detailed information about a user, including roles and join date."),
    (CommandName.REGISTER_TRAINER, "🎮", "Registers your own trainer code and name."),
    (CommandName.GET_TRAINER, "📇", "Shows your registered trainer details."),
)


def _bullets(lines: Iterable[tuple[str, str]]) -> str:
    return "\n".join(f"- **{label}:** {value}" for label, value in lines)


def trainer_profile_reply(profile: TrainerProfile) -> PlainText:
    return PlainText(
        "🎮 **Trainer Info:**\n"
        + _bullets((
            ("Discord Name", profile.display_name),
            ("Trainer Code", profile.trainer_code),
            ("Trainer Name", profile.trainer_name),
        ))
    )


def scammer_marked_reply(record: ScammerRecord) -> PlainText:
    return PlainText(
        "⚠️ **Scammer Marked Successfully!**\n"
        + _bullets((
            ("Discord ID", record.user_id),
            ("Discord Name", record.display_name),
            ("Trainer Code", record.trainer_code),
            ("Trainer Name", record.trainer_name),
            ("Reported Server", record.reported_server),
            ("Reason", record.reason),
            ("Reported By", record.reporter),
        ))
    )


def scammer_found_reply(record: ScammerRecord) -> PlainText:
    return PlainText(
        "⚠️ **Scammer Found!**\n"
        + _bullets((
            ("Discord Name", record.display_name),
            ("Trainer Code", record.trainer_code),
            ("Trainer Name", record.trainer_name),
            ("Reported Server", record.reported_server),
            ("Reason", record.reason),
            ("Reported By", record.reporter),
            ("Reported Date", humanize_date(record.reported_at)),
        ))
    )


def help_summary(prefix: str, requester: CommandContext) -> StructuredSummary:
    fields = tuple(
        SummaryField(label=f"{emoji} `{prefix}{COMMAND_USAGE[name]}`", value=description)
        for name, emoji, description in HELP_ENTRIES
    )
    return StructuredSummary(
        title="📜 Scam Tracker Bot - Command List",
        description="Below are the available commands for managing scam reports and checking users.",
        fields=fields,
        color=SummaryColor.INFO,
        footer_text=f"Requested by {requester.author_display_name}",
        footer_icon_url=requester.author_avatar_url,
    )


def user_info_summary(
    profile: UserProfile,
    member: Optional[MemberSnapshot],
    banner_url: Optional[str],
    requester: CommandContext,
) -> StructuredSummary:
    """Profile summary for a user lookup.

    ``member`` is None when the user is not in the guild (or the lookup
    failed); the summary then says so instead of listing join date and roles.
    """
    general = "\n".join((
        f"• **ID:** `{profile.user_id}`",
        f"• **Username:** @{profile.username}",
        f"• **Display Name:** {profile.global_name or 'None'}",
        f"• **Mention:** {profile.mention}",
    ))
    created = "\n".join((
        f"• **Date:** {discord_timestamp(profile.created_at, 'D')}",
        f"• **Relative:** {discord_timestamp(profile.created_at, 'R')}",
    ))

    fields = [
        SummaryField("General", general),
        SummaryField("Created At", created),
    ]

    if member is None:
        fields.append(SummaryField("Joined At", "🚨 **This user is not in the server.**"))
        fields.append(SummaryField("Roles [0]", "• Not in Server"))
    else:
        if member.joined_at is not None:
            joined = "\n".join((
                f"• **Date:** {discord_timestamp(member.joined_at, 'D')}",
                f"• **Relative:** {discord_timestamp(member.joined_at, 'R')}",
            ))
        else:
            joined = "• Unknown"
        fields.append(SummaryField("Joined At", joined))
        fields.append(SummaryField(f"Roles [{len(member.role_ids)}]", f"• {format_role_list(member.role_ids)}"))

    return StructuredSummary(
        fields=tuple(fields),
        color=SummaryColor.NEUTRAL,
        author_name=f"{profile.username}'s User Information",
        author_icon_url=profile.avatar_url,
        thumbnail_url=profile.avatar_url,
        image_url=banner_url,
        footer_text=f"Requested by {requester.author_display_name}",
        footer_icon_url=requester.author_avatar_url,
    )


def scammer_alert_summary(record: ScammerRecord) -> StructuredSummary:
    return StructuredSummary(
        title="🚨 **Scammer Alert!** 🚨",
        description="A known scammer has joined the server!",
        fields=(
            SummaryField("👤 Discord Name", record.display_name, inline=True),
            SummaryField("🆔 Discord ID", record.user_id, inline=True),
            SummaryField("🎮 Trainer Name", record.trainer_name, inline=True),
            SummaryField("🔢 Trainer Code", record.trainer_code, inline=True),
            SummaryField("⚠️ Reason", record.reason, inline=False),
            SummaryField("📅 Reported Server", record.reported_server, inline=True),
            SummaryField("🔍 Reported By", record.reporter, inline=True),
        ),
        color=SummaryColor.ALERT,
        timestamp=utc_now(),
    )
