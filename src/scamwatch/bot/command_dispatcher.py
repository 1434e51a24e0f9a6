"""
Command dispatcher: turns one chat line into exactly one action and reply.

Design notes
- ``dispatch`` returns None for lines that are not commands; the bot stays
  silent on ordinary chat.
- Checks run in a fixed order and stop at the first failure: permission,
  argument count, ID shape, then remote lookups.
- Store refusals (duplicate report, duplicate registration, missing record)
  are expected outcomes and map to their own ``CommandOutcome``.
- Any other exception inside a handler is logged with its traceback and
  answered with a generic failure message; details never reach the chat.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Optional

from scamwatch.bot.command_parser import MAX_REASON_LENGTH, parse_command, parse_report_arguments, usage_for
from scamwatch.bot.platform_gateway import PlatformGateway
from scamwatch.database.errors import AlreadyRegistered, AlreadyReported, RecordNotFound
from scamwatch.database.record_store import RecordStore
from scamwatch.datatypes.command_datatypes import (
    CommandContext,
    CommandName,
    CommandOutcome,
    CommandResult,
    ParsedCommand,
    PlainText,
    Reply,
)
from scamwatch.datatypes.discord_datatypes import is_valid_snowflake
from scamwatch.datatypes.record_datatypes import UNKNOWN, UNKNOWN_SERVER, ScammerRecord
from scamwatch.ui import summaries
from scamwatch.util.logger import get_logger

logger = get_logger("command_dispatcher")

GREETING = "👋 Hello! I'm active and ready to help."
UNAUTHORIZED_MESSAGE = "❌ Only admins can use this command."
INVALID_ID_MESSAGE = "❌ Invalid Discord ID! Please provide a valid user ID."
UNKNOWN_TARGET_MESSAGE = "❌ This Discord ID does not belong to a real user."
DUPLICATE_REPORT_MESSAGE = "⚠️ This user is already marked as a scammer."
ALREADY_REGISTERED_MESSAGE = "❌ You have already registered!"
TRAINER_SAVED_MESSAGE = "✅ Trainer details saved successfully!"
NOT_REGISTERED_MESSAGE = "❌ You are not registered."
NOT_MARKED_MESSAGE = "⚠️ This user is not marked as a scammer."
USER_NOT_FOUND_MESSAGE = "❌ Could not fetch user. Make sure the ID is correct."
GENERIC_FAILURE_MESSAGE = "❌ Something went wrong and the command could not be completed. Please try again later."
REASON_TOO_LONG_MESSAGE = f"❌ The reason is too long. Use at most {MAX_REASON_LENGTH} characters."

Handler = Callable[[ParsedCommand, CommandContext], Awaitable[CommandResult]]


def _result(command: CommandName, outcome: CommandOutcome, reply: Reply | str) -> CommandResult:
    if isinstance(reply, str):
        reply = PlainText(reply)
    return CommandResult(command=command, outcome=outcome, reply=reply)


class CommandDispatcher:
    """Validates and executes parsed commands.

    Args:
        store: Record store for trainer profiles and scammer records.
        gateway: Platform lookups (users, members, banners).
        prefix: Command prefix, e.g. ``"!"``.
    """

    def __init__(self, store: RecordStore, gateway: PlatformGateway, prefix: str = "!") -> None:
        self.store = store
        self.gateway = gateway
        self.prefix = prefix
        self._handlers: Dict[CommandName, Handler] = {
            CommandName.GREET: self.handle_greet,
            CommandName.HELP: self.handle_help,
            CommandName.REGISTER_TRAINER: self.handle_register_trainer,
            CommandName.GET_TRAINER: self.handle_get_trainer,
            CommandName.REPORT_SCAMMER: self.handle_report_scammer,
            CommandName.REMOVE_SCAMMER: self.handle_remove_scammer,
            CommandName.CHECK_SCAMMER: self.handle_check_scammer,
            CommandName.FIND_USER: self.handle_find_user,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def dispatch(self, text: str, context: CommandContext) -> Optional[CommandResult]:
        """Parse and execute a chat line; None if the line is not a command."""
        parsed = parse_command(text, self.prefix)
        if parsed is None:
            return None
        return await self.execute(parsed, context)

    async def execute(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        logger.debug(
            "[DISPATCH] %s from %s (guild %s) with %d arg(s)",
            parsed.name, context.author_id, context.guild_id, len(parsed.args),
        )
        handler = self._handlers[parsed.name]
        try:
            result = await handler(parsed, context)
        except Exception:
            logger.exception(
                "[DISPATCH] Command %s from %s failed", parsed.name, context.author_id
            )
            return _result(parsed.name, CommandOutcome.EXTERNAL_FAILURE, GENERIC_FAILURE_MESSAGE)

        if not result.ok:
            logger.info("[DISPATCH] %s from %s ended with %s", parsed.name, context.author_id, result.outcome)
        return result

    def _usage(self, name: CommandName) -> CommandResult:
        return _result(name, CommandOutcome.MALFORMED_ARGS, f"❌ Usage: `{usage_for(name, self.prefix)}`")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def handle_greet(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        return _result(parsed.name, CommandOutcome.OK, GREETING)

    async def handle_help(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        if not context.is_admin:
            return _result(parsed.name, CommandOutcome.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)
        return _result(parsed.name, CommandOutcome.OK, summaries.help_summary(self.prefix, context))

    async def handle_register_trainer(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        if len(parsed.args) < 2:
            return self._usage(parsed.name)

        trainer_code = parsed.args[0]
        trainer_name = " ".join(parsed.args[1:])
        try:
            await self.store.register_trainer(
                context.author_id, context.author_display_name, trainer_code, trainer_name
            )
        except AlreadyRegistered:
            return _result(parsed.name, CommandOutcome.ALREADY_REGISTERED, ALREADY_REGISTERED_MESSAGE)

        return _result(parsed.name, CommandOutcome.OK, TRAINER_SAVED_MESSAGE)

    async def handle_get_trainer(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        profile = await self.store.get_trainer(context.author_id)
        if profile is None:
            return _result(parsed.name, CommandOutcome.NOT_FOUND, NOT_REGISTERED_MESSAGE)
        return _result(parsed.name, CommandOutcome.OK, summaries.trainer_profile_reply(profile))

    async def handle_report_scammer(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        if not context.is_admin:
            return _result(parsed.name, CommandOutcome.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)

        report = parse_report_arguments(parsed.args)
        if report is None:
            return self._usage(parsed.name)
        if len(report.reason) > MAX_REASON_LENGTH:
            return _result(parsed.name, CommandOutcome.MALFORMED_ARGS, REASON_TOO_LONG_MESSAGE)

        if not is_valid_snowflake(report.target_id):
            return _result(parsed.name, CommandOutcome.INVALID_ID, INVALID_ID_MESSAGE)

        if await self.gateway.fetch_user(report.target_id) is None:
            return _result(parsed.name, CommandOutcome.UNKNOWN_TARGET, UNKNOWN_TARGET_MESSAGE)

        if await self.store.get_scammer(report.target_id) is not None:
            return _result(parsed.name, CommandOutcome.DUPLICATE_REPORT, DUPLICATE_REPORT_MESSAGE)

        record = ScammerRecord(
            user_id=report.target_id,
            display_name=report.display_name,
            trainer_code=report.trainer_code or UNKNOWN,
            trainer_name=report.trainer_name or UNKNOWN,
            reported_server=context.guild_name or UNKNOWN_SERVER,
            reporter=context.author_display_name,
            reason=report.reason,
        )
        try:
            stored = await self.store.add_scammer(record)
        except AlreadyReported:
            return _result(parsed.name, CommandOutcome.DUPLICATE_REPORT, DUPLICATE_REPORT_MESSAGE)

        return _result(parsed.name, CommandOutcome.OK, summaries.scammer_marked_reply(stored))

    async def handle_remove_scammer(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        if not context.is_admin:
            return _result(parsed.name, CommandOutcome.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)
        if not parsed.args:
            return self._usage(parsed.name)

        target_id = parsed.args[0]
        if not is_valid_snowflake(target_id):
            return _result(parsed.name, CommandOutcome.INVALID_ID, INVALID_ID_MESSAGE)

        try:
            await self.store.remove_scammer(target_id)
        except RecordNotFound:
            return _result(parsed.name, CommandOutcome.NOT_FOUND, NOT_MARKED_MESSAGE)

        return _result(
            parsed.name,
            CommandOutcome.OK,
            f"✅ **User removed from scammer list!**\n- **Discord ID:** {target_id}",
        )

    async def handle_check_scammer(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        if not parsed.args:
            return self._usage(parsed.name)

        target_id = parsed.args[0]
        if not is_valid_snowflake(target_id):
            return _result(parsed.name, CommandOutcome.INVALID_ID, INVALID_ID_MESSAGE)

        record = await self.store.get_scammer(target_id)
        if record is None:
            return _result(
                parsed.name,
                CommandOutcome.NOT_FOUND,
                f"✅ No scammer record found for **Discord ID: {target_id}**.",
            )
        return _result(parsed.name, CommandOutcome.OK, summaries.scammer_found_reply(record))

    async def handle_find_user(self, parsed: ParsedCommand, context: CommandContext) -> CommandResult:
        if not parsed.args:
            return self._usage(parsed.name)

        target_id = parsed.args[0]
        profile = await self.gateway.fetch_user(target_id) if is_valid_snowflake(target_id) else None
        if profile is None:
            return _result(parsed.name, CommandOutcome.NOT_FOUND, USER_NOT_FOUND_MESSAGE)

        member = None
        if context.guild_id is not None:
            member = await self.gateway.fetch_member(context.guild_id, target_id)

        try:
            banner_url = await self.gateway.fetch_banner_url(target_id)
        except Exception:
            logger.exception("[DISPATCH] Banner lookup for %s failed, sending summary without it", target_id)
            banner_url = None

        return _result(
            parsed.name,
            CommandOutcome.OK,
            summaries.user_info_summary(profile, member, banner_url, context),
        )
