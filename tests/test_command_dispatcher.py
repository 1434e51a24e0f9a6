"""Tests for command validation and execution."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from scamwatch.bot import command_dispatcher
from scamwatch.bot.command_dispatcher import CommandDispatcher
from scamwatch.bot.command_parser import MAX_REASON_LENGTH
from scamwatch.datatypes.command_datatypes import (
    CommandName,
    CommandOutcome,
    PlainText,
    StructuredSummary,
)
from scamwatch.datatypes.discord_datatypes import UserID
from scamwatch.datatypes.record_datatypes import UNKNOWN, ScammerRecord

SCAMMER_ID = "123456789012345678"
OTHER_ID = "876543210987654321"
UNREGISTERED_ID = "999999999999999999"


def spy_store():
    """Store double that records every call."""
    return SimpleNamespace(
        register_trainer=AsyncMock(),
        get_trainer=AsyncMock(return_value=None),
        add_scammer=AsyncMock(),
        get_scammer=AsyncMock(return_value=None),
        remove_scammer=AsyncMock(),
    )


def store_calls(store):
    return sum(
        getattr(store, name).await_count
        for name in ("register_trainer", "get_trainer", "add_scammer", "get_scammer", "remove_scammer")
    )


@pytest.fixture
def dispatcher(store, gateway):
    return CommandDispatcher(store, gateway, prefix="!")


class TestDispatchBasics:

    @pytest.mark.asyncio
    async def test_plain_chat_produces_nothing(self, gateway, member_context):
        store = spy_store()
        dispatcher = CommandDispatcher(store, gateway)

        for line in ("hello everyone", "check 123456789012345678", "!notacommand", ""):
            assert await dispatcher.dispatch(line, member_context) is None

        assert store_calls(store) == 0
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_greet(self, dispatcher, member_context):
        result = await dispatcher.dispatch("!hi", member_context)

        assert result.outcome is CommandOutcome.OK
        assert result.reply == PlainText(command_dispatcher.GREETING)

    @pytest.mark.asyncio
    async def test_help_requires_admin(self, dispatcher, member_context, admin_context):
        denied = await dispatcher.dispatch("!scamhelp", member_context)
        allowed = await dispatcher.dispatch("!scamhelp", admin_context)

        assert denied.outcome is CommandOutcome.UNAUTHORIZED
        assert allowed.outcome is CommandOutcome.OK
        assert isinstance(allowed.reply, StructuredSummary)
        labels = [f.label for f in allowed.reply.fields]
        assert any("!add <discordID>" in label for label in labels)
        assert allowed.reply.footer_text == "Requested by ModMary"

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_generic_failure(self, gateway, admin_context):
        store = spy_store()
        store.get_scammer.side_effect = RuntimeError("database is locked at /secret/path")
        dispatcher = CommandDispatcher(store, gateway)

        result = await dispatcher.dispatch(f"!check {SCAMMER_ID}", admin_context)

        assert result.outcome is CommandOutcome.EXTERNAL_FAILURE
        assert result.reply == PlainText(command_dispatcher.GENERIC_FAILURE_MESSAGE)
        assert "/secret/path" not in result.reply.content


class TestTrainerCommands:

    @pytest.mark.asyncio
    async def test_register_then_get(self, dispatcher, member_context):
        registered = await dispatcher.dispatch("!addtrainer 1111-2222-3333 Ash Ketchum", member_context)
        fetched = await dispatcher.dispatch("!gettrainer", member_context)

        assert registered.outcome is CommandOutcome.OK
        assert fetched.outcome is CommandOutcome.OK
        assert "Ash Ketchum" in fetched.reply.content
        assert "1111-2222-3333" in fetched.reply.content
        assert "TrainerTom" in fetched.reply.content

    @pytest.mark.asyncio
    async def test_register_twice(self, dispatcher, store, member_context):
        await dispatcher.dispatch("!addtrainer 1111 Ash", member_context)
        second = await dispatcher.dispatch("!addtrainer 9999 Gary", member_context)

        assert second.outcome is CommandOutcome.ALREADY_REGISTERED
        profile = await store.get_trainer(member_context.author_id)
        assert profile.trainer_code == "1111"
        assert profile.trainer_name == "Ash"

    @pytest.mark.asyncio
    async def test_register_needs_code_and_name(self, dispatcher, member_context):
        result = await dispatcher.dispatch("!addtrainer 1111", member_context)

        assert result.outcome is CommandOutcome.MALFORMED_ARGS
        assert "!addtrainer <trainerCode> <trainerName>" in result.reply.content

    @pytest.mark.asyncio
    async def test_get_unregistered(self, dispatcher, member_context):
        result = await dispatcher.dispatch("!gettrainer", member_context)

        assert result.outcome is CommandOutcome.NOT_FOUND


class TestReportScammer:

    @pytest.mark.asyncio
    async def test_report_with_defaults(self, dispatcher, store, admin_context):
        result = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady chargeback fraud", admin_context)

        assert result.outcome is CommandOutcome.OK
        record = await store.get_scammer(SCAMMER_ID)
        assert record.reason == "chargeback fraud"
        assert record.trainer_code == UNKNOWN
        assert record.trainer_name == UNKNOWN
        assert record.reported_server == "Pogo Traders"
        assert record.reporter == "ModMary"
        assert "Scammer Marked Successfully" in result.reply.content

    @pytest.mark.asyncio
    async def test_report_with_trainer_fields(self, dispatcher, store, admin_context):
        result = await dispatcher.dispatch(
            f"!add {SCAMMER_ID} shady code:111122223333 trainer:ShadyGo never sent the mon",
            admin_context,
        )

        assert result.outcome is CommandOutcome.OK
        record = await store.get_scammer(SCAMMER_ID)
        assert record.trainer_code == "111122223333"
        assert record.trainer_name == "ShadyGo"
        assert record.reason == "never sent the mon"

    @pytest.mark.asyncio
    async def test_report_with_quoted_trainer_name(self, dispatcher, store, admin_context):
        result = await dispatcher.dispatch(
            f'!add {SCAMMER_ID} shady trainer:"Ash Ketchum" kept both mons',
            admin_context,
        )

        assert result.outcome is CommandOutcome.OK
        record = await store.get_scammer(SCAMMER_ID)
        assert record.trainer_name == "Ash Ketchum"
        assert record.reason == "kept both mons"

    @pytest.mark.asyncio
    async def test_unclosed_trainer_quote_is_malformed(self, dispatcher, store, admin_context):
        result = await dispatcher.dispatch(f'!add {SCAMMER_ID} shady trainer:"Ash Ketchum kept both', admin_context)

        assert result.outcome is CommandOutcome.MALFORMED_ARGS
        assert await store.count_scammers() == 0

    @pytest.mark.asyncio
    async def test_report_twice_is_duplicate(self, dispatcher, admin_context):
        first = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady chargeback fraud", admin_context)
        second = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady again", admin_context)

        assert first.outcome is CommandOutcome.OK
        assert second.outcome is CommandOutcome.DUPLICATE_REPORT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["abc", "12345", "1234567890123456789012", "12345678901234567a"])
    async def test_invalid_id_checked_before_any_call(self, gateway, admin_context, bad_id):
        store = spy_store()
        dispatcher = CommandDispatcher(store, gateway)

        result = await dispatcher.dispatch(f"!add {bad_id} shady some reason", admin_context)

        assert result.outcome is CommandOutcome.INVALID_ID
        assert store_calls(store) == 0
        assert gateway.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "lookalike_id",
        ["１２３４５６７８９０１２３４５６７８", "١٢٣٤٥٦٧٨٩٠١٢٣٤٥٦٧٨"],
    )
    async def test_non_ascii_digits_cannot_report_twice(
        self, store, gateway_factory, profile_factory, admin_context, lookalike_id
    ):
        gateway = gateway_factory(users={SCAMMER_ID: profile_factory()})
        lookup = gateway.fetch_user

        async def fetch_like_discord(user_id):
            # Discord resolves any numeral that int() accepts
            return await lookup(str(UserID(user_id)))

        gateway.fetch_user = fetch_like_discord
        dispatcher = CommandDispatcher(store, gateway)

        first = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady chargeback fraud", admin_context)
        second = await dispatcher.dispatch(f"!add {lookalike_id} shady again", admin_context)

        assert first.outcome is CommandOutcome.OK
        assert second.outcome is CommandOutcome.INVALID_ID
        assert await store.count_scammers() == 1

    @pytest.mark.asyncio
    async def test_overlong_reason_is_rejected_before_storing(self, store, gateway, admin_context):
        dispatcher = CommandDispatcher(store, gateway)
        reason = " ".join(["scam"] * 300)

        result = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady {reason}", admin_context)

        assert len(reason) > 1000
        assert result.outcome is CommandOutcome.MALFORMED_ARGS
        assert result.reply == PlainText(command_dispatcher.REASON_TOO_LONG_MESSAGE)
        assert gateway.calls == []
        assert await store.count_scammers() == 0

    @pytest.mark.asyncio
    async def test_reason_at_limit_is_accepted(self, store, gateway, admin_context):
        dispatcher = CommandDispatcher(store, gateway)
        reason = "x" * MAX_REASON_LENGTH

        result = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady {reason}", admin_context)

        assert result.outcome is CommandOutcome.OK
        assert len(result.reply.content) <= 2000

    @pytest.mark.asyncio
    async def test_unknown_target(self, dispatcher, store, admin_context):
        result = await dispatcher.dispatch(f"!add {UNREGISTERED_ID} ghost made up", admin_context)

        assert result.outcome is CommandOutcome.UNKNOWN_TARGET
        assert await store.get_scammer(UNREGISTERED_ID) is None

    @pytest.mark.asyncio
    async def test_missing_reason_is_malformed(self, dispatcher, admin_context):
        result = await dispatcher.dispatch(f"!add {SCAMMER_ID} shady", admin_context)

        assert result.outcome is CommandOutcome.MALFORMED_ARGS

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "line",
        [
            f"!add {SCAMMER_ID} shady chargeback fraud",
            "!add abc",
            "!add",
            f"!remove {SCAMMER_ID}",
            "!remove nonsense",
            "!remove",
        ],
    )
    async def test_non_admin_is_always_unauthorized(self, gateway, member_context, line):
        store = spy_store()
        dispatcher = CommandDispatcher(store, gateway)

        result = await dispatcher.dispatch(line, member_context)

        assert result.outcome is CommandOutcome.UNAUTHORIZED
        store.add_scammer.assert_not_awaited()
        store.remove_scammer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_admin_leaves_real_store_untouched(self, dispatcher, store, member_context):
        await dispatcher.dispatch(f"!add {SCAMMER_ID} shady chargeback fraud", member_context)

        assert await store.count_scammers() == 0


class TestRemoveAndCheck:

    @pytest.mark.asyncio
    async def test_remove_unreported(self, dispatcher, store, admin_context):
        await store.add_scammer(
            ScammerRecord(user_id=OTHER_ID, display_name="x", reason="r", reporter="m")
        )

        result = await dispatcher.dispatch(f"!remove {SCAMMER_ID}", admin_context)

        assert result.outcome is CommandOutcome.NOT_FOUND
        assert await store.count_scammers() == 1

    @pytest.mark.asyncio
    async def test_remove_reported(self, dispatcher, store, admin_context):
        await dispatcher.dispatch(f"!add {SCAMMER_ID} shady chargeback fraud", admin_context)

        result = await dispatcher.dispatch(f"!remove {SCAMMER_ID}", admin_context)

        assert result.outcome is CommandOutcome.OK
        assert await store.get_scammer(SCAMMER_ID) is None

    @pytest.mark.asyncio
    async def test_remove_validates_id(self, gateway, admin_context):
        store = spy_store()
        dispatcher = CommandDispatcher(store, gateway)

        result = await dispatcher.dispatch("!remove 12345", admin_context)

        assert result.outcome is CommandOutcome.INVALID_ID
        assert store_calls(store) == 0

    @pytest.mark.asyncio
    async def test_check_round_trip(self, dispatcher, store, admin_context, member_context):
        before = datetime.now(timezone.utc)
        await dispatcher.dispatch(f"!add {SCAMMER_ID} shady chargeback fraud", admin_context)

        result = await dispatcher.dispatch(f"!check {SCAMMER_ID}", member_context)

        assert result.outcome is CommandOutcome.OK
        assert "**Reason:** chargeback fraud" in result.reply.content
        record = await store.get_scammer(SCAMMER_ID)
        assert abs((record.reported_at - before).total_seconds()) < 5

    @pytest.mark.asyncio
    async def test_check_clean_user(self, dispatcher, member_context):
        result = await dispatcher.dispatch(f"!check {OTHER_ID}", member_context)

        assert result.outcome is CommandOutcome.NOT_FOUND
        assert "No scammer record found" in result.reply.content

    @pytest.mark.asyncio
    async def test_check_validates_id(self, gateway, member_context):
        store = spy_store()
        dispatcher = CommandDispatcher(store, gateway)

        result = await dispatcher.dispatch("!check abc", member_context)

        assert result.outcome is CommandOutcome.INVALID_ID
        assert store_calls(store) == 0

    @pytest.mark.asyncio
    async def test_check_without_id(self, dispatcher, member_context):
        result = await dispatcher.dispatch("!check", member_context)

        assert result.outcome is CommandOutcome.MALFORMED_ARGS


class TestFindUser:

    @pytest.mark.asyncio
    async def test_member_summary(self, dispatcher, gateway, member_context):
        result = await dispatcher.dispatch(f"!finduser {SCAMMER_ID}", member_context)

        assert result.command is CommandName.FIND_USER
        assert result.outcome is CommandOutcome.OK
        summary = result.reply
        assert summary.author_name == "shady's User Information"
        assert summary.image_url == "https://cdn.example/banners/a.png"
        fields = {f.label: f.value for f in summary.fields}
        assert "`123456789012345678`" in fields["General"]
        assert "Shady Trader" in fields["General"]
        assert ":D>" in fields["Created At"] and ":R>" in fields["Created At"]
        assert fields["Roles [2]"] == "• <@&501>, <@&502>"
        assert ("fetch_member", 4242, SCAMMER_ID) in gateway.calls

    @pytest.mark.asyncio
    async def test_non_member_summary(self, dispatcher, member_context):
        result = await dispatcher.dispatch(f"!find {OTHER_ID}", member_context)

        fields = {f.label: f.value for f in result.reply.fields}
        assert "not in the server" in fields["Joined At"]
        assert fields["Roles [0]"] == "• Not in Server"
        assert "Display Name:** None" in fields["General"]
        assert result.reply.image_url is None

    @pytest.mark.asyncio
    async def test_banner_failure_is_not_fatal(self, store, gateway_factory, profile_factory, member_context):
        gateway = gateway_factory(
            users={SCAMMER_ID: profile_factory()},
            banner_error=RuntimeError("HTTP 500"),
        )
        dispatcher = CommandDispatcher(store, gateway)

        result = await dispatcher.dispatch(f"!finduser {SCAMMER_ID}", member_context)

        assert result.outcome is CommandOutcome.OK
        assert result.reply.image_url is None

    @pytest.mark.asyncio
    async def test_unknown_user(self, dispatcher, member_context):
        result = await dispatcher.dispatch(f"!finduser {UNREGISTERED_ID}", member_context)

        assert result.outcome is CommandOutcome.NOT_FOUND
        assert result.reply == PlainText(command_dispatcher.USER_NOT_FOUND_MESSAGE)

    @pytest.mark.asyncio
    async def test_malformed_id_skips_lookup(self, dispatcher, gateway, member_context):
        result = await dispatcher.dispatch("!finduser bob", member_context)

        assert result.outcome is CommandOutcome.NOT_FOUND
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_find_user_does_not_touch_store(self, gateway, member_context):
        store = spy_store()
        dispatcher = CommandDispatcher(store, gateway)

        await dispatcher.dispatch(f"!finduser {SCAMMER_ID}", member_context)

        assert store_calls(store) == 0
