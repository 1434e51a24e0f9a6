"""
Pytest configuration and fixtures for Scamwatch tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from scamwatch.database.db_connection import ConnectionManager  # noqa: E402
from scamwatch.database.db_schema import SchemaManager  # noqa: E402
from scamwatch.database.record_store import RecordStore  # noqa: E402
from scamwatch.datatypes.command_datatypes import CommandContext  # noqa: E402
from scamwatch.datatypes.discord_datatypes import MemberSnapshot, UserProfile  # noqa: E402

SCAMMER_ID = "123456789012345678"
OTHER_ID = "876543210987654321"
ADMIN_ID = "111111111111111111"
MEMBER_ID = "222222222222222222"
GUILD_ID = 4242


class FakeGateway:
    """In-memory platform gateway recording every call."""

    def __init__(self, users=None, members=None, banners=None, banner_error=None):
        self.users = dict(users or {})
        self.members = dict(members or {})
        self.banners = dict(banners or {})
        self.banner_error = banner_error
        self.calls = []

    async def fetch_user(self, user_id):
        self.calls.append(("fetch_user", user_id))
        return self.users.get(user_id)

    async def fetch_member(self, guild_id, user_id):
        self.calls.append(("fetch_member", guild_id, user_id))
        return self.members.get(user_id)

    async def fetch_banner_url(self, user_id):
        self.calls.append(("fetch_banner_url", user_id))
        if self.banner_error is not None:
            raise self.banner_error
        return self.banners.get(user_id)


def make_profile(user_id=SCAMMER_ID, username="shady", global_name="Shady Trader"):
    return UserProfile(
        user_id=user_id,
        username=username,
        global_name=global_name,
        created_at=datetime(2021, 5, 1, 12, 0, tzinfo=timezone.utc),
        avatar_url=f"https://cdn.example/avatars/{user_id}.png",
    )


@pytest_asyncio.fixture
async def connection(tmp_path):
    """A fresh database with the registry schema, closed after the test."""
    manager = ConnectionManager()
    await manager.open(tmp_path / "registry.db")
    async with manager.transaction() as conn:
        await SchemaManager.initialize_schema(conn)
    yield manager
    await manager.close()


@pytest.fixture
def store(connection):
    return RecordStore(connection)


@pytest.fixture
def gateway():
    return FakeGateway(
        users={SCAMMER_ID: make_profile(), OTHER_ID: make_profile(OTHER_ID, "clean", None)},
        members={
            SCAMMER_ID: MemberSnapshot(
                joined_at=datetime(2023, 1, 2, tzinfo=timezone.utc),
                role_ids=(501, 502),
            ),
        },
        banners={SCAMMER_ID: "https://cdn.example/banners/a.png"},
    )


@pytest.fixture
def admin_context():
    return CommandContext(
        author_id=ADMIN_ID,
        author_display_name="ModMary",
        guild_id=GUILD_ID,
        guild_name="Pogo Traders",
        is_admin=True,
    )


@pytest.fixture
def member_context():
    return CommandContext(
        author_id=MEMBER_ID,
        author_display_name="TrainerTom",
        guild_id=GUILD_ID,
        guild_name="Pogo Traders",
        is_admin=False,
    )


@pytest.fixture
def gateway_factory():
    return FakeGateway


@pytest.fixture
def profile_factory():
    return make_profile
