"""Tests for database lifecycle and connection string handling."""

from pathlib import Path

import pytest

from scamwatch.database.database import Database, resolve_database_path
from scamwatch.database.db_connection import ConnectionManager


class TestResolveDatabasePath:

    def test_relative_sqlite_url(self):
        assert resolve_database_path("sqlite:///data/registry.db") == Path("data/registry.db").resolve()

    def test_absolute_sqlite_url(self):
        assert resolve_database_path("sqlite:////srv/registry.db") == Path("/srv/registry.db").resolve()

    def test_bare_path(self, tmp_path):
        target = tmp_path / "registry.db"
        assert resolve_database_path(str(target)) == target.resolve()

    @pytest.mark.parametrize("url", ["", "   ", "sqlite://", "mongodb://localhost/Pokepolice"])
    def test_rejects_unusable_urls(self, url):
        with pytest.raises(ValueError):
            resolve_database_path(url)


class TestDatabaseLifecycle:

    @pytest.mark.asyncio
    async def test_initialize_creates_registry_tables(self, tmp_path):
        db = Database(ConnectionManager())
        await db.initialize(str(tmp_path / "registry.db"))
        try:
            assert db.initialized
            async with db._connection.read() as conn:
                async with conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
                ) as cursor:
                    names = {row[0] for row in await cursor.fetchall()}
            assert {"users", "scammers", "schema_version"} <= names
        finally:
            await db.shutdown()

        assert not db.initialized

    @pytest.mark.asyncio
    async def test_initialize_twice_is_a_no_op(self, tmp_path):
        db = Database(ConnectionManager())
        await db.initialize(str(tmp_path / "registry.db"))
        try:
            await db.initialize(str(tmp_path / "other.db"))
            assert db._connection.path == (tmp_path / "registry.db").resolve()
        finally:
            await db.shutdown()

    @pytest.mark.asyncio
    async def test_records_survive_reopen(self, tmp_path):
        path = str(tmp_path / "registry.db")
        db = Database(ConnectionManager())
        await db.initialize(path)
        await db.records.register_trainer("42", "Ash", "1111", "AshK")
        await db.shutdown()

        reopened = Database(ConnectionManager())
        await reopened.initialize(path)
        try:
            assert (await reopened.records.get_trainer("42")).trainer_name == "AshK"
        finally:
            await reopened.shutdown()

    def test_connection_requires_open(self):
        with pytest.raises(RuntimeError):
            ConnectionManager().connection
