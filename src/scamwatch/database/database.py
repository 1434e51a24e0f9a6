"""
Database lifecycle for the scammer registry.

The Database class resolves the configured connection string, opens the
shared connection, creates the schema, and hands out the record store.

Lifecycle:
    1. ``await database.initialize(url)`` at program startup
    2. ``database.records`` for all registry operations
    3. ``await database.shutdown()`` at program end
"""

from __future__ import annotations

from pathlib import Path

from scamwatch.database.db_connection import ConnectionManager, db_connection
from scamwatch.database.db_schema import SchemaManager
from scamwatch.database.record_store import RecordStore
from scamwatch.util.logger import get_logger

logger = get_logger("database")

SQLITE_SCHEME = "sqlite://"


def resolve_database_path(database_url: str) -> Path:
    """Turn a connection string into a database file path.

    Accepted forms:
        ``sqlite:///data/scamwatch.db``   relative path ``data/scamwatch.db``
        ``sqlite:////srv/scamwatch.db``   absolute path ``/srv/scamwatch.db``
        ``data/scamwatch.db``             bare path

    Raises:
        ValueError: If the string is empty or uses another scheme.
    """
    url = (database_url or "").strip()
    if not url:
        raise ValueError("Database URL is empty")

    if url.startswith(SQLITE_SCHEME):
        path_part = url[len(SQLITE_SCHEME):]
        # sqlite:///relative -> "/relative"; sqlite:////absolute -> "//absolute"
        if path_part.startswith("//"):
            path_part = path_part[1:]
        elif path_part.startswith("/"):
            path_part = path_part[1:]
        if not path_part:
            raise ValueError(f"Database URL has no path: {database_url!r}")
        return Path(path_part).resolve()

    if "://" in url:
        raise ValueError(f"Unsupported database URL scheme: {database_url!r}")

    return Path(url).resolve()


class Database:
    """
    Central coordinator for registry storage.

    Args:
        connection: Connection manager to own. Defaults to the process-wide singleton.
    """

    def __init__(self, connection: ConnectionManager = db_connection) -> None:
        self._connection = connection
        self.records = RecordStore(connection)
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self, database_url: str) -> None:
        """
        Open the database and create the schema.

        Raises:
            ValueError: If the URL cannot be resolved.
            Exception: Any connection or schema error, propagated to the caller.
        """
        if self._initialized:
            logger.debug("[DATABASE] Already initialized, skipping")
            return

        path = resolve_database_path(database_url)
        await self._connection.open(path)
        async with self._connection.transaction() as conn:
            await SchemaManager.initialize_schema(conn)

        self._initialized = True
        logger.info("[DATABASE] Database initialized at %s", path)

    async def shutdown(self) -> None:
        """Close the connection if it was opened."""
        await self._connection.close()
        if self._initialized:
            self._initialized = False
            logger.info("[DATABASE] Database shutdown complete")


# Global Database instance
database = Database()
