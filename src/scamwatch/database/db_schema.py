"""
Database schema initialization.

The registry has two collections, stored as one table each, keyed by the
Discord user ID so that SQLite itself rejects a second record for an ID.
"""

import aiosqlite
from scamwatch.util.logger import get_logger

logger = get_logger("database_schema")

TRAINERS_TABLE = "users"
SCAMMERS_TABLE = "scammers"

SCHEMA_VERSION = 1


class SchemaManager:
    """Creates the registry tables and records the schema version."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """
        Create all tables if they do not exist yet.

        Args:
            db: Open database connection
        """
        await SchemaManager._create_tables(db)
        await SchemaManager._update_schema_version(db)
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized (version %d)", SCHEMA_VERSION)

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        """Create all required database tables."""
        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS {TRAINERS_TABLE} (
                user_id TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                trainer_code TEXT NOT NULL,
                trainer_name TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute(f"""
            CREATE TABLE IF NOT EXISTS {SCAMMERS_TABLE} (
                user_id TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                trainer_code TEXT NOT NULL DEFAULT 'Unknown',
                trainer_name TEXT NOT NULL DEFAULT 'Unknown',
                reported_server TEXT NOT NULL,
                reporter TEXT NOT NULL,
                reason TEXT NOT NULL CHECK (length(trim(reason)) > 0),
                reported_at INTEGER NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _update_schema_version(db: aiosqlite.Connection) -> None:
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
