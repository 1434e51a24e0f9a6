"""
Repository for the ``scammers`` table.

``reported_at`` is stored as INTEGER unix seconds (UTC) and converted back to
an aware datetime on read.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import aiosqlite

from scamwatch.database.db_schema import SCAMMERS_TABLE
from scamwatch.datatypes.record_datatypes import ScammerRecord

_COLUMNS = (
    "user_id, display_name, trainer_code, trainer_name, "
    "reported_server, reporter, reason, reported_at"
)


def _row_to_record(row) -> ScammerRecord:
    return ScammerRecord(
        user_id=str(row[0]),
        display_name=row[1],
        trainer_code=row[2],
        trainer_name=row[3],
        reported_server=row[4],
        reporter=row[5],
        reason=row[6],
        reported_at=datetime.fromtimestamp(int(row[7]), tz=timezone.utc),
    )


class ScammerRepo:
    """Low-level CRUD for scammer records."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @staticmethod
    async def insert(conn: aiosqlite.Connection, record: ScammerRecord) -> None:
        """Insert a record. Raises ``aiosqlite.IntegrityError`` if the user ID is taken."""
        await conn.execute(
            f"INSERT INTO {SCAMMERS_TABLE} ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                record.user_id,
                record.display_name,
                record.trainer_code,
                record.trainer_name,
                record.reported_server,
                record.reporter,
                record.reason,
                int(record.reported_at.timestamp()),
            ),
        )

    @staticmethod
    async def delete(conn: aiosqlite.Connection, user_id: str) -> int:
        """Delete the record for ``user_id`` and return the number of rows removed."""
        cursor = await conn.execute(
            f"DELETE FROM {SCAMMERS_TABLE} WHERE user_id = ?",
            (str(user_id),),
        )
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    async def get(conn: aiosqlite.Connection, user_id: str) -> Optional[ScammerRecord]:
        async with conn.execute(
            f"SELECT {_COLUMNS} FROM {SCAMMERS_TABLE} WHERE user_id = ?",
            (str(user_id),),
        ) as cursor:
            row = await cursor.fetchone()
        return _row_to_record(row) if row is not None else None

    @staticmethod
    async def exists(conn: aiosqlite.Connection, user_id: str) -> bool:
        async with conn.execute(
            f"SELECT 1 FROM {SCAMMERS_TABLE} WHERE user_id = ? LIMIT 1",
            (str(user_id),),
        ) as cursor:
            return await cursor.fetchone() is not None

    @staticmethod
    async def count(conn: aiosqlite.Connection) -> int:
        async with conn.execute(f"SELECT COUNT(*) FROM {SCAMMERS_TABLE}") as cursor:
            row = await cursor.fetchone()
        return int(row[0]) if row else 0
