"""
Repository for the ``users`` table (registered trainer profiles).
"""

from __future__ import annotations

from typing import Optional

import aiosqlite

from scamwatch.database.db_schema import TRAINERS_TABLE
from scamwatch.datatypes.record_datatypes import TrainerProfile


class TrainerRepo:
    """Low-level CRUD for trainer profiles."""

    @staticmethod
    async def insert(conn: aiosqlite.Connection, profile: TrainerProfile) -> None:
        """Insert a profile. Raises ``aiosqlite.IntegrityError`` if the user ID is taken."""
        await conn.execute(
            f"INSERT INTO {TRAINERS_TABLE} (user_id, display_name, trainer_code, trainer_name) "
            "VALUES (?, ?, ?, ?)",
            (profile.user_id, profile.display_name, profile.trainer_code, profile.trainer_name),
        )

    @staticmethod
    async def get(conn: aiosqlite.Connection, user_id: str) -> Optional[TrainerProfile]:
        async with conn.execute(
            f"SELECT user_id, display_name, trainer_code, trainer_name FROM {TRAINERS_TABLE} WHERE user_id = ?",
            (str(user_id),),
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return TrainerProfile(
            user_id=str(row[0]),
            display_name=row[1],
            trainer_code=row[2],
            trainer_name=row[3],
        )

    @staticmethod
    async def exists(conn: aiosqlite.Connection, user_id: str) -> bool:
        async with conn.execute(
            f"SELECT 1 FROM {TRAINERS_TABLE} WHERE user_id = ? LIMIT 1",
            (str(user_id),),
        ) as cursor:
            return await cursor.fetchone() is not None
