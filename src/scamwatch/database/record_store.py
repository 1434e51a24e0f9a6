"""
Record store: the only component that reads or writes registry state.

Every method performs one short operation on the shared connection. The
existence checks before inserts give friendly errors in the common case;
the primary keys on both tables still reject a duplicate that races past
the check, and that rejection is reported with the same exception.
"""

from __future__ import annotations

from typing import Optional

import aiosqlite

from scamwatch.database.db_connection import ConnectionManager, db_connection
from scamwatch.database.errors import AlreadyRegistered, AlreadyReported, RecordNotFound
from scamwatch.database.scammer_repo import ScammerRepo
from scamwatch.database.trainer_repo import TrainerRepo
from scamwatch.datatypes.record_datatypes import ScammerRecord, TrainerProfile
from scamwatch.util.logger import get_logger

logger = get_logger("record_store")


class RecordStore:
    """Trainer profile and scammer record operations.

    Args:
        connection: Connection manager to run queries on. Defaults to the
            process-wide singleton.
    """

    def __init__(self, connection: ConnectionManager = db_connection) -> None:
        self._connection = connection

    # ------------------------------------------------------------------
    # Trainer profiles
    # ------------------------------------------------------------------

    async def register_trainer(
        self,
        user_id: str,
        display_name: str,
        trainer_code: str,
        trainer_name: str,
    ) -> TrainerProfile:
        """Create the trainer profile for ``user_id``.

        Raises:
            AlreadyRegistered: If the user already has a profile.
        """
        profile = TrainerProfile(
            user_id=str(user_id),
            display_name=display_name,
            trainer_code=trainer_code,
            trainer_name=trainer_name,
        )
        async with self._connection.transaction() as conn:
            if await TrainerRepo.exists(conn, profile.user_id):
                raise AlreadyRegistered(profile.user_id)
            try:
                await TrainerRepo.insert(conn, profile)
            except aiosqlite.IntegrityError as exc:
                raise AlreadyRegistered(profile.user_id) from exc

        logger.info("[RECORD STORE] Registered trainer profile for %s", profile.user_id)
        return profile

    async def get_trainer(self, user_id: str) -> Optional[TrainerProfile]:
        async with self._connection.read() as conn:
            return await TrainerRepo.get(conn, str(user_id))

    # ------------------------------------------------------------------
    # Scammer records
    # ------------------------------------------------------------------

    async def add_scammer(self, record: ScammerRecord) -> ScammerRecord:
        """Persist ``record`` with ``reported_at`` set to now.

        Returns:
            The stored record.

        Raises:
            AlreadyReported: If a record for the same user ID exists.
        """
        stored = record.stamped()
        async with self._connection.transaction() as conn:
            if await ScammerRepo.exists(conn, stored.user_id):
                raise AlreadyReported(stored.user_id)
            try:
                await ScammerRepo.insert(conn, stored)
            except aiosqlite.IntegrityError as exc:
                raise AlreadyReported(stored.user_id) from exc

        logger.info(
            "[RECORD STORE] Added scammer record for %s (reported by %s in %s)",
            stored.user_id, stored.reporter, stored.reported_server,
        )
        return stored

    async def get_scammer(self, user_id: str) -> Optional[ScammerRecord]:
        async with self._connection.read() as conn:
            return await ScammerRepo.get(conn, str(user_id))

    async def remove_scammer(self, user_id: str) -> None:
        """Delete the scammer record for ``user_id``.

        Raises:
            RecordNotFound: If there is no record for that ID.
        """
        async with self._connection.transaction() as conn:
            removed = await ScammerRepo.delete(conn, str(user_id))
        if not removed:
            raise RecordNotFound(str(user_id))
        logger.info("[RECORD STORE] Removed scammer record for %s", user_id)

    async def count_scammers(self) -> int:
        async with self._connection.read() as conn:
            return await ScammerRepo.count(conn)
