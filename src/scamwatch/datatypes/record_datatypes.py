"""
Records persisted by the record store.

Both entities are keyed by the Discord user ID they describe and are
immutable once built: the registry never edits a record in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

# Substituted for optional fields the reporter left out
UNKNOWN = "Unknown"
UNKNOWN_SERVER = "Unknown Server"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True, slots=True)
class TrainerProfile:
    """A self-registered trainer.

    Attributes:
        user_id: Discord user ID of the owner (unique key)
        display_name: Display name captured at registration time
        trainer_code: In-game friend code, free form
        trainer_name: In-game trainer name, free form
    """
    user_id: str
    display_name: str
    trainer_code: str
    trainer_name: str


@dataclass(frozen=True, slots=True)
class ScammerRecord:
    """A reported bad actor.

    Attributes:
        user_id: Discord user ID of the reported account (unique key)
        display_name: Name the reporter gave for the account
        trainer_code: Friend code, or ``UNKNOWN``
        trainer_name: Trainer name, or ``UNKNOWN``
        reported_server: Name of the guild the report was filed in
        reporter: Display name of the moderator who filed the report
        reason: Free text, never empty
        reported_at: UTC time the report was stored
    """
    user_id: str
    display_name: str
    reason: str
    reporter: str
    reported_server: str = UNKNOWN_SERVER
    trainer_code: str = UNKNOWN
    trainer_name: str = UNKNOWN
    reported_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.reason or not self.reason.strip():
            raise ValueError("ScammerRecord.reason must not be empty")

    def stamped(self, when: datetime | None = None) -> "ScammerRecord":
        """Return a copy whose ``reported_at`` is ``when`` (default: now)."""
        return replace(self, reported_at=when or utc_now())
