"""Errors raised by the record store.

Lookups that find nothing return ``None``; these exceptions cover writes
that the registry refuses.
"""


class RecordStoreError(Exception):
    """Base class for refused record store writes."""

    def __init__(self, user_id: str, message: str) -> None:
        super().__init__(message)
        self.user_id = user_id


class AlreadyRegistered(RecordStoreError):
    """A trainer profile already exists for this user ID."""

    def __init__(self, user_id: str) -> None:
        super().__init__(user_id, f"Trainer profile already exists for {user_id}")


class AlreadyReported(RecordStoreError):
    """A scammer record already exists for this user ID."""

    def __init__(self, user_id: str) -> None:
        super().__init__(user_id, f"Scammer record already exists for {user_id}")


class RecordNotFound(RecordStoreError):
    """No scammer record exists for this user ID."""

    def __init__(self, user_id: str) -> None:
        super().__init__(user_id, f"No scammer record for {user_id}")
