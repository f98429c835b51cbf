"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so the delivery
service can treat any storage failure the same way.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - get_session() called before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an update targets a notification log that doesn't exist.

    Lookups that may legitimately miss return None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated (e.g. duplicate id)."""

    pass


class InvalidStatusTransitionError(PersistenceError):
    """Raised when an update would move a log out of a terminal state.

    A notification log goes from ``pending`` to ``sent`` or ``failed``
    exactly once.
    """

    def __init__(self, log_id: str, current_status: str, requested_status: str):
        self.log_id = log_id
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Notification log {log_id} cannot move from "
            f"'{current_status}' to '{requested_status}'"
        )
