"""Persistence layer for notification logs.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repositories
    - NotificationRepository: storage boundary used by delivery
    - SqlNotificationRepository: SQLAlchemy implementation

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError, RecordNotFoundError, DataIntegrityError,
      InvalidStatusTransitionError

Example usage:
    >>> from notification_service.persistence import init_database, SqlNotificationRepository
    >>> init_database("sqlite:///./data/notifications.db")
    >>> repo = SqlNotificationRepository()
    >>> failed = repo.list_by_status(NotificationStatus.FAILED)
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    InvalidStatusTransitionError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import (
    NotificationRepository,
    SqlNotificationRepository,
    validate_transition,
)

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "NotificationRepository",
    "SqlNotificationRepository",
    "validate_transition",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
    "InvalidStatusTransitionError",
]
