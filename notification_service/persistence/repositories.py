"""Notification log repositories.

``NotificationRepository`` is the storage boundary used by the delivery
service. ``SqlNotificationRepository`` is the SQLAlchemy implementation: it
opens one session per call and only touches the row it was asked about, so
concurrent fan-out workers can share a single instance.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from notification_service.domain.models import (
    NewNotificationLog,
    NotificationLog,
    NotificationStatus,
)
from notification_service.utils.timestamps import format_iso, utc_now

from .database import get_session
from .exceptions import (
    DataIntegrityError,
    InvalidStatusTransitionError,
    PersistenceError,
    RecordNotFoundError,
)
from .schema import NotificationLogModel

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager]


class NotificationRepository(ABC):
    """Storage boundary for notification logs."""

    @abstractmethod
    def create(self, new_log: NewNotificationLog) -> NotificationLog:
        """Insert a log in ``pending`` state and return it with its id."""

    @abstractmethod
    def update(
        self,
        log_id: str,
        status: NotificationStatus,
        resend_message_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> NotificationLog:
        """Move a pending log to a terminal status.

        Raises:
            RecordNotFoundError: If no log has this id
            InvalidStatusTransitionError: If the log is already terminal
        """

    @abstractmethod
    def get(self, log_id: str) -> Optional[NotificationLog]:
        """Return the log with this id, or None."""


def validate_transition(
    log_id: str, current: NotificationStatus, requested: NotificationStatus
) -> None:
    """Allow only pending -> sent and pending -> failed."""
    if current is not NotificationStatus.PENDING or not requested.is_terminal:
        raise InvalidStatusTransitionError(log_id, current.value, requested.value)


class SqlNotificationRepository(NotificationRepository):
    """SQLAlchemy-backed notification log repository."""

    def __init__(self, session_factory: SessionFactory = get_session):
        """Initialize repository.

        Args:
            session_factory: Context manager factory yielding a Session that
                commits on exit. Defaults to the module-level get_session.
        """
        self._session_factory = session_factory

    def create(self, new_log: NewNotificationLog) -> NotificationLog:
        """Insert a pending log row.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        log_id = uuid.uuid4().hex
        try:
            with self._session_factory() as session:
                model = NotificationLogModel.from_new(log_id, new_log, utc_now())
                session.add(model)
                session.flush()
                return model.to_domain()
        except IntegrityError as e:
            logger.error(f"Integrity error creating notification log: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create notification log: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating notification log: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create notification log: {e}") from e

    def update(
        self,
        log_id: str,
        status: NotificationStatus,
        resend_message_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> NotificationLog:
        """Write the terminal status of a log.

        ``sent_at`` is stamped when the new status is ``sent``.

        Raises:
            RecordNotFoundError: If log_id doesn't exist
            InvalidStatusTransitionError: If the log is not pending
            PersistenceError: If database error occurs
        """
        status = NotificationStatus(status)
        try:
            with self._session_factory() as session:
                model = self._get_model(session, log_id)
                if model is None:
                    raise RecordNotFoundError(f"Notification log {log_id} not found")

                validate_transition(log_id, NotificationStatus(model.status), status)

                now = format_iso(utc_now())
                model.status = status.value
                model.updated_at = now
                if status is NotificationStatus.SENT:
                    model.sent_at = now
                    model.resend_message_id = resend_message_id
                else:
                    model.error_message = error_message

                session.flush()
                return model.to_domain()
        except PersistenceError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating notification log {log_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update notification log: {e}") from e

    def get(self, log_id: str) -> Optional[NotificationLog]:
        try:
            with self._session_factory() as session:
                model = self._get_model(session, log_id)
                return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notification log {log_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve notification log: {e}") from e

    def list_by_status(
        self, status: NotificationStatus, limit: int = 100
    ) -> List[NotificationLog]:
        """Return logs with the given status, newest first.

        Args:
            status: Status to filter on
            limit: Maximum number of rows

        Raises:
            PersistenceError: If database error occurs
        """
        status = NotificationStatus(status)
        stmt = (
            select(NotificationLogModel)
            .where(NotificationLogModel.status == status.value)
            .order_by(NotificationLogModel.created_at.desc())
            .limit(limit)
        )
        return self._list(stmt, f"status={status.value}")

    def list_for_recipient(
        self, recipient_email: str, limit: int = 100
    ) -> List[NotificationLog]:
        """Return logs sent to an address, newest first."""
        stmt = (
            select(NotificationLogModel)
            .where(NotificationLogModel.recipient_email == recipient_email)
            .order_by(NotificationLogModel.created_at.desc())
            .limit(limit)
        )
        return self._list(stmt, "recipient")

    def _list(self, stmt, description: str) -> List[NotificationLog]:
        try:
            with self._session_factory() as session:
                models = session.execute(stmt).scalars().all()
                return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error listing notification logs ({description}): {e}", exc_info=True)
            raise PersistenceError(f"Failed to list notification logs: {e}") from e

    @staticmethod
    def _get_model(session: Session, log_id: str) -> Optional[NotificationLogModel]:
        return session.get(NotificationLogModel, log_id)
