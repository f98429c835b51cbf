"""Database schema definition and ORM models.

Defines the notification_logs table and the conversion between ORM rows and
the NotificationLog domain model.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Column, Index, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from notification_service.domain.models import (
    NewNotificationLog,
    NotificationChannel,
    NotificationLog,
    NotificationPriority,
    NotificationStatus,
)
from notification_service.utils.timestamps import format_iso, parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


class NotificationLogModel(Base):
    """ORM model for the notification_logs table.

    One row per (event, recipient) delivery attempt. The payload column holds
    the JSON-encoded event data exactly as it was dispatched.
    """

    __tablename__ = "notification_logs"

    id = Column(String(64), primary_key=True, nullable=False)

    event_type = Column(String(100), nullable=False)
    recipient_email = Column(String(320), nullable=False)
    recipient_user_id = Column(String(64), nullable=True)

    subject = Column(Text, nullable=False)
    template = Column(String(100), nullable=False)
    payload = Column(Text, nullable=False, default="{}")

    channel = Column(String(20), nullable=False, default=NotificationChannel.EMAIL.value)
    status = Column(String(20), nullable=False, default=NotificationStatus.PENDING.value)
    priority = Column(String(20), nullable=False, default=NotificationPriority.NORMAL.value)

    # Kept for the in-app notification center; never changed here
    read = Column(Boolean, nullable=False, default=False)
    dismissed = Column(Boolean, nullable=False, default=False)

    resend_message_id = Column(String(255), nullable=True)
    error_message = Column(Text, nullable=True)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)
    sent_at = Column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_notification_logs_status", "status"),
        Index("idx_notification_logs_recipient", "recipient_email"),
        Index("idx_notification_logs_event_type", "event_type"),
    )

    def to_domain(self) -> NotificationLog:
        """Convert ORM model to domain model."""
        return NotificationLog(
            id=self.id,
            event_type=self.event_type,
            recipient_email=self.recipient_email,
            recipient_user_id=self.recipient_user_id,
            subject=self.subject,
            template=self.template,
            payload=_load_payload(self.payload),
            channel=NotificationChannel(self.channel),
            status=NotificationStatus(self.status),
            priority=NotificationPriority(self.priority),
            read=bool(self.read),
            dismissed=bool(self.dismissed),
            resend_message_id=self.resend_message_id,
            error_message=self.error_message,
            created_at=parse_iso_datetime(self.created_at),
            updated_at=parse_iso_datetime(self.updated_at),
            sent_at=parse_iso_datetime(self.sent_at),
        )

    @classmethod
    def from_new(
        cls, log_id: str, new_log: NewNotificationLog, now: datetime
    ) -> "NotificationLogModel":
        """Create a pending row from the fields supplied at send time.

        Args:
            log_id: Generated primary key
            new_log: Caller-supplied fields
            now: Creation timestamp (UTC)
        """
        timestamp = format_iso(now)
        return cls(
            id=log_id,
            event_type=new_log.event_type,
            recipient_email=new_log.recipient_email,
            recipient_user_id=new_log.recipient_user_id,
            subject=new_log.subject,
            template=new_log.template,
            payload=_dump_payload(new_log.payload),
            channel=NotificationChannel(new_log.channel).value,
            status=NotificationStatus.PENDING.value,
            priority=NotificationPriority(new_log.priority).value,
            read=False,
            dismissed=False,
            created_at=timestamp,
            updated_at=timestamp,
        )


def _dump_payload(payload: Dict[str, Any]) -> str:
    # default=str keeps datetimes and Decimals from upstream payloads storable
    return json.dumps(payload or {}, sort_keys=True, default=str)


def _load_payload(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Stored notification payload is not valid JSON; returning empty payload")
        return {}
    return value if isinstance(value, dict) else {"value": value}


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
