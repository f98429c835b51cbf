"""Domain models for the notification dispatch service."""

from .models import (
    AudienceSource,
    Contact,
    ContactKind,
    DomainEvent,
    NewNotificationLog,
    NotificationChannel,
    NotificationLog,
    NotificationPriority,
    NotificationStatus,
    RenderedMessage,
)

__all__ = [
    "AudienceSource",
    "Contact",
    "ContactKind",
    "DomainEvent",
    "NewNotificationLog",
    "NotificationChannel",
    "NotificationLog",
    "NotificationPriority",
    "NotificationStatus",
    "RenderedMessage",
]
