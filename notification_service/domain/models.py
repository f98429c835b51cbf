"""Core domain models for events, contacts, and notification logs.

This module defines the data structures used throughout the dispatch pipeline:
- DomainEvent: inbound event envelope (type + loosely typed payload)
- Contact: a resolved, deliverable recipient
- NotificationLog: the durable record of one delivery attempt
- RenderedMessage: transient output of a message template
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from notification_service.utils.timestamps import ensure_utc, utc_now


class AudienceSource(str, Enum):
    """Brand audience a message is rendered for."""

    PORTAL = "portal"
    CANDIDATE = "candidate"
    CORPORATE = "corporate"


class NotificationStatus(str, Enum):
    """Delivery state of a notification log."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not NotificationStatus.PENDING


class NotificationPriority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"


class NotificationChannel(str, Enum):
    EMAIL = "email"


class ContactKind(str, Enum):
    """Kinds of domain identifiers the contact lookup can resolve."""

    RECRUITER = "recruiter"
    CANDIDATE = "candidate"
    COMPANY = "company"


class DomainEvent(BaseModel):
    """Inbound domain event.

    The payload is opaque to the dispatch core except for the fields each
    consumer explicitly validates. Events arriving from the broker name the
    type ``event_type``; both spellings are accepted.
    """

    type: str = Field(..., min_length=1, description="Dotted event type, e.g. application.created")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Event-specific data")
    timestamp: datetime = Field(default_factory=utc_now, description="When the event was emitted (UTC)")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def accept_event_type_alias(cls, data: Any) -> Any:
        """Map the broker's ``event_type`` key onto ``type``."""
        if isinstance(data, dict) and "type" not in data and "event_type" in data:
            data = {**data, "type": data["event_type"]}
            data.pop("event_type", None)
        return data

    @field_validator("payload", mode="before")
    @classmethod
    def default_payload(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("timestamp")
    @classmethod
    def ensure_timestamp_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class Contact(BaseModel):
    """A resolved recipient. Lives for one dispatch call only."""

    id: str = Field(..., description="Domain identifier the contact was resolved from")
    name: str = Field("", description="Display name")
    email: str = Field(..., min_length=3, description="Deliverable email address")
    user_id: Optional[str] = Field(None, description="Platform user id, when the contact has an account")

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        stripped = v.strip()
        if "@" not in stripped:
            raise ValueError(f"Contact email is not an address: {v!r}")
        return stripped

    @property
    def display_name(self) -> str:
        """Name to greet the contact by, falling back to the mailbox name."""
        return self.name.strip() or self.email.split("@", 1)[0]


class NotificationLog(BaseModel):
    """Durable record of one (event, recipient) delivery attempt.

    Created in ``pending`` before the provider is called and moved exactly
    once to ``sent`` or ``failed``. ``read`` and ``dismissed`` are kept for
    schema compatibility with the in-app notification center.
    """

    id: str = Field(..., description="Log identifier")
    event_type: str = Field(..., description="Domain event type that triggered the send")
    recipient_email: str = Field(..., description="Address the message was sent to")
    recipient_user_id: Optional[str] = Field(None, description="Recipient's platform user id")
    subject: str = Field(..., description="Rendered subject line")
    template: str = Field(..., description="Template kind tag")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Denormalized event data for audit")
    channel: NotificationChannel = Field(NotificationChannel.EMAIL)
    status: NotificationStatus = Field(NotificationStatus.PENDING)
    priority: NotificationPriority = Field(NotificationPriority.NORMAL)
    read: bool = False
    dismissed: bool = False
    resend_message_id: Optional[str] = Field(None, description="Provider message id once sent")
    error_message: Optional[str] = Field(None, description="Provider error text once failed")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    sent_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", "sent_at")
    @classmethod
    def ensure_timestamps_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def is_terminal(self) -> bool:
        return self.status.is_terminal

    model_config = {"json_schema_extra": {"example": {
        "id": "9f1c2b7e5d0a4c3b8e6f1a2d3c4b5a69",
        "event_type": "recruiter.stripe_connect_onboarded",
        "recipient_email": "jane@example.com",
        "subject": "Your payout account is ready",
        "template": "stripe_connect_onboarded",
        "status": "sent",
        "priority": "normal",
        "resend_message_id": "re_123",
    }}}


class NewNotificationLog(BaseModel):
    """Fields supplied when a pending log row is created."""

    event_type: str
    recipient_email: str
    recipient_user_id: Optional[str] = None
    subject: str
    template: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    channel: NotificationChannel = NotificationChannel.EMAIL
    priority: NotificationPriority = NotificationPriority.NORMAL


class RenderedMessage(BaseModel):
    """Output of a message template: subject, HTML document and plain-text rendition."""

    subject: str
    html: str
    text: str = ""
    template: str = Field(..., description="Kind tag recorded on the notification log")
    source: AudienceSource = AudienceSource.PORTAL
    priority: NotificationPriority = NotificationPriority.NORMAL

    model_config = ConfigDict(frozen=True)

