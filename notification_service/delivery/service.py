"""Delivery service: record, send, record the outcome.

Every send follows the same sequence:
1. Write a ``pending`` notification log (abort if this fails)
2. Hand the message to the provider
3. Move the log to ``sent`` or ``failed``

A failure to write the terminal status is logged and never changes what
the caller sees; the provider result decides success or failure.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from notification_service.domain.models import (
    NewNotificationLog,
    NotificationPriority,
    NotificationStatus,
    RenderedMessage,
)
from notification_service.logging import get_logger
from notification_service.logging.context import log_context
from notification_service.persistence.exceptions import PersistenceError
from notification_service.persistence.repositories import NotificationRepository
from notification_service.providers.base import EmailProvider, OutboundEmail
from notification_service.providers.exceptions import TransportError
from notification_service.utils.text import mask_email

logger = get_logger(__name__, component="delivery")


@dataclass(frozen=True)
class DeliveryMeta:
    """What the notification log records besides the message itself."""

    event_type: str
    template: str
    user_id: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    priority: NotificationPriority = NotificationPriority.NORMAL


@dataclass
class DeliveryResult:
    """Outcome of a successful send.

    Attributes:
        log_id: Notification log id
        recipient: Address the message went to
        status: Final log status (always ``sent`` when returned)
        message_id: Provider message id, when the provider returns one
        log_update_failed: The provider accepted the message but the log
            could not be moved to ``sent``
    """

    log_id: str
    recipient: str
    status: NotificationStatus
    message_id: Optional[str] = None
    log_update_failed: bool = False

    def is_success(self) -> bool:
        return self.status is NotificationStatus.SENT


class DeliveryService:
    """Sends one message to one recipient and keeps the notification log in step."""

    def __init__(
        self,
        repository: NotificationRepository,
        provider: EmailProvider,
        from_address: str,
    ):
        """Initialize delivery service.

        Args:
            repository: Notification log storage
            provider: Outbound email transport
            from_address: Formatted sender used on every message
        """
        self.repository = repository
        self.provider = provider
        self.from_address = from_address

    def send(
        self,
        to: str,
        subject: str,
        html: str,
        meta: DeliveryMeta,
        text: Optional[str] = None,
    ) -> DeliveryResult:
        """Record and deliver one message.

        Args:
            to: Recipient address
            subject: Subject line
            html: Complete HTML document
            meta: Log metadata
            text: Plain-text rendition sent alongside the HTML

        Returns:
            DeliveryResult for the sent message

        Raises:
            PersistenceError: If the pending log could not be written; the
                provider is not called
            TransportError: If the provider failed; the log is marked failed
                first (best effort)
        """
        with log_context(event_type=meta.event_type, template=meta.template):
            # Step 1: pending log
            try:
                pending = self.repository.create(
                    NewNotificationLog(
                        event_type=meta.event_type,
                        recipient_email=to,
                        recipient_user_id=meta.user_id,
                        subject=subject,
                        template=meta.template,
                        payload=dict(meta.payload or {}),
                        priority=meta.priority,
                    )
                )
            except PersistenceError as e:
                logger.error(
                    f"Could not record pending notification, not sending: {e}",
                    extra={
                        "event": "delivery.pending.failed",
                        "recipient": mask_email(to),
                        "error_type": type(e).__name__,
                    },
                )
                raise

            with log_context(log_id=pending.id):
                logger.debug(
                    "Pending notification recorded",
                    extra={"event": "delivery.pending.created", "recipient": mask_email(to)},
                )

                # Step 2: provider
                try:
                    response = self.provider.send(
                        OutboundEmail(
                            from_address=self.from_address,
                            to=to,
                            subject=subject,
                            html=html,
                            text=text,
                        )
                    )
                except Exception as e:
                    transport_error = _as_transport_error(e, self.provider)
                    error_message = describe_error(transport_error)

                    # Step 3b: failed log, then surface the provider error
                    self._finish(pending.id, NotificationStatus.FAILED, error_message=error_message)
                    logger.error(
                        f"Delivery failed: {error_message}",
                        extra={
                            "event": "delivery.send.failure",
                            "recipient": mask_email(to),
                            "error_type": type(e).__name__,
                            "provider": self.provider.name,
                        },
                    )
                    if transport_error is e:
                        raise
                    raise transport_error from e

                # Step 3a: sent log
                updated = self._finish(
                    pending.id, NotificationStatus.SENT, resend_message_id=response.message_id
                )
                logger.info(
                    "Notification sent",
                    extra={
                        "event": "delivery.send.success",
                        "recipient": mask_email(to),
                        "message_id": response.message_id,
                        "provider": self.provider.name,
                    },
                )
                return DeliveryResult(
                    log_id=pending.id,
                    recipient=to,
                    status=NotificationStatus.SENT,
                    message_id=response.message_id,
                    log_update_failed=not updated,
                )

    def send_rendered(
        self,
        to: str,
        message: RenderedMessage,
        event_type: str,
        user_id: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> DeliveryResult:
        """Send a RenderedMessage, taking template and priority from it."""
        return self.send(
            to,
            message.subject,
            message.html,
            DeliveryMeta(
                event_type=event_type,
                template=message.template,
                user_id=user_id,
                payload=payload,
                priority=message.priority,
            ),
            text=message.text or None,
        )

    def _finish(
        self,
        log_id: str,
        status: NotificationStatus,
        resend_message_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> bool:
        """Write the terminal status. Returns False if the write failed."""
        try:
            self.repository.update(
                log_id,
                status,
                resend_message_id=resend_message_id,
                error_message=error_message,
            )
            return True
        except Exception as e:
            logger.error(
                f"Could not mark notification {status.value}: {e}",
                exc_info=True,
                extra={
                    "event": "delivery.log.update_failed",
                    "status": status.value,
                    "error_type": type(e).__name__,
                },
            )
            return False


def describe_error(exc: BaseException) -> str:
    """Error text for the failed log: the message, or the class name if empty."""
    text = str(exc).strip()
    return text or type(exc).__name__


def _as_transport_error(exc: Exception, provider: EmailProvider) -> TransportError:
    if isinstance(exc, TransportError):
        return exc
    wrapped = TransportError(describe_error(exc), provider=provider.name)
    wrapped.__cause__ = exc
    return wrapped
