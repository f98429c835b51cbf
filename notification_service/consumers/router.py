"""Event routing: event type to family consumer handler."""

from typing import Dict, List, Optional, Sequence

from notification_service.config.environment import EnvironmentConfig
from notification_service.config.loader import resolve_alert_recipients
from notification_service.config.models import AlertRecipients, AppConfig
from notification_service.contacts import ContactLookup, HttpContactLookup
from notification_service.delivery import (
    ApplicationDeliveryService,
    BillingDeliveryService,
    CandidateDeliveryService,
    CompanyInvitationDeliveryService,
    DeliveryService,
    DispatchReport,
    HealthDeliveryService,
)
from notification_service.domain.models import DomainEvent
from notification_service.logging import get_logger
from notification_service.logging.context import log_context
from notification_service.persistence.repositories import NotificationRepository, SqlNotificationRepository
from notification_service.providers import EmailProvider, build_provider

from .applications import ApplicationsEventConsumer
from .base import BaseConsumer, Handler
from .billing import BillingEventConsumer
from .candidates import CandidatesEventConsumer
from .company_invitations import CompanyInvitationsConsumer
from .health import HealthEventConsumer

logger = get_logger(__name__, component="router")


class EventRouter:
    """Routes each event to the handler bound for its type.

    Events are independent units of work; the router keeps no ordering
    between them. Unknown types produce an empty report.
    """

    def __init__(self, consumers: Sequence[BaseConsumer]):
        self._handlers: Dict[str, Handler] = {}
        for consumer in consumers:
            for event_type, handler in consumer.handlers().items():
                if event_type in self._handlers:
                    raise ValueError(f"Event type {event_type!r} is bound to more than one consumer")
                self._handlers[event_type] = handler

    def supported_event_types(self) -> List[str]:
        return sorted(self._handlers)

    def dispatch(self, event: DomainEvent) -> DispatchReport:
        """Hand an event to its handler.

        Args:
            event: Inbound domain event

        Returns:
            The handler's DispatchReport, or an empty report for unknown types

        Raises:
            Exception: Whatever an all-or-nothing handler propagates
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.debug(
                f"No handler for event type {event.type}",
                extra={"event": "router.event.unhandled", "event_type": event.type},
            )
            return DispatchReport.skipped(event.type, "unhandled event type")

        with log_context(event_type=event.type):
            return handler(event)


def build_router(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    repository: Optional[NotificationRepository] = None,
    provider: Optional[EmailProvider] = None,
    contact_lookup: Optional[ContactLookup] = None,
    alert_recipients: Optional[AlertRecipients] = None,
) -> EventRouter:
    """Wire repository, provider and contact lookup into every family consumer.

    Collaborators that are not passed in are built from configuration: the
    SQL repository (the database must already be initialized), the
    configured provider and the HTTP contact lookup.
    """
    if repository is None:
        repository = SqlNotificationRepository()
    if provider is None:
        provider = build_provider(app_config.email, env_config)
    if contact_lookup is None:
        contact_lookup = HttpContactLookup(
            env_config.contact_service_url, timeout=app_config.email.timeout_seconds
        )
    if alert_recipients is None:
        alert_recipients = resolve_alert_recipients(app_config, env_config)

    delivery = DeliveryService(repository, provider, app_config.email.sender)
    links = app_config.links
    workers = app_config.delivery.max_concurrency

    consumers: List[BaseConsumer] = [
        BillingEventConsumer(BillingDeliveryService(delivery), contact_lookup, links, workers),
        HealthEventConsumer(HealthDeliveryService(delivery), alert_recipients, links, workers),
        CompanyInvitationsConsumer(
            CompanyInvitationDeliveryService(delivery), contact_lookup, links, workers
        ),
        ApplicationsEventConsumer(ApplicationDeliveryService(delivery), contact_lookup, links, workers),
        CandidatesEventConsumer(CandidateDeliveryService(delivery), contact_lookup, links, workers),
    ]

    router = EventRouter(consumers)
    logger.info(
        f"Router ready with {len(router.supported_event_types())} event types",
        extra={
            "event": "router.ready",
            "provider": provider.name,
            "alert_recipient_count": len(alert_recipients),
            "alert_recipients_origin": alert_recipients.origin,
        },
    )
    return router
