"""Service health events, sent to the operator alert list."""

from functools import partial
from typing import Callable, Dict, List

from notification_service.config.models import AlertRecipients
from notification_service.delivery import DispatchReport, FanOutPolicy, HealthDeliveryService, SendTask
from notification_service.domain.models import Contact, DomainEvent
from notification_service.logging import get_logger
from notification_service.templates.health import ServiceRecoveredData, ServiceUnhealthyData

from .base import BaseConsumer, Handler
from .payloads import ServiceRecoveredPayload, ServiceUnhealthyPayload

logger = get_logger(__name__, component="consumer")


class HealthEventConsumer(BaseConsumer):
    """Sends health alerts to every configured operator address.

    Recipients come from the explicit AlertRecipients passed in; no contact
    lookup is involved. With no recipients configured each event is logged
    and skipped.
    """

    family = "health"

    def __init__(
        self,
        delivery: HealthDeliveryService,
        alert_recipients: AlertRecipients,
        links=None,
        max_workers: int = 4,
    ):
        super().__init__(None, links, max_workers)
        self.delivery = delivery
        self.alert_recipients = alert_recipients

    def handlers(self) -> Dict[str, Handler]:
        return {
            "service.unhealthy": self.handle_service_unhealthy,
            "service.recovered": self.handle_service_recovered,
        }

    def handle_service_unhealthy(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ServiceUnhealthyPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        data = ServiceUnhealthyData(**payload.model_dump(), **self._template_links())

        def send_one(contact: Contact):
            return self.delivery.send_service_unhealthy(
                contact, data, payload=event.payload, event_type=event.type
            )

        return self._alert(event, send_one)

    def handle_service_recovered(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ServiceRecoveredPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        data = ServiceRecoveredData(**payload.model_dump(), **self._template_links())

        def send_one(contact: Contact):
            return self.delivery.send_service_recovered(
                contact, data, payload=event.payload, event_type=event.type
            )

        return self._alert(event, send_one)

    def _alert(self, event: DomainEvent, send_one: Callable) -> DispatchReport:
        if self.alert_recipients.is_empty:
            logger.warning(
                f"No health alert recipients configured; dropping {event.type}",
                extra={
                    "event": "consumer.health.no_recipients",
                    "event_type": event.type,
                    "recipients_origin": self.alert_recipients.origin,
                },
            )
            return DispatchReport.skipped(event.type, "no alert recipients configured")

        tasks: List[SendTask] = []
        for address in self.alert_recipients:
            contact = Contact(id=address, email=address)
            tasks.append(SendTask(f"alert:{address}", partial(send_one, contact)))
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)
