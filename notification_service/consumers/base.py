"""Shared behaviour for the per-family event consumers."""

from typing import Callable, Dict, Optional, Sequence, Type, TypeVar

from notification_service.config.models import LinksConfig
from notification_service.contacts import ContactLookup
from notification_service.delivery import DispatchReport, FanOutPolicy, SendTask, dispatch
from notification_service.delivery.service import describe_error
from notification_service.domain.models import ContactKind, DomainEvent
from notification_service.logging import get_logger
from notification_service.logging.context import log_context

from .exceptions import MalformedEventError
from .payloads import EventPayload, parse_payload

logger = get_logger(__name__, component="consumer")

P = TypeVar("P", bound=EventPayload)

Handler = Callable[[DomainEvent], DispatchReport]


class BaseConsumer:
    """Base class for family consumers.

    Subclasses implement ``handlers()`` and one ``handle_*`` method per event
    type. A handler parses its payload, builds one SendTask per recipient and
    runs them through ``_fan_out`` under the policy declared for that event.
    """

    family = "base"

    def __init__(
        self,
        contact_lookup: Optional[ContactLookup] = None,
        links: Optional[LinksConfig] = None,
        max_workers: int = 4,
    ):
        self.contacts = contact_lookup
        self.links = links or LinksConfig()
        self.max_workers = max_workers

    def handlers(self) -> Dict[str, Handler]:
        """Map of event type to bound handler."""
        raise NotImplementedError

    def _parse(self, event: DomainEvent, schema: Type[P]) -> Optional[P]:
        """Validate the payload; log and return None when it is malformed."""
        try:
            return parse_payload(event, schema)
        except MalformedEventError as e:
            logger.warning(
                f"Skipping malformed {event.type} event: {e}",
                extra={
                    "event": "consumer.event.malformed",
                    "event_type": event.type,
                    "consumer": self.family,
                    "validation_errors": e.errors,
                },
            )
            return None

    def _skip(self, event: DomainEvent, reason: str) -> DispatchReport:
        logger.info(
            f"Skipping {event.type} event: {reason}",
            extra={"event": "consumer.event.skipped", "event_type": event.type, "reason": reason},
        )
        return DispatchReport.skipped(event.type, reason)

    def _fan_out(
        self,
        event: DomainEvent,
        tasks: Sequence[SendTask],
        policy: FanOutPolicy,
    ) -> DispatchReport:
        """Run send tasks for one event under the given policy.

        Raises:
            Exception: Under ALL_OR_NOTHING, the first resolution or transport failure
        """
        with log_context(event_type=event.type, consumer=self.family):
            logger.info(
                f"Dispatching {event.type} to {len(tasks)} recipient(s)",
                extra={
                    "event": "consumer.event.dispatching",
                    "recipient_count": len(tasks),
                    "policy": policy.value,
                },
            )
            try:
                report = dispatch(event.type, tasks, policy, max_workers=self.max_workers)
            except Exception as e:
                logger.error(
                    f"Failed to handle {event.type}: {describe_error(e)}",
                    extra={"event": "consumer.event.failed", "error_type": type(e).__name__},
                )
                raise

            logger.info(
                f"Handled {event.type}",
                extra={
                    "event": "consumer.event.handled",
                    "sent_count": len(report.sent),
                    "failed_count": len(report.failed),
                },
            )
            return report

    def _require(self, kind: ContactKind, contact_id: Optional[str]):
        if self.contacts is None:
            raise RuntimeError(f"{type(self).__name__} has no contact lookup configured")
        return self.contacts.require_contact(kind, contact_id)

    def _name_of(self, kind: ContactKind, contact_id: str, given: Optional[str] = None) -> str:
        """Display name from the payload, or from the directory when absent."""
        if given:
            return given
        return self._require(kind, contact_id).display_name

    def _template_links(self) -> Dict[str, str]:
        return {
            "portal_url": self.links.portal_url,
            "candidate_website_url": self.links.candidate_website_url,
        }

    def _portal(self, path: str) -> str:
        return f"{self.links.portal_url}/{path.lstrip('/')}"

    def _candidate_site(self, path: str) -> str:
        return f"{self.links.candidate_website_url}/{path.lstrip('/')}"
