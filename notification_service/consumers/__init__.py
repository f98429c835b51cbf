"""Event consumers: payload validation, recipient resolution and fan-out per family."""

from .applications import ApplicationsEventConsumer
from .base import BaseConsumer
from .billing import BillingEventConsumer
from .candidates import CandidatesEventConsumer
from .company_invitations import CompanyInvitationsConsumer
from .exceptions import MalformedEventError
from .health import HealthEventConsumer
from .payloads import PAYLOAD_SCHEMAS, parse_payload
from .router import EventRouter, build_router

__all__ = [
    "BaseConsumer",
    "BillingEventConsumer",
    "HealthEventConsumer",
    "CompanyInvitationsConsumer",
    "ApplicationsEventConsumer",
    "CandidatesEventConsumer",
    "EventRouter",
    "build_router",
    "MalformedEventError",
    "PAYLOAD_SCHEMAS",
    "parse_payload",
]
