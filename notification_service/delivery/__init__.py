"""Delivery: pending log, provider call, terminal log; plus fan-out."""

from .families import (
    ApplicationDeliveryService,
    BillingDeliveryService,
    CandidateDeliveryService,
    CompanyInvitationDeliveryService,
    HealthDeliveryService,
)
from .fanout import DispatchReport, FanOutPolicy, RecipientFailure, SendTask, dispatch
from .service import DeliveryMeta, DeliveryResult, DeliveryService, describe_error

__all__ = [
    "DeliveryService",
    "DeliveryMeta",
    "DeliveryResult",
    "describe_error",
    "FanOutPolicy",
    "DispatchReport",
    "RecipientFailure",
    "SendTask",
    "dispatch",
    "BillingDeliveryService",
    "HealthDeliveryService",
    "CompanyInvitationDeliveryService",
    "ApplicationDeliveryService",
    "CandidateDeliveryService",
]
