"""Billing events: Stripe Connect onboarding and company billing setup."""

from typing import Dict

from notification_service.delivery import BillingDeliveryService, DispatchReport, FanOutPolicy, SendTask
from notification_service.domain.models import ContactKind, DomainEvent
from notification_service.templates.billing import (
    CompanyBillingProfileCompletedData,
    StripeConnectDisabledData,
    StripeConnectOnboardedData,
)

from .base import BaseConsumer, Handler
from .payloads import (
    CompanyBillingProfileCompletedPayload,
    StripeConnectDisabledPayload,
    StripeConnectOnboardedPayload,
)


class BillingEventConsumer(BaseConsumer):
    family = "billing"

    def __init__(self, delivery: BillingDeliveryService, contact_lookup, links=None, max_workers: int = 4):
        super().__init__(contact_lookup, links, max_workers)
        self.delivery = delivery

    def handlers(self) -> Dict[str, Handler]:
        return {
            "recruiter.stripe_connect_onboarded": self.handle_stripe_connect_onboarded,
            "recruiter.stripe_connect_disabled": self.handle_stripe_connect_disabled,
            "company.billing_profile_completed": self.handle_company_billing_profile_completed,
        }

    def handle_stripe_connect_onboarded(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, StripeConnectOnboardedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = StripeConnectOnboardedData(
                recruiter_name=recruiter.display_name,
                billing_url=self._portal("portal/billing"),
                account_id=payload.account_id,
                **self._template_links(),
            )
            return self.delivery.send_stripe_connect_onboarded(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_stripe_connect_disabled(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, StripeConnectDisabledPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = StripeConnectDisabledData(
                recruiter_name=recruiter.display_name,
                billing_url=self._portal("portal/billing"),
                reason=payload.reason,
                account_id=payload.account_id,
                **self._template_links(),
            )
            return self.delivery.send_stripe_connect_disabled(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_company_billing_profile_completed(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, CompanyBillingProfileCompletedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            company = self._require(ContactKind.COMPANY, payload.company_id)
            data = CompanyBillingProfileCompletedData(
                contact_name=company.display_name,
                company_name=payload.company_name or company.name or "your company",
                billing_url=self._portal("portal/company/billing"),
                billing_email=payload.billing_email,
                billing_terms=payload.billing_terms,
                **self._template_links(),
            )
            return self.delivery.send_company_billing_profile_completed(
                company, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"company:{payload.company_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)
