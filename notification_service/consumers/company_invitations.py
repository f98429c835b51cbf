"""Company platform invitation events."""

from typing import Dict

from notification_service.contacts import contact_from_payload
from notification_service.delivery import (
    CompanyInvitationDeliveryService,
    DispatchReport,
    FanOutPolicy,
    SendTask,
)
from notification_service.domain.models import ContactKind, DomainEvent
from notification_service.templates.company_invitations import (
    CompanyInvitationAcceptedData,
    CompanyPlatformInvitationData,
)

from .base import BaseConsumer, Handler
from .payloads import CompanyInvitationAcceptedPayload, CompanyInvitationCreatedPayload


class CompanyInvitationsConsumer(BaseConsumer):
    family = "company_invitations"

    def __init__(
        self,
        delivery: CompanyInvitationDeliveryService,
        contact_lookup,
        links=None,
        max_workers: int = 4,
    ):
        super().__init__(contact_lookup, links, max_workers)
        self.delivery = delivery

    def handlers(self) -> Dict[str, Handler]:
        return {
            "company_invitation.created": self.handle_company_invitation_created,
            "company_invitation.accepted": self.handle_company_invitation_accepted,
        }

    def handle_company_invitation_created(self, event: DomainEvent) -> DispatchReport:
        """Invite a prospective company by the address the recruiter entered."""
        payload = self._parse(event, CompanyInvitationCreatedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            invitee = contact_from_payload(
                payload.invitation_id, payload.invited_email, payload.contact_name
            )
            recruiter_name = self._name_of(ContactKind.RECRUITER, payload.recruiter_id)
            if payload.invite_code:
                invitation_url = self._portal(f"join/{payload.invite_code}")
            else:
                invitation_url = self._portal(f"invitation/company/{payload.invitation_id}")

            data = CompanyPlatformInvitationData(
                recruiter_name=recruiter_name,
                invitation_url=invitation_url,
                invite_code=payload.invite_code,
                company_name=payload.company_name,
                contact_name=payload.contact_name,
                personal_message=payload.personal_message,
                expires_at=payload.expires_at,
                **self._template_links(),
            )
            return self.delivery.send_company_platform_invitation(
                invitee, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"invitee:{payload.invited_email}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_company_invitation_accepted(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, CompanyInvitationAcceptedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            company_name = self._name_of(ContactKind.COMPANY, payload.company_id, payload.company_name)
            data = CompanyInvitationAcceptedData(
                recruiter_name=recruiter.display_name,
                company_name=company_name,
                company_url=self._portal(f"portal/companies/{payload.company_id}"),
                **self._template_links(),
            )
            return self.delivery.send_company_invitation_accepted(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)
