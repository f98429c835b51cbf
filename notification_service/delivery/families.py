"""Per-family delivery services: one typed method per notification kind.

Each method renders its message set and hands the result to the shared
DeliveryService, so the notification log always records the rendered
subject, template tag and priority.
"""

from typing import Any, Callable, Dict, Optional

from notification_service.domain.models import Contact, RenderedMessage
from notification_service.templates import (
    applications,
    billing,
    candidates,
    company_invitations,
    health,
)

from .service import DeliveryResult, DeliveryService


class FamilyDeliveryService:
    """Shared plumbing for the family services."""

    def __init__(self, delivery: DeliveryService):
        self.delivery = delivery

    def _deliver(
        self,
        render: Callable[..., RenderedMessage],
        recipient: Contact,
        data: Any,
        event_type: str,
        payload: Optional[Dict[str, Any]],
        source: Any = None,
    ) -> DeliveryResult:
        message = render(data, source)
        return self.delivery.send_rendered(
            recipient.email,
            message,
            event_type=event_type,
            user_id=recipient.user_id,
            payload=payload,
        )


class BillingDeliveryService(FamilyDeliveryService):
    def send_stripe_connect_onboarded(
        self,
        recipient: Contact,
        data: billing.StripeConnectOnboardedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "recruiter.stripe_connect_onboarded",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            billing.stripe_connect_onboarded_email,
            recipient, data, event_type, payload, source,
        )

    def send_stripe_connect_disabled(
        self,
        recipient: Contact,
        data: billing.StripeConnectDisabledData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "recruiter.stripe_connect_disabled",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            billing.stripe_connect_disabled_email,
            recipient, data, event_type, payload, source,
        )

    def send_company_billing_profile_completed(
        self,
        recipient: Contact,
        data: billing.CompanyBillingProfileCompletedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "company.billing_profile_completed",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            billing.company_billing_profile_completed_email,
            recipient, data, event_type, payload, source,
        )


class HealthDeliveryService(FamilyDeliveryService):
    def send_service_unhealthy(
        self,
        recipient: Contact,
        data: health.ServiceUnhealthyData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "service.unhealthy",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            health.service_unhealthy_email,
            recipient, data, event_type, payload, source,
        )

    def send_service_recovered(
        self,
        recipient: Contact,
        data: health.ServiceRecoveredData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "service.recovered",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            health.service_recovered_email,
            recipient, data, event_type, payload, source,
        )


class CompanyInvitationDeliveryService(FamilyDeliveryService):
    def send_company_platform_invitation(
        self,
        recipient: Contact,
        data: company_invitations.CompanyPlatformInvitationData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "company_invitation.created",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            company_invitations.company_platform_invitation_email,
            recipient, data, event_type, payload, source,
        )

    def send_company_invitation_accepted(
        self,
        recipient: Contact,
        data: company_invitations.CompanyInvitationAcceptedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "company_invitation.accepted",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            company_invitations.company_invitation_accepted_email,
            recipient, data, event_type, payload, source,
        )


class ApplicationDeliveryService(FamilyDeliveryService):
    def send_application_created(
        self,
        recipient: Contact,
        data: applications.ApplicationCreatedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.created",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_created_email,
            recipient, data, event_type, payload, source,
        )

    def send_candidate_application_submitted(
        self,
        recipient: Contact,
        data: applications.CandidateApplicationSubmittedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.created",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.candidate_application_submitted_email,
            recipient, data, event_type, payload, source,
        )

    def send_application_stage_changed(
        self,
        recipient: Contact,
        data: applications.ApplicationStageChangedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.stage_changed",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_stage_changed_email,
            recipient, data, event_type, payload, source,
        )

    def send_application_rejected(
        self,
        recipient: Contact,
        data: applications.ApplicationRejectedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.stage_changed",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_rejected_email,
            recipient, data, event_type, payload, source,
        )

    def send_application_accepted(
        self,
        recipient: Contact,
        data: applications.ApplicationAcceptedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.accepted",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_accepted_email,
            recipient, data, event_type, payload, source,
        )

    def send_application_withdrawn(
        self,
        recipient: Contact,
        data: applications.ApplicationWithdrawnData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.withdrawn",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_withdrawn_email,
            recipient, data, event_type, payload, source,
        )

    def send_application_submitted_to_company(
        self,
        recipient: Contact,
        data: applications.ApplicationSubmittedToCompanyData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.submitted_to_company",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_submitted_to_company_email,
            recipient, data, event_type, payload, source,
        )

    def send_application_note_created(
        self,
        recipient: Contact,
        data: applications.ApplicationNoteCreatedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.note.created",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.application_note_created_email,
            recipient, data, event_type, payload, source,
        )

    def send_prescreen_requested(
        self,
        recipient: Contact,
        data: applications.PreScreenRequestedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.prescreen_requested",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.prescreen_requested_email,
            recipient, data, event_type, payload, source,
        )

    def send_prescreen_request_confirmation(
        self,
        recipient: Contact,
        data: applications.PreScreenRequestConfirmationData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.prescreen_requested",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.prescreen_request_confirmation_email,
            recipient, data, event_type, payload, source,
        )

    def send_ai_review_completed_candidate(
        self,
        recipient: Contact,
        data: applications.AIReviewCompletedCandidateData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "ai_review.completed",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.ai_review_completed_candidate_email,
            recipient, data, event_type, payload, source,
        )

    def send_ai_review_completed_recruiter(
        self,
        recipient: Contact,
        data: applications.AIReviewCompletedRecruiterData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "ai_review.completed",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.ai_review_completed_recruiter_email,
            recipient, data, event_type, payload, source,
        )

    def send_company_application_received(
        self,
        recipient: Contact,
        data: applications.CompanyApplicationReceivedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.draft_completed",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.company_application_received_email,
            recipient, data, event_type, payload, source,
        )

    def send_proposal_accepted(
        self,
        recipient: Contact,
        data: applications.ApplicationProposalAcceptedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.proposal_accepted",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.proposal_accepted_by_application_email,
            recipient, data, event_type, payload, source,
        )

    def send_proposal_declined(
        self,
        recipient: Contact,
        data: applications.ApplicationProposalDeclinedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "application.proposal_declined",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            applications.proposal_declined_by_application_email,
            recipient, data, event_type, payload, source,
        )


class CandidateDeliveryService(FamilyDeliveryService):
    def send_candidate_invitation(
        self,
        recipient: Contact,
        data: candidates.CandidateInvitationData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "candidate.invited",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            candidates.candidate_invitation_email,
            recipient, data, event_type, payload, source,
        )

    def send_consent_given(
        self,
        recipient: Contact,
        data: candidates.CandidateConsentGivenData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "candidate.consent_given",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            candidates.candidate_consent_given_email,
            recipient, data, event_type, payload, source,
        )

    def send_consent_declined(
        self,
        recipient: Contact,
        data: candidates.CandidateConsentDeclinedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "candidate.consent_declined",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            candidates.candidate_consent_declined_email,
            recipient, data, event_type, payload, source,
        )

    def send_candidate_sourced(
        self,
        recipient: Contact,
        data: candidates.CandidateSourcedData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "candidate.sourced",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            candidates.candidate_sourced_email,
            recipient, data, event_type, payload, source,
        )

    def send_ownership_conflict(
        self,
        recipient: Contact,
        data: candidates.OwnershipConflictData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "ownership.conflict_detected",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            candidates.ownership_conflict_email,
            recipient, data, event_type, payload, source,
        )

    def send_ownership_conflict_rejection(
        self,
        recipient: Contact,
        data: candidates.OwnershipConflictData,
        payload: Optional[Dict[str, Any]] = None,
        event_type: str = "ownership.conflict_detected",
        source: Any = None,
    ) -> DeliveryResult:
        return self._deliver(
            candidates.ownership_conflict_rejection_email,
            recipient, data, event_type, payload, source,
        )
