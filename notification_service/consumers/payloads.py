"""Typed payload schemas, one per supported event type.

Each inbound payload is validated exactly once, when a consumer picks the
event up. Unknown keys are ignored so producers can add fields freely;
missing required keys make the event malformed.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from notification_service.domain.models import ContactKind, DomainEvent

from .exceptions import MalformedEventError


class EventPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)


class ApplicationRef(EventPayload):
    """Fields shared by every application event."""

    application_id: str = Field(..., min_length=1)
    candidate_id: str = Field(..., min_length=1)
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None


# Billing

class StripeConnectOnboardedPayload(EventPayload):
    recruiter_id: str = Field(..., min_length=1)
    account_id: Optional[str] = None


class StripeConnectDisabledPayload(EventPayload):
    recruiter_id: str = Field(..., min_length=1)
    account_id: Optional[str] = None
    reason: Optional[str] = None


class CompanyBillingProfileCompletedPayload(EventPayload):
    company_id: str = Field(..., min_length=1)
    company_name: Optional[str] = None
    billing_email: Optional[str] = None
    billing_terms: Optional[str] = None


# Health

class ServiceUnhealthyPayload(EventPayload):
    service_name: str = Field(..., min_length=1)
    status: str = "unhealthy"
    error: Optional[str] = None
    checked_at: Optional[str] = None
    consecutive_failures: Optional[int] = Field(None, ge=0)
    details: Dict[str, Any] = Field(default_factory=dict)
    status_url: Optional[str] = None

    @field_validator("details", mode="before")
    @classmethod
    def default_details(cls, v: Any) -> Any:
        return {} if v is None else v


class ServiceRecoveredPayload(EventPayload):
    service_name: str = Field(..., min_length=1)
    downtime_seconds: Optional[float] = Field(None, ge=0)
    recovered_at: Optional[str] = None
    status_url: Optional[str] = None


# Company invitations

class CompanyInvitationCreatedPayload(EventPayload):
    invitation_id: str = Field(..., min_length=1)
    recruiter_id: str = Field(..., min_length=1)
    invited_email: str = Field(..., min_length=3)
    invite_code: Optional[str] = None
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    personal_message: Optional[str] = None
    expires_at: Optional[str] = None

    @field_validator("invited_email")
    @classmethod
    def require_address(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError(f"invited_email is not an address: {v!r}")
        return v


class CompanyInvitationAcceptedPayload(EventPayload):
    invitation_id: str = Field(..., min_length=1)
    recruiter_id: str = Field(..., min_length=1)
    company_id: str = Field(..., min_length=1)
    company_name: Optional[str] = None


# Applications

class ApplicationCreatedPayload(ApplicationRef):
    recruiter_id: Optional[str] = None


class ApplicationStageChangedPayload(ApplicationRef):
    new_stage: str = Field(..., min_length=1)
    old_stage: Optional[str] = None
    recruiter_id: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("new_stage", "old_stage")
    @classmethod
    def normalize_stage(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class ApplicationAcceptedPayload(ApplicationRef):
    recruiter_id: str = Field(..., min_length=1)


class ApplicationWithdrawnPayload(ApplicationRef):
    recruiter_id: str = Field(..., min_length=1)
    withdrawn_by: Optional[str] = None
    reason: Optional[str] = None


class ApplicationSubmittedToCompanyPayload(ApplicationRef):
    company_id: str = Field(..., min_length=1)
    recruiter_id: Optional[str] = None


class NoteRecipient(EventPayload):
    kind: ContactKind
    id: str = Field(..., min_length=1)


class ApplicationNoteCreatedPayload(ApplicationRef):
    note_id: Optional[str] = None
    content: str = Field(..., min_length=1)
    created_by_name: Optional[str] = None
    created_by_role: Optional[str] = None
    recipients: List[NoteRecipient] = Field(default_factory=list)


class PreScreenRequestedPayload(ApplicationRef):
    company_id: str = Field(..., min_length=1)
    recruiter_id: Optional[str] = None
    requested_by_name: Optional[str] = None
    candidate_email: Optional[str] = None
    message: Optional[str] = None
    auto_assign: bool = False


class AIReviewPayload(ApplicationRef):
    review_id: Optional[str] = None
    recruiter_id: Optional[str] = None


class AIReviewStartedPayload(AIReviewPayload):
    pass


class AIReviewFailedPayload(AIReviewPayload):
    error: Optional[str] = None


class AIReviewCompletedPayload(AIReviewPayload):
    fit_score: float = Field(..., ge=0, le=100)
    recommendation: str = Field(..., min_length=1)
    overall_summary: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)

    @field_validator("recommendation")
    @classmethod
    def normalize_recommendation(cls, v: str) -> str:
        return v.lower()

    @field_validator("strengths", "concerns", "matched_skills", "missing_skills", mode="before")
    @classmethod
    def default_list(cls, v: Any) -> Any:
        return [] if v is None else v


class DraftCompletedPayload(ApplicationRef):
    company_id: Optional[str] = None
    recruiter_id: Optional[str] = None


class ApplicationProposalAcceptedPayload(ApplicationRef):
    recruiter_id: str = Field(..., min_length=1)


class ApplicationProposalDeclinedPayload(ApplicationRef):
    recruiter_id: str = Field(..., min_length=1)
    reason: Optional[str] = None


# Candidates

class CandidateInvitedPayload(EventPayload):
    candidate_id: str = Field(..., min_length=1)
    recruiter_id: str = Field(..., min_length=1)
    invitation_token: str = Field(..., min_length=1)
    recruiter_bio: Optional[str] = None
    expires_at: Optional[str] = None


class CandidateConsentGivenPayload(EventPayload):
    candidate_id: str = Field(..., min_length=1)
    recruiter_id: str = Field(..., min_length=1)


class CandidateConsentDeclinedPayload(CandidateConsentGivenPayload):
    reason: Optional[str] = None


class CandidateSourcedPayload(EventPayload):
    candidate_id: str = Field(..., min_length=1)
    recruiter_id: str = Field(..., min_length=1)
    protection_days: int = Field(365, ge=1)
    protection_expires_at: Optional[str] = None


class OwnershipConflictPayload(EventPayload):
    candidate_id: str = Field(..., min_length=1)
    original_sourcer_id: str = Field(..., min_length=1)
    attempting_recruiter_id: str = Field(..., min_length=1)
    sourced_at: Optional[str] = None


PAYLOAD_SCHEMAS: Dict[str, Type[EventPayload]] = {
    "recruiter.stripe_connect_onboarded": StripeConnectOnboardedPayload,
    "recruiter.stripe_connect_disabled": StripeConnectDisabledPayload,
    "company.billing_profile_completed": CompanyBillingProfileCompletedPayload,
    "service.unhealthy": ServiceUnhealthyPayload,
    "service.recovered": ServiceRecoveredPayload,
    "company_invitation.created": CompanyInvitationCreatedPayload,
    "company_invitation.accepted": CompanyInvitationAcceptedPayload,
    "application.created": ApplicationCreatedPayload,
    "application.stage_changed": ApplicationStageChangedPayload,
    "application.accepted": ApplicationAcceptedPayload,
    "application.withdrawn": ApplicationWithdrawnPayload,
    "application.submitted_to_company": ApplicationSubmittedToCompanyPayload,
    "application.note.created": ApplicationNoteCreatedPayload,
    "application.prescreen_requested": PreScreenRequestedPayload,
    "ai_review.started": AIReviewStartedPayload,
    "ai_review.completed": AIReviewCompletedPayload,
    "ai_review.failed": AIReviewFailedPayload,
    "application.draft_completed": DraftCompletedPayload,
    "application.proposal_accepted": ApplicationProposalAcceptedPayload,
    "application.proposal_declined": ApplicationProposalDeclinedPayload,
    "candidate.invited": CandidateInvitedPayload,
    "candidate.consent_given": CandidateConsentGivenPayload,
    "candidate.consent_declined": CandidateConsentDeclinedPayload,
    "candidate.sourced": CandidateSourcedPayload,
    "ownership.conflict_detected": OwnershipConflictPayload,
}


def parse_payload(event: DomainEvent, schema: Optional[Type[EventPayload]] = None) -> EventPayload:
    """Validate an event's payload against its schema.

    Args:
        event: Inbound event
        schema: Schema to use; defaults to the one registered for event.type

    Returns:
        The validated payload model

    Raises:
        MalformedEventError: If no schema is registered or validation fails
    """
    if schema is None:
        schema = PAYLOAD_SCHEMAS.get(event.type)
        if schema is None:
            raise MalformedEventError(event.type, ["no payload schema registered"])

    try:
        return schema.model_validate(event.payload)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        ]
        raise MalformedEventError(event.type, errors) from e
