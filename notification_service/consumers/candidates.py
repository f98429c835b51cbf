"""Candidate invitation, consent, sourcing and ownership events."""

from typing import Dict

from notification_service.delivery import CandidateDeliveryService, DispatchReport, FanOutPolicy, SendTask
from notification_service.domain.models import ContactKind, DomainEvent
from notification_service.templates.candidates import (
    CandidateConsentDeclinedData,
    CandidateConsentGivenData,
    CandidateInvitationData,
    CandidateSourcedData,
    OwnershipConflictData,
)

from .base import BaseConsumer, Handler
from .payloads import (
    CandidateConsentDeclinedPayload,
    CandidateConsentGivenPayload,
    CandidateInvitedPayload,
    CandidateSourcedPayload,
    OwnershipConflictPayload,
)


class CandidatesEventConsumer(BaseConsumer):
    family = "candidates"

    def __init__(self, delivery: CandidateDeliveryService, contact_lookup, links=None, max_workers: int = 4):
        super().__init__(contact_lookup, links, max_workers)
        self.delivery = delivery

    def handlers(self) -> Dict[str, Handler]:
        return {
            "candidate.invited": self.handle_candidate_invited,
            "candidate.consent_given": self.handle_consent_given,
            "candidate.consent_declined": self.handle_consent_declined,
            "candidate.sourced": self.handle_candidate_sourced,
            "ownership.conflict_detected": self.handle_ownership_conflict,
        }

    def handle_candidate_invited(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, CandidateInvitedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            candidate = self._require(ContactKind.CANDIDATE, payload.candidate_id)
            data = CandidateInvitationData(
                candidate_name=candidate.display_name,
                recruiter_name=self._name_of(ContactKind.RECRUITER, payload.recruiter_id),
                invitation_url=self._candidate_site(f"invitation/{payload.invitation_token}"),
                recruiter_bio=payload.recruiter_bio,
                expires_at=payload.expires_at,
                **self._template_links(),
            )
            return self.delivery.send_candidate_invitation(
                candidate, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"candidate:{payload.candidate_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_consent_given(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, CandidateConsentGivenPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = CandidateConsentGivenData(
                recruiter_name=recruiter.display_name,
                candidate_name=self._name_of(ContactKind.CANDIDATE, payload.candidate_id),
                candidate_url=self._candidate_url(payload.candidate_id),
                **self._template_links(),
            )
            return self.delivery.send_consent_given(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_consent_declined(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, CandidateConsentDeclinedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = CandidateConsentDeclinedData(
                recruiter_name=recruiter.display_name,
                candidate_name=self._name_of(ContactKind.CANDIDATE, payload.candidate_id),
                candidate_url=self._candidate_url(payload.candidate_id),
                reason=payload.reason,
                **self._template_links(),
            )
            return self.delivery.send_consent_declined(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_candidate_sourced(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, CandidateSourcedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = CandidateSourcedData(
                recruiter_name=recruiter.display_name,
                candidate_name=self._name_of(ContactKind.CANDIDATE, payload.candidate_id),
                candidate_url=self._candidate_url(payload.candidate_id),
                protection_days=payload.protection_days,
                protection_expires_at=payload.protection_expires_at,
                **self._template_links(),
            )
            return self.delivery.send_candidate_sourced(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_ownership_conflict(self, event: DomainEvent) -> DispatchReport:
        """Notify the original sourcer and the attempting recruiter independently."""
        payload = self._parse(event, OwnershipConflictPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        candidate_url = self._candidate_url(payload.candidate_id)

        def send_to_sourcer():
            sourcer = self._require(ContactKind.RECRUITER, payload.original_sourcer_id)
            data = OwnershipConflictData(
                recipient_name=sourcer.display_name,
                candidate_name=self._name_of(ContactKind.CANDIDATE, payload.candidate_id),
                other_recruiter_name=self._name_of(
                    ContactKind.RECRUITER, payload.attempting_recruiter_id
                ),
                candidate_url=candidate_url,
                sourced_at=payload.sourced_at,
                **self._template_links(),
            )
            return self.delivery.send_ownership_conflict(
                sourcer, data, payload=event.payload, event_type=event.type
            )

        def send_to_attempting():
            attempting = self._require(ContactKind.RECRUITER, payload.attempting_recruiter_id)
            data = OwnershipConflictData(
                recipient_name=attempting.display_name,
                candidate_name=self._name_of(ContactKind.CANDIDATE, payload.candidate_id),
                other_recruiter_name=self._name_of(
                    ContactKind.RECRUITER, payload.original_sourcer_id
                ),
                candidate_url=candidate_url,
                sourced_at=payload.sourced_at,
                **self._template_links(),
            )
            return self.delivery.send_ownership_conflict_rejection(
                attempting, data, payload=event.payload, event_type=event.type
            )

        tasks = [
            SendTask(f"recruiter:{payload.original_sourcer_id}", send_to_sourcer),
            SendTask(f"recruiter:{payload.attempting_recruiter_id}", send_to_attempting),
        ]
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)

    def _candidate_url(self, candidate_id: str) -> str:
        return self._portal(f"portal/candidates/{candidate_id}")
