"""Application lifecycle events."""

from functools import partial
from typing import Dict, List, Tuple

from notification_service.delivery import ApplicationDeliveryService, DispatchReport, FanOutPolicy, SendTask
from notification_service.domain.models import AudienceSource, ContactKind, DomainEvent
from notification_service.logging import get_logger
from notification_service.templates.applications import (
    AIReviewCompletedCandidateData,
    AIReviewCompletedRecruiterData,
    ApplicationAcceptedData,
    ApplicationCreatedData,
    ApplicationNoteCreatedData,
    ApplicationProposalAcceptedData,
    ApplicationProposalDeclinedData,
    ApplicationRejectedData,
    ApplicationStageChangedData,
    ApplicationSubmittedToCompanyData,
    ApplicationWithdrawnData,
    CandidateApplicationSubmittedData,
    CompanyApplicationReceivedData,
    PreScreenRequestConfirmationData,
    PreScreenRequestedData,
)

from .base import BaseConsumer, Handler
from .payloads import (
    AIReviewCompletedPayload,
    AIReviewFailedPayload,
    AIReviewStartedPayload,
    ApplicationAcceptedPayload,
    ApplicationCreatedPayload,
    ApplicationNoteCreatedPayload,
    ApplicationProposalAcceptedPayload,
    ApplicationProposalDeclinedPayload,
    ApplicationRef,
    ApplicationStageChangedPayload,
    ApplicationSubmittedToCompanyPayload,
    ApplicationWithdrawnPayload,
    DraftCompletedPayload,
    NoteRecipient,
    PreScreenRequestedPayload,
)

logger = get_logger(__name__, component="consumer")

REJECTED_STAGE = "rejected"


class ApplicationsEventConsumer(BaseConsumer):
    """Notifies candidates, recruiters and companies about application changes.

    Applications submitted without a recruiter are "direct": stage changes
    then go to the candidate, branded for the candidate site.
    """

    family = "applications"

    def __init__(self, delivery: ApplicationDeliveryService, contact_lookup, links=None, max_workers: int = 4):
        super().__init__(contact_lookup, links, max_workers)
        self.delivery = delivery

    def handlers(self) -> Dict[str, Handler]:
        return {
            "application.created": self.handle_application_created,
            "application.stage_changed": self.handle_application_stage_changed,
            "application.accepted": self.handle_application_accepted,
            "application.withdrawn": self.handle_application_withdrawn,
            "application.submitted_to_company": self.handle_application_submitted_to_company,
            "application.note.created": self.handle_application_note_created,
            "application.prescreen_requested": self.handle_prescreen_requested,
            "ai_review.started": self.handle_ai_review_started,
            "ai_review.completed": self.handle_ai_review_completed,
            "ai_review.failed": self.handle_ai_review_failed,
            "application.draft_completed": self.handle_draft_completed,
            "application.proposal_accepted": self.handle_application_proposal_accepted,
            "application.proposal_declined": self.handle_application_proposal_declined,
        }

    def handle_application_created(self, event: DomainEvent) -> DispatchReport:
        """Confirm to the candidate and, when represented, tell the recruiter."""
        payload = self._parse(event, ApplicationCreatedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send_to_candidate():
            candidate = self._require(ContactKind.CANDIDATE, payload.candidate_id)
            data = CandidateApplicationSubmittedData(
                candidate_name=candidate.display_name,
                job_title=job_title,
                company_name=company_name,
                application_url=self._candidate_application_url(payload),
                has_recruiter=bool(payload.recruiter_id),
                **self._template_links(),
            )
            return self.delivery.send_candidate_application_submitted(
                candidate, data, payload=event.payload, event_type=event.type
            )

        def send_to_recruiter():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationCreatedData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                recruiter_name=recruiter.display_name,
                **self._template_links(),
            )
            return self.delivery.send_application_created(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"candidate:{payload.candidate_id}", send_to_candidate)]
        if payload.recruiter_id:
            tasks.append(SendTask(f"recruiter:{payload.recruiter_id}", send_to_recruiter))
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)

    def handle_application_stage_changed(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationStageChangedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)
        direct = not payload.recruiter_id

        def send():
            if direct:
                recipient = self._require(ContactKind.CANDIDATE, payload.candidate_id)
                candidate_name = recipient.display_name
                application_url = self._candidate_application_url(payload)
                source = AudienceSource.CANDIDATE
            else:
                recipient = self._require(ContactKind.RECRUITER, payload.recruiter_id)
                candidate_name = self._candidate_name(payload)
                application_url = self._portal_application_url(payload)
                source = AudienceSource.PORTAL

            common = dict(
                candidate_name=candidate_name,
                job_title=job_title,
                company_name=company_name,
                application_url=application_url,
                **self._template_links(),
            )
            if payload.new_stage == REJECTED_STAGE:
                return self.delivery.send_application_rejected(
                    recipient,
                    ApplicationRejectedData(reason=payload.reason, **common),
                    payload=event.payload,
                    event_type=event.type,
                    source=source,
                )
            return self.delivery.send_application_stage_changed(
                recipient,
                ApplicationStageChangedData(
                    new_stage=payload.new_stage, old_stage=payload.old_stage, **common
                ),
                payload=event.payload,
                event_type=event.type,
                source=source,
            )

        label = f"candidate:{payload.candidate_id}" if direct else f"recruiter:{payload.recruiter_id}"
        return self._fan_out(event, [SendTask(label, send)], FanOutPolicy.ALL_OR_NOTHING)

    def handle_application_accepted(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationAcceptedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationAcceptedData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                **self._template_links(),
            )
            return self.delivery.send_application_accepted(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_application_withdrawn(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationWithdrawnPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationWithdrawnData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                withdrawn_by=payload.withdrawn_by or "Candidate",
                reason=payload.reason,
                **self._template_links(),
            )
            return self.delivery.send_application_withdrawn(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_application_submitted_to_company(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationSubmittedToCompanyPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send():
            company = self._require(ContactKind.COMPANY, payload.company_id)
            recruiter_name = None
            if payload.recruiter_id:
                recruiter_name = self._name_of(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationSubmittedToCompanyData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=payload.company_name or company.name or company_name,
                application_url=self._portal_application_url(payload),
                recruiter_name=recruiter_name,
                **self._template_links(),
            )
            return self.delivery.send_application_submitted_to_company(
                company, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"company:{payload.company_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_application_note_created(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationNoteCreatedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")
        if not payload.recipients:
            return self._skip(event, "note has no recipients")

        job_title, company_name = self._job(payload)

        def send_to(target: NoteRecipient):
            recipient = self._require(target.kind, target.id)
            is_candidate = target.kind is ContactKind.CANDIDATE
            if is_candidate:
                candidate_name = recipient.display_name
                application_url = self._candidate_application_url(payload)
            else:
                candidate_name = self._candidate_name(payload)
                application_url = self._portal_application_url(payload)

            data = ApplicationNoteCreatedData(
                candidate_name=candidate_name,
                job_title=job_title,
                company_name=company_name,
                application_url=application_url,
                recipient_name=recipient.display_name,
                note_preview=payload.content,
                added_by_name=payload.created_by_name or "A team member",
                added_by_role=payload.created_by_role or "team member",
                **self._template_links(),
            )
            return self.delivery.send_application_note_created(
                recipient,
                data,
                payload=event.payload,
                event_type=event.type,
                source=AudienceSource.CANDIDATE if is_candidate else AudienceSource.PORTAL,
            )

        tasks: List[SendTask] = []
        seen = set()
        for target in payload.recipients:
            key = (target.kind, target.id)
            if key in seen:
                continue
            seen.add(key)
            tasks.append(SendTask(f"{target.kind.value}:{target.id}", partial(send_to, target)))
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)

    def handle_prescreen_requested(self, event: DomainEvent) -> DispatchReport:
        """Ask the assigned recruiter to pre-screen and confirm the request to the company.

        With auto-assignment and no recruiter chosen yet, only the company
        confirmation is sent.
        """
        payload = self._parse(event, PreScreenRequestedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send_to_recruiter():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            candidate_email = payload.candidate_email or self._require(
                ContactKind.CANDIDATE, payload.candidate_id
            ).email
            data = PreScreenRequestedData(
                candidate_name=self._candidate_name(payload),
                candidate_email=candidate_email,
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                requested_by=payload.requested_by_name or company_name,
                message=payload.message,
                **self._template_links(),
            )
            return self.delivery.send_prescreen_requested(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        def send_to_company():
            company = self._require(ContactKind.COMPANY, payload.company_id)
            data = PreScreenRequestConfirmationData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=payload.company_name or company.name or company_name,
                application_url=self._portal_application_url(payload),
                auto_assign=payload.auto_assign,
                **self._template_links(),
            )
            return self.delivery.send_prescreen_request_confirmation(
                company, data, payload=event.payload, event_type=event.type
            )

        tasks: List[SendTask] = []
        if payload.recruiter_id:
            tasks.append(SendTask(f"recruiter:{payload.recruiter_id}", send_to_recruiter))
        tasks.append(SendTask(f"company:{payload.company_id}", send_to_company))
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)

    def handle_ai_review_started(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, AIReviewStartedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")
        return self._skip(event, "no notification for review start")

    def handle_ai_review_completed(self, event: DomainEvent) -> DispatchReport:
        """Share review results with the candidate and, when represented, the recruiter."""
        payload = self._parse(event, AIReviewCompletedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)
        review = dict(
            job_title=job_title,
            company_name=company_name,
            fit_score=payload.fit_score,
            recommendation=payload.recommendation,
            strengths=payload.strengths,
            concerns=payload.concerns,
            **self._template_links(),
        )

        def send_to_candidate():
            candidate = self._require(ContactKind.CANDIDATE, payload.candidate_id)
            data = AIReviewCompletedCandidateData(
                candidate_name=candidate.display_name,
                application_url=self._candidate_application_url(payload),
                **review,
            )
            return self.delivery.send_ai_review_completed_candidate(
                candidate, data, payload=event.payload, event_type=event.type
            )

        def send_to_recruiter():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = AIReviewCompletedRecruiterData(
                candidate_name=self._candidate_name(payload),
                recruiter_name=recruiter.display_name,
                application_url=self._portal_application_url(payload),
                overall_summary=payload.overall_summary,
                matched_skills=payload.matched_skills,
                missing_skills=payload.missing_skills,
                **review,
            )
            return self.delivery.send_ai_review_completed_recruiter(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"candidate:{payload.candidate_id}", send_to_candidate)]
        if payload.recruiter_id:
            tasks.append(SendTask(f"recruiter:{payload.recruiter_id}", send_to_recruiter))
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)

    def handle_ai_review_failed(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, AIReviewFailedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        logger.warning(
            f"AI review failed for application {payload.application_id}: {payload.error or 'unknown error'}",
            extra={
                "event": "consumer.ai_review.failed",
                "event_type": event.type,
                "application_id": payload.application_id,
                "review_id": payload.review_id,
            },
        )
        return self._skip(event, "review failures are not emailed")

    def handle_draft_completed(self, event: DomainEvent) -> DispatchReport:
        """Tell the hiring company about the finished application and the recruiter it needs review."""
        payload = self._parse(event, DraftCompletedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")
        if not payload.company_id and not payload.recruiter_id:
            return self._skip(event, "no company or recruiter to notify")

        job_title, company_name = self._job(payload)

        def send_to_company():
            company = self._require(ContactKind.COMPANY, payload.company_id)
            recruiter_name = None
            if payload.recruiter_id:
                recruiter_name = self._name_of(ContactKind.RECRUITER, payload.recruiter_id)
            data = CompanyApplicationReceivedData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=payload.company_name or company.name or company_name,
                application_url=self._portal_application_url(payload),
                recruiter_name=recruiter_name,
                **self._template_links(),
            )
            return self.delivery.send_company_application_received(
                company, data, payload=event.payload, event_type=event.type
            )

        def send_to_recruiter():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationCreatedData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                recruiter_name=recruiter.display_name,
                **self._template_links(),
            )
            return self.delivery.send_application_created(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks: List[SendTask] = []
        if payload.company_id:
            tasks.append(SendTask(f"company:{payload.company_id}", send_to_company))
        if payload.recruiter_id:
            tasks.append(SendTask(f"recruiter:{payload.recruiter_id}", send_to_recruiter))
        return self._fan_out(event, tasks, FanOutPolicy.BEST_EFFORT)

    def handle_application_proposal_accepted(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationProposalAcceptedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationProposalAcceptedData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                recruiter_name=recruiter.display_name,
                **self._template_links(),
            )
            return self.delivery.send_proposal_accepted(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def handle_application_proposal_declined(self, event: DomainEvent) -> DispatchReport:
        payload = self._parse(event, ApplicationProposalDeclinedPayload)
        if payload is None:
            return DispatchReport.skipped(event.type, "malformed payload")

        job_title, company_name = self._job(payload)

        def send():
            recruiter = self._require(ContactKind.RECRUITER, payload.recruiter_id)
            data = ApplicationProposalDeclinedData(
                candidate_name=self._candidate_name(payload),
                job_title=job_title,
                company_name=company_name,
                application_url=self._portal_application_url(payload),
                recruiter_name=recruiter.display_name,
                candidate_profile_url=self._portal(f"portal/candidates/{payload.candidate_id}"),
                reason=payload.reason,
                **self._template_links(),
            )
            return self.delivery.send_proposal_declined(
                recruiter, data, payload=event.payload, event_type=event.type
            )

        tasks = [SendTask(f"recruiter:{payload.recruiter_id}", send)]
        return self._fan_out(event, tasks, FanOutPolicy.ALL_OR_NOTHING)

    def _job(self, payload: ApplicationRef) -> Tuple[str, str]:
        return payload.job_title or "the role", payload.company_name or "the hiring company"

    def _candidate_name(self, payload: ApplicationRef) -> str:
        return self._name_of(ContactKind.CANDIDATE, payload.candidate_id, payload.candidate_name)

    def _portal_application_url(self, payload: ApplicationRef) -> str:
        return self._portal(f"portal/applications/{payload.application_id}")

    def _candidate_application_url(self, payload: ApplicationRef) -> str:
        return self._candidate_site(f"portal/applications/{payload.application_id}")
