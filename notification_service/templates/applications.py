"""Application lifecycle messages."""

from typing import Any, List, Optional

from markupsafe import escape
from pydantic import Field

from notification_service.domain.models import AudienceSource, RenderedMessage
from notification_service.utils.text import truncate_text

from .components import (
    ListItem,
    alert,
    bullet_list,
    button,
    compose,
    divider,
    heading,
    info_card,
    link,
    paragraph,
)
from .message import TemplateData, audience, build_message, display
from .theme import resolve_theme


class ApplicationData(TemplateData):
    """Fields shared by every application message."""

    candidate_name: str
    job_title: str
    company_name: str
    application_url: str


class ApplicationCreatedData(ApplicationData):
    recruiter_name: Optional[str] = None


class ApplicationStageChangedData(ApplicationData):
    new_stage: str
    old_stage: Optional[str] = None


class ApplicationAcceptedData(ApplicationData):
    pass


class ApplicationRejectedData(ApplicationData):
    reason: Optional[str] = None


class ApplicationWithdrawnData(ApplicationData):
    withdrawn_by: str = "Candidate"
    reason: Optional[str] = None


class ApplicationSubmittedToCompanyData(ApplicationData):
    recruiter_name: Optional[str] = None


class CandidateApplicationSubmittedData(ApplicationData):
    has_recruiter: bool = False
    next_steps: str = (
        "Your application is now being reviewed. We'll email you as soon as its status changes."
    )


class ApplicationNoteCreatedData(ApplicationData):
    recipient_name: str
    note_preview: str
    added_by_name: str
    added_by_role: str = "team member"


class PreScreenRequestedData(ApplicationData):
    candidate_email: Optional[str] = None
    requested_by: str
    message: Optional[str] = None


class PreScreenRequestConfirmationData(ApplicationData):
    auto_assign: bool = False


class AIReviewCompletedCandidateData(ApplicationData):
    fit_score: float
    recommendation: str
    strengths: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)


class AIReviewCompletedRecruiterData(AIReviewCompletedCandidateData):
    recruiter_name: str
    overall_summary: Optional[str] = None
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)


class CompanyApplicationReceivedData(ApplicationData):
    recruiter_name: Optional[str] = None

    @property
    def has_recruiter(self) -> bool:
        return bool(self.recruiter_name)


class ApplicationProposalAcceptedData(ApplicationData):
    recruiter_name: str


class ApplicationProposalDeclinedData(ApplicationData):
    recruiter_name: str
    candidate_profile_url: str
    reason: Optional[str] = None


GOOD_FIT_RECOMMENDATIONS = ("strong_fit", "good_fit")

_CANDIDATE_RECOMMENDATION_LABELS = {
    "strong_fit": "Strong Fit",
    "good_fit": "Good Fit",
    "possible_fit": "Possible Fit",
    "weak_fit": "Needs Development",
}
_RECRUITER_RECOMMENDATION_LABELS = dict(_CANDIDATE_RECOMMENDATION_LABELS, weak_fit="Weak Fit")


def stage_label(stage: Optional[str]) -> str:
    """Human label for a pipeline stage id (``phone_screen`` -> ``Phone Screen``)."""
    if not stage:
        return "Unknown"
    return " ".join(word.capitalize() for word in str(stage).replace("-", "_").split("_") if word)


def recommendation_label(recommendation: str, for_recruiter: bool = False) -> str:
    """Display label for an AI review recommendation code."""
    labels = _RECRUITER_RECOMMENDATION_LABELS if for_recruiter else _CANDIDATE_RECOMMENDATION_LABELS
    return labels.get(recommendation) or recommendation.replace("_", " ", 1).upper()


def fit_score_label(score: float) -> str:
    return f"{score:g}/100"


def _details_card(data: ApplicationData, theme, title: str = "Application Details", *extra):
    return info_card(
        title,
        [
            ("Candidate", escape(data.candidate_name)),
            ("Position", escape(data.job_title)),
            ("Company", escape(data.company_name)),
            *extra,
        ],
        theme,
    )


def application_created_email(data: ApplicationCreatedData, source: Any = None) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)

    content = compose(
        heading(1, "New Candidate Application", theme),
        paragraph(
            f"Your candidate <strong>{candidate}</strong> has submitted an application for review.",
            theme,
        ),
        _details_card(
            data,
            theme,
            "Application Details",
            ("Submitted by", escape(data.recruiter_name) if data.recruiter_name else None),
        ),
        paragraph(
            "Review the application, add any additional context, and submit it to the "
            "company when ready.",
            theme,
        ),
        button(escape(data.application_url), "Review Application →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Need help? Visit our "
            f"{link(escape(data.portal_link('public/help')), 'Help Center', theme)} or reply to this email.",
            theme,
        ),
    )

    return build_message(
        "application_created",
        f"New application: {data.candidate_name} for {data.job_title}",
        content,
        source,
        preheader=f"New application from {data.candidate_name} for {data.job_title}",
    )


def application_stage_changed_email(
    data: ApplicationStageChangedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    new_stage = stage_label(data.new_stage)

    content = compose(
        heading(1, "Application Status Update", theme),
        paragraph(
            f"The application for <strong>{escape(data.candidate_name)}</strong> has moved "
            "to a new stage in the hiring process.",
            theme,
        ),
        _details_card(
            data,
            theme,
            "Status Change",
            ("Previous Stage", escape(stage_label(data.old_stage)) if data.old_stage else None),
            ("New Stage", escape(new_stage), True),
        ),
        paragraph("Keep tracking the application and prepare for the next steps.", theme),
        button(escape(data.application_url), "View Application →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Get real-time updates in your "
            f"{link(escape(data.portal_link('portal/dashboard')), 'dashboard', theme)}.",
            theme,
        ),
    )

    return build_message(
        "application_stage_changed",
        f"Application update: {data.candidate_name} moved to {new_stage}",
        content,
        source,
        preheader=f"{data.candidate_name} moved to {new_stage} for {data.job_title}",
    )


def application_accepted_email(data: ApplicationAcceptedData, source: Any = None) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)

    content = compose(
        heading(1, "Application Accepted!", theme),
        alert(
            "success",
            f"The company has accepted your candidate {escape(data.candidate_name)} for the "
            f"{escape(data.job_title)} position.",
            title="Great News!",
            theme=theme,
        ),
        _details_card(data, theme, "Accepted Application"),
        paragraph(
            "The candidate has moved forward in the hiring process. Keep monitoring progress "
            "and coordinate next steps with the company.",
            theme,
        ),
        button(escape(data.application_url), "View Application Details →", "primary", theme),
        divider(theme=theme),
        paragraph("<strong>What happens next?</strong>", theme),
        paragraph(
            "The company will continue their interview process. When an offer is extended "
            "and accepted, a placement is created automatically.",
            theme,
        ),
    )

    return build_message(
        "application_accepted",
        f"Application accepted: {data.candidate_name} for {data.job_title}",
        content,
        source,
        preheader=f"{data.candidate_name}'s application was accepted by {data.company_name}",
    )


def application_rejected_email(data: ApplicationRejectedData, source: Any = None) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)

    content = compose(
        heading(1, "Application Update", theme),
        alert(
            "warning",
            f"The application for {escape(data.candidate_name)} was not moved forward by "
            f"{escape(data.company_name)}.",
            theme=theme,
        ),
        _details_card(
            data,
            theme,
            "Application Details",
            ("Reason", escape(data.reason) if data.reason else None),
        ),
        paragraph(
            "While this opportunity didn't work out, there are many more roles available on the platform.",
            theme,
        ),
        button(escape(data.portal_link("portal/roles")), "Browse Open Roles →", "primary", theme),
        divider(theme=theme),
        paragraph(
            "<strong>Keep moving forward:</strong> keep submitting quality candidates to build "
            "your placement success rate.",
            theme,
        ),
    )

    return build_message(
        "application_rejected",
        f"Application update for {data.candidate_name}",
        content,
        source,
        preheader=f"Update on {data.candidate_name}'s application",
    )


def application_withdrawn_email(data: ApplicationWithdrawnData, source: Any = None) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)

    content = compose(
        heading(1, "Application Withdrawn", theme),
        alert(
            "info",
            f"The application for {escape(data.candidate_name)} has been withdrawn from "
            f"{escape(data.company_name)}.",
            theme=theme,
        ),
        _details_card(
            data,
            theme,
            "Withdrawal Details",
            ("Withdrawn by", escape(data.withdrawn_by)),
            ("Reason", escape(data.reason) if data.reason else None),
        ),
        paragraph(
            "This application has been removed from consideration for this position.",
            theme,
        ),
        button(escape(data.application_url), "View Application Record →", "secondary", theme),
        divider(theme=theme),
        paragraph(
            f"Looking for other opportunities? Browse available roles in your "
            f"{link(escape(data.portal_link('portal/roles')), 'dashboard', theme)}.",
            theme,
        ),
    )

    return build_message(
        "application_withdrawn",
        f"Application withdrawn: {data.candidate_name} for {data.job_title}",
        content,
        source,
        preheader=f"Application withdrawn: {data.candidate_name} for {data.job_title}",
    )


def application_submitted_to_company_email(
    data: ApplicationSubmittedToCompanyData, source: Any = None
) -> RenderedMessage:
    """Notify the hiring company that a candidate was submitted to one of its roles."""
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    recruiter = escape(data.recruiter_name) if data.recruiter_name else None

    content = compose(
        heading(1, "New Candidate Submitted", theme),
        paragraph(
            f"A new candidate has been submitted for <strong>{escape(data.job_title)}</strong>.",
            theme,
        ),
        _details_card(data, theme, "Submission Details", ("Recruiter", recruiter)),
        alert(
            "info",
            f"This candidate is represented by recruiter <strong>{recruiter}</strong>."
            if recruiter
            else "This is a direct candidate application.",
            theme=theme,
        ),
        paragraph(
            "Review the candidate's profile and decide whether they're a good fit for your role.",
            theme,
        ),
        button(escape(data.application_url), "Review Application →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Manage all your applications in your "
            f"{link(escape(data.portal_link('portal/applications')), 'company portal', theme)}.",
            theme,
        ),
    )

    return build_message(
        "application_submitted_to_company",
        f"New candidate for {data.job_title}: {data.candidate_name}",
        content,
        source,
        preheader=f"New application: {data.candidate_name} for {data.job_title}",
    )


def candidate_application_submitted_email(
    data: CandidateApplicationSubmittedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.CANDIDATE)
    theme = resolve_theme(source)

    content = compose(
        heading(1, "Application Received", theme),
        paragraph(f"Hi <strong>{escape(data.candidate_name)}</strong>,", theme),
        paragraph(
            f"Your application for <strong>{escape(data.job_title)}</strong> at "
            f"<strong>{escape(data.company_name)}</strong> has been received.",
            theme,
        ),
        alert("success", escape(data.next_steps), title="Next Steps", theme=theme),
        paragraph(
            "Your recruiter will review your application and make any final enhancements "
            "before submitting it to the company.",
            theme,
        )
        if data.has_recruiter
        else None,
        paragraph("You can track your application status anytime in your portal.", theme),
        button(escape(data.application_url), "Track Application Status →", "primary", theme),
        divider(theme=theme),
        paragraph(
            "<strong>Good luck!</strong> We're here to support you throughout the hiring process.",
            theme,
        ),
    )

    return build_message(
        "candidate_application_submitted",
        f"Application received: {data.job_title} at {data.company_name}",
        content,
        source,
        preheader=f"Application received: {data.job_title} at {data.company_name}",
    )


def application_note_created_email(
    data: ApplicationNoteCreatedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    added_by = escape(data.added_by_name)

    content = compose(
        heading(1, "New Note on Application", theme),
        paragraph(f"Hi <strong>{escape(display(data.recipient_name, 'there'))}</strong>,", theme),
        paragraph(
            f"<strong>{added_by}</strong> ({escape(data.added_by_role)}) added a note to the "
            f"application for <strong>{escape(data.candidate_name)}</strong>.",
            theme,
        ),
        _details_card(data, theme),
        heading(3, "Note Preview", theme),
        paragraph(f'<em>"{escape(truncate_text(data.note_preview, max_length=280))}"</em>', theme),
        button(escape(data.application_url), "View Full Note →", "primary", theme),
        divider(theme=theme),
        paragraph("You can reply to this note directly in the application portal.", theme, muted=True),
    )

    return build_message(
        "application_note_created",
        f"New note on {data.candidate_name}'s application",
        content,
        source,
        preheader=f"New note from {data.added_by_name} on {data.candidate_name}'s application",
    )


def prescreen_requested_email(data: PreScreenRequestedData, source: Any = None) -> RenderedMessage:
    """Ask a recruiter to pre-screen a direct application for a company."""
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    requested_by = escape(data.requested_by)

    content = compose(
        heading(1, "Pre-Screen Request", theme),
        paragraph(
            f"<strong>{requested_by}</strong> from <strong>{escape(data.company_name)}</strong> "
            "has requested your help reviewing a candidate application.",
            theme,
        ),
        info_card(
            "Candidate Details",
            [
                ("Candidate", escape(data.candidate_name)),
                ("Email", escape(data.candidate_email) if data.candidate_email else None),
                ("Position", escape(data.job_title)),
                ("Company", escape(data.company_name)),
            ],
            theme,
        ),
        alert("info", escape(data.message), title=f"Message from {requested_by}", theme=theme)
        if data.message
        else None,
        paragraph("<strong>What's Expected?</strong>", theme),
        bullet_list(
            [
                "Review the candidate's profile and documents",
                "Add your professional insights and recommendations",
                "Submit the pre-screened application back to the company",
            ],
            theme,
        ),
        button(escape(data.application_url), "Start Review →", "primary", theme),
        divider(theme=theme),
        paragraph(
            "<em>This direct application came from a candidate who applied without a recruiter. "
            "The company values your expertise in evaluating this candidate.</em>",
            theme,
            muted=True,
        ),
    )

    return build_message(
        "prescreen_requested",
        f"Pre-screen request: {data.candidate_name} for {data.job_title}",
        content,
        source,
        preheader=f"Pre-screen request: {data.candidate_name} for {data.job_title}",
    )


def prescreen_request_confirmation_email(
    data: PreScreenRequestConfirmationData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)

    if data.auto_assign:
        assignment = "Auto-assign (system will select a recruiter)"
        next_step = alert(
            "info",
            "Our system will automatically assign an available recruiter to review this candidate. "
            "You'll be notified once they submit their review.",
            title="Auto-Assignment",
            theme=theme,
        )
    else:
        assignment = "Manually assigned"
        next_step = alert(
            "info",
            "The selected recruiter has been notified and will review this candidate. "
            "You'll receive their insights once the review is complete.",
            title="Manual Assignment",
            theme=theme,
        )

    content = compose(
        heading(1, "Pre-Screen Request Submitted", theme),
        alert(
            "success",
            "Your request for candidate pre-screening has been submitted successfully.",
            theme=theme,
        ),
        info_card(
            "Request Details",
            [
                ("Candidate", escape(data.candidate_name)),
                ("Position", escape(data.job_title)),
                ("Assignment", assignment),
            ],
            theme,
        ),
        next_step,
        paragraph("<strong>What Happens Next?</strong>", theme),
        bullet_list(
            [
                "Recruiter reviews the candidate's profile",
                "Recruiter adds professional insights and recommendations",
                "You receive the pre-screened application for final review",
            ],
            theme,
        ),
        button(escape(data.application_url), "Track Application Status →", "primary", theme),
        divider(theme=theme),
        paragraph("Typical review timelines: <strong>2-3 business days</strong>", theme, muted=True),
    )

    return build_message(
        "prescreen_request_confirmation",
        f"Pre-screen request submitted: {data.candidate_name}",
        content,
        source,
        preheader=f"Pre-screen request confirmed: {data.candidate_name}",
    )


def ai_review_completed_candidate_email(
    data: AIReviewCompletedCandidateData, source: Any = None
) -> RenderedMessage:
    """Share AI review results with the candidate.

    Strong and good fits get a success callout promising recruiter contact;
    other recommendations get a neutral one.
    """
    source = audience(source, AudienceSource.CANDIDATE)
    theme = resolve_theme(source)
    job_title = escape(data.job_title)
    good_match = data.recommendation in GOOD_FIT_RECOMMENDATIONS

    content = compose(
        heading(1, "Your Application Has Been Reviewed", theme),
        paragraph(
            f"Hi <strong>{escape(display(data.candidate_name, 'there'))}</strong>, good news! Your "
            f"application for <strong>{job_title}</strong> has been reviewed by our AI system.",
            theme,
        ),
        info_card(
            "AI Review Results",
            [
                ("Position", job_title),
                ("Match Score", fit_score_label(data.fit_score), True),
                ("Assessment", escape(recommendation_label(data.recommendation)), True),
            ],
            theme,
        ),
        _review_list("Your Strengths", data.strengths, theme),
        _review_list("Areas to Address", data.concerns, theme),
        alert(
            "success" if good_match else "info",
            "Your application shows strong potential! A recruiter will be in touch soon to "
            "discuss the next steps in the process."
            if good_match
            else "We'll keep you updated on your application status. Continue building your "
            "skills in the areas identified above.",
            title="Next Steps",
            theme=theme,
        ),
        button(escape(data.application_url), "View Full Analysis →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Questions about your review? Visit our "
            f"{link(escape(data.portal_link('public/help')), 'Help Center', theme)} "
            "to learn more about our AI review process.",
            theme,
        ),
    )

    return build_message(
        "ai_review_completed_candidate",
        f"Your application for {data.job_title} has been reviewed",
        content,
        source,
        preheader=f"AI review complete: {fit_score_label(data.fit_score)} match for {data.job_title}",
    )


def ai_review_completed_recruiter_email(
    data: AIReviewCompletedRecruiterData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)
    strong_candidate = data.recommendation in GOOD_FIT_RECOMMENDATIONS
    recommendation = escape(recommendation_label(data.recommendation, for_recruiter=True))

    content = compose(
        heading(1, "AI Review Complete", theme),
        paragraph(
            f"Hi <strong>{escape(display(data.recruiter_name, 'there'))}</strong>, the AI review for "
            f"<strong>{candidate}</strong>'s application to <strong>{escape(data.job_title)}</strong> "
            "is now complete.",
            theme,
        ),
        info_card(
            "Review Summary",
            [
                ("Candidate", candidate),
                ("Position", escape(data.job_title)),
                ("Match Score", fit_score_label(data.fit_score), True),
                ("Recommendation", recommendation, True),
            ],
            theme,
        ),
        [heading(3, "AI Assessment", theme), paragraph(escape(data.overall_summary), theme)]
        if data.overall_summary
        else None,
        _review_list("Matched Skills", data.matched_skills, theme, bold=True),
        _review_list("Key Strengths", data.strengths, theme),
        _review_list("Missing Skills", data.missing_skills, theme, muted=True),
        _review_list("Concerns", data.concerns, theme, muted=True),
        alert(
            "success" if strong_candidate else "info",
            "This candidate shows strong potential for the role. Consider scheduling a phone "
            "screen to discuss their qualifications further."
            if strong_candidate
            else "Review the detailed analysis carefully to determine if this candidate is worth "
            "pursuing. Consider their growth potential and transferable skills.",
            title="Recommended Action",
            theme=theme,
        ),
        button(escape(data.application_url), "View Full AI Analysis →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Need help interpreting the AI review? Check out our "
            f"{link(escape(data.portal_link('public/help/ai-reviews')), 'AI Review Guide', theme)}.",
            theme,
        ),
    )

    return build_message(
        "ai_review_completed_recruiter",
        f"AI review complete: {data.candidate_name} for {data.job_title}",
        content,
        source,
        preheader=(
            f"AI review: {data.candidate_name} - {fit_score_label(data.fit_score)} match "
            f"for {data.job_title}"
        ),
    )


def company_application_received_email(
    data: CompanyApplicationReceivedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    recruiter = escape(data.recruiter_name) if data.has_recruiter else None

    content = compose(
        heading(1, "New Candidate Application", theme),
        paragraph(
            f"A new candidate has applied for <strong>{escape(data.job_title)}</strong>.",
            theme,
        ),
        info_card(
            "Application Details",
            [
                ("Candidate", escape(data.candidate_name)),
                ("Position", escape(data.job_title)),
                ("Recruiter", recruiter),
            ],
            theme,
        ),
        alert(
            "info",
            f"This candidate is represented by recruiter <strong>{recruiter}</strong>."
            if recruiter
            else "This is a direct candidate application.",
            theme=theme,
        ),
        paragraph(
            "Review the candidate's profile and determine if they're a good fit for your role.",
            theme,
        ),
        button(escape(data.application_url), "Review Application →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Manage all your applications in your "
            f"{link(escape(data.portal_link('portal/applications')), 'company portal', theme)}.",
            theme,
        ),
    )

    return build_message(
        "company_application_received",
        f"New application for {data.job_title}: {data.candidate_name}",
        content,
        source,
        preheader=f"New application: {data.candidate_name} for {data.job_title}",
    )


def proposal_accepted_by_application_email(
    data: ApplicationProposalAcceptedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)

    content = compose(
        heading(1, "Your Job Proposal Was Accepted!", theme),
        alert(
            "success",
            f"{escape(data.candidate_name)} has accepted your job proposal and is working on "
            "their application.",
            title="Great News!",
            theme=theme,
        ),
        _details_card(data, theme),
        paragraph(
            "The candidate is now completing their application. You'll be notified when it's "
            "ready for your review.",
            theme,
        ),
        button(escape(data.application_url), "View Application Status →", "primary", theme),
        divider(theme=theme),
        paragraph(
            "<strong>Next Steps:</strong> Wait for the candidate to submit their application, "
            "then review and provide feedback.",
            theme,
        ),
        paragraph(
            f"Track all your proposals in your "
            f"{link(escape(data.portal_link('portal/dashboard')), 'dashboard', theme)}.",
            theme,
        ),
    )

    return build_message(
        "application_proposal_accepted",
        f"{data.candidate_name} accepted your proposal for {data.job_title}",
        content,
        source,
        preheader=f"{data.candidate_name} accepted your proposal for {data.job_title}",
    )


def proposal_declined_by_application_email(
    data: ApplicationProposalDeclinedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)

    content = compose(
        heading(1, "Proposal Update", theme),
        alert(
            "warning",
            f"{escape(data.candidate_name)} has declined your proposal for the "
            f"{escape(data.job_title)} position.",
            title="Proposal Declined",
            theme=theme,
        ),
        [
            heading(3, "Candidate's Reason", theme),
            paragraph(escape(data.reason), theme),
            divider(theme=theme),
        ]
        if data.reason
        else None,
        _details_card(data, theme, "Proposal Details"),
        paragraph(
            "Don't worry! You can continue exploring other opportunities with this candidate "
            "or find other great matches.",
            theme,
        ),
        button(escape(data.candidate_profile_url), "View Candidate Profile →", "secondary", theme),
        divider(theme=theme),
        paragraph(
            "<strong>Next Steps:</strong> Consider proposing other positions that might be a "
            "better fit, or continue your search for the perfect candidate.",
            theme,
        ),
        paragraph(
            f"Need tips on crafting better proposals? Visit our "
            f"{link(escape(data.portal_link('public/help/proposals')), 'Proposal Guide', theme)}.",
            theme,
        ),
    )

    return build_message(
        "application_proposal_declined",
        f"{data.candidate_name} declined your proposal for {data.job_title}",
        content,
        source,
        preheader=f"{data.candidate_name} declined your proposal for {data.job_title}",
    )


def _review_list(title: str, items: List[str], theme, bold: bool = False, muted: bool = False):
    """Heading plus bullet list, or nothing when there are no items."""
    entries = [ListItem(escape(item), bold=bold) for item in items if item and item.strip()]
    if not entries:
        return None
    return [heading(3, title, theme), bullet_list(entries, theme, muted=muted)]
