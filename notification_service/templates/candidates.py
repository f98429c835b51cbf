"""Candidate representation and ownership messages."""

from typing import Any, Optional

from markupsafe import escape

from notification_service.domain.models import AudienceSource, RenderedMessage

from .components import (
    alert,
    badge,
    bullet_list,
    button,
    compose,
    divider,
    heading,
    info_card,
    link,
    paragraph,
)
from .message import TemplateData, audience, build_message, date_value, display
from .theme import resolve_theme


class CandidateInvitationData(TemplateData):
    candidate_name: str
    recruiter_name: str
    invitation_url: str
    recruiter_bio: Optional[str] = None
    expires_at: Optional[str] = None


class CandidateConsentData(TemplateData):
    recruiter_name: str
    candidate_name: str
    candidate_url: str


class CandidateConsentGivenData(CandidateConsentData):
    pass


class CandidateConsentDeclinedData(CandidateConsentData):
    reason: Optional[str] = None


class CandidateSourcedData(TemplateData):
    recruiter_name: str
    candidate_name: str
    candidate_url: str
    protection_days: int = 365
    protection_expires_at: Optional[str] = None


class OwnershipConflictData(TemplateData):
    recipient_name: str
    candidate_name: str
    other_recruiter_name: str
    candidate_url: str
    sourced_at: Optional[str] = None


def candidate_invitation_email(data: CandidateInvitationData, source: Any = None) -> RenderedMessage:
    source = audience(source, AudienceSource.CANDIDATE)
    theme = resolve_theme(source)
    recruiter = escape(display(data.recruiter_name, "A recruiter"))

    content = compose(
        heading(1, f"{recruiter} wants to represent you", theme),
        paragraph(f"Hi <strong>{escape(display(data.candidate_name, 'there'))}</strong>,", theme),
        paragraph(
            f"<strong>{recruiter}</strong> would like to represent you in your job search, "
            "at no cost to you. As your recruiter they can:",
            theme,
        ),
        bullet_list(
            [
                "Put you forward for roles that match your experience",
                "Prepare you for interviews with each hiring company",
                "Negotiate your offer on your behalf",
            ],
            theme,
        ),
        alert("info", escape(data.recruiter_bio), title=f"About {recruiter}", theme=theme)
        if data.recruiter_bio
        else None,
        info_card(
            "Invitation",
            [
                ("Recruiter", recruiter),
                ("Expires", date_value(data.expires_at)),
            ],
            theme,
        ),
        button(escape(data.invitation_url), "Review Invitation →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Not interested? You can decline from the same page. Questions? Visit our "
            f"{link(escape(data.candidate_link('public/help')), 'Help Center', theme)}.",
            theme,
            muted=True,
        ),
    )

    return build_message(
        "candidate_invitation",
        f"{display(data.recruiter_name, 'A recruiter')} wants to represent you",
        content,
        source,
        preheader=f"{display(data.recruiter_name, 'A recruiter')} invited you to work together",
    )


def candidate_consent_given_email(
    data: CandidateConsentGivenData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)

    content = compose(
        heading(1, "Invitation Accepted!", theme),
        paragraph(f"Hi <strong>{escape(display(data.recruiter_name, 'there'))}</strong>,", theme),
        alert(
            "success",
            f"<strong>{candidate}</strong> accepted your invitation. You now represent "
            "them on the platform.",
            title="Great News!",
            theme=theme,
        ),
        paragraph("Start matching them to open roles and submitting applications.", theme),
        button(escape(data.candidate_url), "View Candidate →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Browse open roles in your "
            f"{link(escape(data.portal_link('portal/roles')), 'dashboard', theme)}.",
            theme,
        ),
    )

    return build_message(
        "candidate_consent_given",
        f"{data.candidate_name} accepted your invitation",
        content,
        source,
        preheader=f"You now represent {data.candidate_name}",
    )


def candidate_consent_declined_email(
    data: CandidateConsentDeclinedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)

    content = compose(
        heading(1, "Invitation Declined", theme),
        paragraph(f"Hi <strong>{escape(display(data.recruiter_name, 'there'))}</strong>,", theme),
        alert(
            "warning",
            f"<strong>{candidate}</strong> declined your invitation to represent them.",
            theme=theme,
        ),
        info_card(
            "Details",
            [
                ("Candidate", candidate),
                ("Reason", escape(data.reason) if data.reason else None),
            ],
            theme,
        ),
        paragraph(
            "The candidate's decision is final for this invitation. You can keep working "
            "with your other candidates as usual.",
            theme,
        ),
        button(escape(data.candidate_url), "View Candidate →", "secondary", theme),
    )

    return build_message(
        "candidate_consent_declined",
        f"{data.candidate_name} declined your invitation",
        content,
        source,
        preheader=f"{data.candidate_name} declined representation",
    )


def candidate_sourced_email(data: CandidateSourcedData, source: Any = None) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)

    content = compose(
        heading(1, "Candidate Sourced", theme),
        paragraph(f"Hi <strong>{escape(display(data.recruiter_name, 'there'))}</strong>,", theme),
        paragraph(
            f"You are now the sourcing recruiter for <strong>{candidate}</strong>.",
            theme,
        ),
        info_card(
            "Sourcing Protection",
            [
                ("Candidate", candidate),
                ("Status", badge("Protected", "success", theme)),
                ("Protection period", f"{data.protection_days} days"),
                (
                    "Protected until",
                    date_value(data.protection_expires_at),
                    True,
                ),
            ],
            theme,
        ),
        alert(
            "info",
            "While protection is active, you receive the sourcing share of any placement "
            "fee for this candidate, whichever recruiter submits them.",
            title="How protection works",
            theme=theme,
        ),
        button(escape(data.candidate_url), "View Candidate →", "primary", theme),
    )

    return build_message(
        "candidate_sourced",
        f"You sourced {data.candidate_name}",
        content,
        source,
        preheader=f"{data.candidate_name} is protected for {data.protection_days} days",
    )


def ownership_conflict_email(data: OwnershipConflictData, source: Any = None) -> RenderedMessage:
    """Tell the original sourcer that another recruiter tried to claim their candidate."""
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)
    other = escape(data.other_recruiter_name)

    content = compose(
        heading(1, "Ownership Conflict Detected", theme),
        paragraph(f"Hi <strong>{escape(display(data.recipient_name, 'there'))}</strong>,", theme),
        alert(
            "warning",
            f"<strong>{other}</strong> attempted to source <strong>{candidate}</strong>, "
            "who is already under your sourcing protection.",
            title="Your ownership is intact",
            theme=theme,
        ),
        info_card(
            "Conflict Details",
            [
                ("Candidate", candidate),
                ("Attempted by", other),
                ("You sourced on", date_value(data.sourced_at)),
            ],
            theme,
        ),
        paragraph("No action is needed. Your protection remains in effect.", theme),
        button(escape(data.candidate_url), "View Candidate →", "secondary", theme),
    )

    return build_message(
        "ownership_conflict",
        f"Ownership conflict: {data.candidate_name}",
        content,
        source,
        preheader=f"{data.other_recruiter_name} attempted to source {data.candidate_name}",
    )


def ownership_conflict_rejection_email(
    data: OwnershipConflictData, source: Any = None
) -> RenderedMessage:
    """Tell the attempting recruiter the candidate already has a sourcer."""
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    candidate = escape(data.candidate_name)

    content = compose(
        heading(1, "Candidate Already Sourced", theme),
        paragraph(f"Hi <strong>{escape(display(data.recipient_name, 'there'))}</strong>,", theme),
        alert(
            "error",
            f"<strong>{candidate}</strong> is already protected by another recruiter, so "
            "your sourcing claim was not recorded.",
            title="Sourcing claim rejected",
            theme=theme,
        ),
        info_card(
            "Details",
            [
                ("Candidate", candidate),
                ("Original sourcer", escape(data.other_recruiter_name)),
                ("Sourced on", date_value(data.sourced_at)),
            ],
            theme,
        ),
        paragraph(
            "You can still collaborate on placements for this candidate through a split "
            "agreement with the sourcing recruiter.",
            theme,
        ),
        button(escape(data.candidate_url), "View Candidate →", "secondary", theme),
    )

    return build_message(
        "ownership_conflict_rejection",
        f"{data.candidate_name} is already represented",
        content,
        source,
        preheader=f"Your sourcing claim for {data.candidate_name} was not recorded",
    )
