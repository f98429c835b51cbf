"""Company platform invitation messages."""

from typing import Any, Optional

from markupsafe import escape

from notification_service.domain.models import AudienceSource, RenderedMessage

from .components import alert, button, compose, divider, heading, info_card, link, paragraph
from .message import TemplateData, audience, build_message, date_value, display
from .theme import resolve_theme


class CompanyPlatformInvitationData(TemplateData):
    recruiter_name: str
    invitation_url: str
    invite_code: Optional[str] = None
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    personal_message: Optional[str] = None
    expires_at: Optional[str] = None


class CompanyInvitationAcceptedData(TemplateData):
    recruiter_name: str
    company_name: str
    company_url: str


def company_platform_invitation_email(
    data: CompanyPlatformInvitationData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    recruiter = escape(display(data.recruiter_name, "A recruiter"))
    greeting = escape(display(data.contact_name, "there"))

    content = compose(
        heading(1, "You're Invited to Splits Network", theme),
        paragraph(f"Hi <strong>{greeting}</strong>,", theme),
        paragraph(
            f"<strong>{recruiter}</strong> has invited "
            + (f"<strong>{escape(data.company_name)}</strong>" if data.company_name else "your company")
            + " to hire through Splits Network, where vetted recruiters collaborate "
            "to fill your open roles.",
            theme,
        ),
        alert(
            "info",
            escape(data.personal_message),
            title=f"Message from {recruiter}",
            theme=theme,
        )
        if data.personal_message
        else None,
        info_card(
            "Invitation",
            [
                ("Invited by", recruiter),
                ("Invite code", escape(data.invite_code) if data.invite_code else None),
                ("Expires", date_value(data.expires_at)),
            ],
            theme,
        ),
        button(escape(data.invitation_url), "Accept Invitation →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Want to learn more first? Visit our "
            f"{link(escape(data.portal_link('public/help')), 'Help Center', theme)}.",
            theme,
            muted=True,
        ),
    )

    return build_message(
        "company_platform_invitation",
        f"{display(data.recruiter_name, 'A recruiter')} invited you to join Splits Network",
        content,
        source,
        preheader=f"{display(data.recruiter_name, 'A recruiter')} wants to work with you on Splits Network",
    )


def company_invitation_accepted_email(
    data: CompanyInvitationAcceptedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    company = escape(display(data.company_name, "The company"))

    content = compose(
        heading(1, "Invitation Accepted!", theme),
        paragraph(f"Hi <strong>{escape(display(data.recruiter_name, 'there'))}</strong>,", theme),
        alert(
            "success",
            f"<strong>{company}</strong> accepted your invitation and has joined the platform.",
            title="Great News!",
            theme=theme,
        ),
        paragraph(
            "You can now submit candidates to their roles as soon as they are published.",
            theme,
        ),
        button(escape(data.company_url), "View Company →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Track all your companies in your "
            f"{link(escape(data.portal_link('portal/dashboard')), 'dashboard', theme)}.",
            theme,
        ),
    )

    return build_message(
        "company_invitation_accepted",
        f"{display(data.company_name, 'A company')} accepted your invitation",
        content,
        source,
        preheader=f"{display(data.company_name, 'A company')} joined Splits Network",
    )
