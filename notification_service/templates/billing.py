"""Billing and payout messages."""

from typing import Any, Optional

from markupsafe import escape

from notification_service.domain.models import AudienceSource, RenderedMessage

from .components import alert, badge, button, compose, divider, heading, info_card, link, paragraph
from .message import TemplateData, audience, build_message, display
from .theme import resolve_theme


class StripeConnectOnboardedData(TemplateData):
    recruiter_name: str
    billing_url: str
    account_id: Optional[str] = None


class StripeConnectDisabledData(TemplateData):
    recruiter_name: str
    billing_url: str
    reason: Optional[str] = None
    account_id: Optional[str] = None


class CompanyBillingProfileCompletedData(TemplateData):
    contact_name: str
    company_name: str
    billing_url: str
    billing_email: Optional[str] = None
    billing_terms: Optional[str] = None


_BILLING_TERMS_LABELS = {
    "immediate": "Due on receipt",
    "net_15": "Net 15",
    "net_30": "Net 30",
    "net_60": "Net 60",
}


def stripe_connect_onboarded_email(
    data: StripeConnectOnboardedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    name = escape(display(data.recruiter_name, "there"))

    content = compose(
        heading(1, "Payout Account Connected", theme),
        paragraph(f"Hi <strong>{name}</strong>,", theme),
        alert(
            "success",
            "Your Stripe Connect account has been verified. Placement fees you earn "
            "will now be paid out to your account automatically.",
            title="You're ready to get paid",
            theme=theme,
        ),
        info_card(
            "Payout Account",
            [
                ("Provider", "Stripe Connect"),
                ("Account", escape(data.account_id) if data.account_id else None),
                ("Status", badge("Active", "success", theme)),
            ],
            theme,
        ),
        button(escape(data.billing_url), "View Billing Settings →", "primary", theme),
        divider(theme=theme),
        paragraph(
            f"Questions about payouts? Visit our "
            f"{link(escape(data.portal_link('public/help')), 'Help Center', theme)} or reply to this email.",
            theme,
        ),
    )

    return build_message(
        "stripe_connect_onboarded",
        "Your payout account is ready",
        content,
        source,
        preheader="Your Stripe Connect account is verified and payouts are enabled",
    )


def stripe_connect_disabled_email(
    data: StripeConnectDisabledData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    name = escape(display(data.recruiter_name, "there"))

    content = compose(
        heading(1, "Payouts Paused", theme),
        paragraph(f"Hi <strong>{name}</strong>,", theme),
        alert(
            "error",
            "Stripe has disabled payouts on your connected account. Placement fees "
            "will be held until the account is back in good standing.",
            title="Action required",
            theme=theme,
        ),
        info_card(
            "Payout Account",
            [
                ("Account", escape(data.account_id) if data.account_id else None),
                ("Status", badge("Disabled", "error", theme)),
                ("Reason", escape(data.reason) if data.reason else None),
            ],
            theme,
        ),
        paragraph(
            "To resume payouts, review your account in Stripe and resolve any "
            "outstanding verification requirements.",
            theme,
        ),
        button(escape(data.billing_url), "Update Payout Account →", "danger", theme),
        divider(theme=theme),
        paragraph(
            f"Need help? Visit our "
            f"{link(escape(data.portal_link('public/help')), 'Help Center', theme)} or reply to this email.",
            theme,
        ),
    )

    return build_message(
        "stripe_connect_disabled",
        "Action required: your payout account needs attention",
        content,
        source,
        preheader="Payouts are paused until your Stripe account is updated",
    )


def company_billing_profile_completed_email(
    data: CompanyBillingProfileCompletedData, source: Any = None
) -> RenderedMessage:
    source = audience(source, AudienceSource.PORTAL)
    theme = resolve_theme(source)
    company = escape(display(data.company_name, "your company"))
    terms = None
    if data.billing_terms:
        terms = escape(_BILLING_TERMS_LABELS.get(data.billing_terms, data.billing_terms))

    content = compose(
        heading(1, "Billing Profile Complete", theme),
        paragraph(f"Hi <strong>{escape(display(data.contact_name, 'there'))}</strong>,", theme),
        paragraph(
            f"The billing profile for <strong>{company}</strong> is set up. Placement "
            "invoices will be issued automatically when a hire is confirmed.",
            theme,
        ),
        info_card(
            "Billing Details",
            [
                ("Company", company),
                ("Billing email", escape(data.billing_email) if data.billing_email else None),
                ("Payment terms", terms),
            ],
            theme,
        ),
        button(escape(data.billing_url), "Review Billing Profile →", "primary", theme),
        divider(theme=theme),
        paragraph(
            "You can update billing contacts and payment methods at any time from your company settings.",
            theme,
            muted=True,
        ),
    )

    return build_message(
        "company_billing_profile_completed",
        f"Billing profile completed for {display(data.company_name, 'your company')}",
        content,
        source,
        preheader=f"{display(data.company_name, 'Your company')} is ready to receive placement invoices",
    )
