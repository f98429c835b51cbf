"""Unit tests for themes, components, the document shell and message sets.

Tests rendering for:
- Theme resolution per audience source, with the portal fallback
- Component fallbacks for unknown variants and empty content
- Document shell branding
- Deterministic output and escaping of event data
- Subject lines, template tags and priorities of each message kind
"""

from unittest.mock import Mock, patch

import pytest
from jinja2 import UndefinedError

from notification_service.domain.models import AudienceSource, NotificationPriority
from notification_service.templates import (
    InfoItem,
    ListItem,
    TemplateRenderError,
    alert,
    badge,
    bullet_list,
    button,
    compose,
    divider,
    heading,
    info_card,
    paragraph,
    render_document,
    render_text_document,
    resolve_theme,
)
from notification_service.templates import applications, billing, candidates, company_invitations, health
from notification_service.templates.applications import fit_score_label, recommendation_label, stage_label
from notification_service.templates.components import Fragment
from notification_service.templates.theme import CANDIDATE_THEME, CORPORATE_THEME, PORTAL_THEME


class TestThemes:
    """Test suite for resolve_theme."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            (AudienceSource.PORTAL, PORTAL_THEME),
            ("candidate", CANDIDATE_THEME),
            (AudienceSource.CORPORATE, CORPORATE_THEME),
            (None, PORTAL_THEME),
            ("newsletter", PORTAL_THEME),
            (42, PORTAL_THEME),
        ],
    )
    def test_resolve_theme(self, source, expected):
        assert resolve_theme(source) is expected

    def test_themes_have_distinct_brands(self):
        brands = {PORTAL_THEME.brand_name, CANDIDATE_THEME.brand_name, CORPORATE_THEME.brand_name}
        assert len(brands) == 3


class TestComponents:
    """Test suite for email components."""

    def test_heading_invalid_level_renders_as_h2(self):
        assert heading(7, "Title").html.startswith("<h2")

    def test_heading_uses_theme_primary_for_level_one(self):
        html = heading(1, "Title", CANDIDATE_THEME).html
        assert CANDIDATE_THEME.colors.primary in html

    def test_button_unknown_variant_falls_back_to_primary(self):
        assert button("https://x.test", "Go", "sparkly").html == button("https://x.test", "Go").html

    def test_alert_unknown_type_falls_back_to_info(self):
        assert alert("fatal", "msg").html == alert("info", "msg").html

    def test_alert_title_is_optional(self):
        assert "Heads up" in alert("warning", "msg", title="Heads up").html
        assert "font-weight: 700" not in alert("warning", "msg").html

    def test_info_card_drops_empty_rows(self):
        """Test None items and None or empty values produce no row."""
        html = info_card(
            "Details",
            [
                ("Shown", "yes"),
                ("Missing", None),
                ("Blank", ""),
                None,
                InfoItem("Highlighted", "42", highlight=True),
            ],
        ).html

        assert html.count("<tr>") == 1 + 2
        assert "Missing" not in html
        assert "Blank" not in html
        assert "Highlighted" in html

    def test_button_accent_variant_uses_theme_accent(self):
        html = button("https://x.test", "Go", "accent", PORTAL_THEME).html

        assert "background-color: #f59e0b" in html
        assert html != button("https://x.test", "Go", "primary", PORTAL_THEME).html

    def test_button_accent_follows_brand(self):
        assert CANDIDATE_THEME.colors.accent in button("https://x.test", "Go", "accent", CANDIDATE_THEME).html

    def test_bullet_list_bold_items(self):
        html = bullet_list([ListItem("Required", bold=True), ListItem("Optional")]).html

        assert "<strong>Required</strong>" in html
        assert "<strong>Optional</strong>" not in html

    def test_bullet_list_accepts_tuples_and_strings(self):
        html = bullet_list([("Bold", True), ("Plain", False), "Bare"]).html

        assert "<strong>Bold</strong>" in html
        assert "<strong>Plain</strong>" not in html
        assert html.count("<li") == 3

    def test_bullet_list_empty_renders_nothing(self):
        assert bullet_list([]) == Fragment()
        assert not bullet_list(["", None])

    def test_divider_with_text(self):
        assert ">or</td>" in divider("or").html
        assert divider().html.startswith("<hr")

    def test_badge_variants(self):
        assert badge("Live", "success").html != badge("Live", "error").html
        assert badge("Live", "nope").html == badge("Live", "info").html

    def test_compose_drops_empty_and_flattens(self):
        combined = compose(paragraph("one"), None, [paragraph("two"), None], Fragment(""), "")

        assert combined.html.count("<p") == 2
        assert combined.html.index("one") < combined.html.index("two")


class TestPlainText:
    """Test suite for plain-text renditions."""

    def test_components_have_text_renditions(self):
        assert heading(1, "Title").plain_text == "Title\n====="
        assert button("https://x.test/a", "Open").plain_text == "Open: https://x.test/a"
        assert badge("Live").plain_text == "[Live]"
        assert bullet_list(["one", ("two", True)]).plain_text == "- one\n- two"
        assert alert("warning", "Check it", title="Heads up").plain_text == "** Heads up **\nCheck it"

    def test_info_card_text_lists_rows(self):
        text = info_card("Details", [("Status", badge("Active")), ("Missing", None)]).plain_text

        assert text == "DETAILS\nStatus: [Active]"

    def test_markup_is_stripped_and_entities_decoded(self):
        assert paragraph("Hi <strong>Jane &amp; Co</strong>,").plain_text == "Hi Jane & Co,"

    def test_compose_separates_blocks(self):
        assert compose(paragraph("one"), paragraph("two")).plain_text == "one\n\ntwo"

    def test_text_document_carries_brand_and_footer(self):
        text = render_text_document(compose(paragraph("Hello")), source="candidate")

        assert text.startswith("Applicant Network\n")
        assert "Hello" in text
        assert "<" not in text
        for footer_link in CANDIDATE_THEME.footer_links:
            assert footer_link.url in text

    def test_message_carries_text_rendition(self):
        data = billing.StripeConnectOnboardedData(
            recruiter_name="<b>Jane</b>", billing_url="https://portal.test/portal/billing"
        )

        message = billing.stripe_connect_onboarded_email(data)

        assert "View Billing Settings →: https://portal.test/portal/billing" in message.text
        assert "Hi <b>Jane</b>," in message.text
        assert "<strong>" not in message.text


class TestDocumentShell:
    """Test suite for render_document."""

    def test_document_carries_brand_and_content(self):
        html = render_document(compose(paragraph("Hello")), source="candidate", preheader="Preview")

        assert html.startswith("<!DOCTYPE html>")
        assert "Applicant Network" in html
        assert CANDIDATE_THEME.logo_url in html
        assert "Hello" in html
        assert "Preview" in html

    def test_preheader_is_escaped(self):
        html = render_document(Fragment("<p>x</p>"), preheader="<script>")

        assert "&lt;script&gt;" in html
        assert "<p>x</p>" in html

    def test_unknown_source_uses_portal_brand(self):
        assert "Splits Network" in render_document(Fragment("x"), source="unknown")

    def test_footer_links_rendered(self):
        html = render_document(Fragment("x"), source=AudienceSource.CORPORATE)

        for footer_link in CORPORATE_THEME.footer_links:
            assert footer_link.url in html

    def test_shell_failure_raises_template_render_error(self):
        broken = Mock()
        broken.render.side_effect = UndefinedError("'theme' is undefined")

        with patch("notification_service.templates.document._base_template", return_value=broken):
            with pytest.raises(TemplateRenderError, match="theme"):
                render_document(Fragment("x"))


class TestMessageSets:
    """Test suite for kind-specific message functions."""

    def test_rendering_is_deterministic(self):
        data = billing.StripeConnectOnboardedData(
            recruiter_name="Jane", billing_url="https://portal.test/portal/billing", account_id="a1"
        )

        first = billing.stripe_connect_onboarded_email(data)
        second = billing.stripe_connect_onboarded_email(data)

        assert first == second

    def test_event_data_is_escaped(self):
        data = billing.StripeConnectOnboardedData(
            recruiter_name="<b>Jane</b>", billing_url="https://portal.test/portal/billing"
        )

        html = billing.stripe_connect_onboarded_email(data).html

        assert "&lt;b&gt;Jane&lt;/b&gt;" in html
        assert "<b>Jane</b>" not in html

    def test_health_alert_is_high_priority_and_always_corporate(self):
        data = health.ServiceUnhealthyData(
            service_name="ats-service",
            error="connection refused",
            checked_at="2026-03-04T09:15:00Z",
            consecutive_failures=3,
        )

        message = health.service_unhealthy_email(data, source=AudienceSource.CANDIDATE)

        assert message.subject == "[ALERT] ats-service is unhealthy"
        assert message.priority is NotificationPriority.HIGH
        assert message.source is AudienceSource.CORPORATE
        assert message.template == "service_unhealthy"
        assert "2026-03-04 09:15 UTC" in message.html
        assert "connection refused" in message.html

    def test_recovered_alert_is_normal_priority(self):
        message = health.service_recovered_email(health.ServiceRecoveredData(service_name="api"))

        assert message.subject == "[RESOLVED] api has recovered"
        assert message.priority is NotificationPriority.NORMAL
        assert message.source is AudienceSource.CORPORATE

    def test_source_override_rebrands_message(self):
        data = applications.ApplicationStageChangedData(
            candidate_name="Casey",
            job_title="Engineer",
            company_name="Acme",
            application_url="https://x.test/a",
            new_stage="offer",
        )

        portal = applications.application_stage_changed_email(data)
        candidate = applications.application_stage_changed_email(data, AudienceSource.CANDIDATE)

        assert portal.source is AudienceSource.PORTAL
        assert candidate.source is AudienceSource.CANDIDATE
        assert "Applicant Network" in candidate.html

    def test_candidate_messages_default_to_candidate_brand(self):
        data = candidates.CandidateInvitationData(
            candidate_name="Casey", recruiter_name="Jane", invitation_url="https://x.test/i"
        )

        message = candidates.candidate_invitation_email(data)

        assert message.source is AudienceSource.CANDIDATE
        assert message.template == "candidate_invitation"

    def test_subject_is_single_line(self):
        data = company_invitations.CompanyInvitationAcceptedData(
            recruiter_name="Jane", company_name="Acme\nCorp", company_url="https://x.test/c"
        )

        message = company_invitations.company_invitation_accepted_email(data)

        assert message.subject == "Acme Corp accepted your invitation"

    def test_unparseable_dates_are_shown_as_given(self):
        data = candidates.CandidateSourcedData(
            recruiter_name="Jane",
            candidate_name="Casey",
            candidate_url="https://x.test/c",
            protection_expires_at="in one year",
        )

        assert "in one year" in candidates.candidate_sourced_email(data).html

    @pytest.mark.parametrize(
        "stage,label",
        [("phone_screen", "Phone Screen"), ("final-round", "Final Round"), (None, "Unknown")],
    )
    def test_stage_label(self, stage, label):
        assert stage_label(stage) == label

    @pytest.mark.parametrize(
        "code,for_recruiter,label",
        [
            ("strong_fit", False, "Strong Fit"),
            ("weak_fit", False, "Needs Development"),
            ("weak_fit", True, "Weak Fit"),
            ("unusual_fit", True, "UNUSUAL FIT"),
        ],
    )
    def test_recommendation_label(self, code, for_recruiter, label):
        assert recommendation_label(code, for_recruiter=for_recruiter) == label

    def test_fit_score_label_drops_trailing_zero(self):
        assert fit_score_label(87.0) == "87/100"
        assert fit_score_label(62.5) == "62.5/100"

    def test_prescreen_confirmation_text_lists_steps(self):
        data = applications.PreScreenRequestConfirmationData(
            candidate_name="Casey Lee",
            job_title="Staff Engineer",
            company_name="Acme Corp",
            application_url="https://portal.test/portal/applications/app-1",
            auto_assign=True,
        )

        message = applications.prescreen_request_confirmation_email(data)

        assert message.template == "prescreen_request_confirmation"
        assert "- Recruiter reviews the candidate's profile" in message.text
        assert "Auto-Assignment" in message.html
