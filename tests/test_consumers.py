"""Unit tests for the billing, health, company invitation and candidate consumers.

Tests each consumer for:
- Recipient resolution through the contact lookup
- One notification log per recipient with the event type recorded
- Malformed payloads skipped without sending
- Fan-out policy (propagate vs. collect failures)
"""

from unittest.mock import Mock

import pytest

from notification_service.config.models import AlertRecipients
from notification_service.consumers import (
    BillingEventConsumer,
    CandidatesEventConsumer,
    CompanyInvitationsConsumer,
    HealthEventConsumer,
)
from notification_service.contacts import ContactLookupError, ContactNotFoundError
from notification_service.delivery import (
    BillingDeliveryService,
    CandidateDeliveryService,
    CompanyInvitationDeliveryService,
    DeliveryService,
    HealthDeliveryService,
)
from notification_service.domain.models import NotificationPriority, NotificationStatus
from notification_service.providers.exceptions import TransportError
from tests.helpers import RecordingProvider, make_event

SENDER = "Splits Network <notifications@splits.network>"


@pytest.fixture
def billing(delivery, contacts, links):
    return BillingEventConsumer(BillingDeliveryService(delivery), contacts, links)


@pytest.fixture
def invitations(delivery, contacts, links):
    return CompanyInvitationsConsumer(CompanyInvitationDeliveryService(delivery), contacts, links)


@pytest.fixture
def candidates(delivery, contacts, links):
    return CandidatesEventConsumer(CandidateDeliveryService(delivery), contacts, links)


class TestBillingEventConsumer:
    """Test suite for billing events."""

    def test_stripe_connect_onboarded_sends_to_recruiter(self, billing, repository, provider):
        """Test the recruiter gets one message and one sent log."""
        event = make_event("recruiter.stripe_connect_onboarded", recruiter_id="r1", account_id="a1")

        report = billing.handle_stripe_connect_onboarded(event)

        assert report.sent_recipients == ["jane@x.com"]
        assert provider.recipients == ["jane@x.com"]
        assert provider.sent[0].subject == "Your payout account is ready"

        [log] = repository.logs.values()
        assert log.status is NotificationStatus.SENT
        assert log.event_type == "recruiter.stripe_connect_onboarded"
        assert log.template == "stripe_connect_onboarded"
        assert log.recipient_user_id == "u-r1"
        assert log.payload == {"recruiter_id": "r1", "account_id": "a1"}

    def test_onboarded_body_links_to_billing(self, billing, provider):
        billing.handle_stripe_connect_onboarded(
            make_event("recruiter.stripe_connect_onboarded", recruiter_id="r1", account_id="a1")
        )

        html = provider.sent[0].html
        assert "https://portal.test/portal/billing" in html
        assert "Jane Smith" in html
        assert "a1" in html

    def test_stripe_connect_disabled(self, billing, provider):
        billing.handle_stripe_connect_disabled(
            make_event(
                "recruiter.stripe_connect_disabled",
                recruiter_id="r1",
                reason="requirements.past_due",
            )
        )

        assert provider.sent[0].subject == "Action required: your payout account needs attention"
        assert "requirements.past_due" in provider.sent[0].html

    def test_company_billing_profile_completed(self, billing, provider, repository):
        billing.handle_company_billing_profile_completed(
            make_event(
                "company.billing_profile_completed",
                company_id="co1",
                company_name="Acme Corp",
                billing_terms="net_30",
            )
        )

        assert provider.recipients == ["hiring@acme.com"]
        assert provider.sent[0].subject == "Billing profile completed for Acme Corp"
        assert "Net 30" in provider.sent[0].html
        assert "https://portal.test/portal/company/billing" in provider.sent[0].html

    def test_malformed_payload_is_skipped(self, billing, provider, repository):
        """Test a payload without recruiter_id sends nothing and writes no log."""
        report = billing.handle_stripe_connect_onboarded(
            make_event("recruiter.stripe_connect_onboarded", account_id="a1")
        )

        assert report.skipped_reason == "malformed payload"
        assert provider.sent == []
        assert repository.logs == {}

    def test_unknown_recruiter_propagates(self, billing, repository):
        """Test an unresolvable recipient fails the event before any log is written."""
        with pytest.raises(ContactNotFoundError):
            billing.handle_stripe_connect_onboarded(
                make_event("recruiter.stripe_connect_onboarded", recruiter_id="missing")
            )

        assert repository.logs == {}

    def test_lookup_error_propagates(self, delivery, links):
        lookup = Mock()
        lookup.require_contact.side_effect = ContactLookupError("HTTP 503", "recruiter", "r1", 503)
        consumer = BillingEventConsumer(BillingDeliveryService(delivery), lookup, links)

        with pytest.raises(ContactLookupError):
            consumer.handle_stripe_connect_onboarded(
                make_event("recruiter.stripe_connect_onboarded", recruiter_id="r1")
            )

    def test_provider_failure_propagates_after_failed_log(self, contacts, links, repository):
        provider = RecordingProvider(fail_for={"jane@x.com": TransportError("rate limited")})
        delivery = DeliveryService(repository, provider, SENDER)
        consumer = BillingEventConsumer(BillingDeliveryService(delivery), contacts, links)

        with pytest.raises(TransportError):
            consumer.handle_stripe_connect_onboarded(
                make_event("recruiter.stripe_connect_onboarded", recruiter_id="r1")
            )

        [log] = repository.logs.values()
        assert log.status is NotificationStatus.FAILED
        assert log.error_message == "rate limited"

    def test_handlers_cover_billing_events(self, billing):
        assert set(billing.handlers()) == {
            "recruiter.stripe_connect_onboarded",
            "recruiter.stripe_connect_disabled",
            "company.billing_profile_completed",
        }


class TestHealthEventConsumer:
    """Test suite for service health alerts."""

    def test_one_failing_recipient_does_not_stop_the_other(self, repository, links, alert_recipients):
        """Test the first address failing still delivers to the second, without raising."""
        provider = RecordingProvider(fail_for={"ops1@example.com": TransportError("mailbox full")})
        delivery = DeliveryService(repository, provider, SENDER)
        consumer = HealthEventConsumer(HealthDeliveryService(delivery), alert_recipients, links)

        report = consumer.handle_service_unhealthy(
            make_event("service.unhealthy", service_name="ats-service", error="connection refused")
        )

        assert report.sent_recipients == ["ops2@example.com"]
        assert [failure.label for failure in report.failed] == ["alert:ops1@example.com"]
        assert provider.recipients == ["ops2@example.com"]

        by_recipient = {log.recipient_email: log for log in repository.logs.values()}
        assert by_recipient["ops1@example.com"].status is NotificationStatus.FAILED
        assert by_recipient["ops1@example.com"].error_message == "mailbox full"
        assert by_recipient["ops2@example.com"].status is NotificationStatus.SENT

    def test_unhealthy_alert_is_high_priority_and_corporate(self, delivery, provider, repository, links):
        recipients = AlertRecipients(addresses=("ops@example.com",), origin="environment")
        consumer = HealthEventConsumer(HealthDeliveryService(delivery), recipients, links)

        consumer.handle_service_unhealthy(
            make_event("service.unhealthy", service_name="ats-service", details={"db": "timeout"})
        )

        [log] = repository.logs.values()
        assert log.priority is NotificationPriority.HIGH
        assert log.template == "service_unhealthy"
        assert provider.sent[0].subject == "[ALERT] ats-service is unhealthy"
        assert "Employment Networks" in provider.sent[0].html

    def test_recovered_alert(self, delivery, provider, repository, links, alert_recipients):
        consumer = HealthEventConsumer(HealthDeliveryService(delivery), alert_recipients, links)

        report = consumer.handle_service_recovered(
            make_event("service.recovered", service_name="ats-service", downtime_seconds=125)
        )

        assert sorted(report.sent_recipients) == ["ops1@example.com", "ops2@example.com"]
        assert provider.sent[0].subject == "[RESOLVED] ats-service has recovered"
        assert "2m 5s" in provider.sent[0].html
        assert all(log.priority is NotificationPriority.NORMAL for log in repository.logs.values())

    def test_no_recipients_skips_with_warning(self, delivery, provider, links, caplog):
        """Test an empty alert list sends nothing and logs a warning."""
        consumer = HealthEventConsumer(HealthDeliveryService(delivery), AlertRecipients(), links)

        with caplog.at_level("WARNING"):
            report = consumer.handle_service_unhealthy(
                make_event("service.unhealthy", service_name="ats-service")
            )

        assert report.skipped_reason == "no alert recipients configured"
        assert provider.sent == []
        assert any(
            getattr(record, "event", None) == "consumer.health.no_recipients"
            for record in caplog.records
        )

    def test_malformed_health_event_is_skipped(self, delivery, provider, links, alert_recipients):
        consumer = HealthEventConsumer(HealthDeliveryService(delivery), alert_recipients, links)

        report = consumer.handle_service_unhealthy(make_event("service.unhealthy", status="down"))

        assert report.skipped_reason == "malformed payload"
        assert provider.sent == []


class TestCompanyInvitationsConsumer:
    """Test suite for company platform invitations."""

    def test_invitation_goes_to_invited_address(self, invitations, provider, repository):
        """Test the invitee is taken from the payload, not the contact lookup."""
        report = invitations.handle_company_invitation_created(
            make_event(
                "company_invitation.created",
                invitation_id="inv1",
                recruiter_id="r1",
                invited_email="founder@startup.io",
                invite_code="ABC123",
                company_name="Startup",
                personal_message="Would love to work with you",
            )
        )

        assert report.sent_recipients == ["founder@startup.io"]
        message = provider.sent[0]
        assert message.subject == "Jane Smith invited you to join Splits Network"
        assert "https://portal.test/join/ABC123" in message.html
        assert "Would love to work with you" in message.html

        [log] = repository.logs.values()
        assert log.recipient_user_id is None
        assert log.template == "company_platform_invitation"

    def test_invitation_without_code_links_to_invitation(self, invitations, provider):
        invitations.handle_company_invitation_created(
            make_event(
                "company_invitation.created",
                invitation_id="inv1",
                recruiter_id="r1",
                invited_email="founder@startup.io",
            )
        )

        assert "https://portal.test/invitation/company/inv1" in provider.sent[0].html

    def test_invitation_accepted_notifies_recruiter(self, invitations, provider):
        invitations.handle_company_invitation_accepted(
            make_event(
                "company_invitation.accepted",
                invitation_id="inv1",
                recruiter_id="r1",
                company_id="co1",
            )
        )

        assert provider.recipients == ["jane@x.com"]
        assert provider.sent[0].subject == "Acme Corp accepted your invitation"
        assert "https://portal.test/portal/companies/co1" in provider.sent[0].html


class TestCandidatesEventConsumer:
    """Test suite for candidate invitation, consent and ownership events."""

    def test_invitation_goes_to_candidate_site(self, candidates, provider):
        candidates.handle_candidate_invited(
            make_event(
                "candidate.invited",
                candidate_id="c1",
                recruiter_id="r1",
                invitation_token="tok-1",
                expires_at="2026-03-04T00:00:00Z",
            )
        )

        message = provider.sent[0]
        assert provider.recipients == ["casey@example.com"]
        assert message.subject == "Jane Smith wants to represent you"
        assert "https://candidates.test/invitation/tok-1" in message.html
        assert "March 4, 2026" in message.html
        assert "Applicant Network" in message.html

    def test_consent_given_notifies_recruiter(self, candidates, provider, repository):
        candidates.handle_consent_given(
            make_event("candidate.consent_given", candidate_id="c1", recruiter_id="r1")
        )

        assert provider.recipients == ["jane@x.com"]
        assert provider.sent[0].subject == "Casey Lee accepted your invitation"
        [log] = repository.logs.values()
        assert log.template == "candidate_consent_given"

    def test_consent_declined_includes_reason(self, candidates, provider):
        candidates.handle_consent_declined(
            make_event(
                "candidate.consent_declined",
                candidate_id="c1",
                recruiter_id="r1",
                reason="Already working with another agency",
            )
        )

        assert provider.sent[0].subject == "Casey Lee declined your invitation"
        assert "Already working with another agency" in provider.sent[0].html

    def test_candidate_sourced(self, candidates, provider):
        candidates.handle_candidate_sourced(
            make_event("candidate.sourced", candidate_id="c1", recruiter_id="r1", protection_days=90)
        )

        assert provider.sent[0].subject == "You sourced Casey Lee"
        assert "https://portal.test/portal/candidates/c1" in provider.sent[0].html

    def test_ownership_conflict_notifies_both_recruiters(self, candidates, provider, repository):
        """Test the sourcer and the attempting recruiter get different messages."""
        report = candidates.handle_ownership_conflict(
            make_event(
                "ownership.conflict_detected",
                candidate_id="c1",
                original_sourcer_id="r1",
                attempting_recruiter_id="r2",
            )
        )

        assert report.sent_recipients == ["jane@x.com", "bob@y.com"]
        templates = {log.recipient_email: log.template for log in repository.logs.values()}
        assert templates == {
            "jane@x.com": "ownership_conflict",
            "bob@y.com": "ownership_conflict_rejection",
        }

    def test_ownership_conflict_delivers_despite_one_failure(self, contacts, links, repository):
        provider = RecordingProvider(fail_for={"bob@y.com": TransportError("bounced")})
        delivery = DeliveryService(repository, provider, SENDER)
        consumer = CandidatesEventConsumer(CandidateDeliveryService(delivery), contacts, links)

        report = consumer.handle_ownership_conflict(
            make_event(
                "ownership.conflict_detected",
                candidate_id="c1",
                original_sourcer_id="r1",
                attempting_recruiter_id="r2",
            )
        )

        assert report.sent_recipients == ["jane@x.com"]
        assert report.failed[0].label == "recruiter:r2"
        assert report.failed[0].error_type == "TransportError"

    def test_ownership_conflict_with_unknown_candidate_fails_each_recipient(self, candidates, provider):
        report = candidates.handle_ownership_conflict(
            make_event(
                "ownership.conflict_detected",
                candidate_id="ghost",
                original_sourcer_id="r1",
                attempting_recruiter_id="r2",
            )
        )

        assert provider.sent == []
        assert [failure.error_type for failure in report.failed] == [
            "ContactNotFoundError",
            "ContactNotFoundError",
        ]
