"""Unit tests for the delivery service.

Tests DeliveryService for:
- Pending log written before the provider is called
- Terminal status recorded exactly once (sent or failed)
- Provider errors surfaced as TransportError with the error text logged
- Pending-write failures aborting the send
- Terminal-write failures not changing the outcome
"""

from unittest.mock import MagicMock, Mock

import pytest
import requests

from notification_service.delivery import DeliveryMeta, DeliveryService, describe_error
from notification_service.domain.models import (
    AudienceSource,
    NotificationPriority,
    NotificationStatus,
    RenderedMessage,
)
from notification_service.persistence.exceptions import PersistenceError
from notification_service.providers import ResendProvider
from notification_service.providers.exceptions import ProviderHTTPError, TransportError
from tests.helpers import InMemoryNotificationRepository, RecordingProvider

SENDER = "Splits Network <notifications@splits.network>"


def _meta(**overrides):
    fields = dict(
        event_type="recruiter.stripe_connect_onboarded",
        template="stripe_connect_onboarded",
        user_id="u-1",
        payload={"recruiter_id": "r1"},
    )
    fields.update(overrides)
    return DeliveryMeta(**fields)


class TestSuccessfulSend:
    """Test suite for the happy path."""

    def test_send_records_pending_then_sent(self, delivery, repository, provider):
        """Test the log is created before it is moved to sent."""
        result = delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        assert result.is_success()
        assert result.message_id == "msg_1"
        assert result.log_update_failed is False
        assert repository.calls == [
            ("create", result.log_id),
            ("update", result.log_id, NotificationStatus.SENT),
        ]

        log = repository.get(result.log_id)
        assert log.status is NotificationStatus.SENT
        assert log.resend_message_id == "msg_1"
        assert log.sent_at is not None
        assert log.error_message is None

    def test_send_copies_metadata_onto_log(self, delivery, repository):
        """Test event type, template, user id and payload are stored."""
        result = delivery.send(
            "jane@x.com",
            "Hello",
            "<p>Hi</p>",
            _meta(priority=NotificationPriority.HIGH),
        )

        log = repository.get(result.log_id)
        assert log.event_type == "recruiter.stripe_connect_onboarded"
        assert log.template == "stripe_connect_onboarded"
        assert log.recipient_email == "jane@x.com"
        assert log.recipient_user_id == "u-1"
        assert log.subject == "Hello"
        assert log.payload == {"recruiter_id": "r1"}
        assert log.priority is NotificationPriority.HIGH

    def test_send_hands_message_to_provider(self, delivery, provider):
        """Test the provider receives the sender, recipient, subject and body."""
        delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        assert len(provider.sent) == 1
        email = provider.sent[0]
        assert email.from_address == SENDER
        assert email.to == "jane@x.com"
        assert email.subject == "Hello"
        assert email.html == "<p>Hi</p>"

    def test_send_rendered_takes_template_and_priority_from_message(self, delivery, repository):
        """Test send_rendered records the message's template tag and priority."""
        message = RenderedMessage(
            subject="[ALERT] api is unhealthy",
            html="<html></html>",
            template="service_unhealthy",
            source=AudienceSource.CORPORATE,
            priority=NotificationPriority.HIGH,
        )

        result = delivery.send_rendered("ops@example.com", message, event_type="service.unhealthy")

        log = repository.get(result.log_id)
        assert log.template == "service_unhealthy"
        assert log.priority is NotificationPriority.HIGH
        assert log.subject == "[ALERT] api is unhealthy"
        assert log.payload == {}

    def test_send_rendered_passes_plain_text_to_provider(self, delivery, provider):
        message = RenderedMessage(
            subject="Hello",
            html="<p>Hi</p>",
            text="Hi",
            template="stripe_connect_onboarded",
        )

        delivery.send_rendered("jane@x.com", message, event_type="recruiter.stripe_connect_onboarded")

        assert provider.sent[0].text == "Hi"
        assert provider.sent[0].html == "<p>Hi</p>"


class TestProviderFailure:
    """Test suite for provider failures."""

    def test_transport_error_marks_log_failed_and_propagates(self, repository):
        """Test a TransportError is recorded on the log and re-raised unchanged."""
        error = ProviderHTTPError("Resend API error 422: invalid to", status_code=422, provider="resend")
        provider = RecordingProvider(fail_for={"jane@x.com": error})
        delivery = DeliveryService(repository, provider, SENDER)

        with pytest.raises(ProviderHTTPError) as exc_info:
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        assert exc_info.value is error
        [log] = repository.logs.values()
        assert log.status is NotificationStatus.FAILED
        assert log.error_message == "Resend API error 422: invalid to"
        assert log.sent_at is None

    def test_unexpected_provider_exception_is_wrapped(self, repository):
        """Test a non-transport exception surfaces as TransportError with its cause."""
        provider = RecordingProvider(fail_for={"jane@x.com": ValueError("bad header")})
        delivery = DeliveryService(repository, provider, SENDER)

        with pytest.raises(TransportError) as exc_info:
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        assert str(exc_info.value) == "bad header"
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert exc_info.value.provider == "recording"
        [log] = repository.logs.values()
        assert log.error_message == "bad header"

    def test_empty_error_message_falls_back_to_class_name(self, repository):
        """Test an exception without text records its class name."""
        provider = RecordingProvider(fail_for={"jane@x.com": TransportError("")})
        delivery = DeliveryService(repository, provider, SENDER)

        with pytest.raises(TransportError):
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        [log] = repository.logs.values()
        assert log.error_message == "TransportError"

    def test_unacknowledged_resend_response_marks_log_failed(self, repository):
        """Test a 2xx from Resend without a message id is recorded as a failure."""
        response = Mock(spec=requests.Response)
        response.status_code = 200
        response.json.side_effect = ValueError("no json")
        session = MagicMock()
        session.headers = {}
        session.post.return_value = response
        delivery = DeliveryService(repository, ResendProvider(api_key="re_key", session=session), SENDER)

        with pytest.raises(TransportError, match="no message id"):
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        [log] = repository.logs.values()
        assert log.status is NotificationStatus.FAILED
        assert log.error_message == "Resend response had no message id"
        assert log.resend_message_id is None

    def test_failed_log_is_updated_exactly_once(self, repository):
        """Test only one terminal transition is written on failure."""
        provider = RecordingProvider(fail_for={"jane@x.com": TransportError("down")})
        delivery = DeliveryService(repository, provider, SENDER)

        with pytest.raises(TransportError):
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        updates = [call for call in repository.calls if call[0] == "update"]
        assert len(updates) == 1
        assert updates[0][2] is NotificationStatus.FAILED


class TestLogWriteFailures:
    """Test suite for notification log storage failures."""

    def test_pending_write_failure_aborts_before_provider(self, provider):
        """Test nothing is sent when the pending log can't be written."""
        repository = InMemoryNotificationRepository(fail_create=True)
        delivery = DeliveryService(repository, provider, SENDER)

        with pytest.raises(PersistenceError):
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        assert provider.sent == []

    def test_terminal_write_failure_after_send_is_swallowed(self, provider):
        """Test a sent message stays a success when the sent status can't be stored."""
        repository = InMemoryNotificationRepository(fail_update=True)
        delivery = DeliveryService(repository, provider, SENDER)

        result = delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())

        assert result.is_success()
        assert result.log_update_failed is True
        assert provider.recipients == ["jane@x.com"]
        [log] = repository.logs.values()
        assert log.status is NotificationStatus.PENDING

    def test_terminal_write_failure_after_provider_error_keeps_provider_error(self):
        """Test the provider error, not the storage error, reaches the caller."""
        repository = InMemoryNotificationRepository(fail_update=True)
        provider = RecordingProvider(fail_for={"jane@x.com": TransportError("smtp down")})
        delivery = DeliveryService(repository, provider, SENDER)

        with pytest.raises(TransportError, match="smtp down"):
            delivery.send("jane@x.com", "Hello", "<p>Hi</p>", _meta())


class TestDescribeError:
    def test_uses_message(self):
        assert describe_error(RuntimeError("  timed out ")) == "timed out"

    def test_falls_back_to_class_name(self):
        assert describe_error(KeyError()) == "KeyError"
