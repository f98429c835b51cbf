"""Shared fixtures for notification service tests."""

import pytest

from notification_service.config.models import AlertRecipients, LinksConfig
from notification_service.delivery import DeliveryService
from notification_service.domain.models import ContactKind
from notification_service.logging.context import clear_log_context
from tests.helpers import InMemoryNotificationRepository, RecordingProvider, StaticContactLookup

SENDER = "Splits Network <notifications@splits.network>"


@pytest.fixture(autouse=True)
def clean_log_context():
    """Every test starts and ends with an empty log context."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def repository():
    return InMemoryNotificationRepository()


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def delivery(repository, provider):
    return DeliveryService(repository, provider, SENDER)


@pytest.fixture
def links():
    return LinksConfig(
        portal_url="https://portal.test", candidate_website_url="https://candidates.test"
    )


@pytest.fixture
def contacts():
    """Directory with one contact of each kind plus a second recruiter."""
    return (
        StaticContactLookup()
        .add(ContactKind.RECRUITER, "r1", "jane@x.com", "Jane Smith", user_id="u-r1")
        .add(ContactKind.RECRUITER, "r2", "bob@y.com", "Bob Jones", user_id="u-r2")
        .add(ContactKind.CANDIDATE, "c1", "casey@example.com", "Casey Lee", user_id="u-c1")
        .add(ContactKind.COMPANY, "co1", "hiring@acme.com", "Acme Corp")
    )


@pytest.fixture
def alert_recipients():
    return AlertRecipients(addresses=("ops1@example.com", "ops2@example.com"), origin="config")
