"""Tests for logging configuration and formatters."""

import io
import json
import logging
import sys

import pytest

from notification_service.logging import ComponentLoggerAdapter, get_logger
from notification_service.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from notification_service.logging.context import log_context


@pytest.fixture
def logger():
    """Create a test logger with handler for capturing output."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Drop the handler configure_logging installs and restore the root level."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level

    yield root

    root.handlers[:] = [handler for handler in root.handlers if handler in handlers]
    root.setLevel(level)
    for name in ("urllib3", "requests", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def _record(logger, message="Test message", extra=None):
    return logger.makeRecord("test", logging.INFO, "test.py", 1, message, (), None, extra=extra)


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    log_obj = json.loads(JSONFormatter().format(_record(logger)))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_with_extra_fields(logger):
    """Test JSONFormatter includes extra fields with their JSON types."""
    record = _record(logger, extra={"event": "delivery.send.success", "attempts": 1, "retryable": False})

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "delivery.send.success"
    assert log_obj["attempts"] == 1
    assert log_obj["retryable"] is False


def test_json_formatter_stringifies_unknown_types(logger):
    record = _record(logger, extra={"path": object()})

    log_obj = json.loads(JSONFormatter().format(record))

    assert isinstance(log_obj["path"], str)


def test_json_formatter_includes_exception(logger):
    try:
        raise ValueError("boom")
    except ValueError:
        record = logger.makeRecord(
            "test", logging.ERROR, "test.py", 1, "Failed", (), sys.exc_info()
        )

    log_obj = json.loads(JSONFormatter().format(record))

    assert "ValueError: boom" in log_obj["exc_info"]


def test_key_value_formatter_sorts_and_quotes(logger):
    """Test extra fields are sorted and values with spaces are quoted."""
    formatter = KeyValueFormatter("%(levelname)s %(message)s")
    record = _record(
        logger,
        extra={"zeta": "last", "alpha": "two words", "flag": True, "missing": None, "service": "x"},
    )

    output = formatter.format(record)

    assert output == 'INFO Test message alpha="two words" flag=true missing=null zeta=last'


def test_contextual_filter_adds_context_and_service(logger):
    record = _record(logger, extra={"event_type": "explicit"})
    context_filter = ContextualFilter(service="notifications", environment="test")

    with log_context(event_type="service.unhealthy", log_id="log-1"):
        assert context_filter.filter(record) is True

    assert record.service == "notifications"
    assert record.environment == "test"
    assert record.log_id == "log-1"
    # explicit extra fields win over the context
    assert record.event_type == "explicit"


def test_contextual_filter_masks_recipients(logger):
    record = _record(logger, extra={"recipient": "jane@x.com", "to": "j***@x.com"})

    ContextualFilter().filter(record)

    assert record.recipient == "j***@x.com"
    assert record.to == "j***@x.com"


def test_configure_logging_json_output(restore_root_logger):
    stream = io.StringIO()

    configure_logging(level="DEBUG", format_type="json", environment="test", stream=stream)
    logging.getLogger("notification_service.test").info(
        "Notification sent", extra={"event": "delivery.send.success", "recipient": "casey@example.com"}
    )

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert lines[0]["event"] == "logging.configured"
    assert lines[-1]["message"] == "Notification sent"
    assert lines[-1]["recipient"] == "c***@example.com"
    assert lines[-1]["environment"] == "test"
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_quiets_transport_loggers(restore_root_logger):
    configure_logging(level="INFO", stream=io.StringIO())

    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_configure_logging_invalid_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="CHATTY")


def test_configure_logging_invalid_format():
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_get_logger_component_adapter():
    adapted = get_logger("notification_service.test", component="delivery")

    assert isinstance(adapted, ComponentLoggerAdapter)
    _, kwargs = adapted.process("msg", {"extra": {"event": "x", "component": "override"}})
    assert kwargs["extra"] == {"component": "override", "event": "x"}
    assert isinstance(get_logger("notification_service.test"), logging.Logger)
