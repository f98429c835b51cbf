"""Tests for logging context propagation."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from notification_service.logging.context import (
    bind_log_context,
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(event_type="service.unhealthy", log_id="log-1")
    assert get_log_context() == {"event_type": "service.unhealthy", "log_id": "log-1"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test inner layers add fields and restore the outer layer on exit."""
    with log_context(event_type="application.created"):
        with log_context(recipient="r***@x.com", log_id="log-1"):
            assert get_log_context() == {
                "event_type": "application.created",
                "recipient": "r***@x.com",
                "log_id": "log-1",
            }
        assert get_log_context() == {"event_type": "application.created"}

    assert get_log_context() == {}


def test_inner_layer_overrides_field():
    with log_context(log_id="outer"):
        with log_context(log_id="inner"):
            assert get_log_context()["log_id"] == "inner"
        assert get_log_context()["log_id"] == "outer"


def test_context_restored_after_exception():
    with pytest.raises(RuntimeError):
        with log_context(event_type="service.unhealthy"):
            raise RuntimeError("boom")

    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(event_type="service.unhealthy"):
        get_log_context()["event_type"] = "changed"

        assert get_log_context()["event_type"] == "service.unhealthy"


def test_bind_log_context_carries_fields_to_worker_thread():
    def read_context(suffix):
        return dict(get_log_context(), suffix=suffix)

    with log_context(event_type="ownership.conflict_detected"):
        bound = bind_log_context(read_context)

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(bound, ["a", "b"]))

    assert results == [
        {"event_type": "ownership.conflict_detected", "suffix": "a"},
        {"event_type": "ownership.conflict_detected", "suffix": "b"},
    ]


def test_bound_function_changes_do_not_leak():
    def push_more():
        push_log_context(log_id="worker")
        return get_log_context()

    with log_context(event_type="service.unhealthy"):
        bound = bind_log_context(push_more)
        assert bound() == {"event_type": "service.unhealthy", "log_id": "worker"}
        assert get_log_context() == {"event_type": "service.unhealthy"}
