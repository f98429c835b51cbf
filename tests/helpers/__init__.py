"""Test helper utilities for notification service tests."""

from .fakes import (
    InMemoryNotificationRepository,
    RecordingProvider,
    StaticContactLookup,
    make_event,
)

__all__ = [
    "InMemoryNotificationRepository",
    "RecordingProvider",
    "StaticContactLookup",
    "make_event",
]
