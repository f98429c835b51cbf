"""Consumer exceptions."""

from typing import List, Optional


class MalformedEventError(Exception):
    """Raised when an event payload does not match its declared schema."""

    def __init__(self, event_type: str, errors: Optional[List[str]] = None):
        self.event_type = event_type
        self.errors = errors or []
        detail = "; ".join(self.errors) if self.errors else "invalid payload"
        super().__init__(f"Malformed {event_type} event: {detail}")
