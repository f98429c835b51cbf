"""Custom exceptions for contact resolution."""

from typing import Optional


class ContactLookupError(Exception):
    """The contact directory could not be queried.

    Raised for transport problems, unexpected status codes and unparseable
    responses. A missing contact is not an error at this level; the lookup
    returns None for that.
    """

    def __init__(self, message: str, kind: str, contact_id: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.contact_id = contact_id
        self.status_code = status_code


class ContactNotFoundError(Exception):
    """A required recipient could not be resolved to an email address."""

    def __init__(self, kind: str, contact_id: str):
        super().__init__(f"No contact found for {kind} {contact_id}")
        self.kind = kind
        self.contact_id = contact_id
