"""Contact resolution: domain identifiers to deliverable recipients."""

from .base import ContactLookup, contact_from_payload
from .exceptions import ContactLookupError, ContactNotFoundError
from .http import HttpContactLookup

__all__ = [
    "ContactLookup",
    "HttpContactLookup",
    "contact_from_payload",
    "ContactLookupError",
    "ContactNotFoundError",
]
