"""Contact lookup boundary."""

from abc import ABC, abstractmethod
from typing import Optional

from notification_service.domain.models import Contact, ContactKind

from .exceptions import ContactNotFoundError


class ContactLookup(ABC):
    """Resolves a domain identifier to a deliverable contact.

    Implementations do not retry. A lookup that finds nothing returns None;
    one that cannot answer raises ContactLookupError.
    """

    @abstractmethod
    def resolve(self, kind: ContactKind, contact_id: str) -> Optional[Contact]:
        """Return the contact for (kind, id), or None when it doesn't exist."""

    def require_contact(self, kind: ContactKind, contact_id: Optional[str]) -> Contact:
        """Resolve a contact that must exist.

        Args:
            kind: Kind of identifier (recruiter, candidate, company)
            contact_id: Identifier from the event payload

        Returns:
            The resolved contact

        Raises:
            ContactNotFoundError: If the id is empty or resolves to nothing
            ContactLookupError: If the directory could not be queried
        """
        kind = ContactKind(kind)
        if not contact_id:
            raise ContactNotFoundError(kind.value, str(contact_id))

        contact = self.resolve(kind, contact_id)
        if contact is None:
            raise ContactNotFoundError(kind.value, contact_id)
        return contact


def contact_from_payload(
    contact_id: Optional[str], email: Optional[str], name: Optional[str] = None
) -> Optional[Contact]:
    """Build a contact from payload fields, for events that carry the address."""
    if not email:
        return None
    return Contact(id=contact_id or email, email=email, name=name or "")
