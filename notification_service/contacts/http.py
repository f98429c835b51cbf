"""HTTP contact lookup against the platform's contact directory service."""

from typing import Any, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from notification_service.domain.models import Contact, ContactKind
from notification_service.logging import get_logger

from .base import ContactLookup
from .exceptions import ContactLookupError

logger = get_logger(__name__, component="contacts")


class HttpContactLookup(ContactLookup):
    """Contact lookup over HTTP.

    Calls ``GET {base_url}/{kind}s/{id}/contact`` and expects a JSON object
    with ``email`` and optionally ``name`` and ``user_id``. Responses wrapped
    in ``{"data": {...}}`` are unwrapped.

    Attributes:
        base_url: Directory service base URL without trailing slash
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
        user_agent: str = "NotificationService/1.0",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {"User-Agent": user_agent, "Accept": "application/json"}
        )

    def resolve(self, kind: ContactKind, contact_id: str) -> Optional[Contact]:
        """Fetch one contact.

        Returns:
            Contact, or None on HTTP 404 or an entry without an email address

        Raises:
            ContactLookupError: On timeouts, connection errors, other 4xx/5xx
                responses, or a body that isn't a contact object
        """
        kind = ContactKind(kind)
        url = f"{self.base_url}/{kind.value}s/{quote(str(contact_id), safe='')}/contact"

        data = self._get_json(url, kind, contact_id)
        if data is None:
            return None

        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        if not isinstance(data, dict):
            raise ContactLookupError(
                f"Unexpected contact response shape from {url}", kind.value, contact_id
            )
        if not data.get("email"):
            logger.info(
                f"{kind.value} {contact_id} has no email address",
                extra={"event": "contacts.lookup.no_email", "kind": kind.value, "contact_id": contact_id},
            )
            return None

        try:
            return Contact(
                id=str(data.get("id") or contact_id),
                name=data.get("name") or "",
                email=data["email"],
                user_id=data.get("user_id"),
            )
        except ValidationError as e:
            raise ContactLookupError(
                f"Invalid contact returned for {kind.value} {contact_id}: {e}",
                kind.value,
                contact_id,
            ) from e

    def _get_json(self, url: str, kind: ContactKind, contact_id: str) -> Optional[Any]:
        try:
            logger.debug(
                f"HTTP GET {url}",
                extra={"event": "contacts.lookup.request", "url": url, "timeout": self.timeout},
            )
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Contact lookup timed out after {self.timeout} seconds",
                extra={"event": "contacts.lookup.timeout", "url": url},
            )
            raise ContactLookupError(
                f"Contact lookup for {kind.value} {contact_id} timed out after {self.timeout} seconds",
                kind.value,
                contact_id,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Contact lookup request failed: {e}",
                extra={"event": "contacts.lookup.error", "url": url, "error_type": type(e).__name__},
            )
            raise ContactLookupError(
                f"Contact lookup for {kind.value} {contact_id} failed: {e}",
                kind.value,
                contact_id,
            ) from e

        if response.status_code == 404:
            logger.info(
                f"{kind.value} {contact_id} not found in contact directory",
                extra={"event": "contacts.lookup.not_found", "kind": kind.value, "contact_id": contact_id},
            )
            return None

        if response.status_code >= 400:
            logger.error(
                f"HTTP {response.status_code} from contact directory",
                extra={"event": "contacts.lookup.error", "url": url, "status_code": response.status_code},
            )
            raise ContactLookupError(
                f"HTTP {response.status_code}: {response.reason}",
                kind.value,
                contact_id,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ContactLookupError(
                f"Failed to parse contact response from {url}: {e}", kind.value, contact_id
            ) from e
