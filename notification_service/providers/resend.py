"""Resend HTTP API provider."""

from typing import Any, Dict, Optional

import requests

from notification_service.logging import get_logger
from notification_service.utils.text import mask_email

from .base import EmailProvider, OutboundEmail, ProviderResponse
from .exceptions import (
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderTimeoutError,
    TransportError,
)

logger = get_logger(__name__, component="provider")

RESEND_API_URL = "https://api.resend.com"


class ResendProvider(EmailProvider):
    """Sends email through the Resend REST API.

    Attributes:
        timeout: HTTP request timeout in seconds
    """

    name = "resend"

    def __init__(
        self,
        api_key: str,
        timeout: int = 15,
        base_url: str = RESEND_API_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize provider.

        Raises:
            ProviderConfigurationError: If api_key is empty
        """
        if not api_key or not api_key.strip():
            raise ProviderConfigurationError("Resend API key is required", provider=self.name)

        self.timeout = timeout
        self._url = f"{base_url.rstrip('/')}/emails"
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_key.strip()}",
                "Content-Type": "application/json",
            }
        )

    def send(self, email: OutboundEmail) -> ProviderResponse:
        payload: Dict[str, Any] = {
            "from": email.from_address,
            "to": [email.to],
            "subject": email.subject,
            "html": email.html,
        }
        if email.text:
            payload["text"] = email.text
        if email.reply_to:
            payload["reply_to"] = email.reply_to

        try:
            response = self._session.post(self._url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Resend request timed out after {self.timeout} seconds",
                extra={"event": "provider.send.timeout", "provider": self.name},
            )
            raise ProviderTimeoutError(
                f"Resend request timed out after {self.timeout} seconds", provider=self.name
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Resend request failed: {e}", provider=self.name) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error(
                f"Resend rejected message: HTTP {response.status_code} {detail}",
                extra={
                    "event": "provider.send.rejected",
                    "provider": self.name,
                    "status_code": response.status_code,
                    "recipient": mask_email(email.to),
                },
            )
            raise ProviderHTTPError(
                f"Resend API error {response.status_code}: {detail}",
                status_code=response.status_code,
                provider=self.name,
            )

        try:
            body = response.json()
        except ValueError:
            body = None
        message_id = body.get("id") if isinstance(body, dict) else None
        if not message_id:
            # A 2xx without an id is not an acknowledgement
            logger.error(
                "Resend response had no message id",
                extra={
                    "event": "provider.send.no_message_id",
                    "provider": self.name,
                    "status_code": response.status_code,
                    "recipient": mask_email(email.to),
                },
            )
            raise TransportError("Resend response had no message id", provider=self.name)

        logger.debug(
            "Resend accepted message",
            extra={"event": "provider.send.accepted", "provider": self.name, "message_id": message_id},
        )
        return ProviderResponse(message_id=message_id, provider=self.name)


def _error_detail(response: requests.Response) -> str:
    """Pull the human-readable error out of a Resend error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason or ""
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
