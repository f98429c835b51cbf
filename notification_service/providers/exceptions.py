"""Custom exceptions for outbound email providers."""

from typing import Optional


class TransportError(Exception):
    """Base exception for all provider errors.

    Anything raised while handing a message to the transport ends up as a
    TransportError; the delivery service records its text on the failed log.
    """

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderConfigurationError(TransportError):
    """Provider is missing credentials or was given invalid settings."""

    pass


class ProviderHTTPError(TransportError):
    """Provider API answered with a 4xx or 5xx status."""

    def __init__(
        self, message: str, status_code: int, provider: Optional[str] = None
    ) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        """5xx and 429 responses may succeed on a later redelivery."""
        return self.status_code >= 500 or self.status_code == 429


class ProviderTimeoutError(TransportError):
    """Provider did not answer within the configured timeout."""

    pass
