"""Outbound email providers."""

from .base import EmailProvider, OutboundEmail, ProviderResponse
from .exceptions import (
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderTimeoutError,
    TransportError,
)
from .factory import build_provider
from .resend import ResendProvider
from .smtp import SMTPProvider

__all__ = [
    "EmailProvider",
    "OutboundEmail",
    "ProviderResponse",
    "ResendProvider",
    "SMTPProvider",
    "build_provider",
    "TransportError",
    "ProviderConfigurationError",
    "ProviderHTTPError",
    "ProviderTimeoutError",
]
