"""Provider boundary: one outbound email in, one message id out."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OutboundEmail:
    """A fully rendered message addressed to a single recipient.

    Attributes:
        from_address: Formatted sender (e.g. "Splits Network <notifications@splits.network>")
        to: Recipient address
        subject: Subject line
        html: Complete HTML document
        reply_to: Optional Reply-To address
        text: Plain-text rendition; transports derive one from the HTML when absent
    """

    from_address: str
    to: str
    subject: str
    html: str
    reply_to: Optional[str] = None
    text: Optional[str] = None


@dataclass(frozen=True)
class ProviderResponse:
    """Acknowledgement from the transport."""

    message_id: Optional[str]
    provider: str


class EmailProvider(ABC):
    """Outbound email transport.

    Implementations make one attempt per call and raise TransportError (or a
    subclass) on any failure. Retrying is the caller's concern.
    """

    name: str = "provider"

    @abstractmethod
    def send(self, email: OutboundEmail) -> ProviderResponse:
        """Deliver one message.

        Raises:
            TransportError: If the transport rejected or never received the message
        """
