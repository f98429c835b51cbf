"""SMTP provider built on smtplib.

Handles TLS/SSL negotiation, authentication and connection cleanup. The
smtplib classes are injectable so tests never open a socket.
"""

import html
import re
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional

from notification_service.logging import get_logger

from .base import EmailProvider, OutboundEmail, ProviderResponse
from .exceptions import ProviderConfigurationError, TransportError

logger = get_logger(__name__, component="provider")

IMPLICIT_TLS_PORT = 465


class SMTPProvider(EmailProvider):
    """Delivers messages over SMTP, one connection per message."""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: int = 15,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP provider.

        Args:
            host: SMTP server hostname
            port: SMTP server port; 465 uses implicit TLS
            username: Login user (requires password)
            password: Login password
            use_tls: Upgrade plain connections with STARTTLS
            timeout: Socket timeout in seconds
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)

        Raises:
            ProviderConfigurationError: If host is empty
        """
        if not host:
            raise ProviderConfigurationError("SMTP host is required", provider=self.name)

        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def send(self, email: OutboundEmail) -> ProviderResponse:
        message = self._build_message(email)
        message_id = message["Message-ID"]

        smtp = None
        try:
            if self.port == IMPLICIT_TLS_PORT:
                logger.debug(f"Connecting to {self.host}:{self.port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    self.host,
                    self.port,
                    timeout=self.timeout,
                    context=ssl.create_default_context(),
                )
            else:
                logger.debug(f"Connecting to {self.host}:{self.port}")
                smtp = self.smtp_factory(self.host, self.port, timeout=self.timeout)
                if self.use_tls:
                    smtp.starttls(context=ssl.create_default_context())

            if self.username and self.password:
                smtp.login(self.username, self.password)

            smtp.send_message(message)

        except smtplib.SMTPException as e:
            raise TransportError(f"SMTP error during message delivery: {e}", provider=self.name) from e
        except OSError as e:
            raise TransportError(f"Network error during SMTP connection: {e}", provider=self.name) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(
                        f"Error closing SMTP connection: {e}",
                        extra={"event": "provider.smtp.quit_failed"},
                    )

        return ProviderResponse(message_id=message_id, provider=self.name)

    def _build_message(self, email: OutboundEmail) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = email.subject
        message["From"] = email.from_address
        message["To"] = email.to
        if email.reply_to:
            message["Reply-To"] = email.reply_to
        message["Message-ID"] = make_msgid(domain=_sender_domain(email.from_address))

        message.set_content(email.text or html_to_text(email.html))
        message.add_alternative(email.html, subtype="html")
        return message


def _sender_domain(from_address: str) -> Optional[str]:
    match = re.search(r"@([^>\s]+)", from_address)
    return match.group(1) if match else None


def html_to_text(html_text: str) -> str:
    """Plain-text fallback for the HTML part.

    Drops the head section, turns block ends into line breaks, strips the
    remaining tags and collapses whitespace.
    """
    if not html_text:
        return ""

    text = re.sub(r"<(head|style)[^>]*>.*?</\1>", "", html_text, flags=re.IGNORECASE | re.DOTALL)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</(p|h[1-6]|li|tr|div)>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)

    lines = [re.sub(r"[ \t\xa0]+", " ", line).strip() for line in text.splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
