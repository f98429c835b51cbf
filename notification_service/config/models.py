"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .validators import parse_recipient_list


class EmailProviderType(str, Enum):
    """Supported outbound email transports."""

    RESEND = "resend"
    SMTP = "smtp"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class EmailConfig(BaseModel):
    """Outbound email settings shared by every delivery service."""

    provider: EmailProviderType = Field(
        EmailProviderType.RESEND, description="Transport used to deliver messages"
    )
    from_address: EmailStr = Field(
        "notifications@splits.network", description="Sender mailbox"
    )
    from_name: str = Field("Splits Network", min_length=1, description="Sender display name")
    use_tls: bool = Field(True, description="Use TLS/STARTTLS for SMTP connections")
    timeout_seconds: int = Field(
        15, ge=1, le=120, description="Provider request timeout in seconds"
    )

    @field_validator("from_name")
    @classmethod
    def strip_from_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("from_name cannot be empty")
        return stripped

    @property
    def sender(self) -> str:
        """Formatted ``From`` header value."""
        return f"{self.from_name} <{self.from_address}>"

    model_config = {"use_enum_values": True}


class LinksConfig(BaseModel):
    """Public base URLs used to build call-to-action links."""

    portal_url: str = Field("https://splits.network", description="Recruiter/company portal")
    candidate_website_url: str = Field(
        "https://applicant.network", description="Candidate-facing website"
    )

    @field_validator("portal_url", "candidate_website_url")
    @classmethod
    def normalize_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        stripped = v.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got: {v!r}")
        return stripped


class AlertsConfig(BaseModel):
    """Operational alert settings (health-monitor events)."""

    recipients: List[str] = Field(
        default_factory=list,
        description="Addresses that receive service health alerts",
    )

    @field_validator("recipients", mode="before")
    @classmethod
    def parse_recipients(cls, v):
        """Accept a list or a comma-separated string; validate each address."""
        if v is None:
            return []
        if isinstance(v, str):
            return parse_recipient_list(v, "alerts.recipients")
        if isinstance(v, list):
            return parse_recipient_list(",".join(str(item) for item in v), "alerts.recipients")
        raise ValueError("alerts.recipients must be a list or comma-separated string")


class DeliveryConfig(BaseModel):
    """Fan-out tuning."""

    max_concurrency: int = Field(
        4, ge=1, le=32, description="Worker threads used for best-effort fan-out"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the notification service."""

    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    links: LinksConfig = Field(default_factory=LinksConfig, description="Link base URLs")
    alerts: AlertsConfig = Field(default_factory=AlertsConfig, description="Alert recipients")
    delivery: DeliveryConfig = Field(default_factory=DeliveryConfig, description="Fan-out settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )


class AlertRecipients(BaseModel):
    """Resolved recipient list for operational alerts.

    Passed explicitly to the health consumer at construction. ``origin``
    records where the list came from (``environment``, ``config`` or
    ``none``) so the empty case is visible in logs.
    """

    addresses: Tuple[str, ...] = ()
    origin: str = "none"

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.addresses

    def __iter__(self):
        return iter(self.addresses)

    def __len__(self) -> int:
        return len(self.addresses)
