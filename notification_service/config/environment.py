"""Environment variable loading and validation."""

import os
from typing import List, Optional

from .exceptions import ConfigurationError
from .validators import parse_recipient_list

DEFAULT_DATABASE_URL = "sqlite:///./data/notifications.db"
DEFAULT_SMTP_PORT = 587


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        contact_service_url: str,
        resend_api_key: Optional[str] = None,
        smtp_host: Optional[str] = None,
        smtp_port: int = DEFAULT_SMTP_PORT,
        smtp_user: Optional[str] = None,
        smtp_pass: Optional[str] = None,
        health_alert_recipients: Optional[List[str]] = None,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        portal_url: Optional[str] = None,
        candidate_website_url: Optional[str] = None,
    ):
        """Initialize environment configuration.

        ``health_alert_recipients`` is None when HEALTH_ALERT_RECIPIENTS is
        unset, which lets the YAML ``alerts.recipients`` list take over.
        """
        self.contact_service_url = contact_service_url.rstrip("/")
        self.resend_api_key = resend_api_key
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.health_alert_recipients = health_alert_recipients
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level.upper() if log_level else None
        self.portal_url = portal_url
        self.candidate_website_url = candidate_website_url


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - CONTACT_SERVICE_URL: Base URL of the contact directory service

    Optional environment variables:
    - RESEND_API_KEY: API key for the Resend provider
    - SMTP_HOST / SMTP_PORT: SMTP server (port defaults to 587)
    - SMTP_USER / SMTP_PASS: SMTP credentials (both or neither)
    - HEALTH_ALERT_RECIPIENTS: Comma-separated alert addresses
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/notifications.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - PORTAL_URL / CANDIDATE_WEBSITE_URL: Override link base URLs

    Which provider credentials are required depends on ``email.provider``
    and is checked by the loader once the YAML file is parsed.

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    contact_service_url = os.getenv("CONTACT_SERVICE_URL")
    resend_api_key = os.getenv("RESEND_API_KEY") or None
    smtp_host = os.getenv("SMTP_HOST") or None
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER") or None
    smtp_pass = os.getenv("SMTP_PASS") or None
    alert_recipients_raw = os.getenv("HEALTH_ALERT_RECIPIENTS")
    database_url = os.getenv("DATABASE_URL") or None
    log_level = os.getenv("LOG_LEVEL") or None
    portal_url = os.getenv("PORTAL_URL") or None
    candidate_website_url = os.getenv("CANDIDATE_WEBSITE_URL") or None

    if not contact_service_url:
        errors.append("Missing required environment variable: CONTACT_SERVICE_URL")
    elif not contact_service_url.startswith(("http://", "https://")):
        errors.append(
            f"Invalid CONTACT_SERVICE_URL: '{contact_service_url}'. Must be an http(s) URL."
        )

    smtp_port = DEFAULT_SMTP_PORT
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    # Unset means "fall back to the config file"; set-but-blank means "nobody"
    health_alert_recipients = None
    if alert_recipients_raw is not None:
        try:
            health_alert_recipients = parse_recipient_list(
                alert_recipients_raw, "HEALTH_ALERT_RECIPIENTS"
            )
        except ValueError as e:
            errors.append(str(e))

    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if smtp_user and not smtp_pass:
        errors.append(
            "SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication."
        )
    elif smtp_pass and not smtp_user:
        errors.append(
            "SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication."
        )

    for name, value in (("PORTAL_URL", portal_url), ("CANDIDATE_WEBSITE_URL", candidate_website_url)):
        if value and not value.startswith(("http://", "https://")):
            errors.append(f"Invalid {name}: '{value}'. Must be an http(s) URL.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your values",
                "Ensure CONTACT_SERVICE_URL points at the contact directory service",
                "Check that HEALTH_ALERT_RECIPIENTS holds comma-separated email addresses",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        contact_service_url=contact_service_url,
        resend_api_key=resend_api_key,
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        health_alert_recipients=health_alert_recipients,
        database_url=database_url,
        log_level=log_level,
        portal_url=portal_url,
        candidate_website_url=candidate_website_url,
    )
