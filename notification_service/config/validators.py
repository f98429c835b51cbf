"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from email_validator import EmailNotValidError, validate_email


def parse_recipient_list(raw: str, source_name: str) -> List[str]:
    """
    Parse a comma-separated list of email addresses.

    Blank entries are ignored and duplicates are dropped while keeping the
    first occurrence's position.

    Args:
        raw: Comma-separated addresses
        source_name: Where the value came from, used in error messages

    Returns:
        Normalized addresses in their original order

    Raises:
        ValueError: If any entry is not a valid address
    """
    recipients: List[str] = []
    invalid: List[str] = []

    for part in raw.split(","):
        candidate = part.strip()
        if not candidate:
            continue
        try:
            normalized = validate_email(candidate, check_deliverability=False).normalized
        except EmailNotValidError:
            invalid.append(candidate)
            continue
        if normalized not in recipients:
            recipients.append(normalized)

    if invalid:
        raise ValueError(
            f"Invalid email address(es) in {source_name}: {', '.join(invalid)}"
        )
    return recipients


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    # Plain-http links end up in every email body
    links = config_dict.get("links", {})
    if isinstance(links, dict):
        for key in ("portal_url", "candidate_website_url"):
            url = links.get(key)
            if isinstance(url, str) and url.strip().startswith("http://"):
                warning_messages.append(f"links.{key} uses plain http: {url}")

    delivery = config_dict.get("delivery", {})
    if isinstance(delivery, dict):
        max_concurrency = delivery.get("max_concurrency", 4)
        if isinstance(max_concurrency, int) and max_concurrency > 16:
            warning_messages.append(
                f"High delivery.max_concurrency ({max_concurrency}) may trigger provider rate limits"
            )

    email = config_dict.get("email", {})
    if isinstance(email, dict) and email.get("provider") == "smtp" and email.get("use_tls") is False:
        warning_messages.append("SMTP provider configured without TLS")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
