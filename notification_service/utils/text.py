"""Small text helpers shared by templates and log statements."""

from typing import Any, Optional


def truncate_text(text: str, max_length: int = 500, suffix: str = "...") -> str:
    """Truncate text to maximum length, adding suffix if truncated.

    Tries to break at word boundaries for cleaner truncation.

    Args:
        text: Text to truncate
        max_length: Maximum length (including suffix)
        suffix: Suffix to add if truncated (default: ...)

    Returns:
        Truncated text with suffix if needed

    Example:
        >>> truncate_text("This is a very long text that needs truncating", max_length=30)
        'This is a very long text...'
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    truncated = text[:truncate_at]

    # Only break at a space that isn't too far back
    last_space = truncated.rfind(" ")
    if last_space > truncate_at * 0.8:
        truncated = truncated[:last_space]

    return truncated.rstrip() + suffix


def mask_email(email: Optional[str]) -> str:
    """Mask the local part of an address for log output.

    Example:
        >>> mask_email("jane.doe@example.com")
        'j***@example.com'
    """
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[:1]}***@{domain}"


def format_duration(seconds: Any) -> str:
    """Render a duration in seconds as a short human string.

    Example:
        >>> format_duration(3725)
        '1h 2m 5s'
    """
    try:
        total = int(float(seconds))
    except (TypeError, ValueError):
        return str(seconds) if seconds not in (None, "") else "-"
    if total < 0:
        total = 0

    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)
