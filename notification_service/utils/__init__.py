"""Utility functions for time handling and text formatting."""

from .text import format_duration, mask_email, truncate_text
from .timestamps import (
    ensure_utc,
    format_display_date,
    format_display_datetime,
    format_iso,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_iso",
    "format_display_date",
    "format_display_datetime",
    # Text
    "truncate_text",
    "mask_email",
    "format_duration",
]
