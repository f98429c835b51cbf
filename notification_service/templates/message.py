"""Shared pieces for the per-family message sets."""

from typing import Any, Optional

from markupsafe import Markup, escape
from pydantic import BaseModel, ConfigDict

from notification_service.domain.models import (
    AudienceSource,
    NotificationPriority,
    RenderedMessage,
)
from notification_service.utils.timestamps import format_display_date, format_display_datetime

from .components import Fragment
from .document import render_document, render_text_document
from .theme import resolve_theme

DEFAULT_PORTAL_URL = "https://splits.network"
DEFAULT_CANDIDATE_WEBSITE_URL = "https://applicant.network"


class TemplateData(BaseModel):
    """Base for every kind-specific template data record.

    ``portal_url`` and ``candidate_website_url`` are the configured link
    bases used for secondary links (help center, dashboards); primary
    call-to-action URLs are explicit fields on each record.
    """

    portal_url: str = DEFAULT_PORTAL_URL
    candidate_website_url: str = DEFAULT_CANDIDATE_WEBSITE_URL

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def portal_link(self, path: str) -> str:
        return f"{self.portal_url.rstrip('/')}/{path.lstrip('/')}"

    def candidate_link(self, path: str) -> str:
        return f"{self.candidate_website_url.rstrip('/')}/{path.lstrip('/')}"


def audience(source: Any, default: AudienceSource) -> AudienceSource:
    """Pick the audience for a message: the caller's choice or the kind's default."""
    if source is None:
        return default
    return resolve_theme(source).source


def build_message(
    template: str,
    subject: str,
    content: Fragment,
    source: AudienceSource,
    preheader: str,
    priority: NotificationPriority = NotificationPriority.NORMAL,
) -> RenderedMessage:
    """Wrap content in the HTML and text shells and package it as a RenderedMessage."""
    return RenderedMessage(
        subject=_single_line(subject),
        html=render_document(content, source=source, preheader=preheader),
        text=render_text_document(content, source=source),
        template=template,
        source=source,
        priority=priority,
    )


def display(value: Optional[str], fallback: str = "Unknown") -> str:
    """Value for display, or a fallback for missing data."""
    if value is None:
        return fallback
    text = str(value).strip()
    return text or fallback


def date_value(value: Optional[str], with_time: bool = False) -> Optional[Markup]:
    """Escaped display form of a payload date, or None so info cards drop the row."""
    if not value:
        return None
    formatted = format_display_datetime(value) if with_time else format_display_date(value)
    return escape(formatted)


def _single_line(subject: str) -> str:
    return " ".join(subject.split())
