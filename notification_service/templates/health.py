"""Service health alerts for platform operators.

Health messages always render with the corporate brand, whatever source
the caller asks for. ``service_unhealthy_email`` is the only message kind
sent with high priority.
"""

from typing import Any, Dict, Optional

from markupsafe import escape
from pydantic import Field

from notification_service.domain.models import (
    AudienceSource,
    NotificationPriority,
    RenderedMessage,
)
from notification_service.utils.text import format_duration, truncate_text

from .components import alert, badge, button, compose, divider, heading, info_card, paragraph
from .message import TemplateData, build_message, date_value
from .theme import resolve_theme


class ServiceUnhealthyData(TemplateData):
    service_name: str
    status: str = "unhealthy"
    error: Optional[str] = None
    checked_at: Optional[str] = None
    consecutive_failures: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    status_url: Optional[str] = None


class ServiceRecoveredData(TemplateData):
    service_name: str
    downtime_seconds: Optional[float] = None
    recovered_at: Optional[str] = None
    status_url: Optional[str] = None


def service_unhealthy_email(data: ServiceUnhealthyData, source: Any = None) -> RenderedMessage:
    # source is accepted for a uniform signature; alerts are always corporate
    source = AudienceSource.CORPORATE
    theme = resolve_theme(source)
    service = escape(data.service_name)

    detail_items = [
        (escape(str(key)), escape(truncate_text(str(value), max_length=200)))
        for key, value in sorted(data.details.items())
    ]

    content = compose(
        heading(1, f"{service} is unhealthy", theme),
        alert(
            "error",
            f"The health monitor reported <strong>{service}</strong> as "
            f"<strong>{escape(data.status)}</strong>.",
            title="Service degraded",
            theme=theme,
        ),
        info_card(
            "Health Check",
            [
                ("Service", service),
                ("Status", badge(escape(data.status.upper()), "error", theme)),
                ("Checked at", date_value(data.checked_at, with_time=True)),
                (
                    "Consecutive failures",
                    str(data.consecutive_failures) if data.consecutive_failures is not None else None,
                ),
                ("Error", escape(truncate_text(data.error, max_length=500)) if data.error else None),
            ],
            theme,
        ),
        info_card("Details", detail_items, theme) if detail_items else None,
        button(escape(data.status_url), "Open Status Dashboard →", "danger", theme)
        if data.status_url
        else None,
        divider(theme=theme),
        paragraph(
            "You are receiving this because your address is on the platform alert list. "
            "A follow-up is sent when the service recovers.",
            theme,
            muted=True,
        ),
    )

    return build_message(
        "service_unhealthy",
        f"[ALERT] {data.service_name} is unhealthy",
        content,
        source,
        preheader=f"{data.service_name} reported {data.status}",
        priority=NotificationPriority.HIGH,
    )


def service_recovered_email(data: ServiceRecoveredData, source: Any = None) -> RenderedMessage:
    source = AudienceSource.CORPORATE
    theme = resolve_theme(source)
    service = escape(data.service_name)

    content = compose(
        heading(1, f"{service} has recovered", theme),
        alert(
            "success",
            f"<strong>{service}</strong> is passing health checks again.",
            title="Service restored",
            theme=theme,
        ),
        info_card(
            "Recovery",
            [
                ("Service", service),
                ("Status", badge("HEALTHY", "success", theme)),
                ("Recovered at", date_value(data.recovered_at, with_time=True)),
                (
                    "Downtime",
                    format_duration(data.downtime_seconds) if data.downtime_seconds is not None else None,
                ),
            ],
            theme,
        ),
        button(escape(data.status_url), "Open Status Dashboard →", "secondary", theme)
        if data.status_url
        else None,
    )

    return build_message(
        "service_recovered",
        f"[RESOLVED] {data.service_name} has recovered",
        content,
        source,
        preheader=f"{data.service_name} is healthy again",
    )
