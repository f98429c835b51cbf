"""Brand themes keyed by audience source.

Every email is rendered for one audience: the recruiter/company portal, the
candidate website, or the corporate brand used for operational mail.
``resolve_theme`` always returns a theme; unknown sources get the portal
brand.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from notification_service.domain.models import AudienceSource


@dataclass(frozen=True)
class ThemeColors:
    primary: str
    secondary: str
    accent: str
    success: str
    info: str
    warning: str
    error: str
    text: str
    text_muted: str
    background: str
    surface: str
    border: str


@dataclass(frozen=True)
class FooterLink:
    label: str
    url: str


@dataclass(frozen=True)
class Theme:
    """Everything the document shell and components need to brand a message."""

    source: AudienceSource
    brand_name: str
    logo_url: str
    tagline: str
    website_url: str
    help_url: str
    legal_name: str
    colors: ThemeColors
    footer_links: Tuple[FooterLink, ...]


_BASE_COLORS = dict(
    success="#047857",
    info="#1d4ed8",
    warning="#b45309",
    error="#b91c1c",
    text="#374151",
    text_muted="#6b7280",
    background="#f3f4f6",
    surface="#ffffff",
    border="#e5e7eb",
)

PORTAL_THEME = Theme(
    source=AudienceSource.PORTAL,
    brand_name="Splits Network",
    logo_url="https://splits.network/logo.png",
    tagline="Split-fee recruiting, simplified",
    website_url="https://splits.network",
    help_url="https://splits.network/public/help",
    legal_name="Splits Network",
    colors=ThemeColors(primary="#233876", secondary="#0f766e", accent="#f59e0b", **_BASE_COLORS),
    footer_links=(
        FooterLink("Help Center", "https://splits.network/public/help"),
        FooterLink("Privacy Policy", "https://splits.network/public/privacy-policy"),
        FooterLink("Terms of Service", "https://splits.network/public/terms-of-service"),
    ),
)

CANDIDATE_THEME = Theme(
    source=AudienceSource.CANDIDATE,
    brand_name="Applicant Network",
    logo_url="https://applicant.network/logo.png",
    tagline="Your career, represented",
    website_url="https://applicant.network",
    help_url="https://applicant.network/public/help",
    legal_name="Applicant Network",
    colors=ThemeColors(primary="#0f766e", secondary="#233876", accent="#8b5cf6", **_BASE_COLORS),
    footer_links=(
        FooterLink("Help Center", "https://applicant.network/public/help"),
        FooterLink("Privacy Policy", "https://applicant.network/public/privacy-policy"),
        FooterLink("Terms of Service", "https://applicant.network/public/terms-of-service"),
    ),
)

CORPORATE_THEME = Theme(
    source=AudienceSource.CORPORATE,
    brand_name="Employment Networks",
    logo_url="https://employment-networks.com/logo.png",
    tagline="Platform operations",
    website_url="https://employment-networks.com",
    help_url="https://status.splits.network",
    legal_name="Employment Networks, Inc.",
    colors=ThemeColors(primary="#111827", secondary="#374151", accent="#dc2626", **_BASE_COLORS),
    footer_links=(
        FooterLink("Status Page", "https://status.splits.network"),
        FooterLink("Privacy Policy", "https://employment-networks.com/privacy-policy"),
    ),
)

_THEMES = {
    AudienceSource.PORTAL: PORTAL_THEME,
    AudienceSource.CANDIDATE: CANDIDATE_THEME,
    AudienceSource.CORPORATE: CORPORATE_THEME,
}


def resolve_theme(source: Any = None) -> Theme:
    """Return the theme for an audience source.

    Accepts an AudienceSource, its string value, or anything else; values
    that don't name a known audience resolve to the portal theme.

    Example:
        >>> resolve_theme("candidate").brand_name
        'Applicant Network'
        >>> resolve_theme("newsletter").source.value
        'portal'
    """
    try:
        return _THEMES[AudienceSource(source)]
    except (ValueError, KeyError, TypeError):
        return PORTAL_THEME
