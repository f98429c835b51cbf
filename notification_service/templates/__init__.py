"""Email rendering: themes, components, the document shell and message sets."""

from .components import (
    Fragment,
    InfoItem,
    ListItem,
    alert,
    badge,
    bullet_list,
    button,
    compose,
    divider,
    heading,
    info_card,
    link,
    paragraph,
)
from .document import render_document, render_text_document
from .exceptions import TemplateRenderError
from .message import TemplateData
from .theme import Theme, ThemeColors, resolve_theme

__all__ = [
    "Fragment",
    "InfoItem",
    "ListItem",
    "alert",
    "badge",
    "bullet_list",
    "button",
    "compose",
    "divider",
    "heading",
    "info_card",
    "link",
    "paragraph",
    "render_document",
    "render_text_document",
    "resolve_theme",
    "Theme",
    "ThemeColors",
    "TemplateData",
    "TemplateRenderError",
]
