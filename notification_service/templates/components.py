"""Composable email components.

Each component returns a ``Fragment``: a small piece of inline-styled HTML
that the document shell inserts verbatim, together with its plain-text
rendition for the text/plain part. Components never raise; unknown
variants, levels and alert types fall back to defaults, and a missing
theme means the portal brand.

Text arguments are inserted as-is so callers can pass markup such as
``<strong>``. Escape untrusted values (``markupsafe.escape``) before
handing them to a component.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from markupsafe import Markup

from .theme import Theme, resolve_theme


@dataclass(frozen=True)
class Fragment:
    """A rendered piece of message content.

    Implements ``__html__`` so Jinja2 treats it as already-safe markup.
    An empty fragment is falsy, which lets ``compose`` drop it. ``text``
    is the plain-text rendition; when it is not given, the markup with
    tags stripped stands in.
    """

    html: str = ""
    text: Optional[str] = None

    def __html__(self) -> str:
        return self.html

    def __str__(self) -> str:
        return self.html

    def __bool__(self) -> bool:
        return bool(self.html.strip())

    @property
    def plain_text(self) -> str:
        if self.text is not None:
            return self.text
        return _plain(self.html)


Content = Union[Fragment, str]


@dataclass(frozen=True)
class InfoItem:
    label: str
    value: Content
    highlight: bool = False


@dataclass(frozen=True)
class ListItem:
    text: Content
    bold: bool = False


InfoItemLike = Union[InfoItem, Tuple[str, Content], Tuple[str, Content, bool]]
ListItemLike = Union[ListItem, Content, Tuple[Content, bool]]

_HEADING_SIZES = {1: "24px", 2: "20px", 3: "16px"}
_FONT_STACK = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"


def _plain(value: Optional[Content]) -> str:
    """Markup to display text: tags dropped, entities decoded, spaces collapsed."""
    if value is None:
        return ""
    if isinstance(value, Fragment):
        return value.plain_text
    return Markup(str(value)).striptags()


def heading(level: int, text: Content, theme: Optional[Theme] = None) -> Fragment:
    """Section heading; levels outside 1-3 render as level 2."""
    theme = theme or resolve_theme()
    if level not in _HEADING_SIZES:
        level = 2
    margin = "0 0 16px" if level == 1 else "24px 0 8px"
    title = _plain(text)
    return Fragment(
        f'<h{level} style="margin: {margin}; font-family: {_FONT_STACK}; '
        f'font-size: {_HEADING_SIZES[level]}; font-weight: 700; line-height: 1.3; '
        f'color: {theme.colors.primary if level == 1 else theme.colors.text};">{text}</h{level}>',
        f"{title}\n{('=' if level == 1 else '-') * len(title)}",
    )


def paragraph(text: Content, theme: Optional[Theme] = None, muted: bool = False) -> Fragment:
    theme = theme or resolve_theme()
    color = theme.colors.text_muted if muted else theme.colors.text
    return Fragment(
        f'<p style="margin: 0 0 16px; font-family: {_FONT_STACK}; font-size: 16px; '
        f'line-height: 1.6; color: {color};">{text}</p>',
        _plain(text),
    )


def link(href: str, text: Content, theme: Optional[Theme] = None) -> Fragment:
    """Inline text link in the brand color."""
    theme = theme or resolve_theme()
    return Fragment(
        f'<a href="{href}" style="color: {theme.colors.primary}; '
        f'text-decoration: underline;">{text}</a>',
        f"{_plain(text)} ({_plain(href)})",
    )


def button(
    href: str,
    text: Content,
    variant: str = "primary",
    theme: Optional[Theme] = None,
) -> Fragment:
    """Call-to-action button built as a table cell for mail-client support.

    Variants: ``primary`` (filled brand color), ``secondary`` (outlined),
    ``accent`` (filled accent color), ``danger``. Anything else renders as
    primary.
    """
    theme = theme or resolve_theme()
    colors = theme.colors
    styles = {
        "primary": (colors.primary, "#ffffff", colors.primary),
        "secondary": (colors.surface, colors.primary, colors.primary),
        "accent": (colors.accent, "#ffffff", colors.accent),
        "danger": (colors.error, "#ffffff", colors.error),
    }
    background, foreground, border = styles.get(variant, styles["primary"])
    return Fragment(
        '<table role="presentation" cellpadding="0" cellspacing="0" border="0" '
        'style="margin: 24px 0;"><tr>'
        f'<td style="border-radius: 6px; background-color: {background}; border: 2px solid {border};">'
        f'<a href="{href}" style="display: inline-block; padding: 12px 28px; '
        f'font-family: {_FONT_STACK}; font-size: 16px; font-weight: 600; '
        f'color: {foreground}; text-decoration: none; border-radius: 6px;">{text}</a>'
        "</td></tr></table>",
        f"{_plain(text)}: {_plain(href)}",
    )


def info_card(
    title: Content,
    items: Iterable[Optional[InfoItemLike]],
    theme: Optional[Theme] = None,
) -> Fragment:
    """Labelled key/value card.

    Items may be InfoItem instances or ``(label, value[, highlight])``
    tuples. Items that are None, or whose value is None or empty, are
    skipped so optional rows need no branching at the call site.
    """
    theme = theme or resolve_theme()
    colors = theme.colors

    rows = []
    text_rows = [_plain(title).upper()]
    for item in items:
        info = _coerce_item(item)
        if info is None:
            continue
        value_style = (
            f"font-weight: 700; color: {colors.primary};" if info.highlight
            else f"color: {colors.text};"
        )
        rows.append(
            "<tr>"
            f'<td style="padding: 6px 12px 6px 0; font-family: {_FONT_STACK}; font-size: 14px; '
            f'color: {colors.text_muted}; white-space: nowrap; vertical-align: top;">{info.label}</td>'
            f'<td style="padding: 6px 0; font-family: {_FONT_STACK}; font-size: 14px; {value_style}">'
            f"{info.value}</td>"
            "</tr>"
        )
        text_rows.append(f"{_plain(info.label)}: {_plain(info.value)}")

    return Fragment(
        '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0" '
        f'style="margin: 16px 0 24px; background-color: {colors.background}; '
        f'border: 1px solid {colors.border}; border-radius: 8px;"><tr><td style="padding: 20px;">'
        f'<p style="margin: 0 0 12px; font-family: {_FONT_STACK}; font-size: 14px; font-weight: 700; '
        f'text-transform: uppercase; letter-spacing: 0.05em; color: {colors.text_muted};">{title}</p>'
        '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0">'
        + "".join(rows)
        + "</table></td></tr></table>",
        "\n".join(text_rows),
    )


def alert(
    type: str,
    message: Content,
    title: Optional[Content] = None,
    theme: Optional[Theme] = None,
) -> Fragment:
    """Coloured callout. Types: info, success, warning, error (default info)."""
    theme = theme or resolve_theme()
    colors = theme.colors
    palette = {
        "info": (colors.info, "#eff6ff"),
        "success": (colors.success, "#ecfdf5"),
        "warning": (colors.warning, "#fffbeb"),
        "error": (colors.error, "#fef2f2"),
    }
    accent, background = palette.get(type, palette["info"])

    title_html = (
        f'<p style="margin: 0 0 4px; font-family: {_FONT_STACK}; font-size: 15px; '
        f'font-weight: 700; color: {accent};">{title}</p>'
        if title
        else ""
    )
    text = f"** {_plain(title)} **\n{_plain(message)}" if title else _plain(message)
    return Fragment(
        '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0" '
        f'style="margin: 16px 0 24px; background-color: {background}; '
        f'border-left: 4px solid {accent}; border-radius: 4px;"><tr><td style="padding: 16px 20px;">'
        f"{title_html}"
        f'<p style="margin: 0; font-family: {_FONT_STACK}; font-size: 15px; line-height: 1.6; '
        f'color: {colors.text};">{message}</p>'
        "</td></tr></table>",
        text,
    )


def divider(text: Optional[Content] = None, theme: Optional[Theme] = None) -> Fragment:
    theme = theme or resolve_theme()
    colors = theme.colors
    if not text:
        return Fragment(
            f'<hr style="margin: 32px 0; border: none; border-top: 1px solid {colors.border};">',
            "-" * 40,
        )
    return Fragment(
        '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0" '
        'style="margin: 32px 0;"><tr>'
        f'<td style="border-top: 1px solid {colors.border};" width="45%"></td>'
        f'<td style="padding: 0 12px; font-family: {_FONT_STACK}; font-size: 12px; '
        f'color: {colors.text_muted}; white-space: nowrap; text-align: center;">{text}</td>'
        f'<td style="border-top: 1px solid {colors.border};" width="45%"></td>'
        "</tr></table>",
        f"--- {_plain(text)} ---",
    )


def bullet_list(
    items: Sequence[Optional[ListItemLike]], theme: Optional[Theme] = None, muted: bool = False
) -> Fragment:
    """Unordered list of ``ListItem`` entries, plain text or ``(text, bold)`` tuples.

    Empty entries are dropped; an empty list renders nothing.
    """
    entries = [entry for entry in (_coerce_list_item(item) for item in items) if entry]
    if not entries:
        return Fragment()
    theme = theme or resolve_theme()
    color = theme.colors.text_muted if muted else theme.colors.text
    lines = "".join(
        f'<li style="margin-bottom: 6px;">'
        f'{f"<strong>{entry.text}</strong>" if entry.bold else entry.text}</li>'
        for entry in entries
    )
    return Fragment(
        f'<ul style="margin: 8px 0 20px; padding-left: 24px; color: {color}; '
        f'line-height: 1.6; font-family: {_FONT_STACK};">{lines}</ul>',
        "\n".join(f"- {_plain(entry.text)}" for entry in entries),
    )


def badge(text: Content, variant: str = "info", theme: Optional[Theme] = None) -> Fragment:
    """Small pill label. Variants match ``alert`` types plus ``neutral``."""
    theme = theme or resolve_theme()
    colors = theme.colors
    palette = {
        "info": (colors.info, "#dbeafe"),
        "success": (colors.success, "#d1fae5"),
        "warning": (colors.warning, "#fef3c7"),
        "error": (colors.error, "#fee2e2"),
        "neutral": (colors.text_muted, colors.background),
    }
    foreground, background = palette.get(variant, palette["info"])
    return Fragment(
        f'<span style="display: inline-block; padding: 2px 10px; border-radius: 9999px; '
        f'font-family: {_FONT_STACK}; font-size: 12px; font-weight: 600; '
        f'color: {foreground}; background-color: {background};">{text}</span>',
        f"[{_plain(text)}]",
    )


def compose(*fragments: Union[Optional[Content], Sequence[Optional[Content]]]) -> Fragment:
    """Join fragments into one content node, one per line.

    None and empty entries are dropped, and lists are flattened, so
    conditional sections can be written inline. Text renditions are
    separated by blank lines.
    """
    parts = []
    for fragment in fragments:
        if isinstance(fragment, (list, tuple)):
            parts.extend(item for item in fragment if item)
        elif fragment:
            parts.append(fragment)
    return Fragment(
        "\n".join(str(part) for part in parts),
        "\n\n".join(_plain(part) for part in parts),
    )


def _coerce_item(item: Optional[InfoItemLike]) -> Optional[InfoItem]:
    if item is None:
        return None
    if not isinstance(item, InfoItem):
        if not isinstance(item, (tuple, list)) or len(item) < 2:
            return None
        item = InfoItem(item[0], item[1], bool(item[2]) if len(item) > 2 else False)
    if item.value is None or str(item.value) == "":
        return None
    return item


def _coerce_list_item(item: Optional[ListItemLike]) -> Optional[ListItem]:
    if item is None:
        return None
    if isinstance(item, ListItem):
        entry = item
    elif isinstance(item, (tuple, list)):
        if not item:
            return None
        entry = ListItem(item[0], bool(item[1]) if len(item) > 1 else False)
    else:
        entry = ListItem(item)
    if entry.text is None or not str(entry.text).strip():
        return None
    return entry
