"""Document shell: the single place a complete email body is produced.

The HTML shell and its plain-text counterpart are separate Jinja2 templates
sharing one environment. Autoescaping applies to the HTML shell only.
"""

import logging
from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, Template, TemplateError, select_autoescape

from .components import Fragment
from .exceptions import TemplateRenderError
from .theme import resolve_theme

logger = logging.getLogger(__name__)

BASE_TEMPLATE = "base.html.j2"
TEXT_TEMPLATE = "base.txt.j2"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("notification_service.templates", "email_templates"),
        autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


@lru_cache(maxsize=1)
def _base_template() -> Template:
    return _environment().get_template(BASE_TEMPLATE)


@lru_cache(maxsize=1)
def _text_template() -> Template:
    return _environment().get_template(TEXT_TEMPLATE)


def render_document(content: Fragment, source: Any = None, preheader: str = "") -> str:
    """Wrap a content fragment in the branded header and footer.

    Args:
        content: Message body, usually built with ``compose``
        source: Audience source; unknown values use the portal brand
        preheader: Inbox preview text (plain text, escaped here)

    Returns:
        Complete HTML document

    Raises:
        TemplateRenderError: If the shell template can't be loaded or rendered
    """
    if not isinstance(content, Fragment):
        content = Fragment(str(content or ""))

    try:
        return _base_template().render(
            theme=resolve_theme(source),
            content=content,
            preheader=preheader or "",
        )
    except TemplateError as e:
        logger.error(f"Document shell rendering failed: {e}", exc_info=True)
        raise TemplateRenderError(f"Document shell rendering failed: {e}") from e


def render_text_document(content: Fragment, source: Any = None) -> str:
    """Plain-text rendition of ``render_document`` for the text/plain part.

    Raises:
        TemplateRenderError: If the text shell can't be loaded or rendered
    """
    if not isinstance(content, Fragment):
        content = Fragment(str(content or ""))

    try:
        return _text_template().render(
            theme=resolve_theme(source),
            content=content.plain_text,
        )
    except TemplateError as e:
        logger.error(f"Text shell rendering failed: {e}", exc_info=True)
        raise TemplateRenderError(f"Text shell rendering failed: {e}") from e
