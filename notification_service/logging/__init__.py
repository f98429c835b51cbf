"""Structured logging for the notification service.

Modules log through ``get_logger(__name__, component=...)`` and tag each
call with an ``event`` name in ``extra``; ``log_context`` adds scoped fields
such as ``event_type`` and ``log_id`` to everything logged inside it.
"""

import logging
from typing import Optional, Union

from .config import configure_logging
from .context import bind_log_context, log_context


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """Adds a fixed ``component`` field; fields passed per call take precedence."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Return the named logger, wrapped to stamp ``component`` when given.

    Example:
        >>> logger = get_logger(__name__, component="delivery")
        >>> logger.info("Notification sent", extra={"event": "delivery.send.success"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = [
    "get_logger",
    "ComponentLoggerAdapter",
    "configure_logging",
    "log_context",
    "bind_log_context",
]
