"""Root logger setup: one stdout handler, JSON or key-value lines.

Every record passes through ``ContextualFilter`` first, which stamps the
service name and environment, merges the active ``log_context`` fields and
masks recipient addresses, so formatters only decide layout.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Dict, Literal, Optional

from notification_service.utils.text import mask_email

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

VALID_FORMATS = ("json", "key-value")

# Transport chatter is only useful when debugging a provider or the database
NOISY_LOGGERS = ("urllib3", "requests", "sqlalchemy.engine")

# Extra fields that may carry a raw address
RECIPIENT_FIELDS = ("recipient", "recipient_email", "to")

# LogRecord attributes that are never emitted as extra fields
RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "asctime",
        "exc_info", "exc_text", "stack_info", "taskName",
    }
)


class ContextualFilter(logging.Filter):
    """Stamps service metadata and the active log context onto each record.

    Fields passed explicitly through ``extra`` win over context fields of the
    same name. Recipient fields are masked unless they already are.
    """

    def __init__(self, service: str = "notification-service", environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        for key in RECIPIENT_FIELDS:
            value = getattr(record, key, None)
            if isinstance(value, str) and "@" in value and "***" not in value:
                setattr(record, key, mask_email(value))

        return True


def _extra_fields(record: logging.LogRecord, skip: frozenset = frozenset()) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in RESERVED_ATTRS and key not in skip and not key.startswith("_")
    }


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (str, int, float, bool, list, dict)) or value is None:
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per line with ``timestamp``, ``level`` and ``message`` first."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in _extra_fields(record).items():
            log_obj[key] = _json_value(value)

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)

    @staticmethod
    def _format_timestamp(created: float) -> str:
        """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _kv_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if value is None:
        return "null"
    if isinstance(value, datetime):
        return value.isoformat()
    text = str(value)
    if any(ch in text for ch in (" ", "=", ",")):
        return f'"{text}"'
    return text


class KeyValueFormatter(logging.Formatter):
    """Human-readable lines: ``timestamp [LEVEL] logger: message key=value ...``

    Extra fields are sorted by key. ``service`` and ``environment`` are left
    out since they are constant for the process.
    """

    SKIP_FIELDS = frozenset({"service", "environment"})

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = " ".join(
            f"{key}={_kv_value(value)}"
            for key, value in sorted(_extra_fields(record, self.SKIP_FIELDS).items())
        )
        return f"{base} {extras}" if extras else base


def _build_formatter(format_type: LogFormat) -> logging.Formatter:
    if format_type == "json":
        return JSONFormatter()
    return KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
    service: str = "notification-service",
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Replace the root logger's handlers with one structured stdout handler.

    Transport libraries (urllib3, requests, SQLAlchemy) stay at WARNING unless
    the root level is DEBUG, so provider chatter does not drown out delivery
    events.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' or 'key-value'
        environment: Environment label (production, staging, local)
        service: Service name stamped on every record
        stream: Output stream (default: sys.stdout)

    Raises:
        ValueError: If level or format_type is invalid
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    if format_type not in VALID_FORMATS:
        raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(_build_formatter(format_type))
    handler.addFilter(ContextualFilter(service=service, environment=environment))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    transport_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": str(level).upper(),
            "log_format": format_type,
        },
    )
