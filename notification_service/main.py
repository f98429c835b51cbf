"""Main entry point for the notification dispatch service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import IO, Iterator, Optional, Tuple

from pydantic import ValidationError

from notification_service.config.environment import EnvironmentConfig
from notification_service.config.exceptions import ConfigurationError
from notification_service.config.loader import load_config
from notification_service.config.models import AppConfig
from notification_service.consumers import EventRouter, build_router
from notification_service.delivery.service import describe_error
from notification_service.domain.models import DomainEvent, NotificationStatus
from notification_service.logging import get_logger
from notification_service.logging.config import configure_logging
from notification_service.logging.context import log_context
from notification_service.persistence.database import close_database, init_database
from notification_service.persistence.repositories import SqlNotificationRepository

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI flag, then LOG_LEVEL, then the config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def read_events(stream: IO[str]) -> Iterator[Tuple[int, Optional[DomainEvent]]]:
    """Yield (line number, event) for each non-blank NDJSON line.

    Lines that are not valid JSON or not a valid event envelope are logged
    and yielded as None.
    """
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield line_number, DomainEvent.model_validate(json.loads(line))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"Skipping unreadable event on line {line_number}: {e}",
                extra={"event": "cli.event.unreadable", "line_number": line_number},
            )
            yield line_number, None


def dispatch_stream(router: EventRouter, stream: IO[str]) -> Tuple[int, int, int]:
    """
    Dispatch every event in an NDJSON stream.

    An event whose handler raises is logged and counted as failed; it is the
    upstream producer's job to redeliver it.

    Returns:
        Tuple of (handled, failed, unreadable) event counts
    """
    handled = failed = unreadable = 0

    for line_number, event in read_events(stream):
        if event is None:
            unreadable += 1
            continue

        with log_context(line_number=line_number):
            try:
                report = router.dispatch(event)
            except Exception as e:
                failed += 1
                logger.error(
                    f"Event {event.type} on line {line_number} failed: {describe_error(e)}",
                    extra={
                        "event": "cli.event.failed",
                        "event_type": event.type,
                        "error_type": type(e).__name__,
                    },
                )
                continue

        handled += 1
        if report.failed:
            logger.warning(
                f"Event {event.type} on line {line_number}: "
                f"{len(report.failed)} of {report.attempted} recipient(s) failed",
                extra={
                    "event": "cli.event.partial",
                    "event_type": event.type,
                    "failed_recipients": [failure.label for failure in report.failed],
                },
            )

    return handled, failed, unreadable


def print_failed_logs(limit: int) -> None:
    """Print failed notification logs, newest first."""
    repository = SqlNotificationRepository()
    logs = repository.list_by_status(NotificationStatus.FAILED, limit=limit)
    if not logs:
        print("No failed notifications.")
        return

    for log in logs:
        print(
            f"{log.created_at.isoformat()}  {log.id}  {log.event_type}  "
            f"{log.recipient_email}  {log.error_message or ''}"
        )


def main() -> int:
    """
    Main entry point for the notification dispatch service.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="Notification Service - dispatch domain events as branded email notifications"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--events",
        default="-",
        help="Newline-delimited JSON events to dispatch; '-' reads stdin (default: -)",
    )
    parser.add_argument(
        "--list-failed",
        action="store_true",
        help="Print failed notification logs and exit",
    )
    parser.add_argument(
        "--list-event-types",
        action="store_true",
        help="Print the event types the service handles and exit",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum rows printed by --list-failed (default: 50)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    args = parser.parse_args()

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=environment,
        )

        logger.info(
            "Notification service starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "provider": app_config.email.provider,
            },
        )

        init_database(env_config.database_url)

        if args.list_failed:
            print_failed_logs(args.limit)
            return 0

        router = build_router(app_config, env_config)

        if args.list_event_types:
            for event_type in router.supported_event_types():
                print(event_type)
            return 0

        if args.events == "-":
            handled, failed, unreadable = dispatch_stream(router, sys.stdin)
        else:
            with open(args.events, "r", encoding="utf-8") as stream:
                handled, failed, unreadable = dispatch_stream(router, stream)

        logger.info(
            f"Dispatch completed: {handled} handled, {failed} failed, {unreadable} unreadable",
            extra={
                "event": "service.stopping",
                "handled_count": handled,
                "failed_count": failed,
                "unreadable_count": unreadable,
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )

        return 1 if failed or unreadable else 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.fatal",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1
    finally:
        close_database()


if __name__ == "__main__":
    sys.exit(main())
