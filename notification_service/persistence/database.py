"""Database connection and session management.

This module owns the module-level engine and session factory used by the
SQL notification repository.
"""

import threading
from contextlib import contextmanager, nullcontext
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from notification_service.logging import get_logger

from .exceptions import DatabaseConnectionError

# Module-level engine and session factory
_engine: Engine | None = None
_session_factory: sessionmaker | None = None

# Serializes sessions when every session shares one connection (in-memory SQLite)
_shared_connection_lock = None

logger = get_logger(__name__, component="database")


def init_database(database_url: str) -> None:
    """Initialize database connection and create schema if tables don't exist.

    Call once during application startup. It:
    1. Creates the SQLAlchemy engine
    2. Configures SQLite-specific settings (thread sharing, WAL, timeouts)
    3. Validates the connection
    4. Creates the notification_logs table if it doesn't exist

    An in-memory SQLite URL gets a single shared connection, so every
    thread in a best-effort fan-out sees the same database. Sessions on
    that connection are serialized by get_session; sqlite3 connections
    cannot run two transactions at once.

    Args:
        database_url: Database connection URL (e.g., "sqlite:///./data/notifications.db")

    Raises:
        DatabaseConnectionError: If database initialization fails

    Example:
        >>> init_database("sqlite:///:memory:")
    """
    global _engine, _session_factory, _shared_connection_lock

    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    logger.info(
        "Initializing database",
        extra={
            "event": "database.initializing",
            "database_url": _redact_url(database_url),
        },
    )

    try:
        is_sqlite = database_url.startswith("sqlite")
        in_memory = is_sqlite and (":memory:" in database_url or database_url == "sqlite://")

        if is_sqlite and not in_memory and database_url.startswith("sqlite:///"):
            db_file = Path(database_url.replace("sqlite:///", "", 1))
            if not db_file.parent.exists():
                logger.info(
                    f"Creating database directory: {db_file.parent}",
                    extra={"event": "database.directory.created"},
                )
                db_file.parent.mkdir(parents=True, exist_ok=True)

        engine_kwargs = {"echo": False, "pool_pre_ping": True, "future": True}
        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if in_memory:
            engine_kwargs["poolclass"] = StaticPool

        _shared_connection_lock = threading.RLock() if in_memory else None

        _engine = create_engine(database_url, **engine_kwargs)

        if is_sqlite and not in_memory:
            _configure_sqlite(_engine)

        _validate_connection(_engine)

        _session_factory = sessionmaker(
            bind=_engine,
            autocommit=False,
            autoflush=True,
            expire_on_commit=False,
            future=True,
        )

        from .schema import create_schema

        create_schema(_engine)

        logger.info(
            "Database initialized successfully",
            extra={
                "event": "database.initialised",
                "database_url": _redact_url(database_url),
            },
        )

    except DatabaseConnectionError:
        raise
    except Exception as e:
        error_msg = f"Failed to initialize database: {e}"
        logger.error(error_msg, exc_info=True, extra={"event": "database.init.failed"})
        raise DatabaseConnectionError(error_msg) from e


def _configure_sqlite(engine: Engine) -> None:
    """Enable WAL so readers don't block the delivery writers."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def _validate_connection(engine: Engine) -> None:
    """Validate database connection by executing a test query.

    Raises:
        DatabaseConnectionError: If connection test fails
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.debug("Database connection validated", extra={"event": "database.validated"})
    except Exception as e:
        raise DatabaseConnectionError(f"Failed to validate database connection: {e}") from e


def _redact_url(url: str) -> str:
    """Hide the password of a database URL for logging."""
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<unparseable database url>"


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Provide a database session with automatic transaction management.

    Commits on successful exit, rolls back on exception and always closes
    the session.

    Yields:
        Session: SQLAlchemy session for database operations

    Raises:
        DatabaseConnectionError: If database not initialized
        Exception: Any exception from operations within the context

    Example:
        >>> with get_session() as session:
        ...     session.get(NotificationLogModel, log_id)
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    lock = _shared_connection_lock if _shared_connection_lock is not None else nullcontext()
    with lock:
        session = _session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.warning(
                f"Database session rolled back due to exception: {e}",
                extra={
                    "event": "database.session.rolled_back",
                    "error_type": type(e).__name__,
                },
            )
            raise
        finally:
            session.close()


def get_engine() -> Engine:
    """Get the database engine instance.

    Raises:
        DatabaseConnectionError: If database not initialized
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )

    return _engine


def close_database() -> None:
    """Dispose of the engine. Call during application shutdown."""
    global _engine, _session_factory, _shared_connection_lock

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        _shared_connection_lock = None
        logger.info("Database connections closed", extra={"event": "database.closed"})
