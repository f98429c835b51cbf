"""Scoped logging fields backed by contextvars.

A dispatch pushes ``event_type``; the delivery service adds ``template``
and then ``log_id`` once the pending row exists. ``ContextualFilter`` copies
whatever is active onto each record, so deep call sites need not repeat
these fields.
"""

from contextvars import ContextVar, Token, copy_context
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

# Each push stores a new dict; stored dicts are never mutated
LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Snapshot of the active fields."""
    return dict(LogContextVar.get())


def push_log_context(**fields: Any) -> Token:
    """Layer ``fields`` over the active context; pass the token to pop_log_context.

    Example:
        >>> token = push_log_context(event_type="service.unhealthy")
        >>> get_log_context()["event_type"]
        'service.unhealthy'
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every field. Used by tests."""
    LogContextVar.set({})


class log_context:
    """``with`` block that adds fields for its duration.

    The previous context is restored on exit, including when the block
    raises; exceptions are never suppressed.

    Example:
        >>> with log_context(event_type="application.created"):
        ...     with log_context(log_id="9f1c"):
        ...         sorted(get_log_context())
        ['event_type', 'log_id']
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "log_context":
        self._token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self._token is not None:
            pop_log_context(self._token)
            self._token = None
        return False


def bind_log_context(func: Callable[..., T]) -> Callable[..., T]:
    """Capture the caller's context for a callable that runs on another thread.

    Pool threads start with an empty context, so fan-out wraps each task
    with this before submitting it.

    Example:
        >>> with log_context(event_type="service.unhealthy"):
        ...     executor.submit(bind_log_context(send_one), recipient)
    """
    captured = copy_context()

    def runner(*args: Any, **kwargs: Any) -> T:
        # A Context can't be entered by two threads at once
        return captured.copy().run(func, *args, **kwargs)

    return runner
