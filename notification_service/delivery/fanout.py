"""Fan-out of one event to several recipients.

``ALL_OR_NOTHING`` sends in order and stops at the first failure, which
propagates so the whole event can be redelivered. ``BEST_EFFORT`` runs every
recipient on a bounded thread pool, logs each failure and reports the split.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from notification_service.logging import get_logger
from notification_service.logging.context import bind_log_context

from .service import DeliveryResult, describe_error

logger = get_logger(__name__, component="fanout")


class FanOutPolicy(str, Enum):
    ALL_OR_NOTHING = "all_or_nothing"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class SendTask:
    """One recipient's unit of work.

    Attributes:
        label: Recipient description for reports, e.g. ``recruiter:r1``
        run: Resolves the recipient, renders and sends; raises on failure
    """

    label: str
    run: Callable[[], DeliveryResult]


@dataclass(frozen=True)
class RecipientFailure:
    label: str
    error: str
    error_type: str


@dataclass
class DispatchReport:
    """What happened to each recipient of one event.

    Attributes:
        event_type: Event that was dispatched
        sent: Delivery results, in task order
        failed: Recipients that failed (best-effort only), in task order
        skipped_reason: Set when the event produced no sends at all
    """

    event_type: str
    sent: List[DeliveryResult] = field(default_factory=list)
    failed: List[RecipientFailure] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @classmethod
    def skipped(cls, event_type: str, reason: str) -> "DispatchReport":
        return cls(event_type=event_type, skipped_reason=reason)

    @property
    def sent_recipients(self) -> List[str]:
        return [result.recipient for result in self.sent]

    @property
    def attempted(self) -> int:
        return len(self.sent) + len(self.failed)

    @property
    def all_sent(self) -> bool:
        return not self.failed and self.skipped_reason is None

    def merge(self, other: "DispatchReport") -> "DispatchReport":
        self.sent.extend(other.sent)
        self.failed.extend(other.failed)
        return self


def dispatch(
    event_type: str,
    tasks: Sequence[SendTask],
    policy: FanOutPolicy,
    max_workers: int = 4,
) -> DispatchReport:
    """Run send tasks under a fan-out policy.

    Args:
        event_type: Event being dispatched (for the report and logs)
        tasks: One task per recipient
        policy: How failures are handled
        max_workers: Thread pool bound for best-effort fan-out

    Returns:
        DispatchReport

    Raises:
        Exception: Under ALL_OR_NOTHING, the first task failure, unchanged
    """
    report = DispatchReport(event_type=event_type)
    if not tasks:
        return report

    if policy is FanOutPolicy.ALL_OR_NOTHING:
        for task in tasks:
            report.sent.append(task.run())
        return report

    if len(tasks) == 1:
        outcomes = [_run_isolated(tasks[0])]
    else:
        workers = max(1, min(max_workers, len(tasks)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fanout") as executor:
            futures = [executor.submit(bind_log_context(_run_isolated), task) for task in tasks]
            outcomes = [future.result() for future in futures]

    for outcome in outcomes:
        if isinstance(outcome, RecipientFailure):
            report.failed.append(outcome)
        else:
            report.sent.append(outcome)

    logger.info(
        f"Fan-out complete: {len(report.sent)} sent, {len(report.failed)} failed",
        extra={
            "event": "fanout.completed",
            "sent_count": len(report.sent),
            "failed_count": len(report.failed),
        },
    )
    return report


def _run_isolated(task: SendTask):
    """Run one best-effort task; a failure becomes a RecipientFailure."""
    try:
        return task.run()
    except Exception as e:
        logger.warning(
            f"Recipient {task.label} failed: {describe_error(e)}",
            exc_info=True,
            extra={
                "event": "fanout.recipient.failed",
                "recipient_label": task.label,
                "error_type": type(e).__name__,
            },
        )
        return RecipientFailure(label=task.label, error=describe_error(e), error_type=type(e).__name__)
