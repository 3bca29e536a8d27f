"""Structured readiness events.

Every state transition is logged as one record whose ``extra`` carries the
event name, database name and elapsed seconds, so a log sink can index them
without parsing the message.
"""

import logging
from enum import Enum

from groundwork.domain.entities import ErrorKind


class ReadinessEvent(str, Enum):
    """Names of the events emitted on state transitions."""

    AVAILABLE = "available"
    SKIPPED = "skipped-already-initialized"
    APPLIED = "applied"
    VERIFIED = "verified"
    FAILED = "failed"


def log_event(
    logger: logging.Logger,
    level: int,
    event: ReadinessEvent,
    message: str,
    *args: object,
    database: str | None,
    elapsed: float,
    kind: ErrorKind | None = None,
    cause: BaseException | None = None,
) -> None:
    """Emit one structured readiness event.

    Args:
        logger: Injected logger to emit through.
        level: Log level (e.g. logging.INFO).
        event: Event name.
        message: %-style message.
        *args: Message arguments.
        database: Logical database name, if known.
        elapsed: Seconds spent so far.
        kind: Error kind for FAILED events.
        cause: Underlying exception for FAILED events.
    """
    extra = {
        "event": event.value,
        "database": database,
        "elapsed": round(elapsed, 3),
    }
    if kind is not None:
        extra["kind"] = kind.value
    if cause is not None:
        extra["cause"] = repr(cause)
    logger.log(level, message, *args, extra=extra)
