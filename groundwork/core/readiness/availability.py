"""Availability checker.

Repeatedly probes a connection handle until a probe succeeds or the timeout
elapses. Waits between probes go through a threading.Event so that another
thread (or a signal handler) can cancel the check without waiting for the
current interval to run out.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import NoReturn

from groundwork.core.readiness.events import ReadinessEvent, log_event
from groundwork.core.readiness.timeouts import ReadinessTimeouts
from groundwork.domain.entities import CheckResult, ErrorKind
from groundwork.domain.exceptions import (
    DatabaseUnavailableError,
    InitializationInterruptedError,
)
from groundwork.ports.database import AvailabilityProbe, ConnectionHandle


class AvailabilityChecker:
    """Bounded retry loop around an availability probe.

    The checker holds no state between calls; each check starts its own
    clock. Only the read-only probe touches the database.

    Example:
        checker = AvailabilityChecker(SqliteProbe(), retry_interval=0.5)
        checker.check(conn, timeout=30.0, database_name="jobs")
    """

    def __init__(
        self,
        probe: AvailabilityProbe,
        *,
        retry_interval: float = ReadinessTimeouts.RETRY_INTERVAL,
        cancel_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            probe: Trivial read-only query used to test reachability.
            retry_interval: Fixed seconds to wait between failed probes.
            cancel_event: Event that cancels a check when set. A private
                event is created if none is given.
            clock: Monotonic clock returning seconds.
            logger: Logger for readiness events (default: module logger).

        Raises:
            ValueError: If retry_interval is not positive.
        """
        if retry_interval <= 0:
            raise ValueError(f"retry_interval must be positive, got {retry_interval}")
        self._probe = probe
        self._retry_interval = retry_interval
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._clock = clock
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def retry_interval(self) -> float:
        return self._retry_interval

    @property
    def cancel_event(self) -> threading.Event:
        """Event that cancels an in-progress check when set."""
        return self._cancel_event

    def cancel(self) -> None:
        """Cancel the current (and any future) check.

        Safe to call from another thread or a signal handler.
        """
        self._cancel_event.set()

    def check(
        self,
        handle: ConnectionHandle | None,
        timeout: float,
        *,
        database_name: str | None = None,
    ) -> CheckResult:
        """Probe the handle until it answers or the timeout elapses.

        Args:
            handle: Connection to probe, or None if no handle is available.
            timeout: Seconds to keep probing. Must be positive.
            database_name: Logical database name for logs and errors.

        Returns:
            CheckResult with available=True.

        Raises:
            ValueError: If timeout is not positive.
            DatabaseUnavailableError: If the handle is absent, or no probe
                succeeded within the timeout.
            InitializationInterruptedError: If the check was cancelled.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        if handle is None:
            # An absent handle is not transient; there is nothing to retry
            error = DatabaseUnavailableError(
                "No connection handle available",
                database_name=database_name,
                hint="Check that the database exists and the connection settings are correct",
            )
            self._log_failure(error, cause=None)
            raise error

        start = self._clock()
        attempts = 0
        last_error: Exception | None = None

        while True:
            if self._cancel_event.is_set():
                self._raise_interrupted(start, attempts, database_name)

            attempts += 1
            try:
                self._probe.probe(handle)
            except Exception as e:
                last_error = e
                self._logger.debug(
                    "Probe %d failed for %s: %s", attempts, database_name or "database", e
                )
            else:
                elapsed = self._clock() - start
                log_event(
                    self._logger,
                    logging.INFO,
                    ReadinessEvent.AVAILABLE,
                    "Database %s is available (%.2fs, %d attempt(s))",
                    database_name or "<unnamed>",
                    elapsed,
                    attempts,
                    database=database_name,
                    elapsed=elapsed,
                )
                return CheckResult.create_available(elapsed=elapsed, attempts=attempts)

            elapsed = self._clock() - start
            if elapsed >= timeout:
                error = DatabaseUnavailableError(
                    f"Database not available after {elapsed:.2f}s "
                    f"({attempts} attempt(s)): {last_error}",
                    result=CheckResult.create_unavailable(
                        elapsed=elapsed, attempts=attempts, cause=last_error
                    ),
                    database_name=database_name,
                    hint="Check that the database is running, or raise the availability timeout",
                )
                self._log_failure(error, cause=last_error)
                raise error from last_error

            wait = min(self._retry_interval, timeout - elapsed)
            if self._cancel_event.wait(wait):
                self._raise_interrupted(start, attempts, database_name)

    def _raise_interrupted(
        self, start: float, attempts: int, database_name: str | None
    ) -> NoReturn:
        elapsed = self._clock() - start
        error = InitializationInterruptedError(
            f"Availability check cancelled after {elapsed:.2f}s ({attempts} attempt(s))",
            database_name=database_name,
            elapsed=elapsed,
        )
        self._log_failure(error, cause=None)
        raise error

    def _log_failure(
        self,
        error: DatabaseUnavailableError | InitializationInterruptedError,
        cause: BaseException | None,
    ) -> None:
        level = logging.WARNING if error.kind is ErrorKind.INTERRUPTED else logging.ERROR
        log_event(
            self._logger,
            level,
            ReadinessEvent.FAILED,
            "Availability check failed (%s): %s",
            error.kind.value,
            error.message,
            database=error.database_name,
            elapsed=error.elapsed,
            kind=error.kind,
            cause=cause,
        )
