"""Tests for the AvailabilityChecker retry loop."""

import logging
import sqlite3
import threading
import time
from unittest.mock import Mock

import pytest

from groundwork.core.readiness.availability import AvailabilityChecker
from groundwork.domain.entities import ErrorKind
from groundwork.domain.exceptions import (
    DatabaseUnavailableError,
    InitializationInterruptedError,
)
from tests.conftest import FakeCancelEvent, FakeClock

HANDLE = object()


def _failing_probe(message: str = "connection refused") -> Mock:
    probe = Mock()
    probe.probe.side_effect = sqlite3.OperationalError(message)
    return probe


def _checker(
    probe: Mock,
    clock: FakeClock,
    cancel_event: FakeCancelEvent,
    retry_interval: float = 1.0,
    **kwargs,
) -> AvailabilityChecker:
    return AvailabilityChecker(
        probe,
        retry_interval=retry_interval,
        cancel_event=cancel_event,  # type: ignore[arg-type]
        clock=clock,
        **kwargs,
    )


class TestSuccessfulCheck:
    """Tests for checks that end with the database available."""

    def test_first_probe_succeeds(self, clock, cancel_event) -> None:
        """A reachable database returns immediately without waiting."""
        probe = Mock()
        checker = _checker(probe, clock, cancel_event)

        result = checker.check(HANDLE, 5.0)

        assert result.available
        assert result.attempts == 1
        assert result.elapsed == 0.0
        probe.probe.assert_called_once_with(HANDLE)
        assert cancel_event.waits == []

    def test_succeeds_after_retries(self, clock, cancel_event) -> None:
        """Failed probes are retried after the fixed interval."""
        probe = Mock()
        probe.probe.side_effect = [
            sqlite3.OperationalError("starting"),
            sqlite3.OperationalError("starting"),
            None,
        ]
        checker = _checker(probe, clock, cancel_event)

        result = checker.check(HANDLE, 10.0)

        assert result.available
        assert result.attempts == 3
        assert result.elapsed == pytest.approx(2.0)
        assert cancel_event.waits == [1.0, 1.0]


class TestTimeout:
    """Tests for checks that run out of time."""

    def test_always_failing_probe_raises_unavailable(self, clock, cancel_event) -> None:
        probe = _failing_probe()
        checker = _checker(probe, clock, cancel_event)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            checker.check(HANDLE, 5.0, database_name="jobs")

        error = exc_info.value
        assert error.kind is ErrorKind.UNAVAILABLE
        assert error.database_name == "jobs"
        assert error.elapsed == pytest.approx(5.0)
        # Probes at t=0,1,2,3,4,5
        assert error.attempts == 6
        assert probe.probe.call_count == 6

    def test_failure_carries_last_cause(self, clock, cancel_event) -> None:
        probe = Mock()
        probe.probe.side_effect = [
            sqlite3.OperationalError("first"),
            sqlite3.OperationalError("second"),
            sqlite3.OperationalError("last"),
        ]
        checker = _checker(probe, clock, cancel_event)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            checker.check(HANDLE, 2.0)

        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
        assert str(exc_info.value.__cause__) == "last"
        assert "last" in exc_info.value.message
        result = exc_info.value.result
        assert not result.available
        assert result.cause is exc_info.value.__cause__
        assert result.attempts == 3

    @pytest.mark.parametrize("timeout", [0.25, 1.0, 2.5, 3.7, 10.0])
    def test_elapsed_within_one_interval_of_timeout(
        self, clock, cancel_event, timeout: float
    ) -> None:
        """Elapsed time lands in [timeout, timeout + retry_interval)."""
        checker = _checker(_failing_probe(), clock, cancel_event, retry_interval=1.0)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            checker.check(HANDLE, timeout)

        assert timeout <= exc_info.value.elapsed < timeout + 1.0

    def test_last_wait_is_capped_by_remaining_time(self, clock, cancel_event) -> None:
        checker = _checker(_failing_probe(), clock, cancel_event, retry_interval=1.0)

        with pytest.raises(DatabaseUnavailableError):
            checker.check(HANDLE, 2.5)

        assert cancel_event.waits == [1.0, 1.0, 0.5]

    def test_slow_probe_still_within_bound(self, clock, cancel_event) -> None:
        """Time spent inside the probe counts towards the timeout."""

        def slow_failure(handle):
            clock.advance(0.3)
            raise sqlite3.OperationalError("timeout")

        probe = Mock()
        probe.probe.side_effect = slow_failure
        checker = _checker(probe, clock, cancel_event, retry_interval=1.0)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            checker.check(HANDLE, 2.0)

        assert 2.0 <= exc_info.value.elapsed < 3.0


class TestAbsentHandle:
    """Tests for the explicit no-handle input."""

    def test_fails_immediately_without_probing(self, clock, cancel_event) -> None:
        probe = Mock()
        checker = _checker(probe, clock, cancel_event)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            checker.check(None, 30.0, database_name="jobs")

        assert exc_info.value.elapsed == 0.0
        assert exc_info.value.attempts == 0
        assert exc_info.value.hint is not None
        probe.probe.assert_not_called()
        assert cancel_event.waits == []


class TestCancellation:
    """Tests for cancelling a check while it waits."""

    def test_cancel_during_wait_raises_interrupted(self, clock) -> None:
        event = FakeCancelEvent(clock, cancel_on_wait=2)
        probe = _failing_probe()
        checker = _checker(probe, clock, event)

        with pytest.raises(InitializationInterruptedError) as exc_info:
            checker.check(HANDLE, 30.0, database_name="jobs")

        assert exc_info.value.kind is ErrorKind.INTERRUPTED
        assert exc_info.value.database_name == "jobs"
        # No further probe after the interrupted wait
        assert probe.probe.call_count == 2
        assert exc_info.value.elapsed == pytest.approx(1.5)

    def test_already_cancelled_does_not_probe(self, clock, cancel_event) -> None:
        probe = Mock()
        checker = _checker(probe, clock, cancel_event)
        checker.cancel()

        with pytest.raises(InitializationInterruptedError):
            checker.check(HANDLE, 5.0)

        probe.probe.assert_not_called()

    def test_cancel_from_another_thread_is_prompt(self) -> None:
        """A real cancel interrupts a long sleep instead of finishing it."""
        checker = AvailabilityChecker(_failing_probe(), retry_interval=10.0)
        timer = threading.Timer(0.1, checker.cancel)

        start = time.monotonic()
        timer.start()
        try:
            with pytest.raises(InitializationInterruptedError):
                checker.check(HANDLE, 60.0)
        finally:
            timer.cancel()

        assert time.monotonic() - start < 5.0

    def test_cancel_event_is_shared(self) -> None:
        event = threading.Event()
        checker = AvailabilityChecker(Mock(), cancel_event=event)
        assert checker.cancel_event is event
        checker.cancel()
        assert event.is_set()


class TestValidation:
    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_non_positive_timeout_raises(self, clock, cancel_event, timeout: float) -> None:
        checker = _checker(Mock(), clock, cancel_event)
        with pytest.raises(ValueError, match="timeout must be positive"):
            checker.check(HANDLE, timeout)

    def test_non_positive_retry_interval_raises(self) -> None:
        with pytest.raises(ValueError, match="retry_interval must be positive"):
            AvailabilityChecker(Mock(), retry_interval=0)


class TestReadinessEvents:
    """Tests for structured log records emitted by the checker."""

    def test_available_event(self, clock, cancel_event, caplog) -> None:
        test_logger = logging.getLogger("test.readiness.checker")
        checker = _checker(Mock(), clock, cancel_event, logger=test_logger)

        with caplog.at_level(logging.DEBUG, logger="test.readiness.checker"):
            checker.check(HANDLE, 5.0, database_name="jobs")

        events = [r for r in caplog.records if getattr(r, "event", None) == "available"]
        assert len(events) == 1
        assert events[0].database == "jobs"

    def test_failed_event_has_kind_and_cause(self, clock, cancel_event, caplog) -> None:
        test_logger = logging.getLogger("test.readiness.checker")
        checker = _checker(_failing_probe("refused"), clock, cancel_event, logger=test_logger)

        with caplog.at_level(logging.DEBUG, logger="test.readiness.checker"):
            with pytest.raises(DatabaseUnavailableError):
                checker.check(HANDLE, 1.0, database_name="jobs")

        failed = [r for r in caplog.records if getattr(r, "event", None) == "failed"]
        assert len(failed) == 1
        assert failed[0].levelno == logging.ERROR
        assert failed[0].kind == "unavailable"
        assert "refused" in failed[0].cause
        assert failed[0].elapsed == pytest.approx(1.0)
