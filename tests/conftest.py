"""Pytest configuration and shared fixtures."""

import gc
import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from groundwork.domain.descriptor import DatabaseDescriptor

JOBS_DDL = """
CREATE TABLE IF NOT EXISTS jobs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    scope TEXT NOT NULL,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS attempts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    job_id INTEGER NOT NULL REFERENCES jobs(id),
    attempt_number INTEGER NOT NULL,
    status TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_attempts_job_id ON attempts(job_id);
"""


# ============================================================================
# Deterministic Time
# ============================================================================
# The availability checker takes a clock and a cancel event. These fakes let
# tests drive the retry loop without sleeping: every wait advances the clock
# by exactly the requested amount.


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCancelEvent:
    """Stand-in for threading.Event whose wait() advances a FakeClock.

    Args:
        clock: Clock advanced by each wait.
        cancel_on_wait: If set, the event becomes set during this (1-based)
            wait call, as if another thread cancelled mid-sleep.
    """

    def __init__(self, clock: FakeClock, cancel_on_wait: int | None = None) -> None:
        self._clock = clock
        self._cancel_on_wait = cancel_on_wait
        self._set = False
        self.waits: list[float] = []

    def is_set(self) -> bool:
        return self._set

    def set(self) -> None:
        self._set = True

    def wait(self, timeout: float | None = None) -> bool:
        self.waits.append(timeout)
        if self._cancel_on_wait is not None and len(self.waits) >= self._cancel_on_wait:
            # Cancelled halfway through the sleep
            self._clock.advance((timeout or 0.0) / 2)
            self._set = True
            return True
        self._clock.advance(timeout or 0.0)
        return self._set


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake monotonic clock starting at 0."""
    return FakeClock()


@pytest.fixture
def cancel_event(clock: FakeClock) -> FakeCancelEvent:
    """Provide a fake cancel event bound to the fake clock."""
    return FakeCancelEvent(clock)


# ============================================================================
# Databases
# ============================================================================


@pytest.fixture(autouse=True)
def cleanup_database_connections():
    """Automatically clean up database connections after each test.

    Runs gc.collect() twice so unclosed SQLite connections are finalized
    without ResourceWarning noise.
    """
    yield
    gc.collect()
    gc.collect()


@pytest.fixture
def memory_conn() -> Iterator[sqlite3.Connection]:
    """Provide an empty in-memory SQLite connection."""
    conn = sqlite3.connect(":memory:")
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Provide a path for a SQLite database file (not yet created)."""
    return tmp_path / "app.db"


@pytest.fixture
def jobs_descriptor() -> DatabaseDescriptor:
    """Descriptor for a jobs database with two expected tables."""
    return DatabaseDescriptor(
        name="jobs",
        ddl_source=JOBS_DDL,
        expected_tables=frozenset({"jobs", "attempts"}),
    )


def table_names(conn: sqlite3.Connection) -> list[str]:
    """Names of the user tables in a SQLite database, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ).fetchall()
    return [row[0] for row in rows]
