"""Schema initializer.

Brings a logical database to its baseline schema: wait until it is
reachable, skip if every expected table already exists, otherwise run the
baseline DDL once and verify the tables are there afterwards.

No locking is done here. Concurrent initializers against the same database
are safe only if the DDL script is itself safe to re-run concurrently
("CREATE TABLE IF NOT EXISTS" style statements).
"""

import logging
import time
from collections.abc import Callable, Iterable
from typing import NoReturn

from groundwork.core.readiness.availability import AvailabilityChecker
from groundwork.core.readiness.events import ReadinessEvent, log_event
from groundwork.core.readiness.timeouts import ReadinessTimeouts
from groundwork.domain.descriptor import DatabaseDescriptor
from groundwork.domain.entities import InitializationState, InitOutcome
from groundwork.domain.exceptions import (
    DatabaseUnavailableError,
    DdlApplicationError,
    InitializationError,
    SchemaVerificationError,
)
from groundwork.ports.database import (
    ConnectionHandle,
    ScriptExecutor,
    TableExistenceOracle,
)


def find_missing_tables(
    oracle: TableExistenceOracle,
    handle: ConnectionHandle,
    names: Iterable[str],
) -> list[str]:
    """Return the names the oracle reports as absent, sorted."""
    return sorted(name for name in names if not oracle.has_table(handle, name))


class SchemaInitializer:
    """Idempotent baseline schema bootstrap for one database at a time.

    A single initializer serves any number of databases; everything that
    differs between them lives in the DatabaseDescriptor passed to init().

    Example:
        initializer = SchemaInitializer(checker, SqliteTableOracle(),
                                        SqliteScriptExecutor(), timeout=30.0)
        outcome = initializer.init(descriptor, conn)
    """

    def __init__(
        self,
        checker: AvailabilityChecker,
        oracle: TableExistenceOracle,
        executor: ScriptExecutor,
        *,
        timeout: float = ReadinessTimeouts.AVAILABILITY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the schema initializer.

        Args:
            checker: Availability checker run before any schema work.
            oracle: Table existence lookups for the pre-check and verification.
            executor: Runs the baseline DDL script.
            timeout: Seconds the availability check may take.
            clock: Monotonic clock returning seconds.
            logger: Logger for readiness events (default: module logger).

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._checker = checker
        self._oracle = oracle
        self._executor = executor
        self._timeout = timeout
        self._clock = clock
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._state = InitializationState.NOT_STARTED

    @property
    def state(self) -> InitializationState:
        """State reached by the most recent init() call."""
        return self._state

    @property
    def timeout(self) -> float:
        return self._timeout

    def init(
        self, descriptor: DatabaseDescriptor, handle: ConnectionHandle | None
    ) -> InitOutcome:
        """Bring the database to its baseline schema.

        Args:
            descriptor: Database name, DDL and expected tables.
            handle: Connection to the database, or None if absent.

        Returns:
            InitOutcome with state SKIPPED (already initialized) or VERIFIED.

        Raises:
            DatabaseUnavailableError: Handle absent or database unreachable.
            InitializationInterruptedError: Availability check cancelled.
            DdlApplicationError: The DDL script failed.
            SchemaVerificationError: Expected tables missing after the DDL ran.
        """
        self._state = InitializationState.NOT_STARTED
        start = self._clock()
        name = descriptor.name

        if handle is None:
            # Fail fast: no probe, no table lookups
            self._fail(
                DatabaseUnavailableError(
                    "No connection handle available",
                    hint="Check that the database exists and the connection settings are correct",
                ),
                name,
                start,
            )

        try:
            check = self._checker.check(handle, self._timeout, database_name=name)
        except InitializationError as e:
            # The checker already emitted the failure event
            self._state = InitializationState.FAILED
            raise e.with_database(name)
        self._state = InitializationState.CHECKED

        expected = descriptor.expected_tables
        missing_before = find_missing_tables(self._oracle, handle, expected)
        if not missing_before:
            self._state = InitializationState.SKIPPED
            elapsed = self._clock() - start
            log_event(
                self._logger,
                logging.DEBUG,
                ReadinessEvent.SKIPPED,
                "Database %s already initialized, skipping DDL",
                name,
                database=name,
                elapsed=elapsed,
            )
            return InitOutcome(
                database_name=name,
                state=self._state,
                ddl_applied=False,
                elapsed=elapsed,
                check=check,
            )

        self._logger.debug(
            "Database %s is missing %d table(s): %s",
            name,
            len(missing_before),
            ", ".join(missing_before),
        )
        ddl_applied = self._apply_ddl(descriptor, handle, start)

        missing_after = find_missing_tables(self._oracle, handle, expected)
        if missing_after:
            self._fail(
                SchemaVerificationError(
                    f"Tables still missing after applying schema: {', '.join(missing_after)}",
                    missing_tables=tuple(missing_after),
                    hint=(
                        "The baseline DDL does not create every expected table"
                        if descriptor.has_ddl
                        else "The database has expected tables but no baseline DDL"
                    ),
                ),
                name,
                start,
            )

        self._state = InitializationState.VERIFIED
        elapsed = self._clock() - start
        created = tuple(missing_before)
        log_event(
            self._logger,
            logging.INFO,
            ReadinessEvent.VERIFIED,
            "Database %s verified: %d expected table(s) present",
            name,
            len(expected),
            database=name,
            elapsed=elapsed,
        )
        return InitOutcome(
            database_name=name,
            state=self._state,
            ddl_applied=ddl_applied,
            elapsed=elapsed,
            check=check,
            created_tables=created,
        )

    def _apply_ddl(
        self,
        descriptor: DatabaseDescriptor,
        handle: ConnectionHandle,
        start: float,
    ) -> bool:
        """Run the baseline DDL as one script. Empty DDL is a no-op."""
        name = descriptor.name
        if not descriptor.has_ddl:
            self._logger.warning("Database %s has no baseline DDL to apply", name)
            self._state = InitializationState.APPLIED
            return False

        try:
            self._executor.execute_script(handle, descriptor.ddl_source)
        except Exception as e:
            self._fail(
                DdlApplicationError(
                    f"Failed to apply baseline schema: {e}",
                    hint="Check the DDL script and the database user's privileges",
                ),
                name,
                start,
                cause=e,
            )

        self._state = InitializationState.APPLIED
        log_event(
            self._logger,
            logging.INFO,
            ReadinessEvent.APPLIED,
            "Applied baseline schema to %s",
            name,
            database=name,
            elapsed=self._clock() - start,
        )
        return True

    def _fail(
        self,
        error: InitializationError,
        database_name: str,
        start: float,
        cause: BaseException | None = None,
    ) -> NoReturn:
        """Record the failure, emit the failed event and raise."""
        self._state = InitializationState.FAILED
        error.elapsed = self._clock() - start
        error.with_database(database_name)
        log_event(
            self._logger,
            logging.ERROR,
            ReadinessEvent.FAILED,
            "Schema initialization failed (%s): %s",
            error.kind.value,
            error.message,
            database=database_name,
            elapsed=error.elapsed,
            kind=error.kind,
            cause=cause,
        )
        if cause is not None:
            raise error from cause
        raise error
