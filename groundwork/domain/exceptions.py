"""Domain exceptions for Groundwork.

These exceptions represent readiness and bootstrap failures. They should be
caught at the application boundary (use case, CLI) and converted to
appropriate user-facing error messages. Every initialization failure carries
an ErrorKind so callers never have to parse messages.
"""

from groundwork.domain.entities import CheckResult, ErrorKind


class GroundworkDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class InitializationError(GroundworkDomainError):
    """Base class for failures of an availability check or schema init.

    Attributes:
        kind: Which failure this is.
        database_name: Logical database the failure applies to, if known.
        elapsed: Seconds spent before the failure was raised.
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        database_name: str | None = None,
        elapsed: float = 0.0,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.database_name = database_name
        self.elapsed = elapsed

    def with_database(self, database_name: str) -> "InitializationError":
        """Attach a database name for context and return self.

        The message is prefixed with the name so logs and CLI output say
        which database failed.
        """
        if self.database_name is None:
            self.database_name = database_name
        prefix = f"[{self.database_name}] "
        if not self.message.startswith(prefix):
            self.message = prefix + self.message
            self.args = (self.message,)
        return self


class DatabaseUnavailableError(InitializationError):
    """Raised when the database is unreachable within the timeout or the
    connection handle is absent.

    Attributes:
        result: The unavailable CheckResult (elapsed time, probe attempts and
            last probe failure).
    """

    kind = ErrorKind.UNAVAILABLE

    def __init__(
        self,
        message: str,
        *,
        result: CheckResult | None = None,
        database_name: str | None = None,
        hint: str | None = None,
    ) -> None:
        if result is None:
            result = CheckResult.create_unavailable(elapsed=0.0, attempts=0, cause=None)
        super().__init__(
            message, database_name=database_name, elapsed=result.elapsed, hint=hint
        )
        self.result = result

    @property
    def attempts(self) -> int:
        """Number of probes issued before giving up."""
        return self.result.attempts


class InitializationInterruptedError(InitializationError):
    """Raised when a wait between probes is cancelled."""

    kind = ErrorKind.INTERRUPTED


class DdlApplicationError(InitializationError):
    """Raised when executing the baseline DDL script fails."""

    kind = ErrorKind.DDL_APPLICATION_FAILED


class SchemaVerificationError(InitializationError):
    """Raised when expected tables are still missing after the DDL ran.

    Attributes:
        missing_tables: Names of the tables that are still absent, sorted.
    """

    kind = ErrorKind.SCHEMA_VERIFICATION_FAILED

    def __init__(
        self,
        message: str,
        *,
        missing_tables: tuple[str, ...] = (),
        database_name: str | None = None,
        elapsed: float = 0.0,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, database_name=database_name, elapsed=elapsed, hint=hint)
        self.missing_tables = tuple(missing_tables)
