"""Domain entities for readiness checks and schema bootstrap."""

from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure a readiness or bootstrap operation can end in.

    Callers branch on the kind rather than on message content.
    """

    UNAVAILABLE = "unavailable"  # unreachable within timeout, or handle absent
    INTERRUPTED = "interrupted"  # cancelled while waiting between probes
    DDL_APPLICATION_FAILED = "ddl_application_failed"
    SCHEMA_VERIFICATION_FAILED = "schema_verification_failed"


class InitializationState(str, Enum):
    """States of a single schema initialization.

    NOT_STARTED -> CHECKED -> {SKIPPED | APPLIED} -> VERIFIED, or FAILED from
    any state. SKIPPED, VERIFIED and FAILED are terminal.
    """

    NOT_STARTED = "not_started"
    CHECKED = "checked"
    SKIPPED = "skipped"
    APPLIED = "applied"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of an availability check.

    Attributes:
        available: True if a probe succeeded before the deadline.
        elapsed: Seconds spent in the check.
        attempts: Number of probes issued (0 when the handle was absent).
        cause: Last probe failure, or None when available.
    """

    available: bool
    elapsed: float
    attempts: int
    cause: BaseException | None = None

    @classmethod
    def create_available(cls, *, elapsed: float, attempts: int) -> "CheckResult":
        return cls(available=True, elapsed=elapsed, attempts=attempts, cause=None)

    @classmethod
    def create_unavailable(
        cls,
        *,
        elapsed: float,
        attempts: int,
        cause: BaseException | None,
    ) -> "CheckResult":
        return cls(available=False, elapsed=elapsed, attempts=attempts, cause=cause)


@dataclass(frozen=True)
class InitOutcome:
    """Successful result of a schema initialization.

    Attributes:
        database_name: Name of the descriptor that was initialized.
        state: Terminal success state (SKIPPED or VERIFIED).
        ddl_applied: True if the DDL script was executed.
        created_tables: Expected tables that were missing before the DDL ran
            and present afterwards, sorted.
        elapsed: Total seconds spent in init, including the availability check.
        check: Result of the availability check that preceded the work.
    """

    database_name: str
    state: InitializationState
    ddl_applied: bool
    elapsed: float
    check: CheckResult
    created_tables: tuple[str, ...] = field(default_factory=tuple)

    @property
    def was_skipped(self) -> bool:
        """True if the database was already initialized."""
        return self.state is InitializationState.SKIPPED
