"""Bootstrap use case for bringing databases to their baseline schema.

Runs the schema initializer for each configured database in order and
reports the result as a response object, following the use case error
handling contract in groundwork.core.use_case_errors.
"""

import logging
from dataclasses import dataclass, field

from groundwork.core.readiness.initializer import SchemaInitializer
from groundwork.core.use_case_errors import format_error_message, log_use_case_error
from groundwork.domain.descriptor import DatabaseDescriptor
from groundwork.domain.entities import ErrorKind, InitOutcome
from groundwork.domain.exceptions import (
    InitializationError,
    SchemaVerificationError,
)
from groundwork.ports.database import ConnectionHandle

logger = logging.getLogger(__name__)


@dataclass
class BootstrapRequest:
    """Request to bootstrap one or more databases.

    Attributes:
        descriptors: Databases to bootstrap, in order.
        handle: Connection shared by all descriptors, or None if absent.
    """

    descriptors: list[DatabaseDescriptor]
    handle: ConnectionHandle | None


@dataclass
class BootstrapResponse:
    """Response from a bootstrap operation.

    Attributes:
        outcomes: Outcomes of the databases that were initialized successfully.
        success: Whether every database was initialized.
        error: Error message if bootstrap failed.
        error_kind: Kind of failure, or None for success and unexpected errors.
        failed_database: Name of the database that failed, if any.
        missing_tables: Tables still absent after DDL, for verification failures.
        hint: Optional actionable suggestion for the user.
    """

    outcomes: list[InitOutcome] = field(default_factory=list)
    success: bool = True
    error: str | None = None
    error_kind: ErrorKind | None = None
    failed_database: str | None = None
    missing_tables: tuple[str, ...] = ()
    hint: str | None = None

    @property
    def applied_count(self) -> int:
        """Number of databases whose DDL was applied."""
        return sum(1 for outcome in self.outcomes if outcome.ddl_applied)

    @property
    def skipped_count(self) -> int:
        """Number of databases that were already initialized."""
        return sum(1 for outcome in self.outcomes if outcome.was_skipped)

    @classmethod
    def create_success(cls, outcomes: list[InitOutcome]) -> "BootstrapResponse":
        """Create a success response.

        Args:
            outcomes: One outcome per bootstrapped database.

        Returns:
            BootstrapResponse with success=True.
        """
        return cls(outcomes=list(outcomes), success=True)

    @classmethod
    def create_error(
        cls,
        message: str,
        *,
        outcomes: list[InitOutcome] | None = None,
        error_kind: ErrorKind | None = None,
        failed_database: str | None = None,
        missing_tables: tuple[str, ...] = (),
        hint: str | None = None,
    ) -> "BootstrapResponse":
        """Create an error response.

        Args:
            message: Error message describing what went wrong.
            outcomes: Outcomes of databases completed before the failure.
            error_kind: Kind of failure, if it was an initialization error.
            failed_database: Name of the database that failed.
            missing_tables: Tables still missing for verification failures.
            hint: Optional actionable suggestion.

        Returns:
            BootstrapResponse with success=False.
        """
        return cls(
            outcomes=list(outcomes or []),
            success=False,
            error=message,
            error_kind=error_kind,
            failed_database=failed_database,
            missing_tables=missing_tables,
            hint=hint,
        )


class BootstrapUseCase:
    """Use case for bootstrapping the baseline schema of several databases.

    Databases are processed in request order. The first failure stops the
    run: later databases are not attempted, since a process embedding this
    should treat any failure as fatal to startup.
    """

    def __init__(self, initializer: SchemaInitializer):
        """Initialize the use case.

        Args:
            initializer: Schema initializer shared by all databases.
        """
        self._initializer = initializer

    def execute(self, request: BootstrapRequest) -> BootstrapResponse:
        """Execute the bootstrap operation.

        Error handling contract:
            - KeyboardInterrupt/SystemExit are re-raised (user wants to exit)
            - All other exceptions are caught and converted to error responses
            - See groundwork.core.use_case_errors for the error handling pattern

        Args:
            request: Bootstrap request with descriptors and connection handle.

        Returns:
            BootstrapResponse with per-database outcomes, or error information.
        """
        outcomes: list[InitOutcome] = []
        for descriptor in request.descriptors:
            try:
                outcomes.append(self._initializer.init(descriptor, request.handle))
            except (KeyboardInterrupt, SystemExit):
                raise
            except InitializationError as e:
                log_use_case_error(e, "bootstrap")
                missing = e.missing_tables if isinstance(e, SchemaVerificationError) else ()
                return BootstrapResponse.create_error(
                    e.message,
                    outcomes=outcomes,
                    error_kind=e.kind,
                    failed_database=descriptor.name,
                    missing_tables=missing,
                    hint=e.hint,
                )
            except Exception as e:
                log_use_case_error(e, "bootstrap")
                return BootstrapResponse.create_error(
                    format_error_message(e, "bootstrap"),
                    outcomes=outcomes,
                    failed_database=descriptor.name,
                )

        logger.info(
            "Bootstrap complete: %d database(s), %d applied, %d already initialized",
            len(outcomes),
            sum(1 for outcome in outcomes if outcome.ddl_applied),
            sum(1 for outcome in outcomes if outcome.was_skipped),
        )
        return BootstrapResponse.create_success(outcomes)
