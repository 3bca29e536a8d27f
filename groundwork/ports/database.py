"""Database port interfaces.

Defines the capabilities the readiness core consumes: a trivial probe, a
table metadata lookup, a DDL script runner and a connection supplier.
Implementations should be in adapters/ layer.

Handles are opaque to the core. They are owned by the caller and borrowed
for the duration of each call; no port implementation may close them.
"""

from typing import Any, Protocol

# Opaque reference to the target database (e.g. a DB-API connection).
ConnectionHandle = Any


class AvailabilityProbe(Protocol):
    """Protocol for a trivial read-only reachability query."""

    def probe(self, handle: ConnectionHandle) -> None:
        """Issue a read-only query through the handle.

        Args:
            handle: Connection to probe.

        Raises:
            Exception: Any error means the database is not (yet) reachable.
        """
        ...


class TableExistenceOracle(Protocol):
    """Protocol for read-only table existence checks.

    Implementations must document their identifier comparison policy and
    apply it uniformly, so the same name gives the same answer before and
    after DDL is applied.
    """

    def has_table(self, handle: ConnectionHandle, name: str) -> bool:
        """Return True if a table with this name exists.

        Args:
            handle: Connection to inspect.
            name: Table name to look up.

        Returns:
            True if the table exists.
        """
        ...


class ScriptExecutor(Protocol):
    """Protocol for running a DDL script as a single operation."""

    def execute_script(self, handle: ConnectionHandle, script: str) -> None:
        """Execute a (possibly multi-statement) script through the handle.

        Args:
            handle: Connection to execute against.
            script: DDL script text.

        Raises:
            Exception: If the script fails to execute.
        """
        ...


class ConnectionSupplier(Protocol):
    """Protocol for obtaining a connection handle.

    Absence is signalled explicitly by returning None, never by raising.
    """

    def open(self) -> ConnectionHandle | None:
        """Return a handle, or None if the database is not present."""
        ...

    def close(self) -> None:
        """Release any handle this supplier opened."""
        ...
