"""SQLite adapters for groundwork readiness checks."""

from .connection import SqliteConnectionSupplier
from .executor import SqliteScriptExecutor
from .oracle import SqliteTableOracle
from .probe import SqliteProbe

__all__ = [
    "SqliteConnectionSupplier",
    "SqliteProbe",
    "SqliteScriptExecutor",
    "SqliteTableOracle",
]
