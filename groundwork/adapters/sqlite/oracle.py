"""SQLite table existence adapter.

Implements the TableExistenceOracle port using the sqlite_master catalog.
"""

import sqlite3


class SqliteTableOracle:
    """SQLite implementation of TableExistenceOracle port.

    Identifier policy: names are compared case-insensitively (ASCII case
    folding via COLLATE NOCASE), which is how SQLite itself resolves table
    names. ``Jobs`` and ``jobs`` therefore always give the same answer.
    Views, indexes and triggers are not tables and are never reported.
    """

    _QUERY = (
        "SELECT 1 FROM sqlite_master "
        "WHERE type = 'table' AND name = ? COLLATE NOCASE LIMIT 1"
    )

    def has_table(self, handle: sqlite3.Connection, name: str) -> bool:
        """Check whether a table exists in the main schema.

        Args:
            handle: Open SQLite connection.
            name: Table name to look up.

        Returns:
            True if the table exists.
        """
        return handle.execute(self._QUERY, (name,)).fetchone() is not None
