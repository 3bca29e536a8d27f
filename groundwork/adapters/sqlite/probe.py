"""SQLite availability probe adapter.

Implements the AvailabilityProbe port using SQLite.
"""

import sqlite3


class SqliteProbe:
    """SQLite implementation of AvailabilityProbe port.

    Runs ``SELECT 1``, which touches no table and writes nothing.
    """

    def probe(self, handle: sqlite3.Connection) -> None:
        """Run a trivial query through the connection.

        Args:
            handle: Open SQLite connection.

        Raises:
            sqlite3.Error: If the database cannot answer the query.
        """
        handle.execute("SELECT 1").fetchone()
