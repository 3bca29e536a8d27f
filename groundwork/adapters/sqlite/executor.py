"""SQLite DDL script adapter.

Implements the ScriptExecutor port using SQLite.
"""

import sqlite3


class SqliteScriptExecutor:
    """SQLite implementation of ScriptExecutor port.

    The script runs through ``executescript``, which commits any pending
    transaction first and then runs every statement in order. A failing
    statement stops the script; statements before it stay applied, which is
    why baseline scripts are written as "CREATE ... IF NOT EXISTS".
    """

    def execute_script(self, handle: sqlite3.Connection, script: str) -> None:
        """Execute the DDL script and commit.

        Args:
            handle: Open SQLite connection.
            script: One or more SQL statements.

        Raises:
            sqlite3.Error: If any statement fails.
        """
        handle.executescript(script)
        handle.commit()
