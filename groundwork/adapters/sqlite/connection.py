"""SQLite connection supplier.

Implements the ConnectionSupplier port. A database file that does not exist
(or cannot be opened) is reported as an absent handle rather than an error,
so the readiness core can fail fast with an "unavailable" result.
"""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Self

logger = logging.getLogger(__name__)


class SqliteConnectionSupplier:
    """Supplies a single lazily opened SQLite connection.

    Thread Safety:
        The connection is opened with double-checked locking and with
        check_same_thread=False, so a handle opened on one thread can be
        used by a checker running on another.

    Example:
        with SqliteConnectionSupplier(Path("app.db"), create=True) as supplier:
            handle = supplier.open()
    """

    def __init__(
        self,
        db_path: Path,
        *,
        create: bool = False,
        timeout: float = 5.0,
    ) -> None:
        """Initialize the supplier.

        Args:
            db_path: Path to the SQLite database file.
            create: Create the file (and parent directories) if missing.
                When False, a missing file is an absent handle.
            timeout: Seconds SQLite waits on a locked database.
        """
        self.db_path = db_path
        self._create = create
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def open(self) -> sqlite3.Connection | None:
        """Return the connection, opening it if needed.

        Returns:
            Open connection, or None if the database file is absent or
            cannot be opened.
        """
        if self._conn is None:
            with self._conn_lock:
                # Double-check pattern: re-check after acquiring lock
                if self._conn is None:
                    self._conn = self._connect()
        return self._conn

    def _connect(self) -> sqlite3.Connection | None:
        if not self._create and not self.db_path.exists():
            logger.warning("Database file not found: %s", self.db_path)
            return None
        if self._create:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        mode = "rwc" if self._create else "rw"
        uri = f"{self.db_path.resolve().as_uri()}?mode={mode}"
        try:
            return sqlite3.connect(
                uri, uri=True, timeout=self._timeout, check_same_thread=False
            )
        except sqlite3.Error as e:
            logger.warning("Could not open database %s: %s", self.db_path, e)
            return None

    def close(self) -> None:
        """Close the connection if open.

        Safe to call multiple times.
        """
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> bool:
        """Exit context manager, closing the connection."""
        self.close()
        return False
