"""Tests for SqliteConnectionSupplier."""

import sqlite3
from pathlib import Path

from groundwork.adapters.sqlite.connection import SqliteConnectionSupplier


class TestSqliteConnectionSupplier:
    def test_missing_file_is_absent_handle(self, db_path: Path) -> None:
        supplier = SqliteConnectionSupplier(db_path)
        assert supplier.open() is None
        assert not db_path.exists()

    def test_create_makes_file_and_parents(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "app.db"
        with SqliteConnectionSupplier(db_path, create=True) as supplier:
            conn = supplier.open()
            assert conn is not None
            conn.execute("CREATE TABLE t (id INTEGER)")
            conn.commit()
        assert db_path.exists()

    def test_opens_existing_file(self, db_path: Path) -> None:
        sqlite3.connect(db_path).close()
        with SqliteConnectionSupplier(db_path) as supplier:
            conn = supplier.open()
            assert conn is not None
            assert conn.execute("SELECT 1").fetchone() == (1,)

    def test_open_returns_same_connection(self, db_path: Path) -> None:
        with SqliteConnectionSupplier(db_path, create=True) as supplier:
            assert supplier.open() is supplier.open()

    def test_close_is_idempotent(self, db_path: Path) -> None:
        supplier = SqliteConnectionSupplier(db_path, create=True)
        supplier.open()
        supplier.close()
        supplier.close()

    def test_reopens_after_close(self, db_path: Path) -> None:
        supplier = SqliteConnectionSupplier(db_path, create=True)
        first = supplier.open()
        supplier.close()
        second = supplier.open()
        try:
            assert second is not None
            assert second is not first
        finally:
            supplier.close()
