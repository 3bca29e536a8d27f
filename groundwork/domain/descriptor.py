"""Database descriptor value object.

A descriptor identifies one logical database and the baseline schema it must
carry before dependent components may use it. One descriptor per logical
database replaces a subclass per database: everything that varies between
databases is plain configuration data.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class DatabaseDescriptor:
    """Immutable description of a logical database's baseline schema.

    Attributes:
        name: Logical database name used in logs and error messages.
        ddl_source: Baseline DDL script. Expected to be safe to re-run
            ("CREATE TABLE IF NOT EXISTS" style statements).
        expected_tables: Table names that must exist once the baseline
            schema is in place. May be empty.

    Raises:
        ValueError: If name is empty or whitespace.
    """

    name: str
    ddl_source: str = ""
    expected_tables: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate name and normalise expected tables to a frozenset."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("DatabaseDescriptor name cannot be empty")
        if self.ddl_source is None:
            object.__setattr__(self, "ddl_source", "")
        if isinstance(self.expected_tables, str):
            # A bare string would otherwise be split into characters
            tables: Iterable[str] = (self.expected_tables,)
        else:
            tables = self.expected_tables or ()
        object.__setattr__(self, "expected_tables", frozenset(tables))

    @property
    def has_ddl(self) -> bool:
        """True if the DDL script contains anything besides whitespace."""
        return bool(self.ddl_source.strip())

    @classmethod
    def from_schema_file(
        cls,
        name: str,
        schema_path: Path,
        expected_tables: Iterable[str] = (),
    ) -> "DatabaseDescriptor":
        """Build a descriptor whose DDL is read from a schema file.

        Args:
            name: Logical database name.
            schema_path: Path to a UTF-8 encoded SQL script.
            expected_tables: Tables the script is expected to create.

        Returns:
            DatabaseDescriptor with the file contents as ddl_source.

        Raises:
            FileNotFoundError: If schema_path does not exist.
        """
        ddl = Path(schema_path).read_text(encoding="utf-8")
        return cls(name=name, ddl_source=ddl, expected_tables=frozenset(expected_tables))

    def __str__(self) -> str:
        return self.name
