"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of GroundworkConfig to/from
TOML format, and building database descriptors from the configured entries.
"""

import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from groundwork.domain.config import (
    AvailabilityConfig,
    DatabaseConfig,
    GroundworkConfig,
    LoggingConfig,
)
from groundwork.domain.descriptor import DatabaseDescriptor

DEFAULT_CONFIG_FILENAME = "groundwork.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to groundwork.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_data_to_groundwork_config(data: dict[str, Any]) -> GroundworkConfig:
    """Convert raw config data dictionary to GroundworkConfig.

    Args:
        data: Dictionary with config sections

    Returns:
        GroundworkConfig instance

    Raises:
        ValueError: If a section has the wrong shape or invalid values.
    """
    availability_data = data.get("availability", {})
    logging_data = data.get("logging", {})
    databases_data = data.get("databases", [])

    if not isinstance(availability_data, dict) or not isinstance(logging_data, dict):
        raise ValueError("[availability] and [logging] must be tables")
    if not isinstance(databases_data, list):
        raise ValueError("databases must be an array of tables ([[databases]])")

    availability = AvailabilityConfig(
        timeout=float(availability_data.get("timeout", AvailabilityConfig.timeout)),
        retry_interval=float(
            availability_data.get("retry_interval", AvailabilityConfig.retry_interval)
        ),
    )
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", LoggingConfig.level)).upper(),  # type: ignore[arg-type]
    )

    databases: list[DatabaseConfig] = []
    for entry in databases_data:
        if not isinstance(entry, dict):
            raise ValueError("each [[databases]] entry must be a table")
        tables = entry.get("expected_tables", [])
        if not isinstance(tables, list):
            raise ValueError(
                f"expected_tables for {entry.get('name')!r} must be a list"
            )
        databases.append(
            DatabaseConfig(
                name=str(entry.get("name", "")),
                schema=str(entry.get("schema", "")),
                expected_tables=[str(table) for table in tables],
            )
        )

    return GroundworkConfig(
        availability=availability,
        logging=logging_config,
        databases=databases,
    )


def groundwork_config_to_data(config: GroundworkConfig) -> dict[str, Any]:
    """Convert GroundworkConfig to a dictionary suitable for TOML output.

    Args:
        config: Configuration to serialize

    Returns:
        Dictionary with config sections
    """
    data: dict[str, Any] = {
        "availability": {
            "timeout": config.availability.timeout,
            "retry_interval": config.availability.retry_interval,
        },
        "logging": {"level": config.logging.level},
    }
    if config.databases:
        data["databases"] = [
            {
                "name": database.name,
                "schema": database.schema,
                "expected_tables": list(database.expected_tables),
            }
            for database in config.databases
        ]
    return data


def load_config(path: Path) -> GroundworkConfig:
    """Load and validate a config file.

    Args:
        path: Path to groundwork.toml

    Returns:
        Validated GroundworkConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed or has invalid values
    """
    return config_data_to_groundwork_config(load_config_data(path))


def create_default_config_file(path: Path) -> None:
    """Write a starter groundwork.toml with one example database.

    Args:
        path: Where to write the config file. Parent directories are created.
    """
    template = GroundworkConfig(
        databases=[
            DatabaseConfig(
                name="app",
                schema="schema.sql",
                expected_tables=["app_settings"],
            )
        ]
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(groundwork_config_to_data(template), f)


def load_descriptors(
    config: GroundworkConfig, base_dir: Path
) -> list[DatabaseDescriptor]:
    """Build database descriptors from the configured entries.

    Schema paths are resolved relative to base_dir (normally the directory
    holding the config file). An entry without a schema gets empty DDL.

    Args:
        config: Loaded configuration
        base_dir: Directory relative schema paths are resolved against

    Returns:
        One descriptor per [[databases]] entry, in config order

    Raises:
        ValueError: If a configured schema file does not exist
    """
    descriptors: list[DatabaseDescriptor] = []
    for database in config.databases:
        if not database.schema:
            descriptors.append(
                DatabaseDescriptor(
                    name=database.name,
                    expected_tables=frozenset(database.expected_tables),
                )
            )
            continue

        schema_path = Path(database.schema)
        if not schema_path.is_absolute():
            schema_path = base_dir / schema_path
        if not schema_path.is_file():
            raise ValueError(
                f"Schema file for database {database.name!r} not found: {schema_path}"
            )
        descriptors.append(
            DatabaseDescriptor.from_schema_file(
                database.name, schema_path, database.expected_tables
            )
        )
    return descriptors
