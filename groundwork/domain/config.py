"""Config domain models for groundwork.

Configuration is stored in groundwork.toml and describes how long to wait for
the database, how often to probe it, and which logical databases to
bootstrap. This module defines the domain models that represent validated
configuration state.
"""

from dataclasses import dataclass, field
from typing import Literal

from groundwork.core.readiness.timeouts import ReadinessTimeouts

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass(frozen=True)
class AvailabilityConfig:
    """Configuration for the availability check loop.

    Attributes:
        timeout: Seconds to keep probing before giving up (default: 60).
        retry_interval: Fixed seconds to wait between failed probes (default: 1).

    Raises:
        ValueError: If timeout or retry_interval is not positive.
    """

    timeout: float = ReadinessTimeouts.AVAILABILITY_TIMEOUT
    retry_interval: float = ReadinessTimeouts.RETRY_INTERVAL

    def __post_init__(self) -> None:
        """Validate availability config after initialization."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.retry_interval <= 0:
            raise ValueError(
                f"retry_interval must be positive, got {self.retry_interval}"
            )


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for log output.

    Attributes:
        level: Root log level used by the CLI (default: INFO).
    """

    level: LogLevel = "INFO"

    def __post_init__(self) -> None:
        """Validate logging config after initialization."""
        if self.level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Invalid log level: {self.level}")


@dataclass(frozen=True)
class DatabaseConfig:
    """One [[databases]] entry.

    Attributes:
        name: Logical database name.
        schema: Path to the baseline DDL script, relative to the config file.
            Empty means the database has no baseline DDL.
        expected_tables: Tables that must exist after bootstrap.

    Raises:
        ValueError: If name is empty.
    """

    name: str
    schema: str = ""
    expected_tables: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate database config after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("database name cannot be empty")


@dataclass(frozen=True)
class GroundworkConfig:
    """Complete groundwork configuration.

    Attributes:
        availability: Probe loop configuration
        logging: Log output configuration
        databases: Logical databases to bootstrap, in order
    """

    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    databases: list[DatabaseConfig] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Reject duplicate database names."""
        seen: set[str] = set()
        for database in self.databases:
            if database.name in seen:
                raise ValueError(f"duplicate database name: {database.name}")
            seen.add(database.name)

    @staticmethod
    def default() -> "GroundworkConfig":
        """Create a config with all default values."""
        return GroundworkConfig(
            availability=AvailabilityConfig(),
            logging=LoggingConfig(),
            databases=[],
        )
