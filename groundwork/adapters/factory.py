"""Factory classes for use case and adapter instantiation.

This module centralizes the creation of use cases and their dependencies,
keeping the CLI layer free from direct adapter imports.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from groundwork.adapters.config.toml_config_provider import TomlConfigProvider
    from groundwork.adapters.sqlite.connection import SqliteConnectionSupplier
    from groundwork.adapters.sqlite.oracle import SqliteTableOracle
    from groundwork.core.readiness.availability import AvailabilityChecker
    from groundwork.core.readiness.bootstrap_usecase import BootstrapUseCase
    from groundwork.core.readiness.initializer import SchemaInitializer
    from groundwork.domain.config import AvailabilityConfig


class ConfigFactory:
    """Factory for creating configuration-related instances."""

    def create_config_provider(self, *, strict: bool = False) -> TomlConfigProvider:
        """Create a TomlConfigProvider instance.

        Args:
            strict: Raise on invalid config instead of using defaults.

        Returns:
            TomlConfigProvider instance.
        """
        from groundwork.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider(strict=strict)


class ConnectionFactory:
    """Factory for connection suppliers."""

    def create_sqlite_supplier(
        self, db_path: Path, *, create: bool = False
    ) -> SqliteConnectionSupplier:
        """Create a supplier for a SQLite database file.

        Args:
            db_path: Path to the database file.
            create: Create the file if missing instead of reporting it absent.

        Returns:
            SqliteConnectionSupplier instance.
        """
        from groundwork.adapters.sqlite.connection import SqliteConnectionSupplier

        return SqliteConnectionSupplier(db_path, create=create)


class ReadinessFactory:
    """Factory for the availability checker, schema initializer and
    bootstrap use case, wired to the SQLite adapters.

    Args:
        availability: Timeout and retry interval settings.
        cancel_event: Event shared by every checker this factory creates.
        logger: Logger injected into the created components.
    """

    def __init__(
        self,
        availability: AvailabilityConfig,
        *,
        cancel_event: threading.Event | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize factory with availability settings.

        Args:
            availability: Timeout and retry interval settings.
            cancel_event: Event that cancels availability checks when set.
            logger: Logger for readiness events (default: component loggers).
        """
        self._availability = availability
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._logger = logger

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    def create_oracle(self) -> SqliteTableOracle:
        """Create the SQLite table existence oracle."""
        from groundwork.adapters.sqlite.oracle import SqliteTableOracle

        return SqliteTableOracle()

    def create_checker(self) -> AvailabilityChecker:
        """Create an availability checker using the SQLite probe.

        Returns:
            AvailabilityChecker instance.
        """
        from groundwork.adapters.sqlite.probe import SqliteProbe
        from groundwork.core.readiness.availability import AvailabilityChecker

        return AvailabilityChecker(
            SqliteProbe(),
            retry_interval=self._availability.retry_interval,
            cancel_event=self._cancel_event,
            logger=self._logger,
        )

    def create_initializer(self) -> SchemaInitializer:
        """Create a schema initializer using the SQLite adapters.

        Returns:
            SchemaInitializer instance.
        """
        from groundwork.adapters.sqlite.executor import SqliteScriptExecutor
        from groundwork.core.readiness.initializer import SchemaInitializer

        return SchemaInitializer(
            self.create_checker(),
            self.create_oracle(),
            SqliteScriptExecutor(),
            timeout=self._availability.timeout,
            logger=self._logger,
        )

    def create_bootstrap_usecase(self) -> BootstrapUseCase:
        """Create the bootstrap use case.

        Returns:
            BootstrapUseCase instance.
        """
        from groundwork.core.readiness.bootstrap_usecase import BootstrapUseCase

        return BootstrapUseCase(self.create_initializer())
