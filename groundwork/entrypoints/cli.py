"""Groundwork CLI entrypoint.

Command-line interface for checking database availability and bootstrapping
baseline schemas at service startup.
"""

from __future__ import annotations

import contextlib
import dataclasses
import functools
import logging
import signal
import sys
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from groundwork.core.readiness.bootstrap_usecase import BootstrapResponse
    from groundwork.domain.config import AvailabilityConfig, GroundworkConfig

from groundwork.core.errors import (
    GroundworkCliError,
    config_not_found_error,
    no_databases_error,
)
from groundwork.domain.exceptions import GroundworkDomainError, InitializationError
from groundwork.shared.config_io import DEFAULT_CONFIG_FILENAME
from groundwork.version import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors keep their hint (and, for initialization failures, their
    kind so interrupted runs exit with 130). Anything else becomes a
    GroundworkCliError with a generic hint.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (GroundworkCliError, click.exceptions.Exit):
                raise
            except InitializationError as e:
                raise GroundworkCliError(e.message, hint=e.hint, kind=e.kind) from e
            except GroundworkDomainError as e:
                raise GroundworkCliError(e.message, hint=e.hint) from e
            except ValueError as e:
                raise GroundworkCliError(
                    str(e),
                    hint=f"Check {DEFAULT_CONFIG_FILENAME} and the command options",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise GroundworkCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(level: int) -> None:
    """Send log records to stderr at the given level."""
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def _apply_config_log_level(ctx: click.Context, config: GroundworkConfig) -> None:
    """Use the configured log level unless --verbose or --quiet was given."""
    if not ctx.obj.get("verbose") and not ctx.obj.get("quiet"):
        logging.getLogger().setLevel(getattr(logging, config.logging.level))


def _load_config(config_path: Path) -> GroundworkConfig:
    """Load configuration from an existing groundwork.toml.

    Args:
        config_path: Path to the config file.

    Returns:
        GroundworkConfig with the file's settings.

    Raises:
        GroundworkCliError: If the config file does not exist.
        ValueError: If the config file is malformed or has invalid values.
    """
    from groundwork.adapters.factory import ConfigFactory

    if not config_path.exists():
        config_not_found_error(config_path)
    return ConfigFactory().create_config_provider(strict=True).load(config_path)


def _availability_with_timeout(
    availability: AvailabilityConfig, timeout: float | None
) -> AvailabilityConfig:
    """Apply a --timeout override to the configured availability settings."""
    if timeout is None:
        return availability
    return dataclasses.replace(availability, timeout=timeout)


@contextlib.contextmanager
def _cancel_on_signals(cancel_event: threading.Event) -> Iterator[None]:
    """Set cancel_event on SIGINT/SIGTERM for the duration of the block.

    Previous handlers are restored on exit. Outside the main thread signal
    handlers cannot be installed, so the block runs without them.
    """

    def signal_handler(signum, frame):
        logging.getLogger(__name__).info("Received signal %s, cancelling...", signum)
        cancel_event.set()

    previous: dict[int, object] = {}
    try:
        for sig in (signal.SIGINT, signal.SIGTERM):
            previous[sig] = signal.signal(sig, signal_handler)
    except ValueError:
        pass
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@click.group()
@click.version_option(version=__version__, prog_name="groundwork")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """Groundwork - database readiness checks and schema bootstrap.

    Waits for a database to become reachable and makes sure its baseline
    tables exist before the rest of a service starts.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    if verbose:
        _configure_logging(logging.DEBUG)
    elif quiet:
        _configure_logging(logging.WARNING)
    else:
        _configure_logging(logging.INFO)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    help="Path to groundwork.toml.",
)
database_option = click.option(
    "--database",
    "-d",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Path to the SQLite database file.",
)
timeout_option = click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for the database (overrides config).",
)


def _report_bootstrap_results(response: BootstrapResponse, quiet: bool) -> None:
    """Report bootstrap results to the user.

    Note: This function should only be called when response.success is True.

    Args:
        response: The BootstrapResponse from the use case.
        quiet: If True, only print the summary line.
    """
    if not quiet:
        for outcome in response.outcomes:
            if outcome.was_skipped:
                click.echo(f"  ✓ {outcome.database_name}: already initialized")
            else:
                created = ", ".join(outcome.created_tables) or "no tables"
                click.echo(f"  ✓ {outcome.database_name}: initialized ({created})")
    click.echo(
        f"Bootstrapped {len(response.outcomes)} database(s): "
        f"{response.applied_count} initialized, {response.skipped_count} already initialized"
    )


@cli.command()
@config_option
@database_option
@timeout_option
@click.option(
    "--create",
    is_flag=True,
    help="Create the database file if it does not exist.",
)
@click.pass_context
@handle_cli_errors("init")
def init(
    ctx: click.Context,
    config_path: Path,
    db_path: Path,
    timeout: float | None,
    create: bool,
) -> None:
    """Bootstrap the baseline schema of every configured database.

    Waits for the database to become available, then applies each
    database's DDL unless all of its expected tables already exist.
    Exits non-zero if any database could not be brought up.
    """
    from groundwork.adapters.factory import ConnectionFactory, ReadinessFactory
    from groundwork.core.readiness.bootstrap_usecase import BootstrapRequest
    from groundwork.shared.config_io import load_descriptors

    config = _load_config(config_path)
    _apply_config_log_level(ctx, config)
    if not config.databases:
        no_databases_error(config_path)
    descriptors = load_descriptors(config, config_path.parent)

    availability = _availability_with_timeout(config.availability, timeout)
    readiness = ReadinessFactory(availability)
    use_case = readiness.create_bootstrap_usecase()

    supplier = ConnectionFactory().create_sqlite_supplier(db_path, create=create)
    with supplier, _cancel_on_signals(readiness.cancel_event):
        response = use_case.execute(BootstrapRequest(descriptors, supplier.open()))

    if not response.success:
        raise GroundworkCliError(
            response.error or "Unknown error",
            hint=response.hint,
            kind=response.error_kind,
        )

    _report_bootstrap_results(response, ctx.obj.get("quiet", False))


@cli.command()
@database_option
@timeout_option
@click.option(
    "--retry-interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between probes (default: 1).",
)
@click.pass_context
@handle_cli_errors("check")
def check(
    ctx: click.Context,
    db_path: Path,
    timeout: float | None,
    retry_interval: float | None,
) -> None:
    """Wait until the database answers a trivial query.

    Makes no changes to the database.
    """
    from groundwork.adapters.factory import ConnectionFactory, ReadinessFactory
    from groundwork.domain.config import AvailabilityConfig

    availability = AvailabilityConfig()
    if timeout is not None:
        availability = dataclasses.replace(availability, timeout=timeout)
    if retry_interval is not None:
        availability = dataclasses.replace(availability, retry_interval=retry_interval)

    readiness = ReadinessFactory(availability)
    checker = readiness.create_checker()

    supplier = ConnectionFactory().create_sqlite_supplier(db_path)
    with supplier, _cancel_on_signals(readiness.cancel_event):
        result = checker.check(
            supplier.open(), availability.timeout, database_name=db_path.name
        )

    if not ctx.obj.get("quiet", False):
        click.echo(
            f"✓ {db_path.name} is available "
            f"({result.attempts} attempt(s), {result.elapsed:.2f}s)"
        )


@cli.command()
@config_option
@database_option
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, config_path: Path, db_path: Path) -> None:
    """Show which expected tables exist.

    Read-only: no availability loop and no DDL. Exits with status 1 if any
    expected table is missing.
    """
    from groundwork.adapters.factory import ConnectionFactory, ReadinessFactory
    from groundwork.core.readiness.initializer import find_missing_tables

    config = _load_config(config_path)
    _apply_config_log_level(ctx, config)
    if not config.databases:
        no_databases_error(config_path)

    oracle = ReadinessFactory(config.availability).create_oracle()
    any_missing = False
    with ConnectionFactory().create_sqlite_supplier(db_path) as supplier:
        handle = supplier.open()
        if handle is None:
            raise GroundworkCliError(
                f"Database not found: {db_path}",
                hint="Run 'groundwork init --create' to create and bootstrap it",
            )
        for database in config.databases:
            missing = set(find_missing_tables(oracle, handle, database.expected_tables))
            any_missing = any_missing or bool(missing)
            state = "incomplete" if missing else "ready"
            click.echo(f"{database.name}: {state}")
            for table in sorted(database.expected_tables):
                mark = "✗" if table in missing else "✓"
                click.echo(f"  {mark} {table}")

    if any_missing:
        ctx.exit(1)


@cli.command(name="config-template")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite an existing file.",
)
@handle_cli_errors("config-template")
def config_template(path: Path, force: bool) -> None:
    """Write a starter groundwork.toml to PATH."""
    from groundwork.shared.config_io import create_default_config_file

    if path.exists() and not force:
        raise GroundworkCliError(
            f"{path} already exists",
            hint="Use --force to overwrite it",
        )
    create_default_config_file(path)
    click.echo(f"Created {path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
