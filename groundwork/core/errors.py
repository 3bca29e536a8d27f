"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all groundwork CLI commands.
"""

from pathlib import Path
from typing import NoReturn

import click

from groundwork.domain.entities import ErrorKind

# Conventional exit status for a process stopped by SIGINT
EXIT_INTERRUPTED = 130


class GroundworkCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.
        exit_code: Process exit status (1 unless the run was interrupted).

    Example:
        raise GroundworkCliError(
            "No databases configured",
            hint="Add a [[databases]] entry to groundwork.toml"
        )
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        *,
        kind: ErrorKind | None = None,
    ) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
            kind: Failure kind, used to pick the exit code.
        """
        super().__init__(message)
        self.hint = hint
        self.kind = kind
        if kind is ErrorKind.INTERRUPTED:
            self.exit_code = EXIT_INTERRUPTED

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def config_not_found_error(config_path: Path) -> NoReturn:
    """Raise error when the config file does not exist.

    Args:
        config_path: The missing config path.

    Raises:
        GroundworkCliError: Always raises with template hint.
    """
    raise GroundworkCliError(
        f"Config file not found: {config_path}",
        hint=f"Run 'groundwork config-template {config_path}' to create one",
    )


def no_databases_error(config_path: Path) -> NoReturn:
    """Raise error when the config lists no databases.

    Args:
        config_path: The config file that was loaded.

    Raises:
        GroundworkCliError: Always raises with config hint.
    """
    raise GroundworkCliError(
        f"No databases configured in {config_path}",
        hint="Add a [[databases]] entry with a name, schema and expected_tables",
    )
