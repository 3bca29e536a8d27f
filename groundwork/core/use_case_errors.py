"""Use case error handling utilities.

Provides consistent exception handling across all use cases. Use cases
return error responses rather than raising exceptions (except for
KeyboardInterrupt/SystemExit).

Design principles:
1. KeyboardInterrupt and SystemExit are always re-raised (never caught)
2. GroundworkDomainError subclasses are domain errors with user-friendly messages
3. Unexpected exceptions are logged and converted to generic error messages
4. All use cases return responses with success/error fields

Error handling contract:
    Use cases catch exceptions internally and return error responses.
    Callers check response.success and branch on response.error_kind
    rather than catching multiple exception types.
"""

import logging

from groundwork.domain.exceptions import GroundworkDomainError, InitializationError

logger = logging.getLogger(__name__)


def format_error_message(exception: Exception, operation_name: str) -> str:
    """Format an exception into a user-friendly error message.

    - GroundworkDomainError: Uses the error's message directly
    - OSError: Adds context about permissions/disk access
    - ValueError/RuntimeError: Includes exception message with operation context
    - Other exceptions: Returns a generic "internal error" message

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for error messages (e.g., "bootstrap").

    Returns:
        User-friendly error message string.
    """
    if isinstance(exception, GroundworkDomainError):
        return exception.message
    elif isinstance(exception, OSError):
        return (
            f"I/O error: {exception}. "
            "Check file permissions and filesystem access."
        )
    elif isinstance(exception, (ValueError, RuntimeError)):
        return f"{operation_name.capitalize()} error: {exception}"
    else:
        return f"Internal error during {operation_name}. Check logs for details."


def log_use_case_error(exception: Exception, operation_name: str) -> None:
    """Log an exception from a use case with appropriate severity.

    Initialization errors were already logged as readiness events by the
    component that raised them, so they are only repeated at DEBUG here.

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for log messages.
    """
    if isinstance(exception, InitializationError):
        logger.debug("%s failed: %s", operation_name.capitalize(), exception)
    elif isinstance(exception, GroundworkDomainError):
        logger.error(str(exception))
    elif isinstance(exception, (OSError, ValueError, RuntimeError)):
        logger.error("Error during %s: %s", operation_name, exception)
    else:
        logger.exception("Unexpected error during %s", operation_name)
