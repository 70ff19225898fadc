"""Error handling for CLI commands.

Maps library exceptions to a coloured message, an optional hint and an
exit code:

    1 configuration, 2 API, 3 validation, 5 authentication,
    6 permission, 7 not found, 8 availability conflict, 9 connection,
    130 cancelled, 255 unexpected
"""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from scuba_admin.cli.utils.formatters import format_error, format_warning
from scuba_admin.services.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    AvailabilityConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
    extract_error_message,
    first_validation_error,
    format_conflict_message,
)
from scuba_admin.services.retry_handler import CircuitBreakerError, RetryExhaustedException


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Settings are missing or invalid."""


class DataValidationError(CLIError):
    """User input (options or an input file) failed validation."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None, report=None):
        super().__init__(message, recovery_hint)
        self.report = report


def _hint(text: Optional[str]) -> None:
    if text:
        click.echo(format_warning(f"Hint: {text}"))


def _echo_pydantic(error: ValidationError) -> None:
    for detail in error.errors():
        location = ".".join(str(p) for p in detail.get("loc", ()))
        message = str(detail.get("msg", "")).replace("Value error, ", "")
        click.echo(f"  - {location}: {message}" if location else f"  - {message}")


def handle_cli_error(error: BaseException, debug: bool = False) -> int:
    """
    Print a user-friendly message for ``error``.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace for unexpected errors

    Returns:
        Exit code for the process
    """
    if isinstance(error, RetryExhaustedException) and error.last_exception is not None:
        click.echo(format_warning("Request failed after retries"))
        return handle_cli_error(error.last_exception, debug)

    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        _hint(error.recovery_hint)
        return 1

    elif isinstance(error, DataValidationError):
        click.echo(format_error(f"Data Validation Error: {error.message}"))
        if error.report is not None:
            click.echo(error.report.format())
        _hint(error.recovery_hint)
        return 3

    elif isinstance(error, ValidationError):
        click.echo(format_error("Invalid input"))
        _echo_pydantic(error)
        return 3

    elif isinstance(error, AvailabilityConflictError):
        click.echo(format_error(format_conflict_message(error.data)))
        _hint("Choose other dates or another equipment item")
        return 8

    elif isinstance(error, ValidationFailedError):
        headline = first_validation_error(error) or extract_error_message(error)
        click.echo(format_error(f"Rejected by server: {headline}"))
        for field, messages in error.errors.items():
            if isinstance(messages, list):
                messages = "; ".join(str(m) for m in messages)
            click.echo(f"  - {field}: {messages}")
        return 3

    elif isinstance(error, AuthenticationError):
        click.echo(format_error("Authentication Failed"))
        click.echo(extract_error_message(error))
        _hint("Run 'scuba-admin auth login' to start a new session")
        return 5

    elif isinstance(error, PermissionDeniedError):
        click.echo(format_error("Permission Denied"))
        click.echo(extract_error_message(error))
        _hint("Ask an administrator for access to this resource")
        return 6

    elif isinstance(error, NotFoundError):
        click.echo(format_error("Resource Not Found"))
        click.echo(extract_error_message(error))
        _hint("Check the id; use the matching 'list' command to find it")
        return 7

    elif isinstance(error, ApiConnectionError):
        click.echo(format_error(f"Connection Error: {error.message}"))
        _hint("Check that the API is running and API_BASE_URL is correct")
        return 9

    elif isinstance(error, CircuitBreakerError):
        click.echo(format_error(f"Connection Error: {error}"))
        _hint("Wait a few seconds before retrying")
        return 9

    elif isinstance(error, ApiError):
        status = f" (HTTP {error.status_code})" if error.status_code else ""
        click.echo(format_error(f"API Error{status}: {extract_error_message(error)}"))
        return 2

    elif isinstance(error, ValueError):
        click.echo(format_error(str(error)))
        return 3

    # Handle click.Abort (user cancellation)
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(
                "".join(traceback.format_exception(type(error), error, error.__traceback__))
            )
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager that turns exceptions into messages and exit codes.

    Args:
        debug: Whether to show full stack traces

    Example:
        @click.command()
        @pass_cli
        def my_command(cli_ctx):
            with with_error_handling(cli_ctx.debug):
                ...
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is None:
                return False
            if isinstance(exc_val, (SystemExit, click.exceptions.Exit, click.ClickException)):
                return False
            if isinstance(exc_val, KeyboardInterrupt):
                exc_val = click.Abort()
            sys.exit(handle_cli_error(exc_val, self.show_debug))

    return ErrorHandler(debug)
