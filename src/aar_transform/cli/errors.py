"""CLI error handling for aar-transform.

Wraps aar_transform exceptions into user-friendly messages with
appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from aar_transform.cli.output import error
from aar_transform.errors import AarTransformError, CacheIOError, InputReadError
from aar_transform.settings import AarTransformSettings

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Conflicts, failed transforms, bad configuration
EXIT_SYSTEM_ERROR = 2  # Unreadable archives, unwritable cache


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def exit_code_for(err: AarTransformError) -> int:
    """Map an aar_transform exception to a CLI exit code."""
    if isinstance(err, (CacheIOError, InputReadError)):
        return EXIT_SYSTEM_ERROR
    return EXIT_USER_ERROR


def handle_transform_error(err: AarTransformError) -> NoReturn:
    """Re-raise an aar_transform exception as a CLIError.

    Raises:
        CLIError: Always raises with the user message of ``err``.
    """
    raise CLIError(err.user_message, exit_code=exit_code_for(err)) from err


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format a Pydantic ValidationError for display.

    Args:
        err: Pydantic validation error.

    Returns:
        Human-readable error message.
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]
    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        msg = e["msg"]
        lines.append(f"  - {loc}: {msg}")
    return "\n".join(lines)


def handle_validation_error(err: PydanticValidationError, source: str) -> NoReturn:
    """Handle Pydantic validation errors with user-friendly output.

    Args:
        err: Pydantic validation error.
        source: Where the invalid values came from.

    Raises:
        CLIError: Always raises with formatted message.
    """
    formatted = format_pydantic_error(err)
    raise CLIError(f"Invalid configuration in {source}:\n{formatted}") from err


def load_settings() -> AarTransformSettings:
    """Read settings from the environment, exiting with a user error if invalid."""
    try:
        return AarTransformSettings()
    except PydanticValidationError as e:
        handle_validation_error(e, "AAR_TRANSFORM_* settings")
