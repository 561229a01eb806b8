"""
Unified CLI Error Handling
==========================

Provides consistent error handling, logging setup and exit codes across the
CLI tools.
"""

import logging
import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from code2tap.errors import Code2TapError, FileOpenError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Encoding or output error
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for the CLI tools.

    Prints the error to stderr, optionally prints the traceback for internal
    errors in verbose mode, and exits with the matching exit code.

    Raises:
        SystemExit: Always
    """
    if isinstance(error, FileOpenError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, Code2TapError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
