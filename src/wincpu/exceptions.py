"""
Exception types and CLI error handling for wincpu.

Every failure surfaced by the library derives from WinCpuError so callers can
catch the whole family at once. The library itself never logs the errors it
raises; presenting them is left to the caller (see handle_cli_error for the
command-line wrapper's policy).
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Sequence, Union


class WinCpuError(Exception):
    """Base class for all wincpu errors."""


class UnsupportedReason(Enum):
    """Why the host cannot run the stats queries."""
    WRONG_OS = "wrong_os"
    TOOL_MISSING = "tool_missing"
    TOOL_INACCESSIBLE = "tool_inaccessible"


class UnsupportedPlatformError(WinCpuError):
    """
    Raised by the strict platform check.

    Attributes:
        reason: Which of the two checks failed, and how.
        tool_path: The tool location that was probed, if any.
    """

    def __init__(self, message: str, reason: UnsupportedReason,
                 tool_path: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.tool_path = tool_path


class ExternalToolError(WinCpuError):
    """
    The external command failed to launch or wrote to its error channel.

    The tool's stderr text is carried verbatim; it is not classified further.
    """

    def __init__(self, message: str, command: Union[str, Sequence[str], None] = None,
                 stderr: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class CommandTimeoutError(ExternalToolError):
    """The external command did not finish within the configured timeout."""


class NoMatchFoundError(WinCpuError):
    """A lookup query produced no output where some output is required."""


class ValidationError(WinCpuError):
    """
    Exception raised when caller-supplied input is rejected.

    Attributes:
        field_name: Name of the offending argument.
        value: The rejected value.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None):
        super().__init__(message)
        self.field_name = field_name
        self.value = value


def handle_cli_error(
    error: Exception,
    context: str,
    logger: logging.Logger,
    exit_code: int = 1,
    include_traceback: bool = False,
) -> None:
    """
    Log an error raised during a CLI command and exit.

    Args:
        error: The exception that occurred
        context: Short description of what the CLI was doing
        logger: Logger of the calling CLI module
        exit_code: Process exit status
        include_traceback: Whether to log the traceback as well
    """
    logger.error(f"Error in CLI {context}: {error}", exc_info=include_traceback)
    sys.exit(exit_code)
