"""
Host capability checks.

The queries only work on Windows with ``wmic.exe`` present. PlatformGuard
offers both a predicate for feature toggling and a strict check that fails
with the reason.
"""

import logging
import os
from typing import Optional

import psutil

from ..config import WMIC_PATH
from ..exceptions import UnsupportedPlatformError, UnsupportedReason

logger = logging.getLogger(__name__)


class PlatformGuard:
    """
    Decides whether the stats queries can run on this host.

    Args:
        tool_path: Location of the query tool to probe. Defaults to the
            well-known wmic location computed at import time.
    """

    def __init__(self, tool_path: Optional[str] = None):
        self.tool_path = tool_path or WMIC_PATH

    def _check(self) -> Optional[UnsupportedPlatformError]:
        if not psutil.WINDOWS:
            return UnsupportedPlatformError(
                "wincpu requires Windows; this host is not running it",
                reason=UnsupportedReason.WRONG_OS,
            )
        if not os.path.isfile(self.tool_path):
            return UnsupportedPlatformError(
                f"Query tool not found at {self.tool_path}",
                reason=UnsupportedReason.TOOL_MISSING,
                tool_path=self.tool_path,
            )
        if not os.access(self.tool_path, os.R_OK | os.X_OK):
            return UnsupportedPlatformError(
                f"Query tool at {self.tool_path} is not readable and executable "
                "by the current user (insufficient privilege?)",
                reason=UnsupportedReason.TOOL_INACCESSIBLE,
                tool_path=self.tool_path,
            )
        return None

    def is_supported(self) -> bool:
        """
        Returns:
            True only on Windows with the query tool present and accessible.
            Never raises; probing errors count as unsupported.
        """
        try:
            problem = self._check()
        except OSError as e:
            logger.debug(f"Probing {self.tool_path} failed: {e}")
            return False
        if problem is not None:
            logger.debug(f"Platform not supported: {problem}")
        return problem is None

    def assert_supported(self) -> None:
        """
        Raises:
            UnsupportedPlatformError: With ``reason`` telling a non-Windows host
                apart from a missing or inaccessible tool.
        """
        try:
            problem = self._check()
        except OSError as e:
            raise UnsupportedPlatformError(
                f"Could not probe query tool at {self.tool_path}: {e}",
                reason=UnsupportedReason.TOOL_INACCESSIBLE,
                tool_path=self.tool_path,
            ) from e
        if problem is not None:
            raise problem
