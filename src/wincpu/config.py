"""
Runtime settings for the stats queries.

There is no configuration file. Settings come from constructor arguments or,
through ``WinCpuConfig.from_env``, from the process environment. The default
wmic location is computed once at import time from ``SystemRoot``.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Mapping, Optional

from .validation import validate_positive_float

logger = logging.getLogger(__name__)

TIMEOUT_ENV_VAR = "WINCPU_COMMAND_TIMEOUT"


def default_wmic_path(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Well-known location of ``wmic.exe`` below the Windows system root.

    Falls back to the filesystem root when ``SystemRoot`` is not set.
    """
    environ = os.environ if environ is None else environ
    system_root = environ.get("SystemRoot") or "/"
    return str(PureWindowsPath(system_root, "System32", "wbem", "wmic.exe"))


WMIC_PATH = default_wmic_path()


@dataclass(frozen=True)
class WinCpuConfig:
    """
    Settings shared by every query.

    Attributes:
        wmic_path: Location of the management-instrumentation tool.
        tasklist_path: Process-listing executable, resolved through PATH.
        command_timeout: Seconds to wait for a command, None waits forever.
        encoding: Text encoding of the tools' output; undecodable bytes are
            replaced rather than raising.
    """

    wmic_path: str = WMIC_PATH
    tasklist_path: str = "tasklist"
    command_timeout: Optional[float] = None
    encoding: str = "utf-8"

    def __post_init__(self):
        if self.command_timeout is not None:
            validate_positive_float(
                self.command_timeout, field_name="command_timeout", allow_min=False
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WinCpuConfig":
        """Build settings from ``SystemRoot`` and ``WINCPU_COMMAND_TIMEOUT``."""
        environ = os.environ if environ is None else environ
        timeout_text = environ.get(TIMEOUT_ENV_VAR)
        timeout = None
        if timeout_text:
            timeout = validate_positive_float(
                timeout_text, field_name=TIMEOUT_ENV_VAR, allow_min=False
            )
        config = cls(wmic_path=default_wmic_path(environ), command_timeout=timeout)
        logger.debug(f"Loaded settings from environment: {config}")
        return config
