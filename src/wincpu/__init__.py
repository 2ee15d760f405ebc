"""
wincpu: Windows CPU and memory statistics from the built-in command-line tools.

The package shells out to ``wmic`` and ``tasklist``, parses their text output
and returns small value objects. It does no sampling, storage or aggregation
over time.

Usage:
    From command line:
        wincpu load
        wincpu find node

    Programmatically:
        import asyncio
        from wincpu import WindowsCPU

        stats = WindowsCPU()
        if stats.is_supported():
            print(asyncio.run(stats.total_load()))
"""

from .config import WinCpuConfig
from .exceptions import (
    CommandTimeoutError,
    ExternalToolError,
    NoMatchFoundError,
    UnsupportedPlatformError,
    UnsupportedReason,
    ValidationError,
    WinCpuError,
)
from .extractor import WindowsCPU
from .models import LoadReport, MemoryUsageReport, ProcessEntry
from .system import CommandRunner, PlatformGuard
from .validation import sanitize_argument

__version__ = "1.0.0"

__all__ = [
    "WindowsCPU",
    "WinCpuConfig",
    "CommandRunner",
    "PlatformGuard",
    "sanitize_argument",
    # Models
    "LoadReport",
    "MemoryUsageReport",
    "ProcessEntry",
    # Errors
    "WinCpuError",
    "UnsupportedPlatformError",
    "UnsupportedReason",
    "ExternalToolError",
    "CommandTimeoutError",
    "NoMatchFoundError",
    "ValidationError",
]
