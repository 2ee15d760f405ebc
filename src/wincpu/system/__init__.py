"""
System interaction: launching the query tools and probing host support.
"""

from .commands import (
    CommandRunner,
    build_cpu_name_command,
    build_load_command,
    build_process_query_command,
    build_tasklist_command,
    raise_for_stderr,
)
from .guard import PlatformGuard

__all__ = [
    "CommandRunner",
    "PlatformGuard",
    "build_cpu_name_command",
    "build_load_command",
    "build_process_query_command",
    "build_tasklist_command",
    "raise_for_stderr",
]
