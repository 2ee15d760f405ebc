"""
CPU and memory statistics for Windows hosts, read from wmic and tasklist.

WindowsCPU is an explicitly constructed service object: the tool location and
the command runner are injected, so tests can substitute a fake runner that
returns canned tool output. Every query is a coroutine that spawns exactly one
external command, parses its text output and returns a value object.

Result policies:
- ``total_load`` and ``find_load`` return empty results when the tool prints
  nothing useful.
- ``cpu_info`` raises NoMatchFoundError when the tool prints nothing.
- Rows of unexpected shape are skipped, never fatal.
- Anything on the tool's stderr, or a failure to launch it, raises
  ExternalToolError. Nothing is retried.
"""

import logging
import os
from typing import List, Optional, Union

from .config import WinCpuConfig
from .exceptions import ValidationError
from .models import LoadReport, MemoryUsageReport
from .parsers import (
    parse_cpu_names,
    parse_load_percentages,
    parse_process_table,
    parse_tasklist_memory,
)
from .system.commands import (
    Command,
    CommandRunner,
    build_cpu_name_command,
    build_load_command,
    build_process_query_command,
    build_tasklist_command,
    raise_for_stderr,
)
from .system.guard import PlatformGuard
from .validation import sanitize_argument

logger = logging.getLogger(__name__)

ProcessFilter = Union[int, str]


class WindowsCPU:
    """
    Query interface for host CPU load, processor inventory and memory usage.

    Args:
        wmic_path: Location of ``wmic.exe``; defaults to ``config.wmic_path``.
        runner: Object with an ``async run(command, shell=False)`` method
            returning a CommandResult. Defaults to a CommandRunner built
            from ``config``.
        config: Shared settings; defaults to ``WinCpuConfig()``.
        strict: Run ``assert_supported`` immediately and fail construction
            on an unsupported host.
    """

    def __init__(
        self,
        wmic_path: Optional[str] = None,
        runner: Optional[CommandRunner] = None,
        config: Optional[WinCpuConfig] = None,
        strict: bool = False,
    ):
        self.config = config or WinCpuConfig()
        self.wmic_path = wmic_path or self.config.wmic_path
        self.tasklist_path = self.config.tasklist_path
        self.runner = runner or CommandRunner(
            timeout=self.config.command_timeout, encoding=self.config.encoding
        )
        self.guard = PlatformGuard(self.wmic_path)
        if strict:
            self.guard.assert_supported()

    sanitize_argument = staticmethod(sanitize_argument)

    def is_supported(self) -> bool:
        return self.guard.is_supported()

    def assert_supported(self) -> None:
        self.guard.assert_supported()

    async def _query(self, command: Command, shell: bool = False) -> str:
        result = await self.runner.run(command, shell=shell)
        raise_for_stderr(result, command)
        return result.stdout

    async def total_load(self) -> List[int]:
        """
        Current load percentage of each logical CPU, in the order wmic reports them.

        Returns an empty list if the output holds no numbers.
        """
        stdout = await self._query(build_load_command(self.wmic_path))
        return parse_load_percentages(stdout)

    async def find_load(self, process_filter: Optional[ProcessFilter] = None) -> LoadReport:
        """
        Current CPU load of processes, optionally filtered.

        Args:
            process_filter: None or ``""`` lists every process (including the
                ``_Total`` and ``Idle`` pseudo-processes wmic reports). A string
                is sanitized and matched case-insensitively as a substring of
                each output line. An integer selects the process with that id.

        Returns:
            LoadReport whose ``total_load`` is the sum over its entries. No
            matching process yields an empty report, not an error.

        Raises:
            ValidationError: If a string filter is empty after sanitizing.
            ExternalToolError: If wmic or findstr fails.
        """
        filter_value = None
        if process_filter is not None and process_filter != "":
            filter_value = sanitize_argument(process_filter)
            if filter_value == "":
                raise ValidationError(
                    f"Process filter {process_filter!r} contains no usable characters",
                    field_name="process_filter",
                    value=process_filter,
                )

        stdout = await self._query(
            build_process_query_command(self.wmic_path, filter_value), shell=True
        )
        if not stdout.strip():
            return LoadReport.empty()

        entries = parse_process_table(stdout).records
        if isinstance(filter_value, int):
            # findstr also matches the id inside other pids and load values
            entries = [e for e in entries if e.process_id == filter_value]
        return LoadReport.from_entries(entries)

    async def node_load(self) -> LoadReport:
        """Load of every process whose line mentions ``node``."""
        return await self.find_load("node")

    async def this_load(self) -> LoadReport:
        """Load of the calling process; at most one entry."""
        return await self.find_load(os.getpid())

    async def cpu_info(self) -> List[str]:
        """
        Name of every installed processor, header excluded.

        Raises:
            NoMatchFoundError: If wmic prints nothing at all.
        """
        stdout = await self._query(build_cpu_name_command(self.wmic_path))
        return parse_cpu_names(stdout)

    async def total_memory_usage(self) -> MemoryUsageReport:
        """
        Working-set memory summed over every process in the tasklist output.
        """
        stdout = await self._query(build_tasklist_command(self.tasklist_path))
        outcome = parse_tasklist_memory(stdout)
        if outcome.skipped:
            logger.debug(f"Ignored {len(outcome.skipped)} malformed tasklist rows")
        return MemoryUsageReport.from_kilobytes(sum(outcome.records))
