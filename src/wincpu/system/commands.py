"""
Command construction and execution for the Windows query tools.

This module provides the OS command runner used by the stats extractor: one
external process per call, awaited to completion, with both output channels
captured. It also knows the exact command lines for the four query shapes.
"""

import asyncio
import logging
import subprocess
from typing import List, Optional, Sequence, Union

from ..exceptions import CommandTimeoutError, ExternalToolError
from ..models import CommandResult

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]

PROCESS_PERF_CLASS = "Win32_PerfFormattedData_PerfProc_Process"
PROCESS_PERF_FIELDS = "Name,PercentProcessorTime,IDProcess"


def build_load_command(wmic_path: str) -> List[str]:
    """Per-CPU load percentage query."""
    return [wmic_path, "cpu", "get", "loadpercentage"]


def build_process_query_command(
    wmic_path: str, filter_value: Optional[Union[int, str]] = None
) -> str:
    """
    Per-process load query, optionally piped through a substring filter.

    The filter is interpolated into a shell command line, so it must already
    have been passed through ``sanitize_argument``.

    Examples:
        >>> build_process_query_command("wmic.exe", "node")
        'wmic.exe path Win32_PerfFormattedData_PerfProc_Process get Name,PercentProcessorTime,IDProcess | findstr /i /c:node'
    """
    command = subprocess.list2cmdline(
        [wmic_path, "path", PROCESS_PERF_CLASS, "get", PROCESS_PERF_FIELDS]
    )
    if filter_value is not None:
        command += f" | findstr /i /c:{filter_value}"
    return command


def build_cpu_name_command(wmic_path: str) -> List[str]:
    """Installed processor inventory query."""
    return [wmic_path, "cpu", "get", "Name"]


def build_tasklist_command(tasklist_path: str = "tasklist") -> List[str]:
    """Full process listing as quoted CSV without a header row."""
    return [tasklist_path, "/FO", "csv", "/NH"]


def describe_command(command: Command) -> str:
    if isinstance(command, str):
        return command
    return subprocess.list2cmdline(list(command))


def raise_for_stderr(result: CommandResult, command: Command) -> CommandResult:
    """
    Treat any text on the error channel as a failure of the tool.

    A non-zero exit code alone is not an error: ``findstr`` exits with 1
    when nothing matches, which is a valid empty result.

    Raises:
        ExternalToolError: If stderr contains anything but whitespace.
    """
    if result.stderr.strip():
        raise ExternalToolError(
            result.stderr.strip(),
            command=command,
            stderr=result.stderr,
            returncode=result.returncode,
        )
    return result


class CommandRunner:
    """
    Runs one external command per call using asyncio subprocesses.

    Attributes:
        timeout: Seconds to wait for a command before killing it; None waits
            indefinitely.
        encoding: Codec used to decode both output channels. Undecodable bytes
            are replaced.
    """

    def __init__(self, timeout: Optional[float] = None, encoding: str = "utf-8"):
        self.timeout = timeout
        self.encoding = encoding

    def _decode(self, data: Optional[bytes]) -> str:
        return data.decode(self.encoding, errors="replace") if data else ""

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        """Kill a still-running child and reap it."""
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                # Exited between the check and the kill.
                pass
        await proc.wait()

    async def run(self, command: Command, shell: bool = False) -> CommandResult:
        """
        Execute a command and capture its output.

        Args:
            command: Argument list, or a command string when ``shell`` is True.
            shell: Run through the system shell (needed for pipelines).

        Returns:
            CommandResult with the exit code and decoded stdout/stderr.

        Raises:
            ExternalToolError: If the command cannot be launched.
            CommandTimeoutError: If it does not finish within ``timeout``.
        """
        display = describe_command(command)
        logger.debug(f"Executing command: '{display}' (shell={shell})")
        try:
            if shell:
                proc = await asyncio.create_subprocess_shell(
                    display,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            else:
                proc = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
        except OSError as e:
            raise ExternalToolError(
                f"Failed to launch '{display}': {type(e).__name__}: {e}",
                command=command,
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            await self._kill(proc)
            raise CommandTimeoutError(
                f"Command '{display}' did not finish within {self.timeout}s",
                command=command,
                returncode=proc.returncode,
            ) from e
        except BaseException:
            # Cancelled or interrupted: the child must not outlive the call.
            await self._kill(proc)
            raise

        logger.debug(f"Command '{display}' exited with code {proc.returncode}")
        return CommandResult(
            returncode=proc.returncode,
            stdout=self._decode(stdout),
            stderr=self._decode(stderr),
        )
