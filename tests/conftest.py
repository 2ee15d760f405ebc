"""
Pytest configuration and shared fixtures for the wincpu test suite.

Tool output samples below are trimmed captures from Windows 10 hosts, with
the ``\\r\\r\\n`` line endings wmic produces when its output is piped.
"""

import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from wincpu.config import WinCpuConfig  # noqa: E402
from wincpu.extractor import WindowsCPU  # noqa: E402
from wincpu.models import CommandResult  # noqa: E402


# ============================================================================
# Sample tool output
# ============================================================================

LOAD_OUTPUT_SINGLE = "LoadPercentage  \r\r\n23              \r\r\n\r\r\n"

LOAD_OUTPUT_MULTI = (
    "LoadPercentage  \r\r\n"
    "12              \r\r\n"
    "0               \r\r\n"
    "100             \r\r\n"
    "7               \r\r\n"
    "\r\r\n"
)

PROCESS_OUTPUT = (
    "IDProcess  Name            PercentProcessorTime  \r\r\n"
    "0          Idle            88                    \r\r\n"
    "4          System          0                     \r\r\n"
    "4120       node            6                     \r\r\n"
    "5236       node#1          3                     \r\r\n"
    "0          _Total          100                   \r\r\n"
    "\r\r\n"
)

PROCESS_OUTPUT_NODE = (
    "4120       node            6                     \r\r\n"
    "5236       node#1          3                     \r\r\n"
)

CPU_NAME_OUTPUT_SINGLE = (
    "Name                                      \r\r\n"
    "Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz  \r\r\n"
    "\r\r\n"
)

CPU_NAME_OUTPUT_DUAL = (
    "Name                                      \r\r\n"
    "Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz  \r\r\n"
    "Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz  \r\r\n"
    "\r\r\n"
)

TASKLIST_OUTPUT = (
    '"System Idle Process","0","Services","0","8 K"\r\n'
    '"System","4","Services","0","1,234 K"\r\n'
    '"node.exe","4120","Console","1","45,000 K"\r\n'
)
TASKLIST_TOTAL_KB = 8 + 1234 + 45000


# ============================================================================
# Fake command runner
# ============================================================================


class FakeRunner:
    """
    Stand-in for CommandRunner that returns canned output.

    Every call is recorded as ``(command, shell)`` in ``calls``. If ``error``
    is set it is raised instead of returning a result.
    """

    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0,
                 error: Optional[Exception] = None):
        self.result = CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)
        self.error = error
        self.calls: List[Tuple[Union[str, Sequence[str]], bool]] = []

    async def run(self, command, shell: bool = False) -> CommandResult:
        self.calls.append((command, shell))
        if self.error is not None:
            raise self.error
        return self.result


WMIC = r"C:\Windows\System32\wbem\wmic.exe"


def make_stats(runner: FakeRunner) -> WindowsCPU:
    return WindowsCPU(wmic_path=WMIC, runner=runner, config=WinCpuConfig())


@pytest.fixture
def fake_runner():
    """A FakeRunner with empty output; tests set ``result`` as needed."""
    return FakeRunner()


@pytest.fixture
def stats_factory():
    """Build a WindowsCPU over a FakeRunner with the given output."""

    def _factory(**kwargs) -> Tuple[WindowsCPU, FakeRunner]:
        runner = FakeRunner(**kwargs)
        return make_stats(runner), runner

    return _factory
