"""
Value objects returned by the stats queries.

All of these are transient: created when tool output is parsed, handed to the
caller and never stored. The frozen dataclasses make the derived invariants
(sum of per-process load, KB/MB/GB conversion) impossible to break after
construction as long as the ``from_*`` constructors are used.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Generic, List, Sequence, Tuple, TypeVar

T = TypeVar("T")

KB_PER_MB = 1024


@dataclass(frozen=True)
class ProcessEntry:
    """One OS process matched by a name or id filter."""

    process_id: int
    process_name: str
    load_percent: int


@dataclass(frozen=True)
class LoadReport:
    """
    Per-process CPU load for every process matched by a filter.

    Attributes:
        total_load: Sum of ``load_percent`` over ``entries``.
        entries: Matched processes in the order the tool reported them.
    """

    total_load: int
    entries: Tuple[ProcessEntry, ...] = ()

    @classmethod
    def from_entries(cls, entries: Sequence[ProcessEntry]) -> "LoadReport":
        entries = tuple(entries)
        return cls(total_load=sum(e.load_percent for e in entries), entries=entries)

    @classmethod
    def empty(cls) -> "LoadReport":
        return cls(total_load=0, entries=())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_load": self.total_load,
            "entries": [asdict(e) for e in self.entries],
        }


@dataclass(frozen=True)
class MemoryUsageReport:
    """Summed working-set memory of all listed processes."""

    kilobytes: float
    megabytes: float
    gigabytes: float

    @classmethod
    def from_kilobytes(cls, kilobytes: float) -> "MemoryUsageReport":
        megabytes = kilobytes / KB_PER_MB
        return cls(
            kilobytes=kilobytes,
            megabytes=megabytes,
            gigabytes=megabytes / KB_PER_MB,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and decoded output channels of one finished command."""

    returncode: int
    stdout: str
    stderr: str


@dataclass
class ParseOutcome(Generic[T]):
    """
    Result of parsing tool output row by row.

    Rows that did not fit the expected column shape are not fatal; they are
    kept verbatim in ``skipped`` so callers can inspect them.
    """

    records: List[T] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
