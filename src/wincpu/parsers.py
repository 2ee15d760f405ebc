"""
Parsers for the text emitted by the Windows management tools.

Each query shape has one pure function here that takes the raw stdout of the
tool and returns structured data. Row-oriented output is parsed against an
explicit RowSchema (named, typed columns and a delimiter) so that a row of
the wrong shape becomes a skipped record in a ParseOutcome instead of an
exception halfway through the parse.

Output shapes handled:
- ``wmic cpu get loadpercentage``: header line, then one number per logical CPU.
- ``wmic path Win32_PerfFormattedData_PerfProc_Process get
  Name,PercentProcessorTime,IDProcess``: whitespace-aligned columns
  ``IDProcess Name PercentProcessorTime`` (wmic orders columns alphabetically),
  optionally pre-filtered by ``findstr``.
- ``wmic cpu get Name``: header line, then one processor name per line.
- ``tasklist /FO csv /NH``: quoted CSV without header, memory in column 5.
"""

import csv
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .exceptions import NoMatchFoundError
from .models import ParseOutcome, ProcessEntry

logger = logging.getLogger(__name__)

_DIGIT_RUN = re.compile(r"\d+")
_NON_DIGIT = re.compile(r"\D")
# Any whitespace except the newline that separates records.
_INLINE_WHITESPACE = re.compile(r"[^\S\n]+")


@dataclass(frozen=True)
class Column:
    """A named column and the converter applied to its raw text."""

    name: str
    convert: Callable[[str], Any] = str


@dataclass(frozen=True)
class RowSchema:
    """
    Expected shape of one row of tabular tool output.

    Attributes:
        columns: Columns in the order they appear in a row.
        delimiter: Field separator; None splits on runs of whitespace.
        strict: If True a row must have exactly len(columns) fields, otherwise
            extra trailing fields are ignored.
    """

    columns: Tuple[Column, ...]
    delimiter: Optional[str] = None
    strict: bool = True

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.columns]

    def split(self, line: str) -> List[str]:
        return line.split(self.delimiter)

    def convert(self, fields: Sequence[str]) -> Optional[Dict[str, Any]]:
        """
        Convert already split fields to a ``{column name: value}`` mapping.

        Returns:
            The converted row, or None if the field count is wrong or a
            converter rejects its field.
        """
        expected = len(self.columns)
        if len(fields) < expected or (self.strict and len(fields) != expected):
            return None
        row: Dict[str, Any] = {}
        for column, raw in zip(self.columns, fields):
            try:
                row[column.name] = column.convert(raw)
            except (TypeError, ValueError):
                return None
        return row

    def parse(self, line: str) -> Optional[Dict[str, Any]]:
        return self.convert(self.split(line))


def kilobytes_value(text: str) -> int:
    """
    Read a memory figure such as ``"12,345 K"`` as an integer KB count.

    Every non-digit character is dropped, so thousands separators of any
    locale disappear. Text with no digits at all counts as zero.
    """
    digits = _NON_DIGIT.sub("", text)
    return int(digits) if digits else 0


PROCESS_ROW = RowSchema(
    columns=(
        Column("process_id", int),
        Column("process_name"),
        Column("load_percent", int),
    ),
)

TASKLIST_ROW = RowSchema(
    columns=(
        Column("image_name"),
        Column("pid"),
        Column("session_name"),
        Column("session_number"),
        Column("mem_usage_kb", kilobytes_value),
    ),
    delimiter=",",
    strict=False,
)


def _non_empty_lines(text: str) -> List[str]:
    """Split on any line ending and drop lines that are blank after trimming."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_load_percentages(stdout: str) -> List[int]:
    """
    Extract one load percentage per logical CPU.

    Every run of decimal digits counts as one value, in report order. The
    header line carries no digits and so never contributes. Output with no
    digits at all yields an empty list rather than an error.

    Examples:
        >>> parse_load_percentages("LoadPercentage  \\r\\r\\n7  \\r\\r\\n")
        [7]
    """
    return [int(match) for match in _DIGIT_RUN.findall(stdout)]


def parse_process_table(stdout: str) -> ParseOutcome[ProcessEntry]:
    """
    Parse ``IDProcess Name PercentProcessorTime`` rows into ProcessEntry records.

    Runs of whitespace other than newlines collapse to a single separator,
    the text is re-split into one record per line and each record must split
    into exactly three fields with integer id and load. Anything else (the
    column header, a truncated row, a name containing spaces) is skipped and
    reported in ``skipped``.

    Args:
        stdout: Raw tool output, possibly already filtered by findstr.

    Returns:
        ParseOutcome with entries in report order.
    """
    outcome: ParseOutcome[ProcessEntry] = ParseOutcome()
    collapsed = _INLINE_WHITESPACE.sub(" ", stdout)
    for line in collapsed.split("\n"):
        line = line.strip()
        if not line:
            continue
        row = PROCESS_ROW.parse(line)
        if row is None:
            logger.debug(f"Skipping process row that does not match {PROCESS_ROW.names}: '{line}'")
            outcome.skipped.append(line)
            continue
        outcome.records.append(ProcessEntry(**row))
    return outcome


def parse_cpu_names(stdout: str) -> List[str]:
    """
    Return one descriptor string per processor, without the column header.

    Raises:
        NoMatchFoundError: If the output contains no lines at all.
    """
    lines = _non_empty_lines(stdout)
    if not lines:
        raise NoMatchFoundError("Processor query returned no output")
    return lines[1:]


def parse_tasklist_memory(stdout: str) -> ParseOutcome[int]:
    """
    Read the working-set column of a ``tasklist /FO csv /NH`` listing.

    Each line is read as quoted CSV so the thousands separator inside
    ``"12,345 K"`` stays part of its field. A row with fewer than five fields
    is skipped; a memory field without digits counts as zero KB.

    Returns:
        ParseOutcome whose records are per-process KB values in listing order.
    """
    outcome: ParseOutcome[int] = ParseOutcome()
    lines = _non_empty_lines(stdout)
    for line, fields in zip(lines, csv.reader(lines)):
        row = TASKLIST_ROW.convert(fields)
        if row is None:
            logger.debug(f"Skipping tasklist row with {len(fields)} fields: '{line}'")
            outcome.skipped.append(line)
            continue
        outcome.records.append(row["mem_usage_kb"])
    return outcome
