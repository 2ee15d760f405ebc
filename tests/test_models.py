"""
Tests for the result value objects.
"""

import dataclasses
import math

import pytest

from wincpu.models import LoadReport, MemoryUsageReport, ProcessEntry


class TestLoadReport:
    """Per-process load aggregation."""

    def test_total_is_sum_of_entries(self):
        entries = [ProcessEntry(1, "a", 10), ProcessEntry(2, "b", 0), ProcessEntry(3, "c", 25)]

        report = LoadReport.from_entries(entries)

        assert report.total_load == 35
        assert report.entries == tuple(entries)

    def test_empty(self):
        assert LoadReport.empty() == LoadReport.from_entries([])
        assert LoadReport.empty().total_load == 0

    def test_to_dict(self):
        report = LoadReport.from_entries([ProcessEntry(4120, "node", 6)])
        assert report.to_dict() == {
            "total_load": 6,
            "entries": [{"process_id": 4120, "process_name": "node", "load_percent": 6}],
        }

    def test_frozen(self):
        report = LoadReport.empty()
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.total_load = 5


class TestMemoryUsageReport:
    """KB/MB/GB conversion."""

    @pytest.mark.parametrize("kilobytes", [0, 1, 1024, 46242, 16 * 1024 * 1024])
    def test_conversion(self, kilobytes):
        report = MemoryUsageReport.from_kilobytes(kilobytes)

        assert report.kilobytes == kilobytes
        assert math.isclose(report.megabytes, kilobytes / 1024)
        assert math.isclose(report.gigabytes, report.megabytes / 1024)

    def test_to_dict_keys(self):
        assert set(MemoryUsageReport.from_kilobytes(2048).to_dict()) == {
            "kilobytes",
            "megabytes",
            "gigabytes",
        }
