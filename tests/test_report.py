"""
Tests for statistics reduction and report building blocks.
"""

import json

import pytest

from procdiag.models.samples import MemorySample
from procdiag.report import (
    byte_stats_block,
    calculate_stats,
    cpu_stats_block,
    lag_stats_block,
    optional_bytes_metric,
    save_report,
)


class TestCalculateStats:
    """Test cases for calculate_stats."""

    def test_empty(self):
        assert calculate_stats([]) == {"peak": 0, "average": 0, "low": 0}

    def test_values(self):
        stats = calculate_stats([3, 1, 2])
        assert stats == {"peak": 3, "average": pytest.approx(2.0), "low": 1}

    def test_accessor(self):
        samples = [
            MemorySample(timestamp=1, rss=10, heap_total=20, heap_used=5),
            MemorySample(timestamp=2, rss=30, heap_total=20, heap_used=15),
        ]
        assert calculate_stats(samples, lambda s: s.rss)["peak"] == 30
        assert calculate_stats(samples, lambda s: s.total)["average"] == pytest.approx(10.0)

    def test_single_value(self):
        assert calculate_stats([7]) == {"peak": 7, "average": 7, "low": 7}


class TestBlocks:
    """Test cases for the metric blocks."""

    def test_byte_stats_block(self):
        block = byte_stats_block({"peak": 2048, "average": 1536, "low": 1024})
        assert block["peak"] == {"bytes": 2048, "human": "2.00 KB"}
        assert block["average"]["human"] == "1.50 KB"
        assert block["low"]["human"] == "1.00 KB"

    def test_cpu_stats_block(self):
        block = cpu_stats_block({"peak": 75.0, "average": 25.0, "low": 0})
        assert block["peak"] == {"percentage": 75.0, "human": "75.00%"}
        assert block["low"]["human"] == "0.00%"

    def test_lag_stats_block(self):
        block = lag_stats_block({"average": 2.5, "max": 1500, "min": 0})
        assert block["lag"]["average"] == {"ms": 2.5, "human": "2.5ms"}
        assert block["lag"]["max"]["human"] == "1s"
        assert block["lag"]["min"]["human"] == "0ms"

    def test_optional_bytes_metric(self):
        assert optional_bytes_metric(None) is None
        assert optional_bytes_metric(1024 * 1024) == {"bytes": 1048576, "human": "1.00 MB"}


def test_save_report(temp_dir):
    report = {"name": "saved", "summary": {"samples": 2}}
    path = temp_dir / "reports" / "report.json"
    save_report(report, path)
    with open(path, encoding="utf-8") as f:
        assert json.load(f) == report
