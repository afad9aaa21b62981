"""
Unit tests for exporting samples with Polars.
"""

import pytest
import polars as pl

from procdiag.models.samples import CpuSample, CpuTimes, MemorySample
from procdiag.storage import SAMPLE_SCHEMA, export_samples, samples_to_dataframe


def _samples():
    memory = [
        MemorySample(timestamp=1000, rss=4096, heap_total=2048, heap_used=1024, external=16),
        MemorySample(timestamp=2000, rss=8192, heap_total=4096, heap_used=3072, external=32),
    ]
    cpu = [
        CpuSample(timestamp=1000, usage=CpuTimes(user=100, system=50)),
        CpuSample(timestamp=2000, usage=CpuTimes(user=400_100, system=100_050), percentage=50.0),
    ]
    return memory, cpu


class TestSamplesToDataFrame:
    """Test cases for samples_to_dataframe."""

    def test_one_row_per_tick(self):
        df = samples_to_dataframe(*_samples())
        assert df.columns == list(SAMPLE_SCHEMA)
        assert len(df) == 2
        assert df["heap_used"].to_list() == [1024, 3072]
        assert df["cpu_user_us"].to_list() == [100, 400_100]
        assert df["cpu_percentage"].to_list() == [0.0, 50.0]

    def test_empty(self):
        df = samples_to_dataframe([], [])
        assert len(df) == 0
        assert dict(df.schema) == SAMPLE_SCHEMA

    def test_degraded_rows(self):
        memory = [
            MemorySample(timestamp=1000, rss=0, heap_total=0, heap_used=0, degraded=True),
            MemorySample(timestamp=2000, rss=8192, heap_total=4096, heap_used=3072),
        ]
        cpu = [
            CpuSample(timestamp=1000, usage=None),
            CpuSample(timestamp=2000, usage=CpuTimes(user=400, system=0)),
        ]
        df = samples_to_dataframe(memory, cpu)
        assert df["degraded"].to_list() == [True, False]
        assert df["cpu_user_us"].to_list() == [None, 400]

    def test_length_mismatch(self):
        memory, cpu = _samples()
        with pytest.raises(ValueError):
            samples_to_dataframe(memory, cpu[:1])


class TestExportSamples:
    """Test cases for export_samples."""

    def test_parquet(self, temp_dir):
        df = samples_to_dataframe(*_samples())
        path = export_samples(df, temp_dir / "samples.parquet")

        assert path.exists()
        loaded = pl.read_parquet(path)
        assert loaded.columns == df.columns
        assert loaded["rss"].to_list() == [4096, 8192]

    def test_csv_by_suffix(self, temp_dir):
        df = samples_to_dataframe(*_samples())
        path = export_samples(df, temp_dir / "nested" / "samples.csv")

        assert path.exists()
        loaded = pl.read_csv(path)
        assert loaded["timestamp"].to_list() == [1000, 2000]
        assert loaded["cpu_percentage"].to_list() == [0.0, 50.0]

    def test_compression(self, temp_dir):
        df = samples_to_dataframe(*_samples())
        path = export_samples(df, temp_dir / "samples.parquet", compression="gzip")
        assert pl.read_parquet(path)["heap_total"].to_list() == [2048, 4096]
