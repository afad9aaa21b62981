"""
Export of collected samples using Polars.

One row per sampling tick, pairing the memory and CPU samples taken in that
tick. Parquet is the default format; a ``.csv`` suffix writes CSV instead.
"""

import logging
from pathlib import Path
from typing import Literal, Sequence, Union

import polars as pl

from ..models.samples import CpuSample, MemorySample

logger = logging.getLogger(__name__)

SAMPLE_SCHEMA = {
    "timestamp": pl.Int64,
    "rss": pl.Int64,
    "heap_total": pl.Int64,
    "heap_used": pl.Int64,
    "external": pl.Int64,
    "array_buffers": pl.Int64,
    "cpu_user_us": pl.Int64,
    "cpu_system_us": pl.Int64,
    "cpu_percentage": pl.Float64,
    "degraded": pl.Boolean,
}


def samples_to_dataframe(
    memory_samples: Sequence[MemorySample],
    cpu_samples: Sequence[CpuSample],
) -> pl.DataFrame:
    """
    Build a DataFrame from paired memory and CPU samples.

    Args:
        memory_samples: Memory samples in capture order
        cpu_samples: CPU samples in capture order, same length as ``memory_samples``

    Returns:
        DataFrame with the columns of SAMPLE_SCHEMA

    Raises:
        ValueError: If the two sequences differ in length
    """
    if len(memory_samples) != len(cpu_samples):
        raise ValueError(
            f"Sample sequences differ in length: {len(memory_samples)} memory, "
            f"{len(cpu_samples)} CPU"
        )

    rows = [
        {
            "timestamp": memory.timestamp,
            "rss": memory.rss,
            "heap_total": memory.heap_total,
            "heap_used": memory.heap_used,
            "external": memory.external,
            "array_buffers": memory.array_buffers,
            "cpu_user_us": cpu.usage.user if cpu.usage is not None else None,
            "cpu_system_us": cpu.usage.system if cpu.usage is not None else None,
            "cpu_percentage": float(cpu.percentage),
            "degraded": memory.degraded or cpu.usage is None,
        }
        for memory, cpu in zip(memory_samples, cpu_samples)
    ]
    return pl.DataFrame(rows, schema=SAMPLE_SCHEMA)


def export_samples(
    df: pl.DataFrame,
    path: Union[str, Path],
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy",
) -> Path:
    """
    Write a samples DataFrame to disk.

    Args:
        df: DataFrame produced by samples_to_dataframe
        path: Destination file; ``.csv`` selects CSV, anything else Parquet
        compression: Parquet compression algorithm

    Returns:
        The path written to
    """
    output = Path(path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        if output.suffix.lower() == ".csv":
            df.write_csv(output)
        else:
            df.write_parquet(output, compression=compression)
        logger.debug(f"Exported {len(df)} samples to {output}")
        return output
    except Exception as e:
        logger.error(f"Failed to export samples to {output}: {e}")
        raise
