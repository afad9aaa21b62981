"""
Statistics reduction and report building blocks.

The report is a plain JSON-serializable dictionary; every metric carries
its raw value alongside a human-readable rendering.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, TypeVar, Union

from .formatting import format_bytes, format_duration, format_percentage

logger = logging.getLogger(__name__)

T = TypeVar("T")

Stats = Dict[str, float]


def calculate_stats(samples: Sequence[T], accessor: Callable[[T], float] = lambda s: s) -> Stats:
    """
    Compute peak, average and low over ``samples`` projected through ``accessor``.

    Args:
        samples: Sequence of samples
        accessor: Extracts the numeric value from each sample

    Returns:
        ``{"peak", "average", "low"}``; all 0 for an empty sequence
    """
    if not samples:
        return {"peak": 0, "average": 0, "low": 0}
    values = [accessor(sample) for sample in samples]
    return {
        "peak": max(values),
        "average": sum(values) / len(values),
        "low": min(values),
    }


def bytes_metric(value: float) -> Dict[str, Any]:
    return {"bytes": value, "human": format_bytes(value)}


def percentage_metric(value: float) -> Dict[str, Any]:
    return {"percentage": value, "human": format_percentage(value)}


def duration_metric(value: float) -> Dict[str, Any]:
    return {"ms": value, "human": format_duration(value)}


def byte_stats_block(stats: Stats) -> Dict[str, Any]:
    return {key: bytes_metric(stats[key]) for key in ("peak", "average", "low")}


def cpu_stats_block(stats: Stats) -> Dict[str, Any]:
    return {key: percentage_metric(stats[key]) for key in ("peak", "average", "low")}


def lag_stats_block(stats: Dict[str, float]) -> Dict[str, Any]:
    return {"lag": {key: duration_metric(stats[key]) for key in ("average", "max", "min")}}


def optional_bytes_metric(value: Optional[int]) -> Optional[Dict[str, Any]]:
    """A configured byte limit echoed back, or None when it is disabled."""
    return bytes_metric(value) if value else None


def save_report(report: Dict[str, Any], path: Union[str, Path]) -> None:
    """
    Write a report to ``path`` as indented JSON.

    Args:
        report: Report produced by a diagnostic session
        path: Destination file; parent directories are created
    """
    output = Path(path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False, default=str)
        logger.debug(f"Saved report to {output}")
    except Exception as e:
        logger.error(f"Failed to save report to {output}: {e}")
        raise
