"""
Point-in-time memory and CPU samplers.

Both samplers wrap a ResourceProbe and never raise: a failing probe is
logged and produces a degraded sample instead.
"""

import logging
import time
from typing import Optional

from ..models.samples import CpuSample, CpuTimes, MemorySample
from ..system.probe import ResourceProbe
from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def compute_cpu_percentage(current: CpuTimes, current_ts: int,
                           previous: CpuTimes, previous_ts: int) -> float:
    """
    CPU time consumed between two captures as a percentage of wall time elapsed.

    CPU times are in microseconds and timestamps in milliseconds. Values above
    100 are possible on multi-core hosts. A non-positive time delta yields 0.
    """
    time_delta_ms = current_ts - previous_ts
    if time_delta_ms <= 0:
        return 0.0
    cpu_delta_us = current.total - previous.total
    return max(0.0, cpu_delta_us / (time_delta_ms * 1000) * 100)


def capture_memory(probe: ResourceProbe) -> MemorySample:
    """
    Capture the current memory state of the probed process.

    Returns:
        A MemorySample; a degraded one with all counters 0 if the probe failed
    """
    timestamp = now_ms()
    try:
        usage = probe.memory_usage()
    except Exception as e:
        handle_error(e, "memory capture", severity=ErrorSeverity.WARNING,
                     reraise=False, logger=logger)
        return MemorySample(timestamp=timestamp, rss=0, heap_total=0, heap_used=0, degraded=True)
    return MemorySample(
        timestamp=timestamp,
        rss=usage.rss,
        heap_total=usage.heap_total,
        heap_used=usage.heap_used,
        external=usage.external,
        array_buffers=usage.array_buffers,
    )


def capture_cpu(probe: ResourceProbe, previous: Optional[CpuSample] = None) -> CpuSample:
    """
    Capture cumulative CPU time and derive usage against ``previous``.

    Args:
        probe: Probe to read CPU times from
        previous: The preceding sample of the same session, None for the first one

    Returns:
        A CpuSample; if the probe failed the previous usage is repeated so the
        derived percentage is 0. Without a previous reading to repeat, usage
        is None and the next capture treats this sample as missing.
    """
    timestamp = now_ms()
    usage: Optional[CpuTimes]
    try:
        usage = probe.cpu_times()
    except Exception as e:
        handle_error(e, "CPU capture", severity=ErrorSeverity.WARNING,
                     reraise=False, logger=logger)
        usage = previous.usage if previous is not None else None

    percentage = 0.0
    if usage is not None and previous is not None and previous.usage is not None:
        percentage = compute_cpu_percentage(usage, timestamp, previous.usage, previous.timestamp)
    return CpuSample(timestamp=timestamp, usage=usage, percentage=percentage)
