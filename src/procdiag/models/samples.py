"""
Sample data models.

Samples are immutable point-in-time captures. A session only ever appends
them to its sequences and reads them back for statistics.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MemoryUsage:
    """
    Raw memory counters returned by a resource probe, in bytes.

    Attributes:
        rss: Resident set size.
        heap_total: Address space reserved by the process (VMS).
        heap_used: Memory unique to the process (USS), or RSS where USS is unavailable.
        external: Shared memory mapped into the process.
        array_buffers: Bytes currently traced by tracemalloc, 0 when not tracing.
    """

    rss: int = 0
    heap_total: int = 0
    heap_used: int = 0
    external: int = 0
    array_buffers: int = 0


@dataclass(frozen=True)
class CpuTimes:
    """Cumulative process CPU time since start, in microseconds."""

    user: int = 0
    system: int = 0

    @property
    def total(self) -> int:
        return self.user + self.system


@dataclass(frozen=True)
class MemorySample:
    """
    A timestamped memory capture.

    A ``degraded`` sample stands in for a failed read: its counters are 0 and
    it is left out of statistics and target accounting.
    """

    # Epoch milliseconds
    timestamp: int
    rss: int
    heap_total: int
    heap_used: int
    external: int = 0
    array_buffers: int = 0
    degraded: bool = False

    @property
    def total(self) -> int:
        """The value thresholds and targets are compared against."""
        return self.heap_used


@dataclass(frozen=True)
class CpuSample:
    """
    A timestamped CPU capture.

    ``percentage`` is computed against the preceding sample of the same
    session and is 0 for the first sample. ``usage`` is None when the
    counters could not be read and there was no earlier reading to repeat.
    """

    timestamp: int
    usage: Optional[CpuTimes]
    percentage: float = 0.0
