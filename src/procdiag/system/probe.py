"""
Process resource probes.

A probe is the only place that touches host counters. Sessions receive one
as an injected capability so tests can script the readings.
"""

import logging
import tracemalloc
from abc import ABC, abstractmethod
from typing import Optional

import psutil

from ..models.samples import CpuTimes, MemoryUsage

logger = logging.getLogger(__name__)


class ResourceProbe(ABC):
    """
    Abstract read contract for process memory and CPU counters.

    Implementations may raise on failure; the samplers built on top of a
    probe contain those failures.
    """

    @abstractmethod
    def memory_usage(self) -> MemoryUsage:
        """Return the current memory counters of the observed process."""
        pass

    @abstractmethod
    def cpu_times(self) -> CpuTimes:
        """Return cumulative user and system CPU time in microseconds."""
        pass


class PsutilProbe(ResourceProbe):
    """
    Reads memory and CPU counters through psutil.

    USS comes from ``memory_full_info()``, which may be denied or
    unsupported; RSS is used instead in that case and the fallback is
    remembered so the expensive call is not retried on every tick.
    """

    def __init__(self, pid: Optional[int] = None):
        """
        Args:
            pid: Process to observe, defaults to the current process.
        """
        self._process = psutil.Process(pid)
        self._uss_supported = True

    @property
    def pid(self) -> int:
        return self._process.pid

    def _unique_set_size(self, fallback: int) -> int:
        if not self._uss_supported:
            return fallback
        try:
            full_info = self._process.memory_full_info()
            return int(getattr(full_info, "uss", fallback))
        except (psutil.AccessDenied, NotImplementedError, AttributeError) as e:
            logger.debug(f"USS unavailable for PID {self.pid}, using RSS: {e}")
            self._uss_supported = False
            return fallback

    def memory_usage(self) -> MemoryUsage:
        mem_info = self._process.memory_info()
        rss = int(mem_info.rss)
        traced = tracemalloc.get_traced_memory()[0] if tracemalloc.is_tracing() else 0
        return MemoryUsage(
            rss=rss,
            heap_total=int(getattr(mem_info, "vms", rss)),
            heap_used=self._unique_set_size(rss),
            external=int(getattr(mem_info, "shared", 0)),
            array_buffers=int(traced),
        )

    def cpu_times(self) -> CpuTimes:
        times = self._process.cpu_times()
        return CpuTimes(
            user=int(times.user * 1_000_000),
            system=int(times.system * 1_000_000),
        )
