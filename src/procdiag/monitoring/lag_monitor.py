"""
Scheduling lag monitor.

A background timer expects to wake every ``interval`` milliseconds; the
amount by which it wakes late is the lag. In a Python host that lateness
reflects GIL contention and scheduler pressure caused by other work.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

from ..models.config import DEFAULT_LAG_INTERVAL_MS
from .timer import RepeatingTimer

logger = logging.getLogger(__name__)


class LagMonitor:
    """
    Records scheduling lag samples and exposes min/average/max statistics.

    The monitor is either idle or monitoring; ``start`` and ``stop`` are
    idempotent. Samples survive ``stop`` and are only dropped by ``clear``.
    """

    def __init__(self, warn_threshold_ms: Optional[float] = None):
        """
        Args:
            warn_threshold_ms: If set, a single lag sample above this value is logged as a warning.
        """
        self.warn_threshold_ms = warn_threshold_ms
        self._samples: List[float] = []
        self._lock = threading.Lock()
        self._timer: Optional[RepeatingTimer] = None
        self._last_check: float = 0.0
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._timer is not None

    @property
    def sample_count(self) -> int:
        with self._lock:
            return len(self._samples)

    def start(self, interval_ms: int = DEFAULT_LAG_INTERVAL_MS) -> None:
        with self._lock:
            if self._timer is not None:
                return
            self._generation += 1
            generation = self._generation
            self._last_check = time.perf_counter()
            self._timer = RepeatingTimer(
                interval_ms / 1000,
                lambda: self._check(generation, interval_ms),
                name=f"LagMonitor-{generation}",
            )
            self._timer.start()
        logger.debug(f"Lag monitor started with interval {interval_ms}ms")

    def stop(self) -> None:
        with self._lock:
            timer = self._timer
            if timer is None:
                return
            self._timer = None
            timer.cancel()
        timer.join(timeout=1.0)
        logger.debug("Lag monitor stopped")

    def clear(self) -> None:
        """Drop all recorded samples."""
        with self._lock:
            self._samples = []

    def _check(self, generation: int, interval_ms: int) -> None:
        now = time.perf_counter()
        with self._lock:
            if generation != self._generation or self._timer is None:
                return
            actual_delay_ms = (now - self._last_check) * 1000
            lag = max(0.0, actual_delay_ms - interval_ms)
            self._samples.append(lag)
            self._last_check = now
        if self.warn_threshold_ms is not None and lag > self.warn_threshold_ms:
            logger.warning(f"Scheduling lag of {lag:.1f}ms exceeds {self.warn_threshold_ms}ms")

    def get_stats(self) -> Dict[str, float]:
        """
        Statistics over all recorded samples.

        Returns:
            ``{"average", "max", "min"}`` in milliseconds, all 0 when no sample exists
        """
        with self._lock:
            samples = list(self._samples)
        if not samples:
            return {"average": 0, "max": 0, "min": 0}
        return {
            "average": sum(samples) / len(samples),
            "max": max(samples),
            "min": min(samples),
        }
