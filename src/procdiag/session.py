"""
Diagnostic session: the sampling loop and its accumulated statistics.

A session samples memory and CPU of the current process at a fixed interval,
raises threshold alerts, tracks time spent over a memory target and builds a
summary report on demand. Sampling runs on a daemon timer thread, so all
mutable state is guarded by a single re-entrant lock.

Usage:
    session = DiagnosticSession("worker", interval=1000, threshold=500_000_000)
    session.start()
    ...
    report = session.report()
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .collectors.resource_sampler import capture_cpu, capture_memory, now_ms
from .config.validators import validate_session_config
from .formatting import format_bytes, format_duration, format_percentage
from .models.config import SessionConfig
from .models.samples import CpuSample, MemorySample
from .monitoring.lag_monitor import LagMonitor
from .monitoring.timer import RepeatingTimer
from .report import (
    byte_stats_block,
    calculate_stats,
    cpu_stats_block,
    lag_stats_block,
    optional_bytes_metric,
)
from .system.environment import collect_environment_info
from .system.probe import PsutilProbe, ResourceProbe
from .validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)

AlertCallback = Callable[[Dict[str, Any]], None]


class DiagnosticSession:
    """
    Collects runtime diagnostics for the current process over a measurement window.

    ``start`` opens a window with an immediate sample and ``stop`` closes it
    with a final one, so a started-then-stopped session always holds at
    least two samples. ``start`` on a stopped session opens a fresh window.
    Sampling failures are logged and never propagate to the caller or the
    timer thread.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        interval: Optional[int] = None,
        threshold: Optional[int] = None,
        alert: Optional[AlertCallback] = None,
        target: Optional[int] = None,
        monitor_event_loop: bool = True,
        lag_threshold: Optional[int] = None,
        probe: Optional[ResourceProbe] = None,
    ):
        """
        Initialize a diagnostic session.

        Args:
            name: Required label for this session
            interval: Sampling interval in milliseconds (default 5000)
            threshold: Memory threshold in bytes that triggers alerts
            alert: Callback receiving the alert payload when the threshold is exceeded
            target: Target memory consumption in bytes for over/under tracking
            monitor_event_loop: Whether to monitor scheduling lag
            lag_threshold: Scheduling lag in milliseconds above which a warning is logged
            probe: Source of memory/CPU readings, defaults to a psutil probe of this process

        Raises:
            ConfigurationError: If ``name`` is missing or an option is invalid
        """
        self.config: SessionConfig = validate_session_config({
            "name": name,
            "interval": interval,
            "threshold": threshold,
            "alert": alert,
            "target": target,
            "monitor_event_loop": monitor_event_loop,
            "lag_threshold": lag_threshold,
        })
        self._probe: ResourceProbe = probe if probe is not None else PsutilProbe()
        self._lag_monitor = LagMonitor(warn_threshold_ms=self.config.lag_threshold)
        self._lock = threading.RLock()

        self._running = False
        self._start_time: Optional[int] = None
        self._end_time: Optional[int] = None
        self._timer: Optional[RepeatingTimer] = None
        self._generation = 0
        self._memory_samples: List[MemorySample] = []
        self._cpu_samples: List[CpuSample] = []
        self._alert_trigger_count = 0
        self._time_over_target = 0
        self._last_target_check: Optional[int] = None

        self._environment: Dict[str, Any] = collect_environment_info()
        logger.debug(f"Created diagnostic session '{self.name}' with {self.config.to_dict()}")

    @classmethod
    def from_config(cls, config: SessionConfig, probe: Optional[ResourceProbe] = None) -> "DiagnosticSession":
        return cls(
            config.name,
            interval=config.interval,
            threshold=config.threshold,
            alert=config.alert,
            target=config.target,
            monitor_event_loop=config.monitor_event_loop,
            lag_threshold=config.lag_threshold,
            probe=probe,
        )

    # --- Configuration ---

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def interval(self) -> int:
        return self.config.interval

    @property
    def threshold(self) -> Optional[int]:
        return self.config.threshold

    @property
    def target(self) -> Optional[int]:
        return self.config.target

    @property
    def monitor_event_loop(self) -> bool:
        return self.config.monitor_event_loop

    @property
    def lag_threshold(self) -> Optional[int]:
        return self.config.lag_threshold

    # --- Accumulated state ---

    @property
    def running(self) -> bool:
        return self._running

    @property
    def start_time(self) -> Optional[int]:
        return self._start_time

    @property
    def end_time(self) -> Optional[int]:
        return self._end_time

    @property
    def memory_samples(self) -> Tuple[MemorySample, ...]:
        with self._lock:
            return tuple(self._memory_samples)

    @property
    def cpu_samples(self) -> Tuple[CpuSample, ...]:
        with self._lock:
            return tuple(self._cpu_samples)

    @property
    def alert_trigger_count(self) -> int:
        return self._alert_trigger_count

    @property
    def time_over_target(self) -> int:
        """Milliseconds spent above the target so far."""
        return self._time_over_target

    @property
    def lag_monitor(self) -> LagMonitor:
        return self._lag_monitor

    @property
    def environment(self) -> Dict[str, Any]:
        return self._environment

    # --- Lifecycle ---

    def start(self) -> "DiagnosticSession":
        """
        Open a new measurement window.

        Clears previously collected samples and counters, takes an immediate
        sample and arms the interval timer. No-op while already running.
        """
        with self._lock:
            if self._running:
                return self

            self._running = True
            self._start_time = now_ms()
            self._end_time = None
            self._clear_accumulators()
            self._generation += 1
            generation = self._generation

            pending_alert = self._take_sample()

            if self.monitor_event_loop:
                self._lag_monitor.start()

            self._timer = RepeatingTimer(
                self.interval / 1000,
                lambda: self._on_interval(generation),
                name=f"DiagnosticSession-{self.name}",
            )
            self._timer.start()

        self._dispatch_alert(pending_alert)
        logger.info(f"Diagnostic session '{self.name}' started (interval: {self.interval}ms)")
        return self

    def stop(self) -> "DiagnosticSession":
        """
        Close the measurement window with a final sample.

        Cancels the interval timer and the lag monitor. No-op when not running.
        """
        with self._lock:
            if not self._running:
                return self
            pending_alert = self._close_window()
            samples = len(self._memory_samples)

        self._dispatch_alert(pending_alert)
        logger.info(f"Diagnostic session '{self.name}' stopped after {samples} samples")
        return self

    def reset(self) -> "DiagnosticSession":
        """Stop and discard all collected data; the configuration is kept."""
        with self._lock:
            pending_alert = self._close_window() if self._running else None
            self._clear_accumulators()
            self._start_time = None
            self._end_time = None
        self._dispatch_alert(pending_alert)
        logger.info(f"Diagnostic session '{self.name}' reset")
        return self

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "running": self._running,
                "name": self.name,
                "samples_collected": len(self._memory_samples),
                "uptime": now_ms() - self._start_time if self._running and self._start_time else 0,
            }

    def __enter__(self) -> "DiagnosticSession":
        return self.start()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    # --- Sampling ---

    def _clear_accumulators(self) -> None:
        self._memory_samples = []
        self._cpu_samples = []
        self._alert_trigger_count = 0
        self._time_over_target = 0
        self._last_target_check = None
        self._lag_monitor.clear()

    def _close_window(self) -> Optional[Dict[str, Any]]:
        """Take the final sample and disarm the timers. Caller holds the lock."""
        self._running = False
        self._end_time = now_ms()

        pending_alert = self._take_sample()

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        self._lag_monitor.stop()
        return pending_alert

    def _on_interval(self, generation: int) -> None:
        with self._lock:
            # A tick armed by an earlier window must not land in this one.
            if not self._running or generation != self._generation:
                return
            pending_alert = self._take_sample()
        self._dispatch_alert(pending_alert)

    def _take_sample(self) -> Optional[Dict[str, Any]]:
        """
        Capture one memory/CPU pair, then evaluate the threshold and the target.

        Returns:
            The alert payload to deliver once the lock is released, or None
        """
        try:
            memory_sample = capture_memory(self._probe)
            previous_cpu = self._cpu_samples[-1] if self._cpu_samples else None
            cpu_sample = capture_cpu(self._probe, previous_cpu)

            self._memory_samples.append(memory_sample)
            self._cpu_samples.append(cpu_sample)

            pending_alert = self._check_threshold(memory_sample)
            self._track_target(memory_sample)
            return pending_alert
        except Exception as e:
            handle_error(e, f"sampling tick of session '{self.name}'",
                         severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
            return None

    def _dispatch_alert(self, payload: Optional[Dict[str, Any]]) -> None:
        """Invoke the alert callback. Must be called without holding the lock."""
        if payload is None or self.config.alert is None:
            return
        try:
            self.config.alert(payload)
        except Exception as e:
            handle_error(e, f"alert callback of session '{self.name}'",
                         severity=ErrorSeverity.WARNING, reraise=False, logger=logger)

    def _check_threshold(self, memory_sample: MemorySample) -> Optional[Dict[str, Any]]:
        threshold = self.threshold
        if threshold is None or memory_sample.total <= threshold:
            return None

        self._alert_trigger_count += 1
        logger.debug(
            f"Session '{self.name}' memory {format_bytes(memory_sample.total)} "
            f"exceeds threshold {format_bytes(threshold)}"
        )
        if self.config.alert is None:
            return None

        return {
            "type": "threshold_exceeded",
            "timestamp": now_ms(),
            "memory": {
                "current": memory_sample.total,
                "threshold": threshold,
                "formatted": {
                    "current": format_bytes(memory_sample.total),
                    "threshold": format_bytes(threshold),
                },
            },
            "name": self.name,
        }

    def _track_target(self, memory_sample: MemorySample) -> None:
        target = self.target
        if target is None or memory_sample.degraded:
            return
        now = now_ms()
        if self._last_target_check is not None and memory_sample.total > target:
            self._time_over_target += max(0, now - self._last_target_check)
        self._last_target_check = now

    # --- Reporting ---

    def report(self) -> Dict[str, Any]:
        """
        Build the diagnostic report for the current measurement window.

        Stops the session first if it is still running. Apart from that
        implicit stop, reporting does not modify collected data.

        Returns:
            A JSON-serializable dictionary with memory, cpu, event_loop, infos,
            clock, analysis and summary blocks
        """
        with self._lock:
            pending_alert = self._close_window() if self._running else None
            report = self._build_report()
        self._dispatch_alert(pending_alert)
        return report

    def _build_report(self) -> Dict[str, Any]:
        with self._lock:
            now = now_ms()
            end_time = self._end_time if self._end_time is not None else now
            start_time = self._start_time if self._start_time is not None else now
            duration = max(0, end_time - start_time)
            # The final tick runs just after end_time is captured.
            time_over_target = min(self._time_over_target, duration)
            time_under_target = max(0, duration - time_over_target)

            readings = [sample for sample in self._memory_samples if not sample.degraded]
            memory_stats = calculate_stats(readings, lambda s: s.total)
            heap_stats = calculate_stats(readings, lambda s: s.heap_used)
            rss_stats = calculate_stats(readings, lambda s: s.rss)
            # A CPU percentage needs two successful reads; the first sample never has one.
            cpu_points = [
                current for previous, current in zip(self._cpu_samples, self._cpu_samples[1:])
                if previous.usage is not None and current.usage is not None
            ]
            cpu_stats = calculate_stats(cpu_points, lambda s: s.percentage)
            lag_stats = self._lag_monitor.get_stats()

            num_samples = len(self._memory_samples)
            alerts = self._alert_trigger_count

            memory_block = byte_stats_block(memory_stats)
            memory_block["heap"] = byte_stats_block(heap_stats)
            memory_block["rss"] = byte_stats_block(rss_stats)

            return {
                "name": self.name,
                "memory": memory_block,
                "cpu": cpu_stats_block(cpu_stats),
                "event_loop": lag_stats_block(lag_stats),
                "infos": self._environment,
                "clock": {
                    "start_time": self._start_time,
                    "end_time": self._end_time,
                    "duration": duration,
                    "human": format_duration(duration),
                },
                "analysis": {
                    "num_samples": num_samples,
                    "num_of_alert_triggers": alerts,
                    "time_over_target": time_over_target,
                    "time_over_target_human": format_duration(time_over_target),
                    "time_under_target": time_under_target,
                    "time_under_target_human": format_duration(time_under_target),
                    "sampling_interval": self.interval,
                    "threshold": optional_bytes_metric(self.threshold),
                    "target": optional_bytes_metric(self.target),
                },
                "summary": {
                    "duration": format_duration(duration),
                    "peak_memory": format_bytes(memory_stats["peak"]),
                    "average_memory": format_bytes(memory_stats["average"]),
                    "peak_cpu": format_percentage(cpu_stats["peak"]),
                    "average_cpu": format_percentage(cpu_stats["average"]),
                    "samples": num_samples,
                    "alerts": alerts,
                },
            }
