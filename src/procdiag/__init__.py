"""
procdiag: Runtime diagnostic sampler for Python processes.

This package periodically samples memory, CPU and scheduling lag of the
running process, accumulates them over a measurement window and builds a
statistical summary report on demand.

The package is organized into specialized modules:
- session: The diagnostic session (sampling loop, alerts, target tracking, reports)
- collectors: Point-in-time memory and CPU samplers
- monitoring: Repeating daemon timer and scheduling lag monitor
- system: psutil-backed resource probe and environment snapshot
- config: Session option validation and TOML loading
- models: Configuration and sample data structures
- validation: Option validation and error containment
- storage: Export of raw samples with Polars
- cli: Run a script under diagnostics from the command line

Usage:
    from procdiag import DiagnosticSession

    session = DiagnosticSession("worker", interval=1000, threshold=500_000_000)
    session.start()
    ...
    report = session.report()
"""

from .config import load_session_config, validate_session_config
from .formatting import format_bytes, format_duration, format_percentage
from .models import CpuSample, CpuTimes, MemorySample, MemoryUsage, SessionConfig
from .monitoring import LagMonitor
from .report import calculate_stats, save_report
from .session import DiagnosticSession
from .system import PsutilProbe, ResourceProbe, collect_environment_info
from .validation import ConfigurationError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interface
    "DiagnosticSession",
    "SessionConfig",
    "load_session_config",
    "validate_session_config",
    # Samples and probes
    "CpuSample",
    "CpuTimes",
    "MemorySample",
    "MemoryUsage",
    "PsutilProbe",
    "ResourceProbe",
    "LagMonitor",
    "collect_environment_info",
    # Reporting
    "calculate_stats",
    "save_report",
    "format_bytes",
    "format_duration",
    "format_percentage",
    # Errors
    "ConfigurationError",
    "ValidationError",
]
