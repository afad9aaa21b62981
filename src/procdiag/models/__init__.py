"""
Data models for the diagnostic sampler.

Configuration Models:
- Immutable session configuration

Sample Models:
- Raw probe readings (memory counters, CPU times)
- Timestamped memory and CPU samples held by a session
"""

from .config import DEFAULT_INTERVAL_MS, DEFAULT_LAG_INTERVAL_MS, SessionConfig
from .samples import CpuSample, CpuTimes, MemorySample, MemoryUsage

__all__ = [
    # Configuration
    "DEFAULT_INTERVAL_MS",
    "DEFAULT_LAG_INTERVAL_MS",
    "SessionConfig",
    # Samples
    "CpuSample",
    "CpuTimes",
    "MemorySample",
    "MemoryUsage",
]
