"""
Resource sampling built on top of the system probes.
"""

from .resource_sampler import capture_cpu, capture_memory, compute_cpu_percentage, now_ms

__all__ = [
    "capture_cpu",
    "capture_memory",
    "compute_cpu_percentage",
    "now_ms",
]
