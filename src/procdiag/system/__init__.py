"""
System interaction for the diagnostic sampler.

- Resource probes reading process memory and CPU counters through psutil
- A one-shot snapshot of host, interpreter and process metadata
"""

from .environment import collect_environment_info
from .probe import PsutilProbe, ResourceProbe

__all__ = [
    "collect_environment_info",
    "PsutilProbe",
    "ResourceProbe",
]
