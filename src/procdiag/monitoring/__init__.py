"""
Background timing primitives: the repeating timer and the lag monitor.
"""

from .lag_monitor import LagMonitor
from .timer import RepeatingTimer

__all__ = [
    "LagMonitor",
    "RepeatingTimer",
]
