"""
Configuration data models.

This module contains the immutable configuration of a diagnostic session.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_INTERVAL_MS = 5000
DEFAULT_LAG_INTERVAL_MS = 100


@dataclass(frozen=True)
class SessionConfig:
    """
    Configuration for a single diagnostic session.

    Attributes:
        name: Required label for the session, echoed in reports and alerts.
        interval: Sampling interval in milliseconds.
        threshold: Memory threshold in bytes that triggers alerts, None to disable.
        target: Target memory consumption in bytes for over/under tracking, None to disable.
        monitor_event_loop: Whether to run the lag monitor alongside sampling.
        lag_threshold: Scheduling lag in milliseconds above which a warning is logged, None to disable.
        alert: Optional callback invoked with the alert payload when the threshold is exceeded.
    """

    name: str
    interval: int = DEFAULT_INTERVAL_MS
    threshold: Optional[int] = None
    target: Optional[int] = None
    monitor_event_loop: bool = True
    lag_threshold: Optional[int] = None
    alert: Optional[Callable[[Dict[str, Any]], None]] = None

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SessionConfig":
        """
        Create a validated SessionConfig from a dictionary.

        Raises:
            ConfigurationError: If any option is invalid
        """
        from ..config.validators import validate_session_config

        return validate_session_config(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        The alert callback is not serializable and is left out.
        """
        return {
            "name": self.name,
            "interval": self.interval,
            "threshold": self.threshold,
            "target": self.target,
            "monitor_event_loop": self.monitor_event_loop,
            "lag_threshold": self.lag_threshold,
        }
