"""
Configuration validation utilities.

This module turns raw option mappings (keyword arguments or a TOML table)
into a validated SessionConfig.
"""

import logging
from typing import Any, Dict

from ..models.config import DEFAULT_INTERVAL_MS, SessionConfig
from ..validation import (
    ConfigurationError,
    validate_callback,
    validate_optional_byte_count,
    validate_positive_integer,
    validate_session_name,
)

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "name", "interval", "threshold", "target", "monitor_event_loop", "lag_threshold", "alert",
}


def validate_session_config(config_data: Dict[str, Any]) -> SessionConfig:
    """
    Validate and create a SessionConfig from raw configuration data.

    Falsy ``interval`` falls back to the default, falsy ``threshold``,
    ``target`` and ``lag_threshold`` disable their feature, and
    ``monitor_event_loop`` is only disabled by an explicit False.

    Args:
        config_data: Raw options, e.g. constructor keyword arguments or a TOML table

    Returns:
        Validated SessionConfig instance

    Raises:
        ConfigurationError: If validation fails
    """
    unknown = set(config_data) - KNOWN_KEYS
    if unknown:
        logger.warning(f"Ignoring unknown diagnostics options: {sorted(unknown)}")

    name = validate_session_name(config_data.get("name"))

    interval = config_data.get("interval") or DEFAULT_INTERVAL_MS
    interval = validate_positive_integer(interval, min_value=1, field_name="interval")

    threshold = validate_optional_byte_count(config_data.get("threshold"), field_name="threshold")
    target = validate_optional_byte_count(config_data.get("target"), field_name="target")

    lag_threshold = config_data.get("lag_threshold")
    if lag_threshold:
        lag_threshold = validate_positive_integer(lag_threshold, min_value=1, field_name="lag_threshold")
    else:
        lag_threshold = None

    monitor_event_loop = config_data.get("monitor_event_loop", True)
    if monitor_event_loop is None:
        monitor_event_loop = True
    if not isinstance(monitor_event_loop, bool):
        raise ConfigurationError(
            "monitor_event_loop must be a boolean",
            field_name="monitor_event_loop",
            value=monitor_event_loop,
        )

    alert = validate_callback(config_data.get("alert"), field_name="alert")

    return SessionConfig(
        name=name,
        interval=interval,
        threshold=threshold,
        target=target,
        monitor_event_loop=monitor_event_loop,
        lag_threshold=lag_threshold,
        alert=alert,
    )
