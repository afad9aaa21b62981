"""
Validation functions for diagnostic session options.

Each validator returns the normalized value or raises ConfigurationError
naming the rejected field.
"""

from typing import Any, Callable, Optional

from .exceptions import ConfigurationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ConfigurationError: If validation fails
    """
    if isinstance(value, bool):
        raise ConfigurationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ConfigurationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ConfigurationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ConfigurationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_optional_byte_count(value: Any, field_name: str = "bytes") -> Optional[int]:
    """
    Validate an optional byte count such as a memory threshold or target.

    Falsy values (None, 0) mean the feature is disabled and yield None.

    Raises:
        ConfigurationError: If the value is negative or not a number
    """
    if not value:
        return None
    return validate_positive_integer(value, min_value=1, field_name=field_name)


def validate_session_name(name: Any, field_name: str = "name") -> str:
    """
    Validate the session label.

    Args:
        name: Session name to validate
        field_name: Name of the field being validated

    Returns:
        The validated name

    Raises:
        ConfigurationError: If the name is missing or not a non-empty string
    """
    if not name or not isinstance(name, str) or not name.strip():
        raise ConfigurationError(
            'Diagnostics requires a "name" option',
            field_name=field_name,
            value=name
        )
    return name


def validate_callback(callback: Any, field_name: str = "alert") -> Optional[Callable]:
    """Validate an optional callback; None passes through unchanged."""
    if callback is None:
        return None
    if not callable(callback):
        raise ConfigurationError(
            f"{field_name} must be callable, got {type(callback).__name__}",
            field_name=field_name,
            value=callback
        )
    return callback
