"""
Validation and error handling for the procdiag package.

This module provides option validation and the error containment helpers
used by every sampling path.
"""

from .exceptions import (
    ConfigurationError,
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    safe_execute,
)

from .validators import (
    validate_callback,
    validate_optional_byte_count,
    validate_positive_integer,
    validate_session_name,
)

__all__ = [
    # Core functionality
    "ConfigurationError",
    "ErrorSeverity",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "safe_execute",
    # Validators
    "validate_callback",
    "validate_optional_byte_count",
    "validate_positive_integer",
    "validate_session_name",
]
