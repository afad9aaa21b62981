"""
Exception types and error containment helpers.

A diagnostic sampler must never destabilize the process it observes, so
almost every failure is logged and absorbed here. Configuration errors are
the exception: they surface to the caller at construction time.
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Carries the offending field and value so callers can report precisely
    which option was rejected.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ConfigurationError(ValidationError):
    """Raised when a diagnostic session is constructed with invalid options."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def safe_execute(func: Callable[[], T], default: Any = None, context: str = "") -> T:
    """
    Run ``func`` and return ``default`` if it raises.

    Args:
        func: Zero-argument callable to execute
        default: Value returned when ``func`` fails
        context: Optional description; when given, the failure is logged at debug level

    Returns:
        The result of ``func`` or ``default``
    """
    try:
        return func()
    except Exception as e:
        if context:
            logger.debug(f"{context} failed, using default: {e}")
        return default


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors."""
    exit_code = kwargs.pop('exit_code', 1)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    import sys
    sys.exit(exit_code)
