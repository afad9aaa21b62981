"""
Human-readable formatting of byte counts, durations and CPU percentages.

These are pure functions used by report synthesis and alert payloads.
"""

from typing import Union

Number = Union[int, float]

_BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]
_BYTE_BASE = 1024


def _format_number(value: Number) -> str:
    """Render integral values without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_bytes(num_bytes: Number) -> str:
    """
    Format a byte count using 1024-based units with two decimals.

    Args:
        num_bytes: Number of bytes

    Returns:
        A string such as "1.00 KB" or "0 B"

    Examples:
        >>> format_bytes(1024)
        '1.00 KB'
        >>> format_bytes(1536)
        '1.50 KB'
    """
    if num_bytes == 0:
        return "0 B"
    if num_bytes < 1:
        return f"{num_bytes:.2f} B"
    value = num_bytes
    index = 0
    while value >= _BYTE_BASE and index < len(_BYTE_UNITS) - 1:
        value /= _BYTE_BASE
        index += 1
    return f"{value:.2f} {_BYTE_UNITS[index]}"


def format_duration(ms: Number) -> str:
    """
    Format milliseconds as a coarsest-to-finest duration string.

    Sub-second durations fall back to the raw millisecond count.

    Examples:
        >>> format_duration(90000)
        '1m 30s'
        >>> format_duration(3661000)
        '1h 1m 1s'
        >>> format_duration(250)
        '250ms'
    """
    seconds = int(ms // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h {minutes % 60}m {seconds % 60}s"
    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    if seconds > 0:
        return f"{seconds}s"
    return f"{_format_number(ms)}ms"


def format_percentage(value: Number) -> str:
    """Format a CPU percentage with two decimals, e.g. '12.50%'."""
    return f"{value:.2f}%"
