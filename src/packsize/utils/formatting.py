"""Pure formatting utilities for human-readable output.

This module provides stateless formatting functions for converting raw data
into human-readable strings. All functions are pure with no side effects.
"""

# Decimal unit suffixes (1000-based)
_UNITS = ("KB", "MB", "GB", "TB", "PB")
_STEP = 1000

# Time unit constants
_MINUTE = 60
_HOUR = _MINUTE * 60  # 3,600
_DAY = _HOUR * 24  # 86,400


def format_size(bytes: int) -> str:
    """Convert bytes to human-readable size format.

    Uses decimal units (1000-based) with at most two decimal places and
    trailing zeros trimmed.

    Args:
        bytes: Number of bytes to format (must be non-negative)

    Returns:
        Human-readable string representation of the size.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1000)
        '1 KB'
        >>> format_size(1010)
        '1.01 KB'
        >>> format_size(2_500_000)
        '2.5 MB'
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)

    if bytes < _STEP:
        return f"{bytes} B"

    value = float(bytes)
    unit = _UNITS[0]
    for unit in _UNITS:
        value /= _STEP
        if round(value, 2) < _STEP:
            break

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"


def format_duration(seconds: float) -> str:
    """Convert seconds to human-readable duration format.

    Shows the two most significant units. Durations under a minute keep
    millisecond precision since most walks finish in well under a minute.

    Args:
        seconds: Duration in seconds (must be non-negative)

    Returns:
        Human-readable duration string with adaptive granularity.

    Examples:
        >>> format_duration(0.25)
        '0.25s'
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(3665)
        '1h 1m'
        >>> format_duration(90000)
        '1d 1h'
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    if seconds < _MINUTE:
        return f"{seconds:.2f}".rstrip("0").rstrip(".") + "s"

    total_seconds = int(seconds)

    if total_seconds >= _DAY:
        days, remaining = divmod(total_seconds, _DAY)
        hours = remaining // _HOUR
        return f"{days}d {hours}h" if hours else f"{days}d"

    if total_seconds >= _HOUR:
        hours, remaining = divmod(total_seconds, _HOUR)
        minutes = remaining // _MINUTE
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"

    minutes, remaining = divmod(total_seconds, _MINUTE)
    return f"{minutes}m {remaining}s" if remaining else f"{minutes}m"


def format_scale(size: int, smallest: int) -> str | None:
    """Format how many times larger ``size`` is than ``smallest``.

    Args:
        size: Byte count of the compared path
        smallest: Byte count of the smallest path

    Returns:
        Ratio with two decimal places, or None when ``smallest`` is zero

    Examples:
        >>> format_scale(300, 100)
        '3.00'
        >>> format_scale(5, 0) is None
        True
    """
    if smallest == 0:
        return None
    return f"{size / smallest:.2f}"
