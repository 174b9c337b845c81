"""Shared utility modules for common operations.

This package provides pure, stateless formatting helpers and the logging
setup used by the application.
"""

from packsize.utils.formatting import (
    format_duration,
    format_scale,
    format_size,
)

__all__ = [
    "format_duration",
    "format_scale",
    "format_size",
]
