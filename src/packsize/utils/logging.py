"""Logging infrastructure with per-root context tracking.

Log records are tagged with the root path whose walk produced them. The root
is stored in a ContextVar set at the start of each root walk; asyncio tasks
spawned during the walk inherit it, so every record emitted anywhere in a
subtree carries its root without passing it around explicitly.

Log output goes to stderr so it never interleaves with the report on stdout.
"""

import contextvars
import logging
import sys
from pathlib import Path
from typing import Final, override

scan_root_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_root",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_root)s] - %(message)s"


class ScanRootFilter(logging.Filter):
    """Logging filter that adds the current scan root to log records.

    Records emitted outside of any root walk get ``-``.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Add scan root to log record from ContextVar.

        Args:
            record: Log record to enhance

        Returns:
            True to allow the record to be logged
        """
        scan_root = scan_root_var.get()
        record.scan_root = scan_root if scan_root is not None else "-"
        return True


def configure_logging(
    *,
    log_level: str = "WARNING",
    log_file: Path | None = None,
    enable_console: bool = True,
) -> None:
    """Configure application logging.

    Sets up logging infrastructure with:
    - Scan root tracking via ContextVar
    - Console output on stderr
    - Optional file output

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file receiving the same records
        enable_console: Enable console output handler

    Example:
        >>> configure_logging(log_level="DEBUG")
        >>> set_scan_root("/srv/www")
        >>> logging.getLogger(__name__).debug("Directory walked", extra={"children": 3})
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    scan_root_filter = ScanRootFilter()
    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(scan_root_filter)
        root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(scan_root_filter)
        root_logger.addHandler(file_handler)


def set_scan_root(scan_root: str) -> None:
    """Set the scan root for the current context.

    Args:
        scan_root: Root path being walked
    """
    _ = scan_root_var.set(scan_root)


def get_scan_root() -> str | None:
    """Get the current scan root from context.

    Returns:
        Current scan root or None if not set
    """
    return scan_root_var.get()


def clear_scan_root() -> None:
    """Clear the scan root from the current context."""
    _ = scan_root_var.set(None)
