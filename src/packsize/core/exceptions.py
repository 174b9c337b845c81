"""Exception hierarchy for traversal and filtering errors."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class PackSizeError(Exception):
    """Base exception for all packsize errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:  # pyright: ignore[reportAny] # Flexible error context
        """Initialize PackSizeError.

        Args:
            message: Error message
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.context: dict[str, Any] = context or {}  # pyright: ignore[reportAny] # Flexible error context


class InvalidGlobError(PackSizeError, ValueError):
    """Exception raised when a filter pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initialize InvalidGlobError.

        Args:
            pattern: The rejected glob pattern
            reason: Why the pattern was rejected
        """
        super().__init__(
            f"Invalid glob pattern {pattern!r}: {reason}",
            {"pattern": pattern, "reason": reason},
        )
        self.pattern: str = pattern
        self.reason: str = reason


class TraversalError(PackSizeError):
    """Exception raised when a path cannot be listed, read or classified."""

    def __init__(
        self,
        path: Path,
        message: str,
        context: dict[str, Any] | None = None,  # pyright: ignore[reportAny] # Flexible error context
    ) -> None:
        """Initialize TraversalError.

        Args:
            path: Path that failed
            message: Human-readable description of the failure
            context: Additional context information
        """
        full_context = context or {}
        full_context["path"] = str(path)

        super().__init__(message, full_context)
        self.path: Path = path


class PathNotFoundError(TraversalError):
    """Exception raised when a root path does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"{path}: no such file or directory")
