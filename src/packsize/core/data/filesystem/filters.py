"""Include/exclude glob filtering for directory entries."""

from __future__ import annotations

import fnmatch
import re
from enum import Enum
from pathlib import Path

from packsize.core.exceptions import InvalidGlobError


class FilterMode(str, Enum):
    """Enumeration for filter rule modes."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


def validate_glob_pattern(pattern: str) -> str:
    """Check that a glob pattern is well formed.

    fnmatch itself accepts any string, treating an unterminated ``[`` as a
    literal. Such patterns are almost always typos, so they are rejected
    here along with empty patterns and NUL bytes.

    Args:
        pattern: Glob pattern to validate

    Returns:
        The unchanged pattern

    Raises:
        InvalidGlobError: If the pattern is malformed
    """
    if not pattern:
        raise InvalidGlobError(pattern, "pattern is empty")
    if "\x00" in pattern:
        raise InvalidGlobError(pattern, "pattern contains a NUL byte")

    index = 0
    length = len(pattern)
    while index < length:
        if pattern[index] != "[":
            index += 1
            continue

        # A leading "!" negates the class and a "]" right after the opening
        # bracket (or the negation) is a literal member.
        close = index + 1
        if close < length and pattern[close] == "!":
            close += 1
        if close < length and pattern[close] == "]":
            close += 1
        close = pattern.find("]", close)
        if close == -1:
            raise InvalidGlobError(pattern, f"unterminated character class at position {index}")
        index = close + 1

    return pattern


class GlobPattern:
    """Glob-style pattern matched against the full path using fnmatch."""

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        """Initialize the glob pattern.

        Args:
            pattern: The pattern string
            case_sensitive: Whether pattern matching is case-sensitive

        Raises:
            InvalidGlobError: If the pattern is malformed
        """
        self.pattern: str = validate_glob_pattern(pattern)
        self.case_sensitive: bool = case_sensitive
        self._compiled: re.Pattern[str] = self._compile()

    def _compile(self) -> re.Pattern[str]:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            return re.compile(fnmatch.translate(self.pattern), flags)
        except re.error as exc:
            raise InvalidGlobError(self.pattern, str(exc)) from exc

    def matches(self, path: Path) -> bool:
        """Check if the glob pattern matches the full path.

        Args:
            path: Path to check

        Returns:
            True if the pattern matches, False otherwise
        """
        return self._compiled.match(path.as_posix()) is not None

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r}, case_sensitive={self.case_sensitive})"


class PathFilter:
    """Single include or exclude rule applied to directory entries.

    ``INCLUDE`` keeps only entries whose full path matches the glob,
    ``EXCLUDE`` keeps only entries that do not match. The rule is consulted
    for the immediate children of each directory being expanded; root paths
    are never filtered.
    """

    def __init__(
        self,
        mode: FilterMode,
        pattern: str,
        *,
        case_sensitive: bool = True,
    ) -> None:
        """Initialize the filter.

        Args:
            mode: Whether matching paths are kept or dropped
            pattern: Glob pattern matched against full paths
            case_sensitive: Whether pattern matching is case-sensitive

        Raises:
            InvalidGlobError: If the pattern is malformed
        """
        self.mode: FilterMode = mode
        self.glob: GlobPattern = GlobPattern(pattern, case_sensitive)

    @classmethod
    def include(cls, pattern: str, *, case_sensitive: bool = True) -> PathFilter:
        """Build a filter keeping only paths that match ``pattern``."""
        return cls(FilterMode.INCLUDE, pattern, case_sensitive=case_sensitive)

    @classmethod
    def exclude(cls, pattern: str, *, case_sensitive: bool = True) -> PathFilter:
        """Build a filter dropping paths that match ``pattern``."""
        return cls(FilterMode.EXCLUDE, pattern, case_sensitive=case_sensitive)

    @property
    def pattern(self) -> str:
        return self.glob.pattern

    def include_path(self, path: Path) -> bool:
        """Decide whether a directory entry takes part in the walk.

        Args:
            path: Full path of the entry

        Returns:
            True if the entry should be walked, False otherwise
        """
        matched = self.glob.matches(path)
        if self.mode is FilterMode.INCLUDE:
            return matched
        return not matched

    def __repr__(self) -> str:
        return f"PathFilter({self.mode.value}, {self.pattern!r})"
