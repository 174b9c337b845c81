"""Unit tests for glob validation and include/exclude filtering."""

from pathlib import Path

import pytest

from packsize.core.data.filesystem.filters import (
    FilterMode,
    GlobPattern,
    PathFilter,
    validate_glob_pattern,
)
from packsize.core.exceptions import InvalidGlobError


class TestValidateGlobPattern:
    """Test suite for validate_glob_pattern."""

    @pytest.mark.parametrize(
        "pattern",
        ["*.log", "**/node_modules", "[abc]*.txt", "[!a]*", "[]]x", "file?.bin", "/srv/*/cache"],
    )
    def test_accepts_well_formed_patterns(self, pattern: str) -> None:
        """Test that valid patterns are returned unchanged."""
        assert validate_glob_pattern(pattern) == pattern

    @pytest.mark.parametrize(
        ("pattern", "reason"),
        [
            ("", "pattern is empty"),
            ("a\x00b", "NUL byte"),
            ("[abc", "unterminated character class at position 0"),
            ("*.[ch", "unterminated character class at position 2"),
            ("[!", "unterminated character class"),
            ("[]", "unterminated character class"),
        ],
    )
    def test_rejects_malformed_patterns(self, pattern: str, reason: str) -> None:
        """Test that malformed patterns raise InvalidGlobError with a reason."""
        with pytest.raises(InvalidGlobError, match=reason) as exc_info:
            _ = validate_glob_pattern(pattern)

        assert exc_info.value.pattern == pattern

    def test_invalid_glob_error_is_value_error(self) -> None:
        """Test that callers catching ValueError also catch bad globs."""
        with pytest.raises(ValueError, match="Invalid glob pattern"):
            _ = validate_glob_pattern("[")


class TestGlobPattern:
    """Test suite for GlobPattern matching."""

    def test_star_matches_across_separators(self) -> None:
        """Test that the pattern is matched against the full path."""
        glob = GlobPattern("*.log")

        assert glob.matches(Path("/var/app/logs/a.log"))
        assert glob.matches(Path("relative/dir/b.log"))
        assert not glob.matches(Path("/var/app/a.txt"))

    def test_pattern_anchors_whole_path(self) -> None:
        """Test that a bare file name does not match a nested path."""
        glob = GlobPattern("a.log")

        assert glob.matches(Path("a.log"))
        assert not glob.matches(Path("dir/a.log"))

    def test_directory_pattern(self) -> None:
        """Test matching directory entries by a path segment."""
        glob = GlobPattern("*/node_modules")

        assert glob.matches(Path("project/node_modules"))
        assert not glob.matches(Path("project/src"))

    def test_case_sensitivity(self) -> None:
        """Test that matching is case-sensitive unless disabled."""
        assert not GlobPattern("*.LOG").matches(Path("dir/a.log"))
        assert GlobPattern("*.LOG", case_sensitive=False).matches(Path("dir/a.log"))

    def test_character_class(self) -> None:
        """Test bracket expressions."""
        glob = GlobPattern("*/file[0-9].bin")

        assert glob.matches(Path("d/file7.bin"))
        assert not glob.matches(Path("d/fileX.bin"))

    def test_invalid_pattern_raises(self) -> None:
        """Test that construction validates the pattern."""
        with pytest.raises(InvalidGlobError):
            _ = GlobPattern("[oops")


class TestPathFilter:
    """Test suite for PathFilter."""

    def test_include_keeps_matches_only(self) -> None:
        """Test that INCLUDE keeps exactly the matching paths."""
        path_filter = PathFilter.include("*.txt")

        assert path_filter.mode is FilterMode.INCLUDE
        assert path_filter.include_path(Path("d/a.txt"))
        assert not path_filter.include_path(Path("d/a.log"))

    def test_exclude_drops_matches_only(self) -> None:
        """Test that EXCLUDE keeps exactly the non-matching paths."""
        path_filter = PathFilter.exclude("*.txt")

        assert path_filter.mode is FilterMode.EXCLUDE
        assert not path_filter.include_path(Path("d/a.txt"))
        assert path_filter.include_path(Path("d/a.log"))

    @pytest.mark.parametrize(
        "path",
        [Path("a.txt"), Path("a.log"), Path("x/y/z.txt"), Path("x/y"), Path("/abs/q.TXT")],
    )
    def test_include_and_exclude_are_complementary(self, path: Path) -> None:
        """Test that the same pattern partitions entries between the two modes."""
        included = PathFilter.include("*.txt").include_path(path)
        excluded = PathFilter.exclude("*.txt").include_path(path)

        assert included != excluded

    def test_case_insensitive_filter(self) -> None:
        """Test that case sensitivity is passed through to the glob."""
        path_filter = PathFilter.exclude("*.LOG", case_sensitive=False)

        assert not path_filter.include_path(Path("d/a.log"))

    def test_pattern_property_and_repr(self) -> None:
        """Test pattern access and representation."""
        path_filter = PathFilter(FilterMode.EXCLUDE, "*.log")

        assert path_filter.pattern == "*.log"
        assert repr(path_filter) == "PathFilter(exclude, '*.log')"

    def test_invalid_pattern_raises(self) -> None:
        """Test that filters reject malformed patterns."""
        with pytest.raises(InvalidGlobError):
            _ = PathFilter.include("")
