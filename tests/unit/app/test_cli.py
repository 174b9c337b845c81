"""Unit tests for the command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from packsize.app.cli import (
    apply_cli_overrides,
    cli,
    last_filter_option,
    resolve_filter,
)
from packsize.core.config import MainConfig
from packsize.core.data.filesystem import FilterMode

_VALUE_OPTIONS = {"--include", "--exclude", "--config", "-c", "--log-level", "-l", "--max-concurrency"}
_original_read_bytes = Path.read_bytes


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep configuration discovery away from the developer's real files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def two_roots(tmp_path: Path) -> tuple[Path, Path]:
    """Create a 100-byte and a 300-byte root."""
    small = tmp_path / "small"
    big = tmp_path / "big"
    small.mkdir()
    big.mkdir()
    _ = (small / "f.bin").write_bytes(b"s" * 100)
    _ = (big / "f.bin").write_bytes(b"b" * 300)
    return small, big


class TestLastFilterOption:
    """Test suite for last_filter_option."""

    @pytest.mark.parametrize(
        ("args", "expected"),
        [
            ([], None),
            (["dir"], None),
            (["--include", "*.txt", "dir"], FilterMode.INCLUDE),
            (["--include", "*.txt", "--exclude", "*.log", "dir"], FilterMode.EXCLUDE),
            (["--exclude=*.log", "--include=*.txt", "dir"], FilterMode.INCLUDE),
            (["--include", "--exclude", "dir"], FilterMode.INCLUDE),
            (["--include", "*.txt", "dir", "--exclude", "*.log"], FilterMode.INCLUDE),
            (["--exclude", "*.log", "--", "--include"], FilterMode.EXCLUDE),
            (["-l", "DEBUG", "--exclude", "x", "dir"], FilterMode.EXCLUDE),
        ],
    )
    def test_last_filter_option(self, args: list[str], expected: FilterMode | None) -> None:
        """Test that only the option section is scanned and values are skipped."""
        assert last_filter_option(args, _VALUE_OPTIONS) is expected


class TestResolveFilter:
    """Test suite for resolve_filter."""

    def test_no_filter(self) -> None:
        """Test that no options yield no filter."""
        assert resolve_filter(None, None, None) is None

    def test_single_options(self) -> None:
        """Test each option on its own."""
        include = resolve_filter("*.txt", None, FilterMode.INCLUDE)
        exclude = resolve_filter(None, "*.log", FilterMode.EXCLUDE)

        assert include is not None
        assert include.mode is FilterMode.INCLUDE
        assert exclude is not None
        assert exclude.mode is FilterMode.EXCLUDE

    @pytest.mark.parametrize("last", [FilterMode.INCLUDE, FilterMode.EXCLUDE])
    def test_last_option_wins(self, last: FilterMode) -> None:
        """Test that the later option replaces the earlier one."""
        path_filter = resolve_filter("*.txt", "*.log", last)

        assert path_filter is not None
        assert path_filter.mode is last
        assert path_filter.pattern == ("*.txt" if last is FilterMode.INCLUDE else "*.log")


class TestApplyCliOverrides:
    """Test suite for apply_cli_overrides."""

    def test_no_overrides_keeps_config(self) -> None:
        """Test that absent options leave the configuration untouched."""
        config = MainConfig()

        assert apply_cli_overrides(config) == config

    def test_overrides(self) -> None:
        """Test that options replace configured values without mutating the original."""
        config = MainConfig()

        updated = apply_cli_overrides(
            config,
            log_level="DEBUG",
            max_concurrency=4,
            fail_fast=True,
            case_insensitive=True,
            no_color=True,
        )

        assert updated.application.log_level == "DEBUG"
        assert updated.application.color is False
        assert updated.walk.max_concurrency == 4
        assert updated.walk.fail_fast is True
        assert updated.walk.case_sensitive is False
        assert config.walk.max_concurrency == 64


class TestCliReport:
    """Test suite for successful CLI runs."""

    def test_scenario_report(self, runner: CliRunner, scenario_tree: Path) -> None:
        """Test the report for a single directory."""
        result = runner.invoke(cli, [str(scenario_tree)])

        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == f"Path: {scenario_tree}"
        assert lines[1].startswith("    Size: 1.01 KB (")
        assert "gzip)" in lines[1]
        assert "brotli)" in lines[1]
        assert f"Smallest: {scenario_tree} 1.01 KB" in lines

    def test_relative_sizes(self, runner: CliRunner, two_roots: tuple[Path, Path]) -> None:
        """Test the ranked summary across two roots."""
        small, big = two_roots

        result = runner.invoke(cli, [str(big), str(small)])

        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == f"Path: {big}"
        assert lines[2] == f"Path: {small}"
        assert f"Smallest: {small} 100 B" in lines
        assert "Other paths:" in lines
        assert f"    {big} 300 B, 3.00 times larger than {small}" in lines
        assert result.stderr == ""

    def test_exclude(self, runner: CliRunner, mixed_tree: Path) -> None:
        """Test that excluded entries are not counted."""
        result = runner.invoke(cli, ["--exclude", "*.log", str(mixed_tree)])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[1].startswith("    Size: 10 B (")

    @pytest.mark.parametrize(
        ("args", "expected_size"),
        [
            (["--include", "*.log", "--exclude", "*.log"], "10 B"),
            (["--exclude", "*.log", "--include", "*.log"], "20 B"),
        ],
    )
    def test_later_filter_wins(
        self,
        runner: CliRunner,
        mixed_tree: Path,
        args: list[str],
        expected_size: str,
    ) -> None:
        """Test that the filter given last decides the outcome."""
        result = runner.invoke(cli, [*args, str(mixed_tree)])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[1].startswith(f"    Size: {expected_size} (")

    def test_case_insensitive_filter(self, runner: CliRunner, mixed_tree: Path) -> None:
        """Test the case-insensitive flag."""
        result = runner.invoke(cli, ["--case-insensitive", "--exclude", "*.LOG", str(mixed_tree)])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[1].startswith("    Size: 10 B (")

    def test_config_file_is_discovered(self, runner: CliRunner, tmp_path: Path, mixed_tree: Path) -> None:
        """Test that packsize.yaml in the working directory is used."""
        log_file = tmp_path / "packsize.log"
        _ = (tmp_path / "packsize.yaml").write_text(f"application:\n  log_level: INFO\n  log_file: {log_file}\n")

        result = runner.invoke(cli, [str(mixed_tree)])

        assert result.exit_code == 0, result.output
        assert "Root walked" in log_file.read_text(encoding="utf-8")

    def test_version(self, runner: CliRunner) -> None:
        """Test the version option."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "packsize" in result.output


class TestCliErrors:
    """Test suite for failing CLI runs and exit codes."""

    def test_missing_path(self, runner: CliRunner, tmp_path: Path, mixed_tree: Path) -> None:
        """Test that a missing root is reported while the others are measured."""
        missing = tmp_path / "does-not-exist"

        result = runner.invoke(cli, [str(missing), str(mixed_tree)])

        assert result.exit_code == 1
        assert f"Error: {missing}: no such file or directory" in result.stderr
        assert f"Path: {mixed_tree}" in result.stdout
        assert f"Path: {missing}" not in result.stdout

    def test_tokens_after_first_path_are_paths(self, runner: CliRunner, mixed_tree: Path) -> None:
        """Test that options after the first path are not parsed as options."""
        result = runner.invoke(cli, [str(mixed_tree), "--exclude", "*.log"])

        assert result.exit_code == 1
        assert "Error: --exclude: no such file or directory" in result.stderr
        assert result.stdout.splitlines()[1].startswith("    Size: 30 B (")

    def test_unreadable_entry_is_skipped(self, runner: CliRunner, mixed_tree: Path) -> None:
        """Test that skipped entries are listed and turn the exit code to 1."""

        def read_bytes(self: Path) -> bytes:
            if self.name == "a.log":
                raise PermissionError(13, "Permission denied", str(self))
            return _original_read_bytes(self)

        with patch.object(Path, "read_bytes", autospec=True, side_effect=read_bytes):
            result = runner.invoke(cli, [str(mixed_tree)])

        assert result.exit_code == 1
        assert f"Skipped {mixed_tree / 'a.log'}: permission denied" in result.stderr
        assert result.stdout.splitlines()[1] == "    Size: 10 B"

    def test_fail_fast(self, runner: CliRunner, mixed_tree: Path) -> None:
        """Test that fail-fast reports the root as failed."""

        def read_bytes(self: Path) -> bytes:
            raise PermissionError(13, "Permission denied", str(self))

        with patch.object(Path, "read_bytes", autospec=True, side_effect=read_bytes):
            result = runner.invoke(cli, ["--fail-fast", str(mixed_tree)])

        assert result.exit_code == 1
        assert "Error:" in result.stderr
        assert "permission denied" in result.stderr
        assert "Path:" not in result.stdout

    @pytest.mark.parametrize(
        "args",
        [
            [],
            ["--bogus", "dir"],
            ["--include"],
            ["--include", "[abc", "dir"],
            ["--exclude", "", "dir"],
            ["--max-concurrency", "0", "dir"],
            ["--log-level", "CHATTY", "dir"],
            ["--config", "settings.toml", "dir"],
        ],
    )
    def test_usage_errors(self, runner: CliRunner, args: list[str]) -> None:
        """Test that malformed command lines exit with 2 before any traversal."""
        result = runner.invoke(cli, args)

        assert result.exit_code == 2
        assert "Path:" not in result.stdout

    def test_invalid_glob_message(self, runner: CliRunner) -> None:
        """Test that the glob problem is explained."""
        result = runner.invoke(cli, ["--include", "[abc", "dir"])

        assert "invalid glob pattern '[abc': unterminated character class" in result.stderr

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path, mixed_tree: Path) -> None:
        """Test that configuration errors exit with 2."""
        config_file = tmp_path / "bad.yaml"
        _ = config_file.write_text("walk:\n  max_concurrency: -3\n")

        result = runner.invoke(cli, ["--config", str(config_file), str(mixed_tree)])

        assert result.exit_code == 2
        assert "Configuration error:" in result.stderr
        assert "walk → max_concurrency" in result.stderr

    def test_unwritable_log_file(self, runner: CliRunner, tmp_path: Path, mixed_tree: Path) -> None:
        """Test that a log file that cannot be created is a configuration error."""
        blocker = tmp_path / "not-a-directory"
        _ = blocker.write_text("")
        config_file = tmp_path / "logging.yaml"
        _ = config_file.write_text(f"application:\n  log_file: {blocker / 'sub' / 'packsize.log'}\n")

        result = runner.invoke(cli, ["--config", str(config_file), str(mixed_tree)])

        assert result.exit_code == 2
        assert "Configuration error:" in result.stderr
        assert "Cannot open log file" in result.stderr
        assert "Path:" not in result.stdout
