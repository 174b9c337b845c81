"""Command-line interface for packsize."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final, override

import click

from packsize.app.runner import EXIT_USAGE_ERROR, ApplicationRunner
from packsize.core.config import (
    ConfigurationError,
    MainConfig,
    discover_config_file,
    load_main_config,
)
from packsize.core.data.filesystem import FilterMode, PathFilter, validate_glob_pattern
from packsize.core.exceptions import InvalidGlobError
from packsize.utils.logging import configure_logging

logger = logging.getLogger(__name__)

try:
    __version__ = version("packsize")
except PackageNotFoundError:
    __version__ = "unknown"

# ctx.meta key holding the filter option that appeared last on the command line
LAST_FILTER_KEY: Final[str] = "packsize.last_filter"

_FILTER_OPTIONS: Final[dict[str, FilterMode]] = {
    "--include": FilterMode.INCLUDE,
    "--exclude": FilterMode.EXCLUDE,
}


def last_filter_option(args: Iterable[str], value_options: set[str]) -> FilterMode | None:
    """Find which of ``--include``/``--exclude`` was given last.

    Only the option section of the command line is scanned, which ends at
    ``--`` or at the first path.

    Args:
        args: Raw command-line tokens
        value_options: Option names that consume the following token as value

    Returns:
        Mode of the last filter option, or None if neither was given
    """
    last: FilterMode | None = None
    tokens = iter(args)
    for token in tokens:
        if token == "--" or token == "-" or not token.startswith("-"):
            break

        name, separator, _ = token.partition("=")
        if name in _FILTER_OPTIONS:
            last = _FILTER_OPTIONS[name]
        if name in value_options and not separator:
            _ = next(tokens, None)
    return last


class PathsLastCommand(click.Command):
    """Command taking options first and every token after the first path as a path.

    Also records which filter option came last so that a later
    ``--include``/``--exclude`` overrides an earlier one.
    """

    @override
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[LAST_FILTER_KEY] = last_filter_option(args, self._value_options())
        return super().parse_args(ctx, args)

    def _value_options(self) -> set[str]:
        names: set[str] = set()
        for param in self.params:
            if isinstance(param, click.Option) and not param.is_flag and not param.count:
                names.update(param.opts)
                names.update(param.secondary_opts)
        return names


def validate_glob(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Reject malformed glob patterns before any traversal starts.

    Raises:
        click.BadParameter: If the pattern is malformed
    """
    if value is None:
        return value

    try:
        return validate_glob_pattern(value)
    except InvalidGlobError as exc:
        raise click.BadParameter(f"invalid glob pattern {value!r}: {exc.reason}") from exc


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate configuration file path.

    Raises:
        click.BadParameter: If validation fails
    """
    if value is None:
        return value

    if value.exists() and value.is_dir():
        raise click.BadParameter("Configuration path must be a file, not a directory")

    valid_extensions = {".yaml", ".yml"}
    if value.suffix.lower() not in valid_extensions:
        extensions_str = ", ".join(sorted(valid_extensions))
        raise click.BadParameter(f"Invalid configuration file extension. Supported extensions: {extensions_str}")

    return value


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Raises:
        click.BadParameter: If validation fails
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if normalized_value not in valid_levels:
        raise click.BadParameter(f'Invalid log level "{value}". Valid options: {", ".join(sorted(valid_levels))}')

    return normalized_value


def resolve_filter(
    include: str | None,
    exclude: str | None,
    last: FilterMode | None,
    *,
    case_sensitive: bool = True,
) -> PathFilter | None:
    """Build the single active filter rule from the parsed options.

    When both options were given, the one that appeared last wins.
    """
    if include is None and exclude is None:
        return None
    if include is not None and (exclude is None or last is FilterMode.INCLUDE):
        return PathFilter.include(include, case_sensitive=case_sensitive)
    assert exclude is not None
    return PathFilter.exclude(exclude, case_sensitive=case_sensitive)


def apply_cli_overrides(
    config: MainConfig,
    *,
    log_level: str | None = None,
    max_concurrency: int | None = None,
    fail_fast: bool = False,
    case_insensitive: bool = False,
    no_color: bool = False,
) -> MainConfig:
    """Return a copy of ``config`` with command-line options applied on top."""
    walk_updates: dict[str, object] = {}
    if max_concurrency is not None:
        walk_updates["max_concurrency"] = max_concurrency
    if fail_fast:
        walk_updates["fail_fast"] = True
    if case_insensitive:
        walk_updates["case_sensitive"] = False

    application_updates: dict[str, object] = {}
    if log_level is not None:
        application_updates["log_level"] = log_level
    if no_color:
        application_updates["color"] = False

    return config.model_copy(
        update={
            "walk": config.walk.model_copy(update=walk_updates),
            "application": config.application.model_copy(update=application_updates),
        }
    )


@click.command(
    cls=PathsLastCommand,
    context_settings={"allow_interspersed_args": False, "help_option_names": ["-h", "--help"]},
)
@click.option(
    "--include",
    metavar="GLOB",
    default=None,
    callback=validate_glob,
    help="Only walk directory entries whose full path matches GLOB.",
)
@click.option(
    "--exclude",
    metavar="GLOB",
    default=None,
    callback=validate_glob,
    help="Skip directory entries whose full path matches GLOB.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    callback=validate_config_path,
    help="Configuration file path (.yaml or .yml). If not specified, searches standard locations.",
)
@click.option(
    "--log-level",
    "-l",
    type=str,
    default=None,
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
)
@click.option(
    "--max-concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of concurrent directory listings and file reads.",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    help="Abort a path on the first unreadable entry instead of skipping it.",
)
@click.option(
    "--case-insensitive",
    is_flag=True,
    help="Match --include/--exclude globs case-insensitively.",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output.",
)
@click.version_option(version=__version__, prog_name="packsize")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.pass_context
def cli(
    ctx: click.Context,
    include: str | None,
    exclude: str | None,
    config: Path | None,
    log_level: str | None,
    max_concurrency: int | None,
    fail_fast: bool,
    case_insensitive: bool,
    no_color: bool,
    paths: tuple[Path, ...],
) -> None:
    """Compare the sizes of PATHS with their gzip and brotli estimates.

    Options must come before the first path; everything after it is
    treated as a path. A later --include/--exclude replaces an earlier one.

    Examples:

        # Compare two build outputs
        packsize dist-old dist-new

        # Ignore log files inside directories
        packsize --exclude '*.log' site/

        # Only count JavaScript bundles
        packsize --include '*.js' build/
    """
    config_path = config if config is not None else discover_config_file()
    try:
        main_config = load_main_config(config_path)
    except ConfigurationError as exc:
        click.echo(f"Configuration error:\n{exc}", err=True)
        ctx.exit(EXIT_USAGE_ERROR)

    main_config = apply_cli_overrides(
        main_config,
        log_level=log_level,
        max_concurrency=max_concurrency,
        fail_fast=fail_fast,
        case_insensitive=case_insensitive,
        no_color=no_color,
    )

    try:
        configure_logging(
            log_level=main_config.application.log_level,
            log_file=main_config.application.log_file,
        )
    except OSError as exc:
        click.echo(f"Configuration error:\nCannot open log file {main_config.application.log_file}: {exc}", err=True)
        ctx.exit(EXIT_USAGE_ERROR)

    logger.debug(
        "Configuration loaded",
        extra={"config_path": str(config_path) if config_path else None, "paths": [str(p) for p in paths]},
    )

    path_filter = resolve_filter(
        include,
        exclude,
        ctx.meta.get(LAST_FILTER_KEY),
        case_sensitive=main_config.walk.case_sensitive,
    )
    runner = ApplicationRunner(paths, config=main_config, path_filter=path_filter)

    try:
        exit_code = runner.run()
    except KeyboardInterrupt:
        click.echo("\nInterrupted", err=True)
        exit_code = 130
    except Exception as e:
        logger.exception("Unexpected error during run")
        raise click.ClickException(str(e)) from e

    ctx.exit(exit_code)


if __name__ == "__main__":
    cli()
