"""Configuration system for packsize.

This module implements the configuration schema using Pydantic for
validation, with support for environment variable resolution and fail-fast
validation with actionable error messages. Every section is optional; a
missing configuration file simply means defaults.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, Field, ValidationError

from packsize.core.data.filesystem.compression import (
    DEFAULT_BROTLI_QUALITY,
    DEFAULT_BROTLI_WINDOW,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_GZIP_LEVEL,
)
from packsize.core.data.filesystem.walker import DEFAULT_MAX_CONCURRENCY

# Regular expression pattern for environment variable references
# Matches ${VARIABLE_NAME} syntax where VARIABLE_NAME can contain letters, digits, and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")

# Configuration file discovery paths in order of precedence
CONFIG_SEARCH_PATHS: Final[tuple[Path, ...]] = (
    Path("packsize.yaml"),
    Path("packsize.yml"),
    Path("~/.packsize.yaml"),
    Path("~/.config/packsize/config.yaml"),
)


class WalkConfig(BaseModel):
    """Configuration for directory traversal.

    Bounds the walker's fan-out and selects how unreadable entries are
    handled.
    """

    max_concurrency: Annotated[
        int,
        Field(
            gt=0,
            description="Maximum concurrent directory listings and file reads",
        ),
    ] = DEFAULT_MAX_CONCURRENCY
    fail_fast: Annotated[
        bool,
        Field(
            description="Abort a root on the first unreadable entry instead of skipping it",
        ),
    ] = False
    case_sensitive: Annotated[
        bool,
        Field(
            description="Whether include/exclude globs are case-sensitive",
        ),
    ] = True


class CompressionConfig(BaseModel):
    """Configuration for the compression estimators."""

    gzip_level: Annotated[
        int,
        Field(
            ge=0,
            le=9,
            description="zlib compression level used for gzip estimates",
        ),
    ] = DEFAULT_GZIP_LEVEL
    brotli_quality: Annotated[
        int,
        Field(
            ge=0,
            le=11,
            description="brotli quality used for brotli estimates",
        ),
    ] = DEFAULT_BROTLI_QUALITY
    brotli_window: Annotated[
        int,
        Field(
            ge=10,
            le=24,
            description="brotli window size (base 2 logarithm)",
        ),
    ] = DEFAULT_BROTLI_WINDOW
    chunk_size: Annotated[
        int,
        Field(
            gt=0,
            description="Bytes fed to each encoder per call",
        ),
    ] = DEFAULT_CHUNK_SIZE


class ApplicationConfig(BaseModel):
    """Configuration for application-level settings."""

    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"
    log_file: Annotated[
        Path | None,
        Field(
            description="Optional file receiving a copy of the log output",
        ),
    ] = None
    color: Annotated[
        bool,
        Field(
            description="Colorize the report when writing to a terminal",
        ),
    ] = True


class MainConfig(BaseModel):
    """Main application configuration schema.

    Top-level configuration container aggregating all configuration sections:
    - walk: Traversal settings
    - compression: Codec settings
    - application: Logging and output settings
    """

    walk: Annotated[
        WalkConfig,
        Field(
            description="Traversal configuration",
        ),
    ] = WalkConfig()
    compression: Annotated[
        CompressionConfig,
        Field(
            description="Compression estimator configuration",
        ),
    ] = CompressionConfig()
    application: Annotated[
        ApplicationConfig,
        Field(
            description="Application-level configuration",
        ),
    ] = ApplicationConfig()


class EnvironmentVariableError(Exception):
    """Exception raised when environment variable resolution fails."""


class ConfigurationError(Exception):
    """Exception raised when configuration loading or validation fails.

    This exception provides detailed, actionable error messages for configuration
    issues including file not found, YAML parsing errors, and validation failures.
    """


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Parses ${VARIABLE_NAME} syntax and replaces with environment variable values.

    Args:
        value: String potentially containing environment variable references

    Returns:
        String with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing

    Examples:
        >>> os.environ["PACKSIZE_LEVEL"] = "9"
        >>> resolve_env_var("${PACKSIZE_LEVEL}")
        '9'
        >>> resolve_env_var("no variables here")
        'no variables here'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = f"Required environment variable '{var_name}' is not set."
            raise EnvironmentVariableError(msg)

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in a dictionary.

    Traverses nested dictionaries and lists, resolving environment variable
    references in string values. Non-string values are preserved as-is.

    Args:
        data: Dictionary potentially containing environment variable references

    Returns:
        New dictionary with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing
    """
    result: dict[str, object] = {}

    for key, value in data.items():
        if isinstance(value, str):
            result[key] = resolve_env_var(value)
        elif isinstance(value, dict):
            # YAML data is untyped at load time; validated by Pydantic after resolution
            result[key] = resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
        elif isinstance(value, list):
            resolved_list: list[object] = []
            for item in value:  # pyright: ignore[reportUnknownVariableType]  # YAML list items
                if isinstance(item, str):
                    resolved_list.append(resolve_env_var(item))
                elif isinstance(item, dict):
                    resolved_list.append(resolve_env_vars_in_dict(item))  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
                else:
                    resolved_list.append(item)  # pyright: ignore[reportUnknownArgumentType]  # YAML primitives
            result[key] = resolved_list
        else:
            result[key] = value

    return result


def discover_config_file(search_paths: tuple[Path, ...] = CONFIG_SEARCH_PATHS) -> Path | None:
    """Find the first existing configuration file in the standard locations.

    Args:
        search_paths: Candidate paths in order of precedence

    Returns:
        Path to the first configuration file found, or None
    """
    for candidate in search_paths:
        try:
            path = candidate.expanduser()
        except RuntimeError:
            # Home directory cannot be determined in some environments
            continue
        if path.is_file():
            return path
    return None


def load_main_config(config_path: Path | None) -> MainConfig:
    """Load and validate application configuration from a YAML file.

    Args:
        config_path: Path to the YAML file, or None for defaults

    Returns:
        Validated MainConfig instance

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid

    Examples:
        >>> load_main_config(None).walk.max_concurrency
        64
    """
    if config_path is None:
        return MainConfig()

    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigurationError(msg)

    try:
        with config_path.open("r") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg) from e

    # An empty file is a valid configuration consisting only of defaults
    if raw_data is None:
        return MainConfig()

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}"
        )
        raise ConfigurationError(msg)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    except EnvironmentVariableError as e:
        msg = f"Environment variable resolution failed in: {config_path}\n{e}"
        raise ConfigurationError(msg) from e

    try:
        config = MainConfig.model_validate(resolved_data)
    except ValidationError as e:
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"])
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append(f"  Type: {error['type']}")
            error_lines.append("")

        error_lines.append(f"Configuration file: {config_path}")
        error_lines.append("Please fix the above errors and try again.")

        msg = "\n".join(error_lines)
        raise ConfigurationError(msg) from e

    return config
