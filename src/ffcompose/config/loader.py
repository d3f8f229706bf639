"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (FFCOMPOSE_*)
3. Config file (~/.ffcompose/config.toml)
4. Default values

Environment variables:
- FFCOMPOSE_CONFIG_PATH: Path to config file (overrides default location)
- FFCOMPOSE_FFMPEG_PATH: Path to ffmpeg executable
- FFCOMPOSE_PROGRESS_PERIOD: Seconds between progress parser ticks
- FFCOMPOSE_LOG_LEVEL: Log level (debug, info, warning, error)
- FFCOMPOSE_LOG_FILE: Log file path
- FFCOMPOSE_LOG_FORMAT: Log format (text, json)
- FFCOMPOSE_LOG_INCLUDE_STDERR: Also log to stderr when a log file is set

Example config file:

    [ffmpeg]
    binary_path = "/opt/ffmpeg/bin/ffmpeg"
    progress_period = 0.5

    [logging]
    level = "debug"
    format = "json"
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ffcompose.config.env import EnvReader
from ffcompose.config.models import FFComposeConfig, FFmpegConfig, LoggingConfig
from ffcompose.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".ffcompose"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by FFCOMPOSE_CONFIG_PATH environment variable.

    Args:
        env: Optional environment mapping (defaults to os.environ).

    Returns:
        Path to config file.
    """
    return EnvReader(env).get_path("FFCOMPOSE_CONFIG_PATH", DEFAULT_CONFIG_FILE)


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigError on parse failures.
                If False (default), log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be read or parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Could not load config file {path}: {e}") from e
        logger.warning("Could not load config file %s: %s", path, e)
        return {}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def get_config(
    config_path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    ffmpeg_path: Path | None = None,
    progress_period: float | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
) -> FFComposeConfig:
    """Build the effective configuration.

    Keyword arguments are CLI overrides and take precedence over the
    environment, which takes precedence over the config file.

    Args:
        config_path: Config file path (None uses the default location).
        env: Environment mapping (None uses os.environ).
        ffmpeg_path: Override ffmpeg binary path.
        progress_period: Override progress tick period in seconds.
        log_level: Override log level.
        log_file: Override log file path.
        log_format: Override log format.

    Returns:
        FFComposeConfig with all layers applied.

    Raises:
        ConfigError: If a config section is malformed or a value is invalid.
    """
    reader = EnvReader(env)
    if config_path is None:
        config_path = get_default_config_path(env)
    data = load_config_file(config_path)
    file_ffmpeg = _section(data, "ffmpeg")
    file_logging = _section(data, "logging")

    file_binary = file_ffmpeg.get("binary_path")
    file_log_file = file_logging.get("file")

    defaults_ffmpeg = FFmpegConfig()
    defaults_logging = LoggingConfig()

    try:
        ffmpeg = FFmpegConfig(
            binary_path=_first(
                ffmpeg_path,
                reader.get_path("FFCOMPOSE_FFMPEG_PATH"),
                Path(file_binary).expanduser() if file_binary else None,
            ),
            progress_period=_first(
                progress_period,
                reader.get_float("FFCOMPOSE_PROGRESS_PERIOD"),
                file_ffmpeg.get("progress_period"),
                defaults_ffmpeg.progress_period,
            ),
        )
        logging_config = LoggingConfig(
            level=_first(
                log_level,
                reader.get_str("FFCOMPOSE_LOG_LEVEL"),
                file_logging.get("level"),
                defaults_logging.level,
            ),
            file=_first(
                log_file,
                reader.get_path("FFCOMPOSE_LOG_FILE"),
                Path(file_log_file).expanduser() if file_log_file else None,
            ),
            format=_first(
                log_format,
                reader.get_str("FFCOMPOSE_LOG_FORMAT"),
                file_logging.get("format"),
                defaults_logging.format,
            ),
            include_stderr=_first(
                reader.get_bool("FFCOMPOSE_LOG_INCLUDE_STDERR"),
                file_logging.get("include_stderr"),
                defaults_logging.include_stderr,
            ),
            max_bytes=_first(
                file_logging.get("max_bytes"), defaults_logging.max_bytes
            ),
            backup_count=_first(
                file_logging.get("backup_count"), defaults_logging.backup_count
            ),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    return FFComposeConfig(ffmpeg=ffmpeg, logging=logging_config)
