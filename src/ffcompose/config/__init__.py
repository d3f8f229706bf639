"""Configuration management for ffcompose.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (FFCOMPOSE_*)
3. Config file (~/.ffcompose/config.toml)
4. Default values (lowest priority)
"""

from ffcompose.config.env import EnvReader
from ffcompose.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)
from ffcompose.config.models import FFComposeConfig, FFmpegConfig, LoggingConfig

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "EnvReader",
    "FFComposeConfig",
    "FFmpegConfig",
    "LoggingConfig",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
