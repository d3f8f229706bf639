"""Configuration data models.

This module defines dataclasses for ffcompose configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class FFmpegConfig:
    """Configuration for the ffmpeg binary and progress reporting."""

    # Path to the ffmpeg executable (None = look it up in PATH)
    binary_path: Path | None = None

    # Seconds between two progress parser ticks
    progress_period: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.progress_period <= 0:
            raise ValueError(
                f"progress_period must be positive, got {self.progress_period}"
            )


@dataclass
class LoggingConfig:
    """Configuration for library and CLI logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class FFComposeConfig:
    """Top-level ffcompose configuration."""

    ffmpeg: FFmpegConfig = field(default_factory=FFmpegConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
