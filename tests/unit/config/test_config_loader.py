"""Tests for configuration loading and precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from ffcompose.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)
from ffcompose.config.models import FFmpegConfig, LoggingConfig
from ffcompose.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        "[ffmpeg]\n"
        'binary_path = "/opt/ffmpeg/bin/ffmpeg"\n'
        "progress_period = 0.5\n"
        "\n"
        "[logging]\n"
        'level = "debug"\n'
        'format = "json"\n'
    )
    return path


class TestGetDefaultConfigPath:
    """Tests for get_default_config_path()."""

    def test_default_location(self) -> None:
        """Should use ~/.ffcompose/config.toml by default."""
        assert get_default_config_path(env={}) == DEFAULT_CONFIG_FILE

    def test_env_override(self, tmp_path: Path) -> None:
        """FFCOMPOSE_CONFIG_PATH should replace the default location."""
        env = {"FFCOMPOSE_CONFIG_PATH": str(tmp_path / "other.toml")}
        assert get_default_config_path(env) == tmp_path / "other.toml"


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        """Should return an empty dict for a missing file."""
        assert load_config_file(tmp_path / "missing.toml") == {}

    def test_parses_toml(self, config_file: Path) -> None:
        """Should return the parsed TOML tables."""
        data = load_config_file(config_file)
        assert data["ffmpeg"]["progress_period"] == 0.5

    def test_invalid_toml_lenient(self, tmp_path: Path) -> None:
        """Should ignore a malformed file by default."""
        path = tmp_path / "bad.toml"
        path.write_text("[ffmpeg\n")
        assert load_config_file(path) == {}

    def test_invalid_toml_strict(self, tmp_path: Path) -> None:
        """Should raise ConfigError for a malformed file in strict mode."""
        path = tmp_path / "bad.toml"
        path.write_text("[ffmpeg\n")
        with pytest.raises(ConfigError, match="Could not load config file"):
            load_config_file(path, strict=True)


class TestGetConfig:
    """Tests for get_config() layering."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Should fall back to defaults with no file and no environment."""
        config = get_config(tmp_path / "missing.toml", env={})
        assert config.ffmpeg == FFmpegConfig()
        assert config.logging == LoggingConfig()

    def test_file_values(self, config_file: Path) -> None:
        """Should apply values from the config file."""
        config = get_config(config_file, env={})
        assert config.ffmpeg.binary_path == Path("/opt/ffmpeg/bin/ffmpeg")
        assert config.ffmpeg.progress_period == 0.5
        assert config.logging.level == "debug"
        assert config.logging.format == "json"

    def test_env_overrides_file(self, config_file: Path) -> None:
        """Environment variables should win over the file."""
        env = {
            "FFCOMPOSE_FFMPEG_PATH": "/usr/local/bin/ffmpeg",
            "FFCOMPOSE_PROGRESS_PERIOD": "2",
            "FFCOMPOSE_LOG_LEVEL": "warning",
        }
        config = get_config(config_file, env=env)
        assert config.ffmpeg.binary_path == Path("/usr/local/bin/ffmpeg")
        assert config.ffmpeg.progress_period == 2.0
        assert config.logging.level == "warning"
        assert config.logging.format == "json"

    def test_cli_overrides_env(self, config_file: Path) -> None:
        """CLI overrides should win over the environment."""
        env = {"FFCOMPOSE_FFMPEG_PATH": "/usr/local/bin/ffmpeg"}
        config = get_config(
            config_file,
            env=env,
            ffmpeg_path=Path("/cli/ffmpeg"),
            progress_period=0.1,
            log_format="text",
        )
        assert config.ffmpeg.binary_path == Path("/cli/ffmpeg")
        assert config.ffmpeg.progress_period == 0.1
        assert config.logging.format == "text"

    def test_config_path_from_env(self, config_file: Path) -> None:
        """Should read the file named by FFCOMPOSE_CONFIG_PATH."""
        config = get_config(env={"FFCOMPOSE_CONFIG_PATH": str(config_file)})
        assert config.ffmpeg.progress_period == 0.5

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """An out-of-range value should raise ConfigError."""
        with pytest.raises(ConfigError, match="progress_period"):
            get_config(tmp_path / "missing.toml", env={}, progress_period=0)

    def test_section_must_be_table(self, tmp_path: Path) -> None:
        """A section that isn't a table should raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text('ffmpeg = "oops"\n')
        with pytest.raises(ConfigError, match=r"\[ffmpeg\] must be a table"):
            get_config(path, env={})

    def test_wrong_value_type_raises(self, tmp_path: Path) -> None:
        """A value of the wrong type should raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text('[ffmpeg]\nprogress_period = "fast"\n')
        with pytest.raises(ConfigError, match="Invalid configuration"):
            get_config(path, env={})

    def test_include_stderr_from_env(self, tmp_path: Path) -> None:
        """FFCOMPOSE_LOG_INCLUDE_STDERR should enable stderr logging."""
        env = {"FFCOMPOSE_LOG_INCLUDE_STDERR": "yes"}
        config = get_config(tmp_path / "missing.toml", env=env)
        assert config.logging.include_stderr is True

    def test_include_stderr_env_overrides_file(self, tmp_path: Path) -> None:
        """The environment should win over include_stderr in the file."""
        path = tmp_path / "config.toml"
        path.write_text("[logging]\ninclude_stderr = true\n")
        env = {"FFCOMPOSE_LOG_INCLUDE_STDERR": "0"}
        assert get_config(path, env=env).logging.include_stderr is False
        assert get_config(path, env={}).logging.include_stderr is True


class TestLoggingConfigValidation:
    """Tests for LoggingConfig.__post_init__."""

    def test_rejects_unknown_level(self) -> None:
        """Should reject a level outside debug, info, warning and error."""
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")

    def test_rejects_unknown_format(self) -> None:
        """Should reject a format other than text or json."""
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")
