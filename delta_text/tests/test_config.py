"""Tests for the configuration system."""

import pytest

from delta_text.utils.config import Config, ConfigError, PathsConfig


class TestConfig:
    """Test the Config class functionality."""

    def test_config_defaults(self):
        """Test that config uses correct default values."""
        config = Config()
        assert config.debounce_ms == 300
        assert config.max_file_bytes == 5 * 1024 * 1024
        assert config.max_render_segments == 20000
        assert config.cleanup_max_passes == 32
        assert config.use_worker is False
        assert config.debounce_seconds == pytest.approx(0.3)

    def test_config_environment_variables(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("DELTA_TEXT_DEBOUNCE_MS", "150")
        monkeypatch.setenv("DELTA_TEXT_MAX_FILE_BYTES", "2048")
        monkeypatch.setenv("DELTA_TEXT_MAX_RENDER_SEGMENTS", "500")
        monkeypatch.setenv("DELTA_TEXT_CLEANUP_MAX_PASSES", "4")
        monkeypatch.setenv("DELTA_TEXT_USE_WORKER", "yes")

        config = Config()
        assert config.debounce_ms == 150
        assert config.max_file_bytes == 2048
        assert config.max_render_segments == 500
        assert config.cleanup_max_passes == 4
        assert config.use_worker is True

    def test_config_invalid_environment_variables(self, monkeypatch):
        """Test that invalid environment variables fall back to defaults."""
        monkeypatch.setenv("DELTA_TEXT_DEBOUNCE_MS", "soon")
        monkeypatch.setenv("DELTA_TEXT_USE_WORKER", "maybe")

        config = Config()
        assert config.debounce_ms == 300
        assert config.use_worker is False

    def test_config_out_of_range_environment_variable(self, monkeypatch):
        monkeypatch.setenv("DELTA_TEXT_DEBOUNCE_MS", "-1")
        with pytest.raises(ConfigError, match="debounce_ms must be between"):
            Config()

    def test_config_validation_bounds(self):
        """Test that configuration values are validated against bounds."""
        with pytest.raises(ConfigError, match="max_render_segments must be between"):
            config = Config()
            config.max_render_segments = 10
            config._validate_all()

        with pytest.raises(ConfigError, match="debounce_ms must be between"):
            config = Config()
            config.debounce_ms = 60000
            config._validate_all()

    def test_config_validation_types(self):
        """Test that configuration values must be correct types."""
        config = Config()
        with pytest.raises(ConfigError, match="cleanup_max_passes must be an integer"):
            config.cleanup_max_passes = "many"
            config._validate_all()

        config = Config()
        with pytest.raises(ConfigError, match="debounce_ms must be an integer"):
            config.debounce_ms = True
            config._validate_all()

        config = Config()
        with pytest.raises(ConfigError, match="use_worker must be a boolean"):
            config.use_worker = "yes"
            config._validate_all()

    def test_config_boundary_values(self, monkeypatch):
        """Test configuration values at boundary limits."""
        monkeypatch.setenv("DELTA_TEXT_DEBOUNCE_MS", "0")
        monkeypatch.setenv("DELTA_TEXT_MAX_FILE_BYTES", "1024")
        monkeypatch.setenv("DELTA_TEXT_CLEANUP_MAX_PASSES", "1")
        config = Config()
        assert config.debounce_ms == 0
        assert config.max_file_bytes == 1024
        assert config.cleanup_max_passes == 1

        monkeypatch.setenv("DELTA_TEXT_DEBOUNCE_MS", "5000")
        monkeypatch.setenv("DELTA_TEXT_MAX_RENDER_SEGMENTS", "1000000")
        config = Config()
        assert config.debounce_ms == 5000
        assert config.max_render_segments == 1_000_000

    def test_config_repr(self):
        """Test the string representation of config."""
        repr_str = repr(Config())
        assert "Config(" in repr_str
        assert "debounce_ms=300" in repr_str
        assert "cleanup_max_passes=32" in repr_str
        assert "use_worker=False" in repr_str


class TestPathsConfig:

    def test_from_args(self):
        class Args:
            first = "a.txt"
            second = None

        paths = PathsConfig.from_args(Args())
        assert paths.first_path == "a.txt"
        assert paths.second_path is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DELTA_TEXT_FIRST", "/data/old.txt")
        monkeypatch.delenv("DELTA_TEXT_SECOND", raising=False)
        paths = PathsConfig.from_env()
        assert paths.first_path == "/data/old.txt"
        assert paths.second_path is None

    def test_merge_with_env_keeps_explicit_values(self, monkeypatch):
        monkeypatch.setenv("DELTA_TEXT_FIRST", "/env/first.txt")
        monkeypatch.setenv("DELTA_TEXT_SECOND", "/env/second.txt")
        merged = PathsConfig(first_path="cli.txt").merge_with_env()
        assert merged.first_path == "cli.txt"
        assert merged.second_path == "/env/second.txt"
