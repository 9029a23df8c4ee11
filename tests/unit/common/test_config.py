"""Tests for provider configuration module."""

import logging

import pytest

from rtprovider.common.config import (
    HttpConfig,
    LoggingConfig,
    ProviderConfig,
    load_config,
    load_typed_config,
    parse_config,
    parse_http_config,
    parse_logging_config,
)
from rtprovider.common.logger import get_logger, setup_logger
from rtprovider.common.settings import ProviderSettings


class TestHttpConfig:
    """Tests for HttpConfig parsing."""

    def test_parse_http_defaults(self, empty_settings):
        """Test HTTP config falls back to settings defaults."""
        config = parse_http_config({}, empty_settings)

        assert config.timeout == 30.0
        assert config.retry_count == 5
        assert config.retry_wait == 0.1
        assert config.retry_max_wait == 2.0

    def test_parse_http_custom(self, empty_settings):
        """Test explicit HTTP values."""
        config = parse_http_config({"timeout": 5, "retry_count": 2}, empty_settings)

        assert config.timeout == 5.0
        assert config.retry_count == 2

    def test_parse_http_from_environment(self, monkeypatch):
        """Test HTTP defaults read from ARTIFACTORY_* variables."""
        monkeypatch.setenv("ARTIFACTORY_RETRY_COUNT", "9")
        config = parse_http_config({}, ProviderSettings())

        assert config.retry_count == 9


class TestLoggingConfig:
    """Tests for LoggingConfig parsing."""

    def test_parse_logging_defaults(self, empty_settings):
        """Test logging config defaults."""
        config = parse_logging_config({}, empty_settings)

        assert config.level == "INFO"
        assert not config.file_logging

    def test_parse_logging_custom(self, empty_settings):
        """Test custom logging config."""
        config = parse_logging_config(
            {"level": "DEBUG", "file_logging": True, "log_dir": "/tmp/rt"}, empty_settings
        )

        assert config.level == "DEBUG"
        assert config.file_logging
        assert config.log_dir == "/tmp/rt"


class TestProviderConfig:
    """Tests for full ProviderConfig parsing."""

    def test_parse_full_config(self, sample_config, empty_settings):
        """Test parsing full configuration."""
        config = parse_config(sample_config, empty_settings)

        assert config.url == "https://rt.example.com/artifactory"
        assert config.username == "admin"
        assert config.password == "password"
        assert config.api_key == ""
        assert config.http.retry_count == 3
        assert config.logging.level == "DEBUG"

    def test_parse_empty_config(self, empty_settings):
        """Test parsing empty configuration."""
        config = parse_config({}, empty_settings)

        assert config == ProviderConfig(http=HttpConfig(), logging=LoggingConfig())

    def test_environment_fills_missing_values(self):
        """Test credentials missing from the block come from settings."""
        settings = ProviderSettings(url="https://env.example.com", access_token="env-token")
        config = parse_config({"username": "admin"}, settings)

        assert config.url == "https://env.example.com"
        assert config.access_token == "env-token"
        assert config.username == "admin"

    def test_explicit_values_win(self):
        """Test explicit values override the environment."""
        settings = ProviderSettings(url="https://env.example.com")
        config = parse_config({"url": "https://explicit.example.com"}, settings)

        assert config.url == "https://explicit.example.com"


class TestLoadConfig:
    """Tests for loading configuration from files."""

    def test_load_yaml_config(self, tmp_path):
        """Test loading YAML configuration."""
        config_content = """
url: https://rt.example.com
access_token: abc
http:
  retry_count: 1
"""
        config_file = tmp_path / "rtprovider.yaml"
        config_file.write_text(config_content)

        config_dict = load_config(str(config_file))

        assert config_dict["url"] == "https://rt.example.com"
        assert config_dict["http"]["retry_count"] == 1

    def test_load_config_nonexistent(self, tmp_path):
        """Test loading nonexistent config raises error."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nonexistent.yaml"))

    def test_load_empty_config(self, tmp_path):
        """Test an empty file loads as an empty mapping."""
        config_file = tmp_path / "rtprovider.yaml"
        config_file.write_text("")

        assert load_config(str(config_file)) == {}

    def test_load_config_not_a_mapping(self, tmp_path):
        """Test a YAML list at the root is rejected."""
        config_file = tmp_path / "rtprovider.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(TypeError):
            load_config(str(config_file))

    def test_load_config_env_expansion(self, tmp_path, monkeypatch):
        """Test environment variable expansion."""
        monkeypatch.setenv("RT_TOKEN", "secret")

        config_file = tmp_path / "rtprovider.yaml"
        config_file.write_text("access_token: ${RT_TOKEN}\n")

        config_dict = load_config(str(config_file))

        assert config_dict["access_token"] == "secret"

    def test_load_typed_config(self, tmp_path, empty_settings):
        """Test loading typed configuration."""
        config_file = tmp_path / "rtprovider.yaml"
        config_file.write_text("url: https://rt.example.com\napi_key: key\n")

        config = load_typed_config(str(config_file), empty_settings)

        assert isinstance(config, ProviderConfig)
        assert config.url == "https://rt.example.com"
        assert config.api_key == "key"


class TestLogger:
    """Tests for logger setup."""

    def test_get_logger_namespace(self):
        """Test component loggers live under rtprovider."""
        assert get_logger("repo_crud").name == "rtprovider.repo_crud"

    def test_setup_logger_level(self):
        """Test level is applied."""
        logger = setup_logger("rtprovider.test_level", level="warning")

        assert logger.level == logging.WARNING

    def test_setup_logger_invalid_level(self):
        """Test invalid level raises."""
        with pytest.raises(ValueError):
            setup_logger("rtprovider.test_invalid", level="LOUD")

    def test_setup_logger_no_duplicate_handlers(self):
        """Test calling setup twice does not add handlers twice."""
        first = setup_logger("rtprovider.test_dupes")
        count = len(first.handlers)
        second = setup_logger("rtprovider.test_dupes")

        assert second is first
        assert len(second.handlers) == count

    def test_setup_logger_file_logging(self, tmp_path):
        """Test file logging writes under log_dir."""
        logger = setup_logger(
            "rtprovider.test_file",
            log_dir=str(tmp_path),
            file_logging=True,
            console_logging=False,
        )
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert (tmp_path / "rtprovider.test_file.log").read_text().strip().endswith("hello")
