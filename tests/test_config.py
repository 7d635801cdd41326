"""Integration tests for configuration module."""

import warnings
from pathlib import Path

import pytest

from app.config import AppConfig, ConfigurationError, build_app_config, load_config
from app.config.duration import (
    DurationParseError,
    parse_duration,
    seconds_to_human_readable,
    validate_duration_range,
)
from app.config.environment import DEFAULT_POLLUTION_API_BASE_URL, load_environment_config
from app.config.exceptions import ENVIRONMENT_SOURCE
from app.config.validators import check_for_warnings


def write_config(directory: Path, content: str, name: str = "config.yaml") -> Path:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_full_config(self, mock_env_vars, tmp_path):
        """Test loading a complete configuration file."""
        config_path = write_config(
            tmp_path,
            """
countries: [pl, de]
pagination:
  default_limit: 20
cache:
  pollution_ttl: 5m
  description_ttl: PT2H
  clear_interval: 1h
auth:
  refresh_buffer_seconds: 30
wikipedia:
  max_description_length: 300
logging:
  level: DEBUG
  format: json
advanced:
  max_workers: 4
""",
        )

        app_config, env_config = load_config(config_path)

        assert app_config.countries == ["PL", "DE"]
        assert app_config.pagination.default_limit == 20
        assert app_config.cache.pollution_ttl_seconds == 300
        assert app_config.cache.description_ttl_seconds == 7200
        assert app_config.cache.clear_interval_seconds == 3600
        assert app_config.auth.refresh_buffer_seconds == 30
        assert app_config.wikipedia.max_description_length == 300
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"
        assert app_config.advanced.max_workers == 4
        assert env_config.pollution_api_username == "tester"

    def test_defaults_without_file(self, mock_env_vars, tmp_path, monkeypatch):
        """Test that defaults apply when no config file exists."""
        monkeypatch.chdir(tmp_path)

        app_config, _ = load_config()

        assert app_config.countries == ["PL", "DE", "ES", "FR"]
        assert app_config.cache.pollution_ttl_seconds == 600
        assert app_config.cache.description_ttl_seconds == 3600
        assert app_config.cache.clear_interval_seconds == 1800
        assert app_config.auth.refresh_buffer_seconds == 60
        assert app_config.auth.min_token_ttl_seconds == 10
        assert app_config.pagination.default_page == 1
        assert app_config.pagination.default_limit == 10

    def test_fallback_to_config_directory(self, mock_env_vars, tmp_path, monkeypatch):
        """Test that config/config.yaml is found."""
        (tmp_path / "config").mkdir()
        write_config(tmp_path / "config", "countries: [FR]\n")
        monkeypatch.chdir(tmp_path)

        app_config, _ = load_config()

        assert app_config.countries == ["FR"]

    def test_empty_file_uses_defaults(self, mock_env_vars, tmp_path):
        config_path = write_config(tmp_path, "")

        app_config, _ = load_config(config_path)

        assert app_config == AppConfig()

    def test_config_file_not_found(self, mock_env_vars):
        """Test error when an explicit config file doesn't exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, mock_env_vars, tmp_path):
        config_path = write_config(tmp_path, "countries: [PL\n  bad: : :")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(config_path)

    def test_non_mapping_yaml(self, mock_env_vars, tmp_path):
        config_path = write_config(tmp_path, "- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(config_path)

    def test_warnings_emitted(self, mock_env_vars, tmp_path):
        config_path = write_config(tmp_path, "cache:\n  pollution_ttl: 30s\n")

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            load_config(config_path)

        assert any("pollution_ttl" in str(w.message) for w in caught)


class TestConfigValidation:
    """Validation errors are collected into ConfigurationError."""

    @pytest.mark.parametrize(
        "config_dict",
        [
            {"countries": ["US"]},
            {"countries": ["PL", "pl"]},
            {"countries": []},
            {"cache": {"pollution_ttl": "soon"}},
            {"cache": {"clear_interval": "10s"}},
            {"cache": {"clear_interval": "2d"}},
            {"pagination": {"default_limit": 0}},
            {"advanced": {"http_request_timeout": 1}},
            {"logging": {"format": "xml"}},
        ],
    )
    def test_invalid_values(self, config_dict):
        with pytest.raises(ConfigurationError) as exc_info:
            build_app_config(config_dict)

        assert exc_info.value.errors
        assert exc_info.value.suggestions


class TestWarnings:
    """Tests for check_for_warnings."""

    def test_defaults_produce_no_warnings(self):
        assert check_for_warnings({}) == []

    def test_description_shorter_than_pollution(self):
        messages = check_for_warnings({"cache": {"pollution_ttl": "2h", "description_ttl": "1h"}})
        assert any("description_ttl is shorter" in m for m in messages)

    def test_zero_refresh_buffer(self):
        messages = check_for_warnings({"auth": {"refresh_buffer_seconds": 0}})
        assert any("refresh_buffer_seconds" in m for m in messages)

    def test_large_worker_pool(self):
        messages = check_for_warnings({"advanced": {"max_workers": 50}})
        assert any("max_workers" in m for m in messages)

    def test_invalid_durations_ignored(self):
        assert check_for_warnings({"cache": {"pollution_ttl": "garbage"}}) == []


class TestEnvironment:
    """Tests for load_environment_config."""

    def test_required_credentials(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        errors = exc_info.value.errors
        assert any("POLLUTION_API_USERNAME" in e for e in errors)
        assert any("POLLUTION_API_PASSWORD" in e for e in errors)

    def test_defaults(self, mock_env_vars):
        env_config = load_environment_config()

        assert env_config.pollution_api_base_url == DEFAULT_POLLUTION_API_BASE_URL
        assert env_config.port == 3000
        assert env_config.log_level is None

    def test_overrides(self, mock_env_vars):
        mock_env_vars.setenv("POLLUTION_API_BASE_URL", "http://localhost:9000/")
        mock_env_vars.setenv("PORT", "8080")
        mock_env_vars.setenv("LOG_LEVEL", "debug")

        env_config = load_environment_config()

        assert env_config.pollution_api_base_url == "http://localhost:9000"
        assert env_config.port == 8080
        assert env_config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("PORT", "abc"),
            ("PORT", "70000"),
            ("LOG_LEVEL", "LOUD"),
            ("POLLUTION_API_BASE_URL", "ftp://example.com"),
        ],
    )
    def test_invalid_values(self, mock_env_vars, name, value):
        mock_env_vars.setenv(name, value)

        with pytest.raises(ConfigurationError):
            load_environment_config()


class TestDuration:
    """Tests for duration parsing."""

    @pytest.mark.parametrize(
        "text,seconds",
        [
            ("10m", 600),
            ("1h", 3600),
            ("30s", 30),
            ("1h30m", 5400),
            ("1d", 86400),
            ("PT10M", 600),
            ("PT1H30M", 5400),
            ("P1D", 86400),
            ("pt30s", 30),
        ],
    )
    def test_parse(self, text, seconds):
        assert parse_duration(text) == seconds

    @pytest.mark.parametrize("text", ["", "  ", "10", "10x", "0m", "PT", "1h and 2m", "P1Y"])
    def test_invalid(self, text):
        with pytest.raises(DurationParseError):
            parse_duration(text)

    def test_range(self):
        validate_duration_range(600, 60, 86400)

        with pytest.raises(DurationParseError, match="too short"):
            validate_duration_range(30, 60, 86400)
        with pytest.raises(DurationParseError, match="too long"):
            validate_duration_range(90000, 60, 86400, label="Cache clear interval")

    @pytest.mark.parametrize(
        "seconds,text",
        [(1, "1 second"), (45, "45 seconds"), (60, "1 minute"), (7200, "2 hours"), (86400, "1 day")],
    )
    def test_human_readable(self, seconds, text):
        assert seconds_to_human_readable(seconds) == text


class TestConfigurationError:
    """Errors name the source of the bad settings."""

    def test_message_lists_errors_and_suggestions(self):
        error = ConfigurationError(
            "Configuration validation failed",
            errors=["countries -> 0: bad"],
            suggestions=["Review config.example.yaml"],
            source="config.yaml",
        )

        text = str(error)
        assert text.startswith("Configuration validation failed (config.yaml)")
        assert "  1. countries -> 0: bad" in text
        assert "  - Review config.example.yaml" in text

    def test_log_fields(self):
        error = ConfigurationError("bad", errors=["a", "b"])

        assert error.log_fields() == {"config_source": "defaults", "error_count": 2, "errors": ["a", "b"]}

    def test_invalid_yaml_names_file(self, mock_env_vars, tmp_path):
        config_path = write_config(tmp_path, "countries: [PL\n  bad: : :")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_path)

        assert exc_info.value.source == str(config_path)

    def test_validation_error_names_file(self, mock_env_vars, tmp_path):
        config_path = write_config(tmp_path, "countries: [US]\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_path)

        assert exc_info.value.source == str(config_path)

    def test_environment_errors_name_environment(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert exc_info.value.source == ENVIRONMENT_SOURCE
