"""Shared pytest fixtures."""

import pytest

ENV_VARS = (
    "POLLUTION_API_USERNAME",
    "POLLUTION_API_PASSWORD",
    "POLLUTION_API_BASE_URL",
    "LOG_LEVEL",
    "PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every service environment variable."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Minimal valid environment."""
    clean_env.setenv("POLLUTION_API_USERNAME", "tester")
    clean_env.setenv("POLLUTION_API_PASSWORD", "secret")
    return clean_env
