"""Shared test configuration and fixtures."""

import pytest

# Variables read by smart_format.config; a developer's .env must not leak into tests
REMOTE_ENV_VARS = (
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_DEPLOYMENT_NAME",
    "SMART_FORMAT_REMOTE_TIMEOUT",
    "SMART_FORMAT_REMOTE_ENABLED",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every remote-classifier setting from the environment for one test."""
    for name in REMOTE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
