"""
Configuration Tests

Validates settings defaults, credential lookup and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from archmen_llm.config import Settings, configure_logging, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """No environment means no keys and the default local endpoint."""
        settings = Settings(_env_file=None)

        assert settings.local_base_url == "http://localhost:11434"
        assert settings.request_timeout_seconds == 60.0
        assert settings.embedding_max_input_chars == 8000
        assert settings.openai_api_key is None

    def test_api_key_for(self):
        """api_key_for returns plain keys and None for missing or blank ones."""
        settings = Settings(_env_file=None, groq_api_key="gsk-1", together_api_key="")

        assert settings.api_key_for("groq") == "gsk-1"
        assert settings.api_key_for("together") is None
        assert settings.api_key_for("openai") is None
        assert settings.api_key_for("local") is None

    def test_keys_are_secret(self):
        """Keys are not exposed in the settings repr."""
        settings = Settings(_env_file=None, anthropic_api_key="sk-ant-secret")
        assert "sk-ant-secret" not in repr(settings)

    def test_environment_is_read(self, monkeypatch):
        """Keys come from environment variables."""
        monkeypatch.setenv("KIMI_API_KEY", "moonshot-key")
        monkeypatch.setenv("LOCAL_BASE_URL", "http://ollama:11434/")

        settings = get_settings()

        assert settings.api_key_for("kimi") == "moonshot-key"
        assert settings.local_base_url == "http://ollama:11434"

    def test_timeout_must_be_positive(self):
        """A zero timeout is rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, request_timeout_seconds=0)

    def test_get_settings_cached(self):
        """get_settings returns the same instance."""
        assert get_settings() is get_settings()


def test_configure_logging_quiets_sdk_loggers():
    """Third-party HTTP and SDK loggers are raised to WARNING."""
    configure_logging(Settings(_env_file=None, log_level="DEBUG"))

    for name in ("httpx", "httpcore", "openai", "anthropic", "groq"):
        assert logging.getLogger(name).level == logging.WARNING
