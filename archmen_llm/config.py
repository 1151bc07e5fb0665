"""
ArchMen LLM Configuration Module

This module manages application settings and environment variables using
pydantic-settings for type-safe configuration management.

Environment variables are loaded from .env file or system environment.
All provider credentials are optional: a provider without a key is simply
reported as not configured. Keys use SecretStr to prevent accidental logging.
"""

from functools import lru_cache
from typing import Literal
import logging
import sys

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic Settings automatically reads from:
    1. Environment variables
    2. .env file in working directory
    3. Default values defined here
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    openai_api_key: SecretStr | None = Field(
        default=None, description="OpenAI API key (chat and embeddings)"
    )

    anthropic_api_key: SecretStr | None = Field(
        default=None, description="Anthropic API key"
    )

    kimi_api_key: SecretStr | None = Field(
        default=None, description="Kimi AI (Moonshot) API key"
    )

    groq_api_key: SecretStr | None = Field(
        default=None, description="Groq API key"
    )

    perplexity_api_key: SecretStr | None = Field(
        default=None, description="Perplexity API key"
    )

    together_api_key: SecretStr | None = Field(
        default=None, description="Together AI API key"
    )

    openrouter_api_key: SecretStr | None = Field(
        default=None, description="OpenRouter API key"
    )

    local_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the local Ollama server",
    )

    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="Timeout applied to every outbound provider request",
    )

    embedding_max_input_chars: int = Field(
        default=8000,
        gt=0,
        description="Embedding input is truncated to this many characters",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Application log level"
    )

    host: str = Field(default="0.0.0.0", description="Server bind host")

    port: int = Field(default=8000, description="Server bind port")

    debug: bool = Field(default=False, description="Enable debug mode")

    @field_validator("local_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the local endpoint so paths can be appended safely."""
        return v.rstrip("/")

    def api_key_for(self, provider: str) -> str | None:
        """
        Return the plain-text API key configured for a provider.

        Empty values count as unset. The local provider never has a key.

        Args:
            provider: Provider tag (e.g. "openai").

        Returns:
            The key, or None when the provider has no credential.
        """
        secret = getattr(self, f"{provider}_api_key", None)
        if secret is None:
            return None
        value = secret.get_secret_value().strip()
        return value or None


@lru_cache
def get_settings() -> Settings:
    """
    Returns cached settings instance.

    Using lru_cache ensures settings are loaded once and reused,
    avoiding repeated file reads and environment parsing.

    Returns:
        Settings: The application settings singleton.
    """
    return Settings()


def configure_logging(settings: Settings) -> None:
    """
    Configure application logging based on settings.

    Sets up structured logging with timestamps and reduces noise
    from third-party HTTP and SDK libraries.

    Args:
        settings: The application settings instance.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("groq").setLevel(logging.WARNING)
