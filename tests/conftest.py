"""
Pytest configuration and shared fixtures.

Provides fake SDK clients, fake adapters and a FastAPI test client for
the gateway test suite.

IMPORTANT: Environment variables must be set BEFORE importing package
modules that use pydantic-settings, so no real credential leaks into a test.
"""

import os

# No provider is configured unless a test configures it explicitly
for _var in (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "KIMI_API_KEY",
    "GROQ_API_KEY",
    "PERPLEXITY_API_KEY",
    "TOGETHER_API_KEY",
    "OPENROUTER_API_KEY",
):
    os.environ.pop(_var, None)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEBUG"] = "false"

# Now safe to import everything else
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from archmen_llm.adapters.base import ChatCompletionAdapter
from archmen_llm.registry.catalog import ProviderId, ProviderRegistry
from archmen_llm.schemas.completion import EmbeddingResult, Usage


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "asyncio: mark test as async")


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Settings are cached with lru_cache; start every test from the environment."""
    from archmen_llm.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry():
    """The shipped provider catalog."""
    return ProviderRegistry()


@pytest.fixture
def mock_openai_response():
    """Create a mock OpenAI chat completion response object."""
    response = MagicMock()
    response.choices = [
        MagicMock(message=MagicMock(content="The Caregiver archetype fits best."))
    ]
    # total_tokens is deliberately inconsistent; adapters must recompute it
    response.usage = MagicMock(prompt_tokens=500, completion_tokens=500, total_tokens=7)
    return response


@pytest.fixture
def mock_openai_client(mock_openai_response):
    """Create a fully mocked AsyncOpenAI-style client."""
    mock = MagicMock()
    mock.chat.completions.create = AsyncMock(return_value=mock_openai_response)
    mock.embeddings.create = AsyncMock(
        return_value=MagicMock(
            data=[MagicMock(embedding=[0.1, 0.2, 0.3])],
            usage=MagicMock(total_tokens=1000),
        )
    )
    mock.with_options = MagicMock(return_value=mock)
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_anthropic_response():
    """Create a mock Anthropic Messages API response object."""
    return SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="You lead with "),
            SimpleNamespace(type="text", text="the Explorer."),
        ],
        usage=SimpleNamespace(input_tokens=120, output_tokens=30),
    )


@pytest.fixture
def mock_anthropic_client(mock_anthropic_response):
    """Create a fully mocked AsyncAnthropic-style client."""
    mock = MagicMock()
    mock.messages.create = AsyncMock(return_value=mock_anthropic_response)
    mock.with_options = MagicMock(return_value=mock)
    mock.close = AsyncMock()
    return mock


class FakeAdapter(ChatCompletionAdapter):
    """
    In-memory adapter recording every call.

    Returns a fixed completion (or raises ``error``) without any I/O.
    """

    def __init__(
        self,
        provider: ProviderId,
        configured: bool = True,
        supports_embeddings: bool = False,
        content: str = "fake reply",
        usage: Usage | None = None,
        error: Exception | None = None,
    ) -> None:
        self.provider = provider
        self.supports_embeddings = supports_embeddings
        self._configured = configured
        self._content = content
        self._usage = usage if usage is not None else Usage(input_tokens=10, output_tokens=5)
        self._error = error
        self.calls = []
        self.closed = False

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def complete(self, messages, config, pricing):
        self.calls.append((list(messages), config))
        if self._error is not None:
            raise self._error
        return self._build_result(self._content, self._usage, config, pricing)

    async def embed(self, text, model, pricing):
        if not self.supports_embeddings:
            return await super().embed(text, model, pricing)
        self.calls.append((text, model))
        return EmbeddingResult(
            vector=[0.5, 0.25],
            provider=self.provider.value,
            model=model,
        )

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_adapter_factory():
    """Factory fixture for FakeAdapter instances."""
    return FakeAdapter


@pytest.fixture
def fake_adapters():
    """
    One fake adapter per provider.

    openai (with embeddings), groq and local are configured; every other
    provider is present but unconfigured.
    """
    configured = {ProviderId.OPENAI, ProviderId.GROQ, ProviderId.LOCAL}
    return {
        provider: FakeAdapter(
            provider,
            configured=provider in configured,
            supports_embeddings=provider == ProviderId.OPENAI,
        )
        for provider in ProviderId
    }


@pytest.fixture
def dispatcher(registry, fake_adapters):
    """CompletionDispatcher wired to fake adapters."""
    from archmen_llm.dispatcher import CompletionDispatcher

    return CompletionDispatcher(registry, fake_adapters)


@pytest.fixture
def test_client(dispatcher):
    """
    Create a FastAPI TestClient whose routes use the fake dispatcher.

    The lifespan still runs (building a real, credential-less dispatcher),
    but the dependency override replaces it for every request.
    """
    from archmen_llm.main import app, get_dispatcher

    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    app.dependency_overrides.clear()


