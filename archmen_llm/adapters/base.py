"""
Adapter interface shared by every provider.

An adapter translates the provider-agnostic message list and config into
one backend call and turns the backend response into a CompletionResult.
The dispatcher only ever talks to this interface.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence
import logging

from archmen_llm.errors import EmbeddingNotSupportedError, ProviderNotConfiguredError
from archmen_llm.metrics.cost import CostCalculator
from archmen_llm.registry.catalog import (
    AsymmetricPricing,
    CombinedPricing,
    EmbeddingPricing,
    FreePricing,
    ProviderId,
)
from archmen_llm.schemas.completion import (
    ChatMessage,
    CompletionConfig,
    CompletionResult,
    EmbeddingResult,
    Usage,
)

logger = logging.getLogger(__name__)

Pricing = AsymmetricPricing | CombinedPricing | FreePricing


class ChatCompletionAdapter(ABC):
    """
    Base class for provider adapters.

    Subclasses set ``provider`` and implement ``complete``. Adapters that
    can embed text set ``supports_embeddings`` and override ``embed``.
    """

    provider: ProviderId
    supports_embeddings: bool = False

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when the adapter can serve calls without a per-call key."""

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        config: CompletionConfig,
        pricing: Pricing,
    ) -> CompletionResult:
        """Run one chat completion against the backend."""

    async def embed(
        self, text: str, model: str, pricing: EmbeddingPricing
    ) -> EmbeddingResult:
        """Embed text. Providers without embedding support always raise."""
        raise EmbeddingNotSupportedError(self.provider.value)

    async def aclose(self) -> None:
        """Release the backend client, if any."""

    def _build_result(
        self,
        content: str,
        usage: Usage | None,
        config: CompletionConfig,
        pricing: Pricing,
    ) -> CompletionResult:
        return CompletionResult(
            content=content,
            usage=usage,
            cost_estimate_usd=CostCalculator.for_usage(pricing, usage),
            provider=self.provider.value,
            model=config.model,
        )


class SDKChatAdapter(ChatCompletionAdapter):
    """
    Adapter backed by a vendor SDK client.

    The client is created once from the configured key and owned by this
    adapter alone. A per-call ``api_key_override`` gets a one-off client
    that is closed after the call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: Any | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._client = client
        if self._client is None and api_key:
            self._client = self._make_client(api_key, base_url)
            logger.debug(f"Initialized {self.provider.value} client")

    @abstractmethod
    def _make_client(self, api_key: str, base_url: str | None) -> Any:
        """Construct the SDK client."""

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def _require_client(self) -> Any:
        if self._client is None:
            raise ProviderNotConfiguredError(self.provider.value)
        return self._client

    @asynccontextmanager
    async def _client_for(self, config: CompletionConfig) -> AsyncIterator[Any]:
        """Yield the client to use for one call, honoring config overrides."""
        if config.api_key_override is not None:
            client = self._make_client(
                config.api_key_override.get_secret_value(),
                config.base_url_override or self._base_url,
            )
            try:
                yield client
            finally:
                await client.close()
            return

        client = self._require_client()
        if config.base_url_override:
            client = client.with_options(base_url=config.base_url_override)
        yield client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()


def usage_from_counts(input_tokens: int | None, output_tokens: int | None) -> Usage:
    """Build Usage from backend counts; total is always recomputed."""
    return Usage(input_tokens=input_tokens or 0, output_tokens=output_tokens or 0)
