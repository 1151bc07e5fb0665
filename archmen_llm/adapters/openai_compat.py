"""
OpenAI-compatible chat adapter.

Serves OpenAI itself and every host that speaks the OpenAI chat
completions protocol (Kimi/Moonshot, Perplexity, Together AI,
OpenRouter); only the base URL and key differ. System messages stay in
the turn list because the protocol accepts them as regular turns.

The OpenAI instance additionally produces embeddings.
"""

from typing import Any, Sequence
import logging

from openai import AsyncOpenAI

from archmen_llm.adapters.base import Pricing, SDKChatAdapter, usage_from_counts
from archmen_llm.registry.catalog import EmbeddingPricing, ProviderId
from archmen_llm.metrics.cost import CostCalculator
from archmen_llm.schemas.completion import (
    ChatMessage,
    CompletionConfig,
    CompletionResult,
    EmbeddingResult,
    EmbeddingUsage,
)

logger = logging.getLogger(__name__)


def to_openai_messages(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
    """Convert messages to the OpenAI wire format, preserving order."""
    return [{"role": m.role.value, "content": m.content} for m in messages]


class OpenAICompatibleAdapter(SDKChatAdapter):
    """
    Chat adapter over the AsyncOpenAI client.

    Args:
        provider: Provider this instance serves
        api_key: Credential; the adapter is unconfigured without one
        base_url: API endpoint (None for the SDK default)
        timeout: Per-request timeout in seconds
        client: Pre-built client (used by tests)
        supports_embeddings: Whether embed() may be called
        embedding_max_input_chars: Embedding input is truncated to this length
    """

    def __init__(
        self,
        provider: ProviderId,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: Any | None = None,
        supports_embeddings: bool = False,
        embedding_max_input_chars: int = 8000,
    ) -> None:
        self.provider = provider
        self.supports_embeddings = supports_embeddings
        self._embedding_max_input_chars = embedding_max_input_chars
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, client=client)

    def _make_client(self, api_key: str, base_url: str | None) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=self._timeout)

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        config: CompletionConfig,
        pricing: Pricing,
    ) -> CompletionResult:
        async with self._client_for(config) as client:
            completion = await client.chat.completions.create(
                model=config.model,
                messages=to_openai_messages(messages),
                temperature=config.temperature,
                max_tokens=config.max_output_tokens,
            )

        content = ""
        if completion.choices:
            content = completion.choices[0].message.content or ""

        usage = None
        if completion.usage is not None:
            usage = usage_from_counts(
                completion.usage.prompt_tokens, completion.usage.completion_tokens
            )

        logger.info(
            f"{self.provider.value} completion: model={config.model}, "
            f"tokens={usage.total_tokens if usage else 'n/a'}"
        )
        return self._build_result(content, usage, config, pricing)

    async def embed(
        self, text: str, model: str, pricing: EmbeddingPricing
    ) -> EmbeddingResult:
        if not self.supports_embeddings:
            return await super().embed(text, model, pricing)

        client = self._require_client()
        response = await client.embeddings.create(
            model=model,
            input=text[: self._embedding_max_input_chars],
        )

        usage = None
        if response.usage is not None:
            usage = EmbeddingUsage(tokens=response.usage.total_tokens or 0)

        logger.info(
            f"{self.provider.value} embedding: model={model}, "
            f"tokens={usage.tokens if usage else 'n/a'}"
        )
        return EmbeddingResult(
            vector=list(response.data[0].embedding),
            usage=usage,
            cost_estimate_usd=CostCalculator.for_embedding(pricing, usage),
            provider=self.provider.value,
            model=model,
        )
