"""
Completion Dispatcher - single entry point for chat and embedding calls.

The dispatcher validates the request against the registry, hands it to
the adapter registered for the provider and returns the adapter's
normalized result. It performs no retries, no fallback to another
provider and no error translation: an adapter failure reaches the caller
unchanged.

Key components:
- CompletionDispatcher: routes requests to adapters
- build_dispatcher(): construct a dispatcher and its adapters from settings
"""

import asyncio
import logging
import time
from typing import Mapping, Sequence

from archmen_llm.adapters.base import ChatCompletionAdapter
from archmen_llm.adapters.factory import build_adapters
from archmen_llm.config import Settings
from archmen_llm.errors import (
    EmbeddingNotSupportedError,
    InvalidMessagesError,
    LLMServiceError,
    ProviderNotConfiguredError,
)
from archmen_llm.metrics.cost import CostCalculator
from archmen_llm.registry.catalog import ProviderId, ProviderRegistry
from archmen_llm.schemas.completion import (
    ChatMessage,
    ChatRole,
    ComparisonOutcome,
    ComparisonTarget,
    CompletionConfig,
    CompletionResult,
    EmbeddingConfig,
    EmbeddingResult,
)

logger = logging.getLogger(__name__)


def validate_messages(messages: Sequence[ChatMessage]) -> None:
    """
    Ensure the conversation has at least one non-system turn.

    Raises:
        InvalidMessagesError: If the list is empty or holds only system prompts.
    """
    if not any(m.role != ChatRole.SYSTEM for m in messages):
        raise InvalidMessagesError(
            "At least one user or assistant message is required"
        )


class CompletionDispatcher:
    """
    Route provider-agnostic requests to provider adapters.

    The dispatcher is built once at startup and passed to whatever needs
    it. It holds no per-call state, so concurrent calls are independent.

    Attributes:
        registry: Provider catalog used for validation and pricing
        calculator: Cost calculator over the same registry
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        adapters: Mapping[ProviderId, ChatCompletionAdapter],
        calculator: CostCalculator | None = None,
    ) -> None:
        self.registry = registry
        self.calculator = calculator or CostCalculator(registry)
        self._adapters = dict(adapters)

    def _adapter_for(self, provider: ProviderId) -> ChatCompletionAdapter:
        adapter = self._adapters.get(provider)
        if adapter is None:
            raise ProviderNotConfiguredError(provider.value)
        return adapter

    async def generate_chat_completion(
        self, messages: Sequence[ChatMessage], config: CompletionConfig
    ) -> CompletionResult:
        """
        Run a chat completion on the requested provider.

        Args:
            messages: Ordered conversation, passed to the adapter unchanged
            config: Provider, model and generation parameters

        Returns:
            CompletionResult echoing the requested provider and model

        Raises:
            UnknownProviderError: Provider tag not in the registry
            UnknownModelError: Model not listed for the provider
            InvalidMessagesError: No user or assistant turn to send
            ProviderNotConfiguredError: No credential for the provider
            ProviderUnavailableError: Backend unreachable (local provider)
        """
        provider = self.registry.resolve_provider(config.provider)
        pricing = self.registry.get_pricing(provider, config.model)
        validate_messages(messages)
        adapter = self._adapter_for(provider)

        logger.info(f"Dispatching to {config.model} via {provider.value}")
        start_time = time.perf_counter()

        result = await adapter.complete(messages, config, pricing)

        latency_ms = (time.perf_counter() - start_time) * 1000
        return result.model_copy(
            update={
                "provider": provider.value,
                "model": config.model,
                "latency_ms": latency_ms,
            }
        )

    async def generate_embedding(
        self, text: str, config: EmbeddingConfig
    ) -> EmbeddingResult:
        """
        Embed text with the requested provider.

        Raises:
            UnknownProviderError: Provider tag not in the registry
            EmbeddingNotSupportedError: Provider cannot embed text
            UnknownModelError: Embedding model not listed for the provider
            ProviderNotConfiguredError: No credential for the provider
        """
        provider = self.registry.resolve_provider(config.provider)
        adapter = self._adapters.get(provider)
        if adapter is None or not adapter.supports_embeddings:
            raise EmbeddingNotSupportedError(provider.value)
        pricing = self.registry.get_embedding_pricing(provider, config.model)

        logger.info(f"Embedding with {config.model} via {provider.value}")
        result = await adapter.embed(text, config.model, pricing)
        return result.model_copy(update={"provider": provider.value, "model": config.model})

    async def compare_completions(
        self,
        messages: Sequence[ChatMessage],
        targets: Sequence[ComparisonTarget],
        temperature: float = 0.7,
        max_output_tokens: int = 1000,
    ) -> list[ComparisonOutcome]:
        """
        Run the same conversation against several provider/model pairs.

        Targets whose provider is known but not configured are skipped.
        The remaining calls run concurrently; each outcome carries either
        the result or the error it failed with, in target order.
        """
        configured = set(self.list_configured_providers())
        runnable: list[ComparisonTarget] = []
        for target in targets:
            try:
                provider = self.registry.resolve_provider(target.provider)
            except LLMServiceError:
                runnable.append(target)  # reported as an error outcome below
                continue
            if provider in configured:
                runnable.append(target)
            else:
                logger.info(f"Skipping unconfigured comparison target: {target.provider}")

        async def _run(target: ComparisonTarget) -> CompletionResult:
            config = CompletionConfig(
                provider=target.provider,
                model=target.model,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )
            return await self.generate_chat_completion(messages, config)

        results = await asyncio.gather(
            *(_run(target) for target in runnable), return_exceptions=True
        )

        outcomes: list[ComparisonOutcome] = []
        for target, result in zip(runnable, results):
            if isinstance(result, CompletionResult):
                outcomes.append(
                    ComparisonOutcome(provider=target.provider, model=target.model, result=result)
                )
            elif isinstance(result, Exception):
                logger.warning(
                    f"Comparison target {target.provider}/{target.model} failed: {result}"
                )
                outcomes.append(
                    ComparisonOutcome(
                        provider=target.provider,
                        model=target.model,
                        error_code=getattr(result, "code", None) or type(result).__name__,
                        error=str(result),
                    )
                )
            else:
                raise result
        return outcomes

    def list_configured_providers(self) -> list[ProviderId]:
        """Providers that can serve calls, in catalog order (local always included)."""
        return [
            provider
            for provider in self.registry.list_providers()
            if provider in self._adapters and self._adapters[provider].is_configured
        ]

    def list_models(self, provider: str | ProviderId) -> list[str]:
        """Chat models for a provider; UnknownProviderError for unknown tags."""
        return self.registry.list_models(provider)

    def estimate_cost(
        self,
        provider: str | ProviderId,
        model: str,
        input_tokens: int,
        output_tokens: int,
    ) -> float:
        """Pure cost estimate, no network call."""
        return self.calculator.estimate(provider, model, input_tokens, output_tokens)

    async def aclose(self) -> None:
        """Close every adapter's backend client."""
        for adapter in self._adapters.values():
            await adapter.aclose()


def build_dispatcher(
    settings: Settings, registry: ProviderRegistry | None = None
) -> CompletionDispatcher:
    """
    Build a dispatcher with one adapter per catalogued provider.

    Args:
        settings: Application settings (credentials, endpoints, timeout)
        registry: Catalog to use (default: the shipped catalog)

    Returns:
        A ready CompletionDispatcher
    """
    registry = registry or ProviderRegistry()
    adapters = build_adapters(settings, registry)
    return CompletionDispatcher(registry, adapters)
