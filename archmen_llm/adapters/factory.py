"""
Adapter construction.

One adapter is built per catalogued provider at startup. SDK clients are
only created for providers whose API key is present; the others stay
unconfigured and reject calls with ProviderNotConfiguredError.
"""

import logging

from archmen_llm.adapters.anthropic import AnthropicAdapter
from archmen_llm.adapters.base import ChatCompletionAdapter
from archmen_llm.adapters.groq import GroqAdapter
from archmen_llm.adapters.local import LocalAdapter
from archmen_llm.adapters.openai_compat import OpenAICompatibleAdapter
from archmen_llm.config import Settings
from archmen_llm.registry.catalog import ProviderId, ProviderRegistry

logger = logging.getLogger(__name__)

OPENAI_COMPATIBLE_PROVIDERS = (
    ProviderId.OPENAI,
    ProviderId.KIMI,
    ProviderId.PERPLEXITY,
    ProviderId.TOGETHER,
    ProviderId.OPENROUTER,
)


def build_adapters(
    settings: Settings, registry: ProviderRegistry
) -> dict[ProviderId, ChatCompletionAdapter]:
    """
    Create one adapter for every provider in the registry.

    Args:
        settings: Credentials, local endpoint and timeout
        registry: Source of each provider's default base URL

    Returns:
        Mapping of provider -> adapter, in catalog order
    """
    timeout = settings.request_timeout_seconds
    adapters: dict[ProviderId, ChatCompletionAdapter] = {}

    for provider in registry.list_providers():
        entry = registry.get_entry(provider)
        api_key = settings.api_key_for(provider.value)

        if provider in OPENAI_COMPATIBLE_PROVIDERS:
            adapter: ChatCompletionAdapter = OpenAICompatibleAdapter(
                provider,
                api_key=api_key,
                base_url=entry.default_base_url,
                timeout=timeout,
                supports_embeddings=bool(entry.embeddings),
                embedding_max_input_chars=settings.embedding_max_input_chars,
            )
        elif provider == ProviderId.ANTHROPIC:
            adapter = AnthropicAdapter(
                api_key=api_key, base_url=entry.default_base_url, timeout=timeout
            )
        elif provider == ProviderId.GROQ:
            adapter = GroqAdapter(
                api_key=api_key, base_url=entry.default_base_url, timeout=timeout
            )
        elif provider == ProviderId.LOCAL:
            adapter = LocalAdapter(base_url=settings.local_base_url, timeout=timeout)
        else:
            logger.warning(f"No adapter available for provider: {provider.value}")
            continue

        adapters[provider] = adapter
        logger.info(
            f"{entry.display_name} adapter: "
            f"{'configured' if adapter.is_configured else 'not configured'}"
        )

    return adapters
