"""
Local (Ollama) chat adapter.

Talks to a self-hosted Ollama server over plain HTTP, no credential
required. Any transport failure or non-success status is reported as
ProviderUnavailableError. Local models are free, so the cost of a
successful call is always exactly 0.
"""

from typing import Sequence
import logging

import httpx

from archmen_llm.adapters.base import ChatCompletionAdapter, Pricing, usage_from_counts
from archmen_llm.adapters.openai_compat import to_openai_messages
from archmen_llm.errors import ProviderUnavailableError
from archmen_llm.registry.catalog import ProviderId
from archmen_llm.schemas.completion import ChatMessage, CompletionConfig, CompletionResult

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_BASE_URL = "http://localhost:11434"


class LocalAdapter(ChatCompletionAdapter):
    """
    Adapter for an Ollama server's /api/chat endpoint.

    Args:
        base_url: Server root (default http://localhost:11434)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    provider = ProviderId.LOCAL

    def __init__(
        self,
        base_url: str = DEFAULT_LOCAL_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def is_configured(self) -> bool:
        return True

    @property
    def base_url(self) -> str:
        return self._base_url

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        config: CompletionConfig,
        pricing: Pricing,
    ) -> CompletionResult:
        base_url = (config.base_url_override or self._base_url).rstrip("/")
        payload = {
            "model": config.model,
            "messages": to_openai_messages(messages),
            "stream": False,
            "options": {
                "temperature": config.temperature,
                "num_predict": config.max_output_tokens,
            },
        }

        try:
            response = await self._http.post(f"{base_url}/api/chat", json=payload)
        except httpx.TransportError as e:
            raise ProviderUnavailableError(
                f"Local model server unreachable at {base_url}: {e}",
                provider=self.provider.value,
                model=config.model,
            ) from e

        if not response.is_success:
            raise ProviderUnavailableError(
                f"Local model server returned HTTP {response.status_code}",
                provider=self.provider.value,
                model=config.model,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderUnavailableError(
                "Local model server returned a non-JSON body",
                provider=self.provider.value,
                model=config.model,
            ) from e

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict):
            raise ProviderUnavailableError(
                "Local model server returned a malformed chat response",
                provider=self.provider.value,
                model=config.model,
            )

        content = message.get("content") or ""

        usage = None
        if "prompt_eval_count" in data or "eval_count" in data:
            usage = usage_from_counts(data.get("prompt_eval_count"), data.get("eval_count"))

        logger.info(
            f"local completion: model={config.model}, "
            f"tokens={usage.total_tokens if usage else 'n/a'}"
        )
        result = self._build_result(content, usage, config, pricing)
        # Local calls are always free.
        return result.model_copy(update={"cost_estimate_usd": 0.0})

    async def aclose(self) -> None:
        await self._http.aclose()
