"""Groq chat adapter, using the native AsyncGroq SDK."""

from typing import Any

from groq import AsyncGroq

from archmen_llm.adapters.openai_compat import OpenAICompatibleAdapter
from archmen_llm.registry.catalog import ProviderId


class GroqAdapter(OpenAICompatibleAdapter):
    """
    Groq exposes the OpenAI chat protocol; only the client differs.

    Groq has no embedding endpoint.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: Any | None = None,
    ) -> None:
        super().__init__(
            ProviderId.GROQ,
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            client=client,
        )

    def _make_client(self, api_key: str, base_url: str | None) -> AsyncGroq:
        return AsyncGroq(api_key=api_key, base_url=base_url, timeout=self._timeout)
