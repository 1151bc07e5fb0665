"""
Anthropic chat adapter.

The Messages API takes the system prompt as a separate ``system``
parameter, not as a conversation turn. Every system message is pulled
out of the list (joined in order by a blank line) and the remaining
user/assistant turns are sent in their original order.
"""

from typing import Sequence
import logging

from anthropic import AsyncAnthropic

from archmen_llm.adapters.base import Pricing, SDKChatAdapter, usage_from_counts
from archmen_llm.registry.catalog import ProviderId
from archmen_llm.schemas.completion import (
    ChatMessage,
    ChatRole,
    CompletionConfig,
    CompletionResult,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_SEPARATOR = "\n\n"


def split_system_prompt(
    messages: Sequence[ChatMessage],
) -> tuple[str | None, list[ChatMessage]]:
    """
    Separate system content from conversation turns.

    Args:
        messages: Ordered conversation

    Returns:
        (system prompt or None, remaining turns in order)
    """
    system_parts = [m.content for m in messages if m.role == ChatRole.SYSTEM]
    turns = [m for m in messages if m.role != ChatRole.SYSTEM]
    system = SYSTEM_PROMPT_SEPARATOR.join(system_parts) if system_parts else None
    return system, turns


class AnthropicAdapter(SDKChatAdapter):
    """Chat adapter over the AsyncAnthropic Messages API."""

    provider = ProviderId.ANTHROPIC

    def _make_client(self, api_key: str, base_url: str | None) -> AsyncAnthropic:
        return AsyncAnthropic(api_key=api_key, base_url=base_url, timeout=self._timeout)

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        config: CompletionConfig,
        pricing: Pricing,
    ) -> CompletionResult:
        system, turns = split_system_prompt(messages)

        request = {
            "model": config.model,
            "max_tokens": config.max_output_tokens,
            "temperature": config.temperature,
            "messages": [{"role": m.role.value, "content": m.content} for m in turns],
        }
        if system is not None:
            request["system"] = system

        async with self._client_for(config) as client:
            response = await client.messages.create(**request)

        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

        usage = None
        if response.usage is not None:
            usage = usage_from_counts(
                response.usage.input_tokens, response.usage.output_tokens
            )

        logger.info(
            f"anthropic completion: model={config.model}, "
            f"tokens={usage.total_tokens if usage else 'n/a'}"
        )
        return self._build_result(content, usage, config, pricing)
