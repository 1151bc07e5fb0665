"""
Adapters module: one translator per provider backend.

Key exports:
- ChatCompletionAdapter: interface the dispatcher calls
- OpenAICompatibleAdapter: OpenAI, Kimi, Perplexity, Together, OpenRouter
- GroqAdapter: Groq via its native SDK
- AnthropicAdapter: Anthropic Messages API (separate system prompt)
- LocalAdapter: Ollama over HTTP
- build_adapters(): construct every adapter from settings
"""

from archmen_llm.adapters.anthropic import AnthropicAdapter, split_system_prompt
from archmen_llm.adapters.base import ChatCompletionAdapter, SDKChatAdapter
from archmen_llm.adapters.factory import build_adapters
from archmen_llm.adapters.groq import GroqAdapter
from archmen_llm.adapters.local import LocalAdapter
from archmen_llm.adapters.openai_compat import OpenAICompatibleAdapter

__all__ = [
    "ChatCompletionAdapter",
    "SDKChatAdapter",
    "OpenAICompatibleAdapter",
    "GroqAdapter",
    "AnthropicAdapter",
    "LocalAdapter",
    "split_system_prompt",
    "build_adapters",
]
