"""
ArchMen LLM Gateway

Multi-provider chat completion dispatch and cost accounting. A single
asynchronous interface routes provider-agnostic requests to OpenAI,
Anthropic, Groq, OpenAI-compatible hosts and a local Ollama server, and
prices every call from a static catalog.
"""

__version__ = "0.1.0"
