"""
Dispatcher module: provider-agnostic entry point for completions.

Key exports:
- CompletionDispatcher: validates, routes and normalizes calls
- build_dispatcher(): construct a dispatcher from settings
- validate_messages(): conversation shape check
"""

from archmen_llm.dispatcher.dispatcher import (
    CompletionDispatcher,
    build_dispatcher,
    validate_messages,
)

__all__ = [
    "CompletionDispatcher",
    "build_dispatcher",
    "validate_messages",
]
