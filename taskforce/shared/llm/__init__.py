"""LLM client utilities."""

from taskforce.shared.llm.client import (
    CompletionClient,
    CompletionOptions,
    OpenAICompletionClient,
    get_cached_client,
)

__all__ = [
    "CompletionClient",
    "CompletionOptions",
    "OpenAICompletionClient",
    "get_cached_client",
]
