"""
Shared infrastructure for the orchestration pipeline.

Modules:
- llm: Async completion client for the OpenAI API
- logging: Structured JSON logging and per-run traces
- contracts: Observable run snapshot models
- errors: Error taxonomy
"""

from taskforce.shared.llm.client import get_cached_client, OpenAICompletionClient
from taskforce.shared.logging.config import setup_logging, log_state_transition

__all__ = [
    "get_cached_client",
    "OpenAICompletionClient",
    "setup_logging",
    "log_state_transition",
]
