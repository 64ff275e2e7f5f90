"""
Async OpenAI completion client.

Provides a cached SDK client instance and a thin completion boundary that
submits one prompt and returns raw text. No retries are performed here;
a failed call surfaces as a ServiceError for the caller to handle.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Dict, Optional, Protocol

import openai
from openai import AsyncOpenAI
from dotenv import load_dotenv

from taskforce.shared.errors import ConfigurationError, ServiceError

load_dotenv()


logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENAI_API_KEY"
DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TIMEOUT = 60.0

STRUCTURED_OUTPUT_HINT = (
    "Respond with raw, valid JSON only. Do not wrap it in markdown code "
    "fences and do not add any commentary."
)

# Module-level cache for the SDK client
_client: Optional[AsyncOpenAI] = None


@dataclass(frozen=True)
class CompletionOptions:
    """
    Per-call options for the completion service.

    Attributes:
        expect_structured: Bias the service toward machine-parseable output
        temperature: Sampling temperature
    """

    expect_structured: bool = False
    temperature: float = 0.3


class CompletionClient(Protocol):
    """Anything that can turn a prompt into text."""

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        ...


def get_cached_client() -> AsyncOpenAI:
    """
    Returns a cached instance of the async OpenAI client.

    Uses the OPENAI_API_KEY environment variable for authentication.
    SDK-level retries are disabled so each completion is a single request.

    Raises:
        ConfigurationError: If OPENAI_API_KEY is not set.
    """
    global _client
    if _client is None:
        api_key = os.environ.get(API_KEY_ENV)
        if not api_key:
            raise ConfigurationError(
                f"{API_KEY_ENV} environment variable is not set. "
                "Please set it to your OpenAI API key."
            )
        _client = AsyncOpenAI(api_key=api_key, max_retries=0)
    return _client


class OpenAICompletionClient:
    """
    Completion client backed by the OpenAI Chat Completions API.

    Args:
        client: Optional AsyncOpenAI instance. Uses the cached client if omitted.
        model: Model identifier
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._client = client if client is not None else get_cached_client()
        self.model = model
        self.timeout = timeout

    def _build_messages(self, prompt: str, options: CompletionOptions) -> List[Dict[str, str]]:
        messages = []
        if options.expect_structured:
            messages.append({"role": "system", "content": STRUCTURED_OUTPUT_HINT})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """
        Submit a prompt and return the completion text.

        Args:
            prompt: Full instruction text
            options: Structured-output hint and temperature

        Returns:
            The assistant's response content, stripped of surrounding whitespace.

        Raises:
            ServiceError: If the call fails, times out, or returns no usable text.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(prompt, options),
                temperature=options.temperature,
                timeout=self.timeout,
            )
        except openai.APITimeoutError as e:
            logger.error(f"Completion timed out | model={self.model}, timeout={self.timeout}s")
            raise ServiceError(
                f"The completion service timed out after {self.timeout:.0f}s"
            ) from e
        except openai.OpenAIError as e:
            logger.error(f"Completion failed | model={self.model}, error={e}")
            raise ServiceError(f"The completion service returned an error: {e}") from e

        if not response.choices:
            raise ServiceError("The completion service returned no choices")

        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise ServiceError("The completion service returned an empty response")

        return content.strip()
