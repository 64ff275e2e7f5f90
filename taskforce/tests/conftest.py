"""Shared fixtures: a scripted completion client and an isolated API session store."""

from typing import List, Tuple, Union

import pytest

from taskforce.shared.errors import ServiceError
from taskforce.shared.llm.client import CompletionOptions


class FakeCompletionClient:
    """
    Completion client that replays scripted responses in order.

    Each scripted item is either the text to return or an exception to raise.
    Every call is recorded as (prompt, options).
    """

    def __init__(self, responses: List[Union[str, Exception]]):
        self._responses = list(responses)
        self.calls: List[Tuple[str, CompletionOptions]] = []

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        self.calls.append((prompt, options))
        if not self._responses:
            raise ServiceError("No scripted response left")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def prompts(self) -> List[str]:
        return [prompt for prompt, _ in self.calls]


@pytest.fixture
def fake_client_factory():
    """Build a FakeCompletionClient from a list of scripted responses."""
    return FakeCompletionClient


@pytest.fixture(autouse=True)
def _isolate_sessions(monkeypatch):
    """Keep API sessions from leaking between tests."""
    from taskforce.orchestration import orchestrator_api

    monkeypatch.setattr(orchestrator_api, "_sessions", {})
