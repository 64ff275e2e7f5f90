"""
Tests for the prompt builders.

Checks the stage-specific instructions and the context serialization.
"""

import pytest

from taskforce.orchestration.prompts.builders import (
    build_decompose_prompt,
    build_execute_prompt,
    build_prompt,
    build_summarize_prompt,
    serialize_context,
)
from taskforce.orchestration.prompts.templates import NO_PRIOR_CONTEXT
from taskforce.orchestration.schemas import AgentRole, ContextEntry, Stage


def _make_context():
    return [
        ContextEntry(
            description="Find top attractions",
            result="Museum, old town, harbour",
            role=AgentRole.RESEARCHER,
        ),
        ContextEntry(
            description="Estimate visit durations",
            result="Museum 2h, old town 3h, harbour 1h",
            role=AgentRole.ANALYST,
        ),
    ]


class TestDecomposePrompt:
    """Tests for build_decompose_prompt."""

    def test_role_tagged_lists_roles_and_goal(self):
        prompt = build_decompose_prompt("Plan a 1-day city tour")
        assert 'User request: "Plan a 1-day city tour"' in prompt
        for role in ("researcher", "analyst", "writer"):
            assert f"'{role}'" in prompt
        assert '"role"' in prompt and '"task"' in prompt
        assert "JSON array" in prompt

    def test_plain_variant_asks_for_strings(self):
        prompt = build_decompose_prompt("Plan a 1-day city tour", role_tagged=False)
        assert "JSON array of strings" in prompt
        assert "'researcher'" not in prompt

    def test_blank_goal_rejected(self):
        with pytest.raises(ValueError):
            build_decompose_prompt("   ")

    def test_deterministic(self):
        assert build_decompose_prompt("Goal") == build_decompose_prompt("Goal")


class TestExecutePrompt:
    """Tests for build_execute_prompt."""

    def test_empty_context_uses_marker(self):
        prompt = build_execute_prompt("Find top attractions", [])
        assert NO_PRIOR_CONTEXT in prompt
        assert prompt.rstrip().endswith("Find top attractions")

    def test_role_persona(self):
        prompt = build_execute_prompt("Write it up", [], role=AgentRole.WRITER)
        assert "acting as the 'writer'" in prompt

    def test_no_persona_without_role(self):
        prompt = build_execute_prompt("Write it up", [])
        assert "acting as" not in prompt

    def test_context_entries_appear_once_in_order(self):
        context = _make_context()
        prompt = build_execute_prompt("Draft a timed itinerary", context)

        positions = []
        for entry in context:
            assert prompt.count(entry.description) == 1
            assert prompt.count(entry.result) == 1
            positions.append(prompt.index(entry.description))
            positions.append(prompt.index(entry.result))
        assert positions == sorted(positions)
        assert NO_PRIOR_CONTEXT not in prompt

    def test_blank_description_rejected(self):
        with pytest.raises(ValueError):
            build_execute_prompt("", [])


class TestSummarizePrompt:
    """Tests for build_summarize_prompt."""

    def test_includes_goal_results_and_markup_vocabulary(self):
        prompt = build_summarize_prompt("Plan a 1-day city tour", _make_context())
        assert "Plan a 1-day city tour" in prompt
        assert "Museum, old town, harbour" in prompt
        assert "Museum 2h, old town 3h, harbour 1h" in prompt
        assert "#, ##, ###" in prompt
        assert "(**)" in prompt

    def test_requires_results(self):
        with pytest.raises(ValueError):
            build_summarize_prompt("Goal", [])


class TestSerializeContext:
    """Tests for serialize_context."""

    def test_empty(self):
        assert serialize_context([]) == NO_PRIOR_CONTEXT

    def test_role_less_entry(self):
        text = serialize_context([ContextEntry(description="Step", result="Done")])
        assert text == 'Result of the agent for the task "Step":\nDone'

    def test_entries_separated(self):
        text = serialize_context(_make_context())
        assert text.count("\n\n---\n\n") == 1
        assert text.startswith('Result of the researcher agent for the task "Find top attractions"')


class TestBuildPrompt:
    """Tests for the stage dispatcher."""

    def test_dispatches_by_stage(self):
        assert build_prompt(Stage.DECOMPOSE, goal="G") == build_decompose_prompt("G")
        assert build_prompt("execute", description="D", context=[]) == build_execute_prompt("D", [])

    def test_unknown_stage(self):
        with pytest.raises(ValueError):
            build_prompt("review", goal="G")
