"""
Tests for the response parser.

Covers fence stripping, JSON decoding, plan shape checks and role filtering.
"""

import json

import pytest

from taskforce.orchestration.response_parser import (
    parse_json_response,
    parse_subtask_plan,
    parse_text_response,
    strip_code_fences,
)
from taskforce.orchestration.schemas import AgentRole
from taskforce.shared.errors import ParseFailure, ParseFailureReason


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    def test_plain_text_is_trimmed(self):
        assert strip_code_fences("  [1, 2]\n") == "[1, 2]"

    def test_language_tagged_fence(self):
        assert strip_code_fences('```json\n["a", "b"]\n```') == '["a", "b"]'

    def test_untagged_fence(self):
        assert strip_code_fences("```\n{\"k\": 1}\n```") == '{"k": 1}'

    def test_inline_fence(self):
        assert strip_code_fences("```[1]```") == "[1]"

    def test_partial_fence_is_left_alone(self):
        assert strip_code_fences("```json\n[1]") == "```json\n[1]"


class TestParseJsonResponse:
    """Tests for parse_json_response."""

    def test_fenced_and_unfenced_parse_identically(self):
        payload = ["Find top attractions", "Draft a timed itinerary"]
        plain = json.dumps(payload)
        fenced = f"```json\n{plain}\n```"
        assert parse_json_response(plain) == parse_json_response(fenced) == payload

    def test_invalid_json_raises(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_json_response("Sure! Here is your plan: step one, step two")
        assert exc_info.value.reason == ParseFailureReason.INVALID_JSON
        assert exc_info.value.raw == "Sure! Here is your plan: step one, step two"

    def test_empty_response_raises(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_json_response("   ")
        assert exc_info.value.reason == ParseFailureReason.EMPTY_RESPONSE

    def test_empty_fence_raises(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_json_response("```json\n```")
        assert exc_info.value.reason == ParseFailureReason.EMPTY_RESPONSE


class TestParseSubtaskPlan:
    """Tests for parse_subtask_plan."""

    def test_plain_strings_keep_order(self):
        plan = parse_subtask_plan('["Find top attractions", "Draft a timed itinerary"]')
        assert [t.description for t in plan] == [
            "Find top attractions",
            "Draft a timed itinerary",
        ]
        assert all(t.role is None for t in plan)

    def test_role_tagged_objects(self):
        raw = json.dumps(
            [
                {"role": "researcher", "task": "Collect data"},
                {"role": "Writer", "task": "Write the summary"},
            ]
        )
        plan = parse_subtask_plan(raw)
        assert [t.role for t in plan] == [AgentRole.RESEARCHER, AgentRole.WRITER]
        assert plan[1].description == "Write the summary"

    def test_alternate_keys_accepted(self):
        plan = parse_subtask_plan('[{"agent": "analyst", "description": "Compare options"}]')
        assert plan[0].role == AgentRole.ANALYST
        assert plan[0].description == "Compare options"

    def test_unknown_role_is_dropped(self):
        raw = json.dumps(
            [
                {"role": "researcher", "task": "Collect data"},
                {"role": "astronaut", "task": "Fly to the moon"},
                {"role": "writer", "task": "Write the summary"},
            ]
        )
        plan = parse_subtask_plan(raw)
        assert [t.description for t in plan] == ["Collect data", "Write the summary"]

    def test_malformed_items_are_dropped(self):
        raw = json.dumps(
            [
                "",
                42,
                {"task": "No role given"},
                {"role": "analyst"},
                {"role": "analyst", "task": "   "},
                "Keep me",
            ]
        )
        plan = parse_subtask_plan(raw)
        assert [t.description for t in plan] == ["Keep me"]

    def test_null_role_falls_back_to_agent_key(self):
        raw = json.dumps([{"role": None, "agent": "writer", "task": "Draft the report"}])
        plan = parse_subtask_plan(raw)
        assert len(plan) == 1
        assert plan[0].role == AgentRole.WRITER
        assert plan[0].description == "Draft the report"

    def test_object_payload_is_wrong_shape(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_subtask_plan('{"tasks": ["a", "b"]}')
        assert exc_info.value.reason == ParseFailureReason.WRONG_SHAPE

    def test_no_usable_items_is_empty_plan(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_subtask_plan('[{"role": "pilot", "task": "Fly"}]')
        assert exc_info.value.reason == ParseFailureReason.EMPTY_PLAN

    def test_empty_array_is_empty_plan(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_subtask_plan("[]")
        assert exc_info.value.reason == ParseFailureReason.EMPTY_PLAN


class TestParseTextResponse:
    """Tests for parse_text_response."""

    def test_text_is_trimmed(self):
        assert parse_text_response("\n  The answer.  \n") == "The answer."

    def test_blank_text_raises(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_text_response(" \n\t")
        assert exc_info.value.reason == ParseFailureReason.EMPTY_RESPONSE
