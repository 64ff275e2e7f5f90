"""
Tests for the orchestration schemas.

Covers sub-task lifecycle rules, context derivation and the activity
log reducer.
"""

import pytest

from taskforce.orchestration.schemas import (
    AgentRole,
    SubTask,
    TaskStatus,
    append_messages,
    build_context,
)
from taskforce.shared.errors import InvalidTransition


class TestSubTaskLifecycle:
    """Tests for SubTask status transitions."""

    def test_happy_path(self):
        task = SubTask(id=1, description="Collect data", role=AgentRole.RESEARCHER)
        assert task.status == TaskStatus.PENDING

        running = task.mark_in_progress()
        done = running.mark_completed("Data collected")

        assert running.status == TaskStatus.IN_PROGRESS
        assert done.status == TaskStatus.COMPLETED
        assert done.result == "Data collected"
        # Original is untouched
        assert task.status == TaskStatus.PENDING

    def test_failure_records_error(self):
        failed = SubTask(id=2, description="Analyze").mark_in_progress().mark_failed("boom")
        assert failed.status == TaskStatus.FAILED
        assert failed.error == "boom"
        assert failed.result is None

    def test_cannot_complete_pending(self):
        with pytest.raises(InvalidTransition):
            SubTask(id=1, description="x").mark_completed("too early")

    def test_cannot_revert_completed(self):
        done = SubTask(id=1, description="x").mark_in_progress().mark_completed("ok")
        with pytest.raises(InvalidTransition):
            done.mark_in_progress()
        with pytest.raises(InvalidTransition):
            done.mark_failed("late")

    def test_agent_label(self):
        assert SubTask(id=1, description="x", role=AgentRole.WRITER).agent_label == "writer"
        assert SubTask(id=1, description="x").agent_label == "executor"


class TestBuildContext:
    """Tests for build_context."""

    def test_only_completed_in_order(self):
        first = SubTask(id=1, description="A").mark_in_progress().mark_completed("ra")
        second = SubTask(id=2, description="B").mark_in_progress()
        third = SubTask(id=3, description="C")
        context = build_context(
            [t.model_dump(mode="json") for t in (first, second, third)]
        )
        assert [(c.description, c.result) for c in context] == [("A", "ra")]


class TestAppendMessages:
    """Tests for the activity log reducer."""

    def test_sequence_numbers_are_monotonic(self):
        log = append_messages([], [{"agent": "orchestrator", "content": "a"}])
        log = append_messages(log, [{"agent": "writer", "content": "b"}, {"agent": "writer", "content": "c"}])
        assert [m["seq"] for m in log] == [1, 2, 3]
        assert [m["content"] for m in log] == ["a", "b", "c"]

    def test_existing_list_not_mutated(self):
        existing = [{"agent": "x", "content": "a", "seq": 1}]
        append_messages(existing, [{"agent": "y", "content": "b"}])
        assert len(existing) == 1
