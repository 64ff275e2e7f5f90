"""
Schemas for the orchestration pipeline.

Defines the stage and status enums, the SubTask model with its monotonic
lifecycle, the derived context view, and the LangGraph state schema.
"""

from enum import Enum
from typing import TypedDict, List, Optional, Annotated

from pydantic import BaseModel, Field

from taskforce.shared.errors import InvalidTransition


# =============================================================================
# Enums
# =============================================================================


class RunStage(str, Enum):
    """Pipeline stage of a run."""

    IDLE = "idle"
    DECOMPOSING = "decomposing"
    EXECUTING = "executing"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"


class Stage(str, Enum):
    """A unit of work mapped to one completion call."""

    DECOMPOSE = "decompose"
    EXECUTE = "execute"
    SUMMARIZE = "summarize"


class TaskStatus(str, Enum):
    """Lifecycle status of a sub-task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class AgentRole(str, Enum):
    """Closed set of roles a sub-task may be assigned to."""

    RESEARCHER = "researcher"
    ANALYST = "analyst"
    WRITER = "writer"


TERMINAL_STAGES = (RunStage.DONE, RunStage.FAILED)

_ALLOWED_TRANSITIONS = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED, TaskStatus.FAILED},
    TaskStatus.COMPLETED: set(),
    TaskStatus.FAILED: set(),
}


# =============================================================================
# Sub-tasks (Pydantic)
# =============================================================================


class PlannedTask(BaseModel):
    """One item of a decomposition plan, before it becomes a SubTask."""

    description: str = Field(min_length=1, description="Instruction for the agent")
    role: Optional[AgentRole] = Field(default=None, description="Assigned role, if any")


class SubTask(BaseModel):
    """
    A unit of delegated work produced by decomposition.

    Status only moves forward: pending -> in_progress -> completed | failed.
    Transition methods return an updated copy and never mutate in place.
    """

    id: int = Field(ge=1, description="Ordinal of the sub-task (1-indexed)")
    description: str = Field(min_length=1, description="What the sub-task must accomplish")
    role: Optional[AgentRole] = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    result: Optional[str] = Field(default=None)
    error: Optional[str] = Field(default=None)

    def _transition(self, target: TaskStatus, **updates) -> "SubTask":
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransition(
                f"Sub-task {self.id} cannot move from {self.status.value} to {target.value}"
            )
        return self.model_copy(update={"status": target, **updates})

    def mark_in_progress(self) -> "SubTask":
        return self._transition(TaskStatus.IN_PROGRESS)

    def mark_completed(self, result: str) -> "SubTask":
        return self._transition(TaskStatus.COMPLETED, result=result)

    def mark_failed(self, error: str) -> "SubTask":
        return self._transition(TaskStatus.FAILED, error=error)

    @property
    def agent_label(self) -> str:
        """Name used for this sub-task in activity messages and prompts."""
        return self.role.value if self.role else "executor"


class ContextEntry(BaseModel):
    """A completed sub-task's description and result, as seen by later stages."""

    description: str
    result: str
    role: Optional[AgentRole] = None


def build_context(subtasks: List[dict]) -> List[ContextEntry]:
    """
    Derive the ordered context from completed sub-tasks.

    Args:
        subtasks: Sub-task dicts in execution order

    Returns:
        One ContextEntry per completed sub-task, in order
    """
    context = []
    for raw in subtasks:
        task = SubTask.model_validate(raw)
        if task.status == TaskStatus.COMPLETED and task.result is not None:
            context.append(
                ContextEntry(description=task.description, result=task.result, role=task.role)
            )
    return context


# =============================================================================
# LangGraph State Schema
# =============================================================================


def append_messages(existing: List[dict], new: List[dict]) -> List[dict]:
    """
    Reducer for the activity log.

    Appends new messages and numbers each one with a per-run monotonic
    sequence number, so identifiers never collide.
    """
    merged = list(existing or [])
    for message in new or []:
        merged.append({**message, "seq": len(merged) + 1})
    return merged


class PipelineState(TypedDict):
    """
    State schema for the orchestrator graph.

    `subtasks` holds SubTask dicts in decomposition order; `cursor` is the
    index of the next sub-task to run and never exceeds len(subtasks).
    """

    run_id: Optional[str]
    goal: str
    stage: str
    cursor: int
    subtasks: List[dict]
    final_report: Optional[str]
    error: Optional[str]
    messages: Annotated[List[dict], append_messages]
