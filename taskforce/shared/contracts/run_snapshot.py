"""
Run snapshot contract.

Defines the read model a presentation layer consumes: the current stage,
ordered sub-task snapshots, the activity log, and the terminal report or
error once the run has finished.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from taskforce.orchestration.schemas import AgentRole, RunStage, TaskStatus


class SubTaskSnapshot(BaseModel):
    """Read-only view of a single sub-task."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1, description="Ordinal of the sub-task (1-indexed)")
    description: str = Field(description="What the sub-task must accomplish")
    role: Optional[AgentRole] = Field(
        default=None, description="Assigned agent role, if role-tagged"
    )
    status: TaskStatus = Field(description="Current lifecycle status")
    result: Optional[str] = Field(default=None, description="Result text once completed")
    error: Optional[str] = Field(default=None, description="Error text once failed")


class ActivityMessage(BaseModel):
    """One entry of the run's append-only activity log."""

    model_config = ConfigDict(frozen=True)

    seq: int = Field(ge=1, description="Monotonic sequence number within the run")
    agent: str = Field(description="Agent that produced the entry")
    content: str = Field(description="Human-readable description of the event")


class RunSnapshot(BaseModel):
    """
    Observable state of one orchestration run.

    `final_report` is only set when `stage` is done; `error` only when
    `stage` is failed.
    """

    model_config = ConfigDict(frozen=True)

    run_id: Optional[str] = Field(default=None, description="Run identifier (None while idle)")
    goal: Optional[str] = Field(default=None, description="The user's goal")
    stage: RunStage = Field(default=RunStage.IDLE, description="Current pipeline stage")
    cursor: int = Field(default=0, ge=0, description="Index of the next sub-task to run")
    subtasks: List[SubTaskSnapshot] = Field(default_factory=list)
    messages: List[ActivityMessage] = Field(default_factory=list)
    final_report: Optional[str] = Field(default=None)
    error: Optional[str] = Field(default=None)

    @property
    def is_terminal(self) -> bool:
        return self.stage in (RunStage.DONE, RunStage.FAILED)

    @property
    def is_running(self) -> bool:
        return self.stage not in (RunStage.IDLE, RunStage.DONE, RunStage.FAILED)

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "RunSnapshot":
        """
        Build a snapshot from a pipeline state dictionary.

        Args:
            state: Pipeline state (see PipelineState)

        Returns:
            Immutable RunSnapshot
        """
        return cls(
            run_id=state.get("run_id"),
            goal=state.get("goal"),
            stage=state.get("stage", RunStage.IDLE),
            cursor=state.get("cursor", 0),
            subtasks=[SubTaskSnapshot.model_validate(t) for t in state.get("subtasks") or []],
            messages=[
                ActivityMessage(seq=m["seq"], agent=m["agent"], content=m["content"])
                for m in state.get("messages") or []
            ],
            final_report=state.get("final_report"),
            error=state.get("error"),
        )
