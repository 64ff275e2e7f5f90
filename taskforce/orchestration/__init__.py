"""
Orchestration of a goal into sequential agent work.

A goal is decomposed into ordered sub-tasks, each sub-task is executed with
the results of the earlier ones as context, and a final report is compiled.
"""

from taskforce.orchestration.orchestrator import TaskOrchestrator
from taskforce.orchestration.schemas import AgentRole, RunStage, SubTask, TaskStatus

__all__ = ["TaskOrchestrator", "AgentRole", "RunStage", "SubTask", "TaskStatus"]
