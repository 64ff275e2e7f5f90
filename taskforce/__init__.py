"""
Taskforce: goal decomposition and sequential agent execution.

This package contains:
- shared/: Common infrastructure (LLM client, logging, contracts, errors)
- orchestration/: Decompose -> execute -> summarize pipeline and its API
"""

from taskforce.orchestration.graph.build import create_orchestrator_graph
from taskforce.orchestration.orchestrator import TaskOrchestrator

__all__ = ["create_orchestrator_graph", "TaskOrchestrator"]
