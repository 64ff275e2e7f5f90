"""
Orchestrator graph.

Sequences the stages of a run:
    goal -> decompose -> execute each sub-task in order -> summarize -> done

Any failed stage ends the run; there is no retry or re-planning.
"""

from taskforce.orchestration.graph.build import create_orchestrator_graph
from taskforce.orchestration.graph.config import OrchestratorConfig, DEFAULT_CONFIG

__all__ = ["create_orchestrator_graph", "OrchestratorConfig", "DEFAULT_CONFIG"]
