"""Stage nodes for the orchestrator graph."""

from taskforce.orchestration.nodes.decompose import decompose_node
from taskforce.orchestration.nodes.execute import start_subtask_node, execute_subtask_node
from taskforce.orchestration.nodes.summarize import summarize_node

__all__ = ["decompose_node", "start_subtask_node", "execute_subtask_node", "summarize_node"]
