"""
Orchestrator graph construction.

Builds the graph that sequences decompose -> (start -> execute)* -> summarize.
Stage nodes need the completion client and configuration, so they are bound
here in thin async wrappers.
"""

import logging
from typing import Any, Dict, Optional

from langgraph.graph import StateGraph, END

from taskforce.orchestration.graph.config import OrchestratorConfig, DEFAULT_CONFIG
from taskforce.orchestration.graph.router import route_next_stage
from taskforce.orchestration.nodes.decompose import decompose_node
from taskforce.orchestration.nodes.execute import execute_subtask_node, start_subtask_node
from taskforce.orchestration.nodes.summarize import summarize_node
from taskforce.orchestration.schemas import PipelineState
from taskforce.shared.llm.client import CompletionClient


logger = logging.getLogger(__name__)

_ROUTES = {
    "start_subtask": "start_subtask",
    "summarize": "summarize",
    "end": END,
}


def create_orchestrator_graph(
    client: CompletionClient,
    config: Optional[OrchestratorConfig] = None,
):
    """
    Create and compile the orchestrator graph.

    The graph structure is:
        Entry -> decompose -> route_next_stage
          -> "start_subtask" -> start_subtask -> execute_subtask -> route_next_stage
          -> "summarize"     -> summarize -> END
          -> "end"           -> END

    Args:
        client: Completion client used by every stage
        config: Optional configuration. Uses DEFAULT_CONFIG if not provided.

    Returns:
        Compiled LangGraph application ready for execution.
    """
    if config is None:
        config = DEFAULT_CONFIG

    async def _decompose(state: PipelineState) -> Dict[str, Any]:
        return await decompose_node(state, client, config)

    async def _execute_subtask(state: PipelineState) -> Dict[str, Any]:
        return await execute_subtask_node(state, client, config)

    async def _summarize(state: PipelineState) -> Dict[str, Any]:
        return await summarize_node(state, client, config)

    graph = StateGraph(PipelineState)

    # Add nodes
    graph.add_node("decompose", _decompose)
    graph.add_node("start_subtask", start_subtask_node)
    graph.add_node("execute_subtask", _execute_subtask)
    graph.add_node("summarize", _summarize)

    graph.set_entry_point("decompose")

    # Plan -> first sub-task, or stop on failure
    graph.add_conditional_edges("decompose", route_next_stage, _ROUTES)

    graph.add_edge("start_subtask", "execute_subtask")

    # After each sub-task: next sub-task, summarize, or stop on failure
    graph.add_conditional_edges("execute_subtask", route_next_stage, _ROUTES)

    graph.add_edge("summarize", END)

    app = graph.compile()

    return app
