"""
Decomposition node.

Asks the completion service to break the goal into an ordered list of
sub-tasks and materializes them, all pending.
"""

import logging
from typing import Any, Dict

from taskforce.orchestration.graph.config import OrchestratorConfig
from taskforce.orchestration.nodes.common import agent_message, timed_completion
from taskforce.orchestration.prompts.builders import build_decompose_prompt
from taskforce.orchestration.response_parser import parse_subtask_plan
from taskforce.orchestration.schemas import PipelineState, RunStage, Stage, SubTask
from taskforce.shared.errors import ParseFailure, ServiceError
from taskforce.shared.llm.client import CompletionClient, CompletionOptions


logger = logging.getLogger(__name__)


async def decompose_node(
    state: PipelineState,
    client: CompletionClient,
    config: OrchestratorConfig,
) -> Dict[str, Any]:
    """
    Plan the run.

    Args:
        state: Current pipeline state (stage is decomposing)
        client: Completion client
        config: Orchestrator configuration

    Returns:
        State update: executing with pending sub-tasks, or failed
    """
    run_id = state.get("run_id", "unknown")
    _log = f"[run={run_id}] [graph=orchestrator] [node=decompose] "
    logger.info(f"{_log}Entering node | goal_chars={len(state['goal'])}, role_tagged={config.role_tagged}")

    prompt = build_decompose_prompt(state["goal"], role_tagged=config.role_tagged)
    options = CompletionOptions(expect_structured=True, temperature=config.decompose_temperature)

    try:
        raw = await timed_completion(client, prompt, options, state, Stage.DECOMPOSE, config)
        plan = parse_subtask_plan(raw)
    except (ParseFailure, ServiceError) as e:
        if isinstance(e, ParseFailure):
            logger.error(f"{_log}Plan could not be parsed | reason={e.reason.value}, error={e}")
        else:
            logger.error(f"{_log}Planning call failed: {e}")
        error = f"The orchestrator could not plan the task: {e}"
        return {
            "stage": RunStage.FAILED.value,
            "error": error,
            "messages": [agent_message("orchestrator", error)],
        }

    subtasks = [
        SubTask(id=index, description=item.description, role=item.role).model_dump(mode="json")
        for index, item in enumerate(plan, start=1)
    ]

    logger.info(f"{_log}Plan created | subtasks={len(subtasks)}")

    return {
        "stage": RunStage.EXECUTING.value,
        "cursor": 0,
        "subtasks": subtasks,
        "messages": [agent_message("orchestrator", f"Plan created with {len(subtasks)} steps.")],
    }
