"""
Sub-task execution nodes.

`start_subtask_node` marks the sub-task at the cursor in progress so the
transition is observable before the service call. `execute_subtask_node`
runs it with the accumulated context and records the outcome.
"""

import logging
from typing import Any, Dict

from taskforce.orchestration.graph.config import OrchestratorConfig
from taskforce.orchestration.nodes.common import agent_message, timed_completion
from taskforce.orchestration.prompts.builders import build_execute_prompt
from taskforce.orchestration.response_parser import parse_text_response
from taskforce.orchestration.schemas import (
    PipelineState,
    RunStage,
    Stage,
    SubTask,
    build_context,
)
from taskforce.shared.errors import ParseFailure, ServiceError
from taskforce.shared.llm.client import CompletionClient, CompletionOptions


logger = logging.getLogger(__name__)


def _replace(subtasks, index: int, task: SubTask):
    updated = list(subtasks)
    updated[index] = task.model_dump(mode="json")
    return updated


def start_subtask_node(state: PipelineState) -> Dict[str, Any]:
    """Mark the sub-task at the cursor in progress."""
    cursor = state["cursor"]
    task = SubTask.model_validate(state["subtasks"][cursor]).mark_in_progress()

    logger.info(
        f"[run={state.get('run_id', 'unknown')}] [graph=orchestrator] [node=start_subtask] "
        f"Sub-task {task.id}/{len(state['subtasks'])} in progress | role={task.agent_label}"
    )

    return {
        "subtasks": _replace(state["subtasks"], cursor, task),
        "messages": [agent_message(task.agent_label, f"Working on: {task.description}")],
    }


async def execute_subtask_node(
    state: PipelineState,
    client: CompletionClient,
    config: OrchestratorConfig,
) -> Dict[str, Any]:
    """
    Execute the in-progress sub-task.

    Args:
        state: Current pipeline state (sub-task at cursor is in progress)
        client: Completion client
        config: Orchestrator configuration

    Returns:
        State update advancing the cursor, or failing the run
    """
    run_id = state.get("run_id", "unknown")
    cursor = state["cursor"]
    subtasks = state["subtasks"]
    task = SubTask.model_validate(subtasks[cursor])
    _log = f"[run={run_id}] [graph=orchestrator] [node=execute_subtask] "

    context = build_context(subtasks)
    logger.info(
        f"{_log}Entering node | subtask={task.id}/{len(subtasks)}, "
        f"role={task.agent_label}, context_entries={len(context)}"
    )

    prompt = build_execute_prompt(task.description, context, role=task.role)
    options = CompletionOptions(expect_structured=False, temperature=config.execute_temperature)

    try:
        raw = await timed_completion(
            client, prompt, options, state, Stage.EXECUTE, config, subtask_id=task.id
        )
        result = parse_text_response(raw)
    except (ParseFailure, ServiceError) as e:
        error = f"The {task.agent_label} agent failed on sub-task {task.id}: {e}"
        logger.error(f"{_log}{error}")
        return {
            "stage": RunStage.FAILED.value,
            "subtasks": _replace(subtasks, cursor, task.mark_failed(error)),
            "error": error,
            "messages": [agent_message(task.agent_label, error)],
        }

    next_cursor = cursor + 1
    next_stage = RunStage.SUMMARIZING if next_cursor == len(subtasks) else RunStage.EXECUTING

    logger.info(f"{_log}Sub-task {task.id} completed | next_stage={next_stage.value}")

    return {
        "stage": next_stage.value,
        "cursor": next_cursor,
        "subtasks": _replace(subtasks, cursor, task.mark_completed(result)),
        "messages": [agent_message(task.agent_label, f"Completed: {task.description}")],
    }
