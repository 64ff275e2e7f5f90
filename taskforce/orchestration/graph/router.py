"""
Routing logic for the orchestrator graph.

Determines which node runs next from the stage recorded in state.
"""

import logging
from typing import Literal

from taskforce.orchestration.schemas import PipelineState, RunStage


logger = logging.getLogger(__name__)


def route_next_stage(
    state: PipelineState,
) -> Literal["start_subtask", "summarize", "end"]:
    """
    Determine the next node to execute based on the current stage.

    Routing logic:
    1. If the run failed or is done -> end
    2. If sub-tasks remain -> start the next sub-task
    3. If all sub-tasks completed -> summarize

    Args:
        state: Current pipeline state

    Returns:
        Name of the next node to execute
    """
    run_id = state.get("run_id", "unknown")
    stage = state.get("stage")
    cursor = state.get("cursor", 0)
    total = len(state.get("subtasks") or [])
    _log = f"[run={run_id}] [graph=orchestrator] [router=route_next_stage] "

    if stage == RunStage.EXECUTING and cursor < total:
        logger.info(f"{_log}Routing to 'start_subtask' | cursor={cursor}, total={total}")
        return "start_subtask"

    if stage == RunStage.SUMMARIZING:
        logger.info(f"{_log}Routing to 'summarize' | completed={cursor}/{total}")
        return "summarize"

    logger.info(f"{_log}Routing to 'end' | stage={stage}, cursor={cursor}, total={total}")
    return "end"
