"""
Helpers shared by the stage nodes.

Wraps a completion call with timing, logging and optional run tracing.
"""

import logging
import time
from typing import Any, Dict, Optional

from taskforce.orchestration.graph.config import OrchestratorConfig
from taskforce.orchestration.schemas import PipelineState, Stage
from taskforce.shared.errors import ServiceError
from taskforce.shared.llm.client import CompletionClient, CompletionOptions
from taskforce.shared.logging.debug_logger import get_or_create_logger


logger = logging.getLogger(__name__)


def agent_message(agent: str, content: str) -> Dict[str, Any]:
    """Build an activity log entry (the sequence number is added by the reducer)."""
    return {"role": "system", "agent": agent, "content": content}


async def timed_completion(
    client: CompletionClient,
    prompt: str,
    options: CompletionOptions,
    state: PipelineState,
    stage: Stage,
    config: OrchestratorConfig,
    subtask_id: Optional[int] = None,
) -> str:
    """
    Call the completion service once, recording duration and trace.

    Raises:
        ServiceError: Propagated from the client after it has been traced
    """
    run_id = state.get("run_id") or "unknown"
    _log = f"[run={run_id}] [graph=orchestrator] [stage={stage.value}] "
    trace = get_or_create_logger(run_id, config.trace_dir) if config.trace_dir else None

    logger.info(
        f"{_log}Calling LLM | structured={options.expect_structured}, "
        f"temperature={options.temperature}, prompt_chars={len(prompt)}"
    )

    start_time = time.perf_counter()
    try:
        response = await client.complete(prompt, options)
    except ServiceError as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        if trace:
            trace.log_llm_call(
                stage=stage.value,
                prompt=prompt,
                response=None,
                duration_ms=duration_ms,
                model=config.model,
                subtask_id=subtask_id,
                error=str(e),
            )
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    if trace:
        trace.log_llm_call(
            stage=stage.value,
            prompt=prompt,
            response=response,
            duration_ms=duration_ms,
            model=config.model,
            subtask_id=subtask_id,
        )

    logger.info(f"{_log}LLM responded | duration={duration_ms:.0f}ms, chars={len(response)}")
    return response
