"""
Summarization node.

Compiles all sub-task results into the final report.
"""

import logging
from typing import Any, Dict

from taskforce.orchestration.graph.config import OrchestratorConfig
from taskforce.orchestration.nodes.common import agent_message, timed_completion
from taskforce.orchestration.prompts.builders import build_summarize_prompt
from taskforce.orchestration.response_parser import parse_text_response
from taskforce.orchestration.schemas import PipelineState, RunStage, Stage, build_context
from taskforce.shared.errors import ParseFailure, ServiceError
from taskforce.shared.llm.client import CompletionClient, CompletionOptions


logger = logging.getLogger(__name__)


async def summarize_node(
    state: PipelineState,
    client: CompletionClient,
    config: OrchestratorConfig,
) -> Dict[str, Any]:
    """Produce the final report, or fail the run."""
    run_id = state.get("run_id", "unknown")
    _log = f"[run={run_id}] [graph=orchestrator] [node=summarize] "

    context = build_context(state["subtasks"])
    logger.info(f"{_log}Entering node | context_entries={len(context)}")

    prompt = build_summarize_prompt(state["goal"], context)
    options = CompletionOptions(expect_structured=False, temperature=config.summarize_temperature)

    try:
        raw = await timed_completion(client, prompt, options, state, Stage.SUMMARIZE, config)
        report = parse_text_response(raw)
    except (ParseFailure, ServiceError) as e:
        error = f"The finalizer agent could not generate the final report: {e}"
        logger.error(f"{_log}{error}")
        return {
            "stage": RunStage.FAILED.value,
            "error": error,
            "messages": [agent_message("finalizer", error)],
        }

    logger.info(f"{_log}Final report generated | chars={len(report)}")

    return {
        "stage": RunStage.DONE.value,
        "final_report": report,
        "messages": [agent_message("finalizer", "Final report generated.")],
    }
