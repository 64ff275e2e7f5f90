"""
Graph configuration for the orchestrator.

Centralizes configuration options for the pipeline, making it easy to tune
behavior without modifying the graph wiring.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class OrchestratorConfig:
    """
    Configuration for the orchestrator graph.

    Attributes:
        model: LLM model to use for every stage
        llm_timeout: Completion call timeout in seconds
        decompose_temperature: Sampling temperature for decomposition
        execute_temperature: Sampling temperature for sub-task execution
        summarize_temperature: Sampling temperature for the final report
        role_tagged: Ask decomposition for role-tagged sub-tasks
        recursion_limit: Maximum number of graph steps, or None for no limit.
            Each sub-task takes two steps, so a fixed limit caps the plan size.
        trace_dir: Directory for per-run JSON Lines traces (None disables)
    """

    # LLM configuration
    model: str = "gpt-4.1-mini"
    llm_timeout: float = 60.0

    # Lower for planning/execution, higher for report prose
    decompose_temperature: float = 0.2
    execute_temperature: float = 0.3
    summarize_temperature: float = 0.7

    # Prompt variant
    role_tagged: bool = True

    # Graph execution limits (every step advances the cursor or ends the run)
    recursion_limit: Optional[int] = None

    # Debug tracing
    trace_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "OrchestratorConfig":
        """
        Create a configuration with overrides from the environment.

        Reads TASKFORCE_MODEL, TASKFORCE_LLM_TIMEOUT, TASKFORCE_ROLE_TAGGED
        and TASKFORCE_TRACE_DIR.
        """
        defaults = cls()
        timeout = os.environ.get("TASKFORCE_LLM_TIMEOUT")
        return cls(
            model=os.environ.get("TASKFORCE_MODEL") or defaults.model,
            llm_timeout=float(timeout) if timeout else defaults.llm_timeout,
            role_tagged=_env_bool("TASKFORCE_ROLE_TAGGED", defaults.role_tagged),
            trace_dir=os.environ.get("TASKFORCE_TRACE_DIR") or defaults.trace_dir,
        )


# Default configuration instance
DEFAULT_CONFIG = OrchestratorConfig()
