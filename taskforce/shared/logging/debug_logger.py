"""
Per-run trace logger for completion calls and stage timing.

Writes one JSON Lines file per run under the configured trace directory.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


# Run-based logger registry so nodes and the orchestrator share one instance
_logger_registry: Dict[str, "RunTraceLogger"] = {}


def get_or_create_logger(run_id: str, logs_dir: str = "logs") -> "RunTraceLogger":
    """
    Get an existing trace logger for the run or create a new one.

    Args:
        run_id: Unique run identifier
        logs_dir: Directory to store trace files (default: "logs")

    Returns:
        RunTraceLogger instance for this run
    """
    if run_id not in _logger_registry:
        _logger_registry[run_id] = RunTraceLogger(run_id, logs_dir)
    return _logger_registry[run_id]


def remove_logger(run_id: str) -> None:
    """
    Remove a logger from the registry (e.g., after the run is reset).

    Args:
        run_id: Run ID to remove
    """
    _logger_registry.pop(run_id, None)


class RunTraceLogger:
    """
    Trace logger that writes a per-run JSON Lines file.

    Tracks completion calls and stage transitions. Each run gets its own
    folder containing `run_trace.jsonl`.
    """

    def __init__(self, run_id: str, logs_dir: str = "logs"):
        self.run_id = run_id
        self.base_logs_dir = Path(logs_dir)
        self.run_dir = self.base_logs_dir / run_id
        self.log_file = self.run_dir / "run_trace.jsonl"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self._total_llm_duration_ms = 0.0
        self._llm_call_count = 0
        self._transition_count = 0

    def _get_timestamp(self) -> str:
        """Get current UTC timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat()

    def _append_to_log(self, entry: Dict[str, Any]) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_llm_call(
        self,
        stage: str,
        prompt: str,
        response: Optional[str],
        duration_ms: float,
        model: Optional[str] = None,
        subtask_id: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Log a completion call with its prompt, response, and timing.

        Args:
            stage: Stage that issued the call (decompose, execute, summarize)
            prompt: Prompt sent to the service
            response: Raw response text, or None if the call failed
            duration_ms: Time taken for the call in milliseconds
            model: Model identifier, if known
            subtask_id: Sub-task ordinal for execute calls
            error: Error message if the call failed
        """
        self._total_llm_duration_ms += duration_ms
        self._llm_call_count += 1

        entry = {
            "type": "llm_call",
            "timestamp": self._get_timestamp(),
            "run_id": self.run_id,
            "stage": stage,
            "model": model,
            "prompt": prompt,
            "response": response,
            "duration_ms": round(duration_ms, 2),
        }

        if subtask_id is not None:
            entry["subtask_id"] = subtask_id

        if error:
            entry["error"] = error

        self._append_to_log(entry)

    def log_transition(self, stage: str, cursor: int, subtask_count: int) -> None:
        """Log an observable stage transition."""
        self._transition_count += 1
        self._append_to_log(
            {
                "type": "transition",
                "timestamp": self._get_timestamp(),
                "run_id": self.run_id,
                "stage": stage,
                "cursor": cursor,
                "subtask_count": subtask_count,
            }
        )

    def log_run_summary(self, stage: str, error: Optional[str] = None) -> Dict[str, Any]:
        """
        Log and return a run summary with totals.

        Args:
            stage: Terminal stage of the run
            error: Terminal error message, if the run failed

        Returns:
            Summary dictionary with all totals
        """
        summary = {
            "type": "run_summary",
            "timestamp": self._get_timestamp(),
            "run_id": self.run_id,
            "stage": stage,
            "error": error,
            "total_llm_calls": self._llm_call_count,
            "total_transitions": self._transition_count,
            "total_llm_duration_ms": round(self._total_llm_duration_ms, 2),
        }

        self._append_to_log(summary)
        return summary
