"""
Structured logging configuration.

Provides JSON-formatted logging for orchestrator state transitions and events.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredFormatter(logging.Formatter):
    """
    Custom formatter that outputs log records as JSON.

    Each log entry includes:
    - timestamp: ISO format datetime
    - level: Log level name
    - logger: Logger name
    - message: Log message
    - extra: Any additional fields passed to the log call
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra"):
            log_entry["extra"] = record.extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logging(
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    logger_name: str = "taskforce",
) -> logging.Logger:
    """
    Configure structured JSON logging for the package logger.

    Console output stays with the root handlers; this only adds a JSON
    Lines file handler. Calling it again replaces the previous JSON handler.

    Args:
        log_file: Path of the JSON log file. If not provided, no file is written.
        level: Logging level (default: INFO)
        logger_name: Name for the logger instance.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            logger.removeHandler(handler)
            handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def log_state_transition(
    event: str,
    state: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a run state transition event.

    Args:
        event: Name of the event (e.g., "run_started", "stage_changed")
        state: Current pipeline state dictionary (key fields are extracted)
        extra: Additional context to include in the log
        logger: Logger instance to use. If not provided, uses default.
    """
    if logger is None:
        logger = logging.getLogger("taskforce")

    subtasks = state.get("subtasks") or []
    status_counts: Dict[str, int] = {}
    for task in subtasks:
        status = str(task.get("status"))
        status_counts[status] = status_counts.get(status, 0) + 1

    state_summary = {
        "run_id": state.get("run_id"),
        "stage": str(state.get("stage")),
        "cursor": state.get("cursor"),
        "subtask_count": len(subtasks),
        "status_counts": status_counts,
    }

    log_data = {
        "event": event,
        "state_summary": state_summary,
    }

    if extra:
        log_data["extra"] = extra

    record = logger.makeRecord(
        logger.name,
        logging.INFO,
        "",
        0,
        f"State transition: {event}",
        args=(),
        exc_info=None,
    )
    record.extra = log_data

    logger.handle(record)
