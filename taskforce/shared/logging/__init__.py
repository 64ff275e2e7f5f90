"""Logging configuration and utilities."""

from taskforce.shared.logging.config import setup_logging, log_state_transition, StructuredFormatter
from taskforce.shared.logging.debug_logger import (
    RunTraceLogger,
    get_or_create_logger,
    remove_logger,
)

__all__ = [
    "setup_logging",
    "log_state_transition",
    "StructuredFormatter",
    "RunTraceLogger",
    "get_or_create_logger",
    "remove_logger",
]
