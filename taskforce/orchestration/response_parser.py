"""
Response parser for the orchestration pipeline.

Handles stripping of markdown code fences, JSON decoding, and shape checks
on decomposition plans. Every failure raises ParseFailure with a reason;
partially valid data is never returned.
"""

import json
import logging
import re
from typing import Any, List, Optional

from taskforce.orchestration.schemas import AgentRole, PlannedTask
from taskforce.shared.errors import ParseFailure, ParseFailureReason


logger = logging.getLogger(__name__)

# Whole response wrapped in ```lang ... ```
_FENCE_PATTERN = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

_ROLE_KEYS = ("role", "agent")
_DESCRIPTION_KEYS = ("task", "description")


def strip_code_fences(raw_response: str) -> str:
    """
    Remove one enclosing markdown code fence, if present.

    Args:
        raw_response: Raw LLM response string

    Returns:
        The fenced content, or the trimmed input when it is not fenced
    """
    content = raw_response.strip()
    match = _FENCE_PATTERN.match(content)
    if match:
        content = match.group(2).strip()
    return content


def parse_json_response(raw_response: str) -> Any:
    """
    Decode a JSON payload, optionally wrapped in a code fence.

    Raises:
        ParseFailure: If the response is empty or not valid JSON
    """
    content = strip_code_fences(raw_response or "")
    if not content:
        raise ParseFailure(
            "The response was empty", ParseFailureReason.EMPTY_RESPONSE, raw_response
        )

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseFailure(
            f"The response is not valid JSON: {e}", ParseFailureReason.INVALID_JSON, raw_response
        ) from e


def _first_text(item: dict, keys) -> Optional[str]:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _coerce_role(value: Any) -> Optional[AgentRole]:
    if not isinstance(value, str):
        return None
    try:
        return AgentRole(value.strip().lower())
    except ValueError:
        return None


def _to_planned_task(item: Any) -> Optional[PlannedTask]:
    """Convert one plan item, or return None if it must be dropped."""
    if isinstance(item, str):
        if not item.strip():
            return None
        return PlannedTask(description=item.strip())

    if isinstance(item, dict):
        description = _first_text(item, _DESCRIPTION_KEYS)
        raw_role = next((item[k] for k in _ROLE_KEYS if item.get(k) is not None), None)
        role = _coerce_role(raw_role)
        if description is None or role is None:
            return None
        return PlannedTask(description=description, role=role)

    return None


def parse_subtask_plan(raw_response: str) -> List[PlannedTask]:
    """
    Parse a decomposition response into an ordered list of planned tasks.

    The payload must be a JSON array. Items are either non-empty strings or
    objects with a recognized role and a non-empty task. Items that do not
    fit are dropped; the order of the remaining items is preserved.

    Args:
        raw_response: Raw LLM response string

    Returns:
        Planned tasks in response order

    Raises:
        ParseFailure: If the payload is not a JSON array or no item survives
    """
    data = parse_json_response(raw_response)

    if not isinstance(data, list):
        raise ParseFailure(
            f"Expected a JSON array of sub-tasks, got {type(data).__name__}",
            ParseFailureReason.WRONG_SHAPE,
            raw_response,
        )

    planned = []
    for item in data:
        task = _to_planned_task(item)
        if task is not None:
            planned.append(task)

    dropped = len(data) - len(planned)
    if dropped:
        logger.warning(f"Dropped {dropped}/{len(data)} plan items with unrecognized shape or role")

    if not planned:
        raise ParseFailure(
            "The plan contains no usable sub-tasks", ParseFailureReason.EMPTY_PLAN, raw_response
        )

    return planned


def parse_text_response(raw_response: str) -> str:
    """
    Accept a free-text response.

    Raises:
        ParseFailure: If the response is empty or whitespace only
    """
    content = (raw_response or "").strip()
    if not content:
        raise ParseFailure(
            "The response was empty", ParseFailureReason.EMPTY_RESPONSE, raw_response
        )
    return content
