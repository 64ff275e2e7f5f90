"""
Prompt builders for the orchestration stages.

These functions construct the exact instructions sent to the completion
service. They are pure: no I/O, same inputs give the same text.
"""

from typing import Optional, Sequence

from taskforce.orchestration.schemas import AgentRole, ContextEntry, Stage
from taskforce.orchestration.prompts.templates import (
    AVAILABLE_ROLES_TEXT,
    CONTEXT_ENTRY_TEMPLATE,
    CONTEXT_SEPARATOR,
    DECOMPOSE_PLAIN_TEMPLATE,
    DECOMPOSE_ROLE_TAGGED_TEMPLATE,
    EXECUTE_TEMPLATE,
    NO_PRIOR_CONTEXT,
    PERSONA_TEMPLATE,
    SUMMARIZE_TEMPLATE,
)


def _require_text(value: Optional[str], name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{name} must be non-empty text")
    return value.strip()


def _format_entry(entry: ContextEntry) -> str:
    agent = f"{entry.role.value} agent" if entry.role else "agent"
    return CONTEXT_ENTRY_TEMPLATE.format(
        agent=agent,
        description=entry.description,
        result=entry.result,
    )


def serialize_context(context: Sequence[ContextEntry]) -> str:
    """
    Render the context entries in order, or the no-context marker.

    Args:
        context: Completed sub-tasks' descriptions and results

    Returns:
        Text block for the prompt
    """
    if not context:
        return NO_PRIOR_CONTEXT
    return CONTEXT_SEPARATOR.join(_format_entry(entry) for entry in context)


def build_decompose_prompt(goal: str, role_tagged: bool = True) -> str:
    """
    Build the decomposition prompt.

    Args:
        goal: The user's goal
        role_tagged: Ask for {role, task} objects instead of bare strings

    Returns:
        Complete prompt string
    """
    goal = _require_text(goal, "goal")
    if role_tagged:
        return DECOMPOSE_ROLE_TAGGED_TEMPLATE.format(roles=AVAILABLE_ROLES_TEXT, goal=goal)
    return DECOMPOSE_PLAIN_TEMPLATE.format(goal=goal)


def build_execute_prompt(
    description: str,
    context: Sequence[ContextEntry],
    role: Optional[AgentRole] = None,
) -> str:
    """
    Build the prompt that executes one sub-task.

    Args:
        description: The sub-task's instruction
        context: Results of previously completed sub-tasks, in order
        role: Optional persona the agent should adopt

    Returns:
        Complete prompt string
    """
    description = _require_text(description, "sub-task description")
    persona = PERSONA_TEMPLATE.format(role=role.value) if role else ""
    return EXECUTE_TEMPLATE.format(
        persona=persona,
        context=serialize_context(context),
        task=description,
    )


def build_summarize_prompt(goal: str, context: Sequence[ContextEntry]) -> str:
    """
    Build the final report prompt.

    Args:
        goal: The user's original goal
        context: All completed sub-tasks' descriptions and results, in order

    Returns:
        Complete prompt string
    """
    goal = _require_text(goal, "goal")
    if not context:
        raise ValueError("summarization requires at least one completed sub-task")
    return SUMMARIZE_TEMPLATE.format(goal=goal, results=serialize_context(context))


def build_prompt(stage: Stage, **inputs) -> str:
    """
    Dispatch to the builder for a stage.

    Args:
        stage: Stage (or its value: "decompose", "execute", "summarize")
        **inputs: Keyword arguments of the stage's builder

    Returns:
        Complete prompt string
    """
    try:
        stage = Stage(stage)
    except ValueError:
        raise ValueError(f"Unknown stage: {stage!r}") from None

    builders = {
        Stage.DECOMPOSE: build_decompose_prompt,
        Stage.EXECUTE: build_execute_prompt,
        Stage.SUMMARIZE: build_summarize_prompt,
    }
    return builders[stage](**inputs)
