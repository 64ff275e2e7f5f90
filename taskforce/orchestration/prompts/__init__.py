"""Prompt templates and builders for the orchestration stages."""

from taskforce.orchestration.prompts.builders import (
    build_decompose_prompt,
    build_execute_prompt,
    build_prompt,
    build_summarize_prompt,
    serialize_context,
)

__all__ = [
    "build_decompose_prompt",
    "build_execute_prompt",
    "build_prompt",
    "build_summarize_prompt",
    "serialize_context",
]
