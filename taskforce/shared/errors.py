"""
Error taxonomy for the orchestration pipeline.

Every failure that can end a run is one of these types, so stages can
catch them without masking programming errors.
"""

from enum import Enum


class TaskforceError(Exception):
    """Base class for all taskforce errors."""

    pass


class ConfigurationError(TaskforceError):
    """Raised when required configuration (e.g. the API key) is missing."""

    pass


class ServiceError(TaskforceError):
    """Raised when the completion service rejects, times out, or returns no text."""

    pass


class ParseFailureReason(str, Enum):
    """Why a response could not be turned into the expected value."""

    EMPTY_RESPONSE = "empty_response"
    INVALID_JSON = "invalid_json"
    WRONG_SHAPE = "wrong_shape"
    EMPTY_PLAN = "empty_plan"


class ParseFailure(TaskforceError):
    """
    Raised when structured output cannot be obtained from a response.

    Attributes:
        reason: Machine-readable failure reason
        raw: The unmodified response text
    """

    def __init__(self, message: str, reason: ParseFailureReason, raw: str):
        super().__init__(message)
        self.reason = reason
        self.raw = raw


class InvalidTransition(TaskforceError, ValueError):
    """Raised when a sub-task or run is asked to move backwards."""

    pass
