"""
FastAPI endpoints for the orchestrator.

Provides the API to start a run for a goal, poll its snapshot, and reset
or discard it. Each session owns one orchestrator.
"""

import logging
import uuid
from typing import Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator

from taskforce.orchestration.graph.config import OrchestratorConfig
from taskforce.orchestration.orchestrator import TaskOrchestrator
from taskforce.shared.contracts.run_snapshot import RunSnapshot
from taskforce.shared.errors import InvalidTransition
from taskforce.shared.llm.client import CompletionClient, OpenAICompletionClient
from taskforce.shared.logging.debug_logger import remove_logger


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/runs", tags=["runs"])

# In-memory session storage (runs are not persisted)
_sessions: Dict[str, TaskOrchestrator] = {}

_config: Optional[OrchestratorConfig] = None


# ============================================================================
# Dependencies
# ============================================================================


def get_orchestrator_config() -> OrchestratorConfig:
    """Get or create the shared configuration (read from the environment once)."""
    global _config
    if _config is None:
        _config = OrchestratorConfig.from_env()
    return _config


def get_completion_client(
    config: OrchestratorConfig = Depends(get_orchestrator_config),
) -> CompletionClient:
    """Completion client for new sessions."""
    return OpenAICompletionClient(model=config.model, timeout=config.llm_timeout)


def _get_session(session_id: str) -> TaskOrchestrator:
    orchestrator = _sessions.get(session_id)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return orchestrator


# ============================================================================
# Request/Response Models
# ============================================================================


class StartRunRequest(BaseModel):
    """Request to start a run."""

    goal: str = Field(min_length=1, description="The goal to decompose and execute")

    @field_validator("goal")
    @classmethod
    def goal_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("goal must not be blank")
        return value.strip()


class RunResponse(BaseModel):
    """Session identifier plus the current run snapshot."""

    session_id: str = Field(description="Session identifier")
    snapshot: RunSnapshot = Field(description="Current run state")


# ============================================================================
# Endpoints
# ============================================================================


@router.post("", response_model=RunResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_run(
    request: StartRunRequest,
    background_tasks: BackgroundTasks,
    client: CompletionClient = Depends(get_completion_client),
    config: OrchestratorConfig = Depends(get_orchestrator_config),
) -> RunResponse:
    """
    Create a session and start a run for the goal.

    The returned snapshot is already decomposing; the run proceeds in the
    background. Poll GET /api/runs/{session_id}.
    """
    session_id = str(uuid.uuid4())
    orchestrator = TaskOrchestrator(client, config)
    _sessions[session_id] = orchestrator

    logger.info(f"[session={session_id}] [api=create_run] Session created | goal_chars={len(request.goal)}")
    orchestrator.begin(request.goal)
    background_tasks.add_task(orchestrator.run)

    return RunResponse(session_id=session_id, snapshot=orchestrator.snapshot)


@router.get("/{session_id}", response_model=RunResponse)
async def get_run(session_id: str) -> RunResponse:
    """Return the current snapshot of a session's run."""
    orchestrator = _get_session(session_id)
    return RunResponse(session_id=session_id, snapshot=orchestrator.snapshot)


@router.post("/{session_id}/start", response_model=RunResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_run(
    session_id: str,
    request: StartRunRequest,
    background_tasks: BackgroundTasks,
) -> RunResponse:
    """
    Start a fresh run in an idle session.

    Ignored (current snapshot returned) if the session is not idle.
    """
    orchestrator = _get_session(session_id)
    if orchestrator.begin(request.goal):
        background_tasks.add_task(orchestrator.run)
    else:
        logger.info(
            f"[session={session_id}] [api=start_run] Start ignored | "
            f"stage={orchestrator.stage.value}"
        )
    return RunResponse(session_id=session_id, snapshot=orchestrator.snapshot)


@router.post("/{session_id}/reset", response_model=RunResponse)
async def reset_run(session_id: str) -> RunResponse:
    """Discard a finished run and return the session to idle."""
    orchestrator = _get_session(session_id)
    try:
        snapshot = orchestrator.reset()
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return RunResponse(session_id=session_id, snapshot=snapshot)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_run(session_id: str) -> Response:
    """Forget a session and release its run trace."""
    orchestrator = _get_session(session_id)
    _sessions.pop(session_id, None)
    if orchestrator.snapshot.run_id is not None:
        remove_logger(orchestrator.snapshot.run_id)
    logger.info(f"[session={session_id}] [api=delete_run] Session removed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
