"""
FastAPI application entry point.

Assembles the FastAPI app with the orchestrator router and validates the
completion service credential at startup.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskforce.orchestration.orchestrator_api import router as runs_router
from taskforce.shared.llm.client import get_cached_client
from taskforce.shared.logging.config import setup_logging


# ============================================================================
# Logging configuration (single source of truth for the service)
# ============================================================================
LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-45s | %(message)s"
)

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,  # Override any prior basicConfig calls
)

# Quiet noisy third-party loggers
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)

# JSON Lines copy of the package logs, including state transitions
setup_logging(log_file=os.environ.get("TASKFORCE_LOG_FILE"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing credentials are fatal: raises ConfigurationError before serving
    get_cached_client()
    yield


app = FastAPI(
    title="Taskforce",
    description="Goal decomposition and sequential AI agent execution",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(runs_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Taskforce",
        "version": "0.1.0",
        "stages": ["decompose", "execute", "summarize"],
        "endpoints": "/api/runs",
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
