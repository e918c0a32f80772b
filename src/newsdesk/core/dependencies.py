"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from newsdesk.pipeline.orchestrator import PipelineOrchestrator
from newsdesk.runtime import AppState


async def get_app_state(request: Request) -> AppState:
    """Get AppState from app.state (set during lifespan)."""
    return request.app.state.newsdesk  # type: ignore[no-any-return]


async def get_orchestrator(state: Annotated[AppState, Depends(get_app_state)]) -> PipelineOrchestrator:
    return state.orchestrator


# Type aliases for cleaner dependency injection
AppStateDep = Annotated[AppState, Depends(get_app_state)]
OrchestratorDep = Annotated[PipelineOrchestrator, Depends(get_orchestrator)]
