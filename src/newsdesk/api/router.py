"""Top-level API router, mounted under /api/v1."""

from fastapi import APIRouter

from newsdesk.api.routes import pipeline

api_router = APIRouter()
api_router.include_router(pipeline.router, prefix="/pipeline", tags=["pipeline"])
