"""Collaborator protocols for the production pipeline.

The pipeline core never talks to a vendor API directly. Research, script
writing, review, rendering, branding and upload are provided by objects that
implement these protocols, so the vendors (Perplexity, Azure OpenAI,
Synthesia, ffmpeg, YouTube) can be swapped without touching the orchestrator.

Collaborators may raise anything. Raising a
``newsdesk.core.exceptions.CollaboratorError`` with ``retryable`` set tells the
error handler whether the failure is worth retrying.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from newsdesk.research.models import ResearchAnswer

if TYPE_CHECKING:
    from newsdesk.research.models import MarketContext, MarketResearch
    from newsdesk.scheduling.models import Decision


# =============================================================================
# Collaborator outputs
# =============================================================================


class Script(BaseModel):
    """A generated video script."""

    text: str
    title: str | None = None
    word_count: int = 0
    estimated_duration: int = 0  # seconds
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ScriptReview(BaseModel):
    """Review verdict for a script."""

    approved: bool
    original_script: str
    corrected_script: str
    issues: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    quality_score: float = 0.0
    review_error: str | None = None

    @property
    def final_word_count(self) -> int:
        return len(self.corrected_script.split())


class VideoAsset(BaseModel):
    """A rendered (and possibly branded) video."""

    video_path: str
    render_id: str | None = None
    duration: float | None = None
    branded_video_path: str | None = None
    branding_error: str | None = None

    @property
    def final_path(self) -> str:
        return self.branded_video_path or self.video_path


class UploadResult(BaseModel):
    video_id: str
    url: str
    title: str | None = None


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class ResearchProvider(Protocol):
    """Answers a single market research query."""

    async def query(self, prompt: str) -> ResearchAnswer: ...


@runtime_checkable
class MarketDataProvider(Protocol):
    """Supplies live price/volume context for urgency scoring.

    Optional: without one, research is scored on its text alone.
    """

    async def get_context(self) -> MarketContext: ...


@runtime_checkable
class ScriptWriter(Protocol):
    """Writes a script for a content decision."""

    async def generate(self, decision: Decision, research: MarketResearch) -> Script: ...


@runtime_checkable
class ScriptReviewer(Protocol):
    """Reviews a script and returns a corrected version when needed."""

    async def review(self, script: Script) -> ScriptReview: ...


@runtime_checkable
class VideoRenderer(Protocol):
    """Renders the avatar video for a script.

    Implementations are expected to enforce their own render timeout; the
    pipeline waits for as long as the call takes.
    """

    async def render(self, script_text: str, decision: Decision) -> VideoAsset: ...


@runtime_checkable
class VideoBrander(Protocol):
    """Applies logo/watermark overlays and returns the branded file path."""

    async def apply_branding(self, video: VideoAsset) -> str: ...


@runtime_checkable
class Uploader(Protocol):
    """Publishes the final video."""

    async def upload(self, video: VideoAsset, decision: Decision, script: Script) -> UploadResult: ...


@dataclass
class Collaborators:
    """Everything the pipeline needs from the outside world."""

    research: ResearchProvider
    writer: ScriptWriter
    reviewer: ScriptReviewer
    renderer: VideoRenderer
    brander: VideoBrander
    uploader: Uploader
    market_data: MarketDataProvider | None = None
