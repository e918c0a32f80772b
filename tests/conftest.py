"""Pytest fixtures and configuration."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsdesk.providers.base import Collaborators, Script, ScriptReview, UploadResult, VideoAsset
from newsdesk.research.models import ResearchAnswer


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests by default unless -m integration is specified."""
    # Check if user explicitly requested integration tests
    markexpr = config.getoption("-m", default="")
    if "integration" in markexpr:
        # User wants integration tests, don't skip
        return

    # Skip integration tests by default
    skip_integration = pytest.mark.skip(reason="Integration test - run with: pytest -m integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio for async tests."""
    return "asyncio"


def _quiet_answer(prompt: str) -> ResearchAnswer:
    return ResearchAnswer(query=prompt, answer="Markets were quiet", citations=["https://example.com/a"])


@pytest.fixture
def collaborators() -> Collaborators:
    """Collaborators that succeed with calm research (educational decision)."""
    research: Any = MagicMock()
    research.query = AsyncMock(side_effect=_quiet_answer)

    writer: Any = MagicMock()
    writer.generate = AsyncMock(
        return_value=Script(text="original script text", title="Lesson", word_count=3)
    )

    reviewer: Any = MagicMock()
    reviewer.review = AsyncMock(
        return_value=ScriptReview(
            approved=True,
            original_script="original script text",
            corrected_script="corrected script text",
            quality_score=8.5,
        )
    )

    renderer: Any = MagicMock()
    renderer.render = AsyncMock(return_value=VideoAsset(video_path="/tmp/video.mp4", render_id="r1"))

    brander: Any = MagicMock()
    brander.apply_branding = AsyncMock(return_value="/tmp/video_branded.mp4")

    uploader: Any = MagicMock()
    uploader.upload = AsyncMock(
        return_value=UploadResult(video_id="abc123", url="https://youtu.be/abc123")
    )

    return Collaborators(
        research=research,
        writer=writer,
        reviewer=reviewer,
        renderer=renderer,
        brander=brander,
        uploader=uploader,
    )
