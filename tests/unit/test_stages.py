"""Tests for the individual pipeline stages."""

from unittest.mock import AsyncMock

import pytest

from newsdesk.core.exceptions import EventDetectionError
from newsdesk.pipeline.stages import PipelineStages
from newsdesk.providers.base import Collaborators, Script, ScriptReview, VideoAsset
from newsdesk.research.models import MarketResearch, ResearchAnswer
from newsdesk.scheduling.models import ContentType, ManualOverride


@pytest.fixture
def stages(collaborators: Collaborators) -> PipelineStages:
    return PipelineStages(collaborators, threshold=3)


class TestStages:
    async def test_research(self, stages: PipelineStages) -> None:
        research = await stages.research()

        assert len(research.answers) == 4
        assert research.forex is not None
        assert research.forex.answer == "Markets were quiet"

    async def test_detect_events_uses_threshold(self, stages: PipelineStages) -> None:
        research = MarketResearch(
            forex=ResearchAnswer(query="f", answer="EUR/USD moved 8% this week")
        )

        urgency = await stages.detect_events(research)

        assert urgency.threshold == 3
        assert urgency.is_urgent is True

    async def test_detect_events_without_research(self, stages: PipelineStages) -> None:
        with pytest.raises(EventDetectionError):
            await stages.detect_events(None)

    async def test_decide_topic_with_override(self, collaborators: Collaborators) -> None:
        stages = PipelineStages(
            collaborators,
            manual_override=ManualOverride(topic="Gold basics", content_type=ContentType.educational),
        )

        decision = await stages.decide_topic(None, None)

        assert decision.topic.title == "Gold basics"
        assert decision.content_type == ContentType.educational

    async def test_review_failure_approves_original(
        self, stages: PipelineStages, collaborators: Collaborators
    ) -> None:
        collaborators.reviewer.review = AsyncMock(side_effect=TimeoutError())

        review = await stages.review_script(Script(text="one two three"))

        assert review.approved is True
        assert review.corrected_script == "one two three"
        assert review.original_script == "one two three"
        assert review.quality_score == 7.0
        assert review.review_error == "TimeoutError"
        assert review.final_word_count == 3

    async def test_review_passthrough(self, stages: PipelineStages) -> None:
        review = await stages.review_script(Script(text="original script text"))

        assert review.corrected_script == "corrected script text"
        assert review.quality_score == 8.5

    async def test_produce_video_renders_corrected_script(
        self, stages: PipelineStages, collaborators: Collaborators
    ) -> None:
        review = ScriptReview(approved=False, original_script="a", corrected_script="b")
        decision = await PipelineStages(
            collaborators, manual_override=ManualOverride(topic="t")
        ).decide_topic(None, None)

        video = await stages.produce_video(review, decision)

        assert video.video_path == "/tmp/video.mp4"
        collaborators.renderer.render.assert_awaited_once_with("b", decision)

    async def test_branding(self, stages: PipelineStages) -> None:
        video = await stages.apply_branding(VideoAsset(video_path="/tmp/raw.mp4"))

        assert video.branded_video_path == "/tmp/video_branded.mp4"
        assert video.final_path == "/tmp/video_branded.mp4"
        assert video.branding_error is None

    async def test_branding_failure_keeps_original(
        self, stages: PipelineStages, collaborators: Collaborators
    ) -> None:
        collaborators.brander.apply_branding = AsyncMock(side_effect=OSError("ffmpeg not found"))
        original = VideoAsset(video_path="/tmp/raw.mp4")

        video = await stages.apply_branding(original)

        assert video.branded_video_path == "/tmp/raw.mp4"
        assert video.branding_error == "ffmpeg not found"
        assert original.branded_video_path is None

    async def test_upload_errors_propagate(
        self, stages: PipelineStages, collaborators: Collaborators
    ) -> None:
        collaborators.uploader.upload = AsyncMock(side_effect=RuntimeError("quota exceeded"))

        with pytest.raises(RuntimeError, match="quota exceeded"):
            await stages.upload(VideoAsset(video_path="/tmp/v.mp4"), AsyncMock(), Script(text="x"))
