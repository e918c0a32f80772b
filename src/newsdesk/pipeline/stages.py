"""Pipeline stages over the external collaborators.

Each method is one stage. Failures propagate to the orchestrator, which wraps
them in the stage's error type, except for script review and brand overlay:
those degrade (original script, unbranded video) instead of failing the run.
"""

from newsdesk.core.constants import DEFAULT_URGENCY_THRESHOLD
from newsdesk.core.logging import get_logger
from newsdesk.detection.assessment import assess_urgency
from newsdesk.detection.models import UrgencyAssessment
from newsdesk.detection.urgency_scorer import UrgencyScorer
from newsdesk.providers.base import Collaborators, Script, ScriptReview, UploadResult, VideoAsset
from newsdesk.research.aggregator import gather_research
from newsdesk.research.models import MarketResearch
from newsdesk.scheduling.calendar import ScheduleCatalog
from newsdesk.scheduling.decision import decide
from newsdesk.scheduling.models import Decision, ManualOverride

logger = get_logger(__name__)

# Quality score given to a script approved without review
UNREVIEWED_QUALITY_SCORE = 7.0


class PipelineStages:
    """Binds collaborators and decision settings to the stage functions."""

    def __init__(
        self,
        collaborators: Collaborators,
        threshold: float = DEFAULT_URGENCY_THRESHOLD,
        catalog: ScheduleCatalog | None = None,
        manual_override: ManualOverride | None = None,
    ) -> None:
        self.collaborators = collaborators
        self.threshold = threshold
        self.catalog = catalog or ScheduleCatalog()
        self.manual_override = manual_override
        self.scorer = UrgencyScorer(threshold=threshold)

    async def research(self) -> MarketResearch:
        return await gather_research(
            self.collaborators.research, market_data=self.collaborators.market_data
        )

    async def detect_events(self, research: MarketResearch | None) -> UrgencyAssessment:
        return assess_urgency(research, threshold=self.threshold, scorer=self.scorer)

    async def decide_topic(
        self,
        urgency: UrgencyAssessment | None,
        research: MarketResearch | None,
    ) -> Decision:
        return decide(urgency, research, self.catalog, manual_override=self.manual_override)

    async def generate_script(self, decision: Decision, research: MarketResearch) -> Script:
        script = await self.collaborators.writer.generate(decision, research)
        logger.info(
            "Script generated",
            words=script.word_count or len(script.text.split()),
            estimated_duration=script.estimated_duration,
        )
        return script

    async def review_script(self, script: Script) -> ScriptReview:
        """Review the script; a failed review approves the original."""
        try:
            review = await self.collaborators.reviewer.review(script)
        except Exception as e:
            logger.warning(
                "Script review failed, proceeding with original script",
                error=str(e),
                error_type=type(e).__name__,
            )
            return ScriptReview(
                approved=True,
                original_script=script.text,
                corrected_script=script.text,
                quality_score=UNREVIEWED_QUALITY_SCORE,
                review_error=str(e) or type(e).__name__,
            )

        logger.info(
            "Script reviewed",
            approved=review.approved,
            issues=len(review.issues),
            quality_score=review.quality_score,
        )
        return review

    async def produce_video(self, review: ScriptReview, decision: Decision) -> VideoAsset:
        """Render the reviewed (corrected) script."""
        video = await self.collaborators.renderer.render(review.corrected_script, decision)
        logger.info("Video rendered", video_path=video.video_path, render_id=video.render_id)
        return video

    async def apply_branding(self, video: VideoAsset) -> VideoAsset:
        """Brand the video; on failure continue with the unbranded file."""
        try:
            branded_path = await self.collaborators.brander.apply_branding(video)
        except Exception as e:
            logger.warning(
                "Brand overlay failed, proceeding with original video",
                error=str(e),
                error_type=type(e).__name__,
            )
            return video.model_copy(
                update={
                    "branded_video_path": video.video_path,
                    "branding_error": str(e) or type(e).__name__,
                }
            )

        logger.info("Brand overlay applied", branded_video_path=branded_path)
        return video.model_copy(update={"branded_video_path": branded_path})

    async def upload(self, video: VideoAsset, decision: Decision, script: Script) -> UploadResult:
        result = await self.collaborators.uploader.upload(video, decision, script)
        logger.info("Video uploaded", video_id=result.video_id, url=result.url)
        return result
