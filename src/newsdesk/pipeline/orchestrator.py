"""Pipeline orchestrator.

Runs the eight production stages in order:

    research -> event-detection -> topic-decision -> script-generation
    -> script-review -> video-production -> brand-overlay -> upload

Every stage goes through ``execute_step``, which records history, times the
stage and retries it under the error handler's verdict. The first stage that
gives up ends the run; ``run()`` turns that into a failed RunResult instead
of raising.

Resume is not true resume: an interrupted run is reported and a fresh run
is started from the first stage.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

from newsdesk.core.exceptions import NoRecoverableStateError, wrap_stage_error
from newsdesk.core.logging import bind_run_context, clear_run_context, get_logger
from newsdesk.pipeline.errors import ErrorHandler
from newsdesk.pipeline.metrics import MetricsSnapshot, MetricsTracker
from newsdesk.pipeline.stages import PipelineStages
from newsdesk.pipeline.state import RecoveryInfo, StateManager
from newsdesk.scheduling.models import ManualOverride

if TYPE_CHECKING:
    from newsdesk.config import Settings
    from newsdesk.providers.base import Collaborators
    from newsdesk.scheduling.calendar import ScheduleCatalog

logger = get_logger(__name__)

T = TypeVar("T")


class RunResult(BaseModel):
    """Outcome of one pipeline run. Failed runs carry ``error`` and ``stage``."""

    success: bool
    run_id: str
    youtube_url: str | None = None
    video_id: str | None = None
    content_type: str | None = None
    topic: str | None = None
    duration: float | None = None  # seconds
    error: str | None = None
    stage: str | None = None
    metrics: MetricsSnapshot


class PipelineOrchestrator:
    """Sequences the production stages with persisted state and retries."""

    def __init__(
        self,
        stages: PipelineStages,
        state: StateManager,
        error_handler: ErrorHandler | None = None,
        metrics: MetricsTracker | None = None,
    ) -> None:
        self.stages = stages
        self.state = state
        self.error_handler = error_handler or ErrorHandler()
        self.metrics = metrics or MetricsTracker()
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        collaborators: Collaborators | None = None,
        catalog: ScheduleCatalog | None = None,
    ) -> PipelineOrchestrator:
        """Build an orchestrator from settings.

        Collaborators are loaded from ``settings.collaborators`` unless given.
        """
        if collaborators is None:
            from newsdesk.providers.factory import load_collaborators

            collaborators = load_collaborators(settings)

        manual_override = None
        if settings.override_topic:
            manual_override = ManualOverride(
                topic=settings.override_topic,
                content_type=settings.override_content_type,
            )

        stages = PipelineStages(
            collaborators,
            threshold=settings.urgency_threshold,
            catalog=catalog,
            manual_override=manual_override,
        )
        error_handler = ErrorHandler(
            max_retries=settings.max_retries,
            retry_delay_ms=settings.retry_delay_ms,
            max_retry_delay_ms=settings.max_retry_delay_ms,
        )
        return cls(stages, StateManager(settings.state_file_path), error_handler)

    @property
    def max_retries(self) -> int:
        return self.error_handler.max_retries

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def execute_step(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run one stage with history, metrics and bounded retries.

        Raises:
            PipelineError: The stage's error once retries are exhausted or the
                error is not retryable
        """
        self.metrics.start_stage(name)
        max_attempts = self.max_retries + 1
        attempt = 1

        while True:
            self.state.set_step(name, attempt=attempt)
            try:
                result = await fn()
            except Exception as e:
                error = wrap_stage_error(name, e)
                logger.warning(
                    "Stage attempt failed",
                    stage=name,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=error.message,
                )
                verdict = await self.error_handler.handle_error(error, name, attempt)
                if verdict.retry and attempt < max_attempts:
                    attempt += 1
                    continue

                self.state.complete_step(name, success=False, error=error, attempt=attempt)
                self.metrics.end_stage(name, success=False, error=error.message)
                if error is e:
                    raise
                raise error from e

            self.state.complete_step(name, success=True, attempt=attempt)
            self.metrics.end_stage(name, success=True)
            return result

    async def run(self) -> RunResult:
        """Run every stage once.

        Never raises: stage errors and state persistence errors both end up
        in a failed RunResult.
        """
        async with self._lock:
            self.error_handler.reset()
            run_id: str | None = None
            try:
                run_id = self.state.init_run()
                bind_run_context(run_id)
                self.metrics.start_run(run_id)
                logger.info("Pipeline started")
                return await self._run_stages(run_id)
            except Exception as e:
                if run_id is None:
                    # init_run assigns the id before its first save
                    run_id = self.state.state.run_id or "unknown"
                    bind_run_context(run_id)
                    self.metrics.start_run(run_id)
                return self._fail_run(run_id, e)
            finally:
                clear_run_context()

    def _fail_run(self, run_id: str, error: Exception) -> RunResult:
        stage = getattr(error, "stage", None) or self.state.state.current_step or "unknown"
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        logger.error("Pipeline failed", stage=stage, error=message)

        try:
            self.state.complete(success=False, error=error)
        except Exception:
            logger.exception("Failed to persist failed run state", stage=stage)

        self.metrics.end_run(success=False)
        return RunResult(
            success=False,
            run_id=run_id,
            error=message,
            stage=stage,
            metrics=self.metrics.get_metrics(),
        )

    async def _run_stages(self, run_id: str) -> RunResult:
        stages = self.stages

        research = await self.execute_step("research", stages.research)
        self.state.set("market_data", research)

        urgency = await self.execute_step(
            "event-detection", lambda: stages.detect_events(research)
        )
        self.state.set("urgency_data", urgency)

        decision = await self.execute_step(
            "topic-decision", lambda: stages.decide_topic(urgency, research)
        )
        self.state.set("topic_data", decision)

        script = await self.execute_step(
            "script-generation", lambda: stages.generate_script(decision, research)
        )
        self.state.set("script_data", script)

        review = await self.execute_step("script-review", lambda: stages.review_script(script))
        self.state.set("review_data", review)
        if not review.approved:
            logger.warning("Script not approved after review, using corrected version")

        video = await self.execute_step(
            "video-production", lambda: stages.produce_video(review, decision)
        )
        self.state.set("video_data", video)

        branded = await self.execute_step("brand-overlay", lambda: stages.apply_branding(video))
        self.state.set("branded_video", branded)

        final_script = script.model_copy(
            update={
                "text": review.corrected_script,
                "word_count": review.final_word_count,
            }
        )
        upload = await self.execute_step(
            "upload", lambda: stages.upload(branded, decision, final_script)
        )
        self.state.set("upload_result", upload)

        self.state.complete(success=True)
        run = self.metrics.end_run(success=True)
        logger.info("Pipeline completed", youtube_url=upload.url, video_id=upload.video_id)

        return RunResult(
            success=True,
            run_id=run_id,
            youtube_url=upload.url,
            video_id=upload.video_id,
            content_type=decision.content_type.value,
            topic=decision.topic.title,
            duration=run.duration if run else None,
            metrics=self.metrics.get_metrics(),
        )

    def can_recover(self) -> bool:
        return self.state.can_recover()

    def get_recovery_info(self) -> RecoveryInfo | None:
        return self.state.get_recovery_info()

    async def resume(self) -> RunResult:
        """Report the interrupted run and start over from the first stage.

        Raises:
            NoRecoverableStateError: If the persisted run is not ``running``
        """
        if not self.can_recover():
            raise NoRecoverableStateError("No recoverable state found")

        info = self.get_recovery_info()
        if info is not None:
            logger.info(
                "Resuming interrupted run with a fresh run",
                previous_run_id=info.run_id,
                current_step=info.current_step,
                completed_steps=info.completed_steps,
            )
        return await self.run()
