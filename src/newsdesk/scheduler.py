"""Publish-slot scheduler: runs the pipeline at each weekly publish slot."""

from __future__ import annotations

from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from newsdesk.core.constants import DEFAULT_SCHEDULE_TIMEZONE
from newsdesk.core.logging import get_logger

if TYPE_CHECKING:
    from newsdesk.pipeline.orchestrator import PipelineOrchestrator
    from newsdesk.scheduling.calendar import ScheduleCatalog

logger = get_logger(__name__)

MANUAL_RUN_JOB_ID = "pipeline_manual"


def create_scheduler(timezone: str = DEFAULT_SCHEDULE_TIMEZONE) -> AsyncIOScheduler:
    """Create a new scheduler instance."""
    return AsyncIOScheduler(timezone=timezone)


async def pipeline_job(orchestrator: PipelineOrchestrator) -> None:
    """Run the pipeline once, skipping if a run is already in progress."""
    if orchestrator.is_running:
        logger.warning("Pipeline already running, skipping scheduled run")
        return

    try:
        result = await orchestrator.run()
        if result.success:
            logger.info(
                "Scheduled pipeline run completed",
                run_id=result.run_id,
                content_type=result.content_type,
                youtube_url=result.youtube_url,
            )
        else:
            logger.error(
                "Scheduled pipeline run failed",
                run_id=result.run_id,
                stage=result.stage,
                error=result.error,
            )
    except Exception:
        logger.exception("Pipeline job failed")


def register_publish_jobs(
    scheduler: AsyncIOScheduler,
    orchestrator: PipelineOrchestrator,
    catalog: ScheduleCatalog,
) -> list[str]:
    """Add one cron job per weekly publish slot. Returns the job ids."""
    job_ids = []
    for slot in catalog.publish_slots:
        job_id = f"publish_{slot.day.cron}_{slot.hour:02d}{slot.minute:02d}"
        scheduler.add_job(
            pipeline_job,
            CronTrigger(
                day_of_week=slot.day.cron,
                hour=slot.hour,
                minute=slot.minute,
                timezone=catalog.timezone,
            ),
            args=[orchestrator],
            id=job_id,
            max_instances=1,
            misfire_grace_time=None,
            replace_existing=True,
        )
        job_ids.append(job_id)

    logger.info("Publish jobs registered", jobs=len(job_ids), timezone=catalog.timezone)
    return job_ids
