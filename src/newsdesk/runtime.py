"""Long-running service resources: orchestrator plus publish-slot scheduler."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from newsdesk.core.logging import get_logger
from newsdesk.pipeline.orchestrator import PipelineOrchestrator
from newsdesk.scheduler import create_scheduler, register_publish_jobs
from newsdesk.scheduling.calendar import ScheduleCatalog

if TYPE_CHECKING:
    from apscheduler.schedulers.asyncio import AsyncIOScheduler

    from newsdesk.config import Settings

logger = get_logger(__name__)


@dataclass
class AppState:
    """Holds references to the running service resources."""

    settings: Settings
    orchestrator: PipelineOrchestrator
    catalog: ScheduleCatalog
    scheduler: AsyncIOScheduler | None = None
    publish_job_ids: list[str] = field(default_factory=list)


@asynccontextmanager
async def app_lifespan(
    settings: Settings,
    orchestrator: PipelineOrchestrator | None = None,
) -> AsyncIterator[AppState]:
    """Build the orchestrator and start the scheduler for the app's lifetime.

    The scheduler always runs so manual triggers can be queued on it; publish
    slot jobs are only registered when ``SCHEDULER_ENABLED`` is set.
    """
    catalog = ScheduleCatalog(timezone=settings.schedule_timezone)
    if orchestrator is None:
        orchestrator = PipelineOrchestrator.from_settings(settings, catalog=catalog)

    scheduler = create_scheduler(settings.schedule_timezone)
    job_ids: list[str] = []
    if settings.scheduler_enabled:
        job_ids = register_publish_jobs(scheduler, orchestrator, catalog)
    scheduler.start()

    if orchestrator.can_recover():
        info = orchestrator.get_recovery_info()
        logger.warning(
            "Interrupted pipeline run found; use resume to start over",
            run_id=info.run_id if info else None,
            current_step=info.current_step if info else None,
        )

    logger.info(
        "Service ready",
        env=settings.env,
        scheduler_enabled=settings.scheduler_enabled,
        publish_jobs=len(job_ids),
        urgency_threshold=settings.urgency_threshold,
    )

    try:
        yield AppState(
            settings=settings,
            orchestrator=orchestrator,
            catalog=catalog,
            scheduler=scheduler,
            publish_job_ids=job_ids,
        )
    finally:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
