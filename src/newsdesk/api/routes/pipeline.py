"""Pipeline status, recovery, metrics and manual trigger endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException

from newsdesk.core.dependencies import AppStateDep, OrchestratorDep
from newsdesk.pipeline.metrics import MetricsSnapshot
from newsdesk.pipeline.state import RecoveryInfo, StateSummary
from newsdesk.scheduler import MANUAL_RUN_JOB_ID, pipeline_job

router = APIRouter()


@router.get("/status")
async def pipeline_status(orchestrator: OrchestratorDep) -> dict[str, Any]:
    summary: StateSummary = orchestrator.state.get_summary()
    return {
        "running": orchestrator.is_running,
        "run": summary.model_dump(mode="json"),
        "error_stats": orchestrator.error_handler.get_stats(),
    }


@router.get("/recovery")
async def pipeline_recovery(orchestrator: OrchestratorDep) -> dict[str, Any]:
    """Whether the persisted run was interrupted, and how far it got.

    While a run is in progress this reports the live run.
    """
    if orchestrator.is_running:
        info: RecoveryInfo | None = orchestrator.get_recovery_info()
        recoverable = False
    else:
        recoverable = orchestrator.can_recover()
        info = orchestrator.get_recovery_info() if recoverable else None
    return {
        "recoverable": recoverable,
        "info": info.model_dump(mode="json") if info else None,
    }


@router.get("/metrics", response_model=MetricsSnapshot)
async def pipeline_metrics(orchestrator: OrchestratorDep) -> MetricsSnapshot:
    return orchestrator.metrics.get_metrics()


@router.post("/run", status_code=202)
async def trigger_run(state: AppStateDep) -> dict[str, str]:
    """Queue a pipeline run on the scheduler.

    The run executes in the background; poll /status for progress.
    """
    if state.orchestrator.is_running:
        raise HTTPException(status_code=409, detail="A pipeline run is already in progress")
    if state.scheduler is None:
        raise HTTPException(status_code=503, detail="Scheduler not available")

    state.scheduler.add_job(
        pipeline_job,
        args=[state.orchestrator],
        id=MANUAL_RUN_JOB_ID,
        replace_existing=True,
    )
    return {"status": "run_triggered"}
