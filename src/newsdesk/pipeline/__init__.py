"""Pipeline orchestration: stages, state, retries and metrics."""

from newsdesk.pipeline.errors import ErrorHandler, RetryDecision
from newsdesk.pipeline.metrics import MetricsSnapshot, MetricsTracker
from newsdesk.pipeline.orchestrator import PipelineOrchestrator, RunResult
from newsdesk.pipeline.stages import PipelineStages
from newsdesk.pipeline.state import (
    PipelineRun,
    RecoveryInfo,
    RunStatus,
    StateManager,
    StepRecord,
    StepStatus,
)

__all__ = [
    "ErrorHandler",
    "MetricsSnapshot",
    "MetricsTracker",
    "PipelineOrchestrator",
    "PipelineRun",
    "PipelineStages",
    "RecoveryInfo",
    "RetryDecision",
    "RunResult",
    "RunStatus",
    "StateManager",
    "StepRecord",
    "StepStatus",
]
