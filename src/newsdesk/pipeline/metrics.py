"""In-memory timing and success metrics for pipeline runs and stages."""

import time
from collections.abc import Callable

from pydantic import BaseModel, Field

from newsdesk.core.logging import get_logger

logger = get_logger(__name__)


class StageRun(BaseModel):
    """One stage within the current run."""

    start_time: float
    end_time: float | None = None
    duration: float | None = None  # seconds
    success: bool = False
    error: str | None = None


class RunMetrics(BaseModel):
    """The run currently being tracked."""

    id: str
    start_time: float
    end_time: float | None = None
    duration: float | None = None  # seconds
    stages: dict[str, StageRun] = Field(default_factory=dict)
    success: bool = False


class StageAggregate(BaseModel):
    """Rolling totals for one stage across runs."""

    total_runs: int = 0
    successful_runs: int = 0
    failed_runs: int = 0
    total_duration: float = 0.0
    average_duration: float = 0.0


class MetricsSnapshot(BaseModel):
    pipeline_runs: int
    successful_runs: int
    failed_runs: int
    total_duration: float
    average_duration: float
    stages: dict[str, StageAggregate]
    success_rate: str  # "NN.NN%"
    average_duration_seconds: str


class MetricsTracker:
    """Tracks at most one active run and its stages.

    Args:
        clock: Monotonic seconds source, swappable in tests
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        self.pipeline_runs = 0
        self.successful_runs = 0
        self.failed_runs = 0
        self.total_duration = 0.0
        self.stages: dict[str, StageAggregate] = {}
        self.current_run: RunMetrics | None = None

    def start_run(self, run_id: str | None = None) -> RunMetrics:
        now = self._clock()
        self.current_run = RunMetrics(id=run_id or f"run_{int(time.time() * 1000)}", start_time=now)
        self.pipeline_runs += 1
        logger.debug("Metrics run started", run_id=self.current_run.id)
        return self.current_run

    def start_stage(self, stage: str) -> None:
        if self.current_run is None:
            logger.warning("No active run to track stage", stage=stage)
            return
        self.current_run.stages[stage] = StageRun(start_time=self._clock())

    def end_stage(self, stage: str, success: bool = True, error: str | None = None) -> None:
        if self.current_run is None or stage not in self.current_run.stages:
            logger.warning("No active stage to end", stage=stage)
            return

        stage_run = self.current_run.stages[stage]
        stage_run.end_time = self._clock()
        stage_run.duration = stage_run.end_time - stage_run.start_time
        stage_run.success = success
        stage_run.error = error

        aggregate = self.stages.setdefault(stage, StageAggregate())
        aggregate.total_runs += 1
        aggregate.total_duration += stage_run.duration
        aggregate.average_duration = aggregate.total_duration / aggregate.total_runs
        if success:
            aggregate.successful_runs += 1
        else:
            aggregate.failed_runs += 1

        logger.debug(
            "Metrics stage ended",
            stage=stage,
            duration=f"{stage_run.duration:.2f}s",
            success=success,
        )

    def end_run(self, success: bool = True) -> RunMetrics | None:
        """Close the current run and return its record."""
        if self.current_run is None:
            logger.warning("No active run to end")
            return None

        run = self.current_run
        run.end_time = self._clock()
        run.duration = run.end_time - run.start_time
        run.success = success

        self.total_duration += run.duration
        if success:
            self.successful_runs += 1
        else:
            self.failed_runs += 1

        logger.info(
            "Run metrics",
            run_id=run.id,
            duration=f"{run.duration:.2f}s",
            success=success,
            stages=len(run.stages),
        )
        self.current_run = None
        return run

    @property
    def average_duration(self) -> float:
        return self.total_duration / self.pipeline_runs if self.pipeline_runs else 0.0

    def get_stage_metrics(self, stage: str) -> StageAggregate | None:
        return self.stages.get(stage)

    def get_metrics(self) -> MetricsSnapshot:
        rate = self.successful_runs / self.pipeline_runs * 100 if self.pipeline_runs else 0.0
        return MetricsSnapshot(
            pipeline_runs=self.pipeline_runs,
            successful_runs=self.successful_runs,
            failed_runs=self.failed_runs,
            total_duration=self.total_duration,
            average_duration=self.average_duration,
            stages={name: agg.model_copy() for name, agg in self.stages.items()},
            success_rate=f"{rate:.2f}%",
            average_duration_seconds=f"{self.average_duration:.2f}",
        )
