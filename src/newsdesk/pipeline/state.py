"""Single-slot persisted pipeline run state.

One JSON document holds the live run: its status, the current step, the
append-only step history and the outputs stored by each stage. Every
mutation is written straight to disk (temp file + ``os.replace``) so a
crashed process leaves either the previous or the new document, never a
partial one.
"""

import os
import tempfile
import time
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, Field, ValidationError

from newsdesk.core.constants import DEFAULT_STATE_FILE_PATH
from newsdesk.core.exceptions import StateCorruptedError, StateError
from newsdesk.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Models
# =============================================================================


class RunStatus(str, Enum):
    idle = "idle"
    running = "running"
    completed = "completed"
    failed = "failed"


class StepStatus(str, Enum):
    started = "started"
    completed = "completed"
    failed = "failed"


class StepRecord(BaseModel):
    """One entry in the run history. Retries add further ``started`` records."""

    step: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    status: StepStatus
    error: str | None = None
    attempt: int | None = None


class RunError(BaseModel):
    message: str
    type: str
    stage: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PipelineRun(BaseModel):
    """The persisted state document."""

    run_id: str | None = None
    start_time: datetime | None = None
    current_step: str | None = None
    status: RunStatus = RunStatus.idle
    data: dict[str, Any] = Field(default_factory=dict)
    history: list[StepRecord] = Field(default_factory=list)
    end_time: datetime | None = None
    duration: float | None = None  # seconds
    error: RunError | None = None


class RecoveryInfo(BaseModel):
    """What an interrupted run got through before it stopped."""

    run_id: str | None
    current_step: str | None
    start_time: datetime | None
    completed_steps: list[str]
    failed_steps: list[str]


class StateSummary(BaseModel):
    run_id: str | None
    status: RunStatus
    current_step: str | None
    start_time: datetime | None
    end_time: datetime | None
    duration: float | None
    steps: int
    data_keys: list[str]


# =============================================================================
# Serialization
# =============================================================================


def _default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def to_jsonable(value: Any) -> Any:
    """Normalize a value to exactly what a reload of the document returns."""
    return orjson.loads(orjson.dumps(value, default=_default))


# =============================================================================
# State Manager
# =============================================================================


class StateManager:
    """Owns the live PipelineRun and its backing file."""

    def __init__(self, state_file_path: str | Path = DEFAULT_STATE_FILE_PATH) -> None:
        self.path = Path(state_file_path)
        self.state = PipelineRun()

    # -- lifecycle ------------------------------------------------------------

    def init_run(self, run_id: str | None = None) -> str:
        """Start a fresh run, overwriting whatever was persisted before."""
        self.state = PipelineRun(
            run_id=run_id or f"run_{int(time.time() * 1000)}",
            start_time=datetime.now(UTC),
            status=RunStatus.running,
        )
        self.save()
        logger.info("Pipeline run initialized", run_id=self.state.run_id)
        return self.state.run_id  # type: ignore[return-value]

    def set_step(self, step: str, attempt: int | None = None) -> None:
        """Make ``step`` current and append a ``started`` record."""
        self._require_running("set_step")
        self.state.current_step = step
        self.state.history.append(
            StepRecord(step=step, status=StepStatus.started, attempt=attempt)
        )
        self.save()
        logger.info("Pipeline step started", step=step, attempt=attempt)

    def complete_step(
        self,
        step: str,
        success: bool = True,
        error: BaseException | None = None,
        attempt: int | None = None,
    ) -> None:
        self._require_running("complete_step")
        self.state.history.append(
            StepRecord(
                step=step,
                status=StepStatus.completed if success else StepStatus.failed,
                error=_message(error) if error else None,
                attempt=attempt,
            )
        )
        self.save()
        if success:
            logger.info("Pipeline step completed", step=step)
        else:
            logger.warning("Pipeline step failed", step=step, error=_message(error))

    def complete(self, success: bool = True, error: BaseException | None = None) -> None:
        """Finish the run as completed or failed."""
        self._require_running("complete")
        now = datetime.now(UTC)
        self.state.status = RunStatus.completed if success else RunStatus.failed
        self.state.end_time = now
        if self.state.start_time is not None:
            self.state.duration = (now - self.state.start_time).total_seconds()
        if error is not None:
            self.state.error = RunError(
                message=_message(error),
                type=type(error).__name__,
                stage=getattr(error, "stage", None),
                timestamp=now,
            )
        self.save()
        logger.info(
            "Pipeline run finished",
            status=self.state.status.value,
            duration=f"{self.state.duration or 0:.2f}s",
        )

    # -- data -----------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """Store a stage output under ``key`` (kept in its JSON form)."""
        self._require_running("set")
        self.state.data[key] = to_jsonable(value)
        self.save()
        logger.debug("State updated", key=key)

    def get(self, key: str, default: Any = None) -> Any:
        return self.state.data.get(key, default)

    def get_all(self) -> dict[str, Any]:
        return dict(self.state.data)

    # -- persistence ----------------------------------------------------------

    def save(self) -> None:
        """Atomically write the document to the state file."""
        payload = orjson.dumps(
            self.state.model_dump(mode="json"),
            option=orjson.OPT_INDENT_2,
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)

        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(payload)
                temp_file.flush()
                os.fsync(temp_file.fileno())

            os.replace(temp_path, self.path)
            logger.debug("State saved", path=str(self.path))
        except OSError:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            logger.exception("Failed to save state", path=str(self.path))
            raise

    def load(self) -> PipelineRun | None:
        """Load the persisted document into memory.

        Returns:
            The loaded run, or None if there is no state file

        Raises:
            StateCorruptedError: If the file exists but is not a valid document
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("No state file found", path=str(self.path))
            return None

        try:
            state = PipelineRun.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            raise StateCorruptedError(f"Corrupted state file {self.path}: {e}") from e

        self.state = state
        logger.debug("State loaded", run_id=state.run_id, status=state.status.value)
        return state

    def can_recover(self) -> bool:
        """True when the persisted run was interrupted while running."""
        try:
            state = self.load()
        except StateError:
            logger.warning("State file unreadable, nothing to recover", exc_info=True)
            return False
        return state is not None and state.status == RunStatus.running

    def get_recovery_info(self) -> RecoveryInfo | None:
        """Completed/failed steps of the in-memory run, if it is still running."""
        if self.state.status != RunStatus.running:
            return None

        return RecoveryInfo(
            run_id=self.state.run_id,
            current_step=self.state.current_step,
            start_time=self.state.start_time,
            completed_steps=[
                h.step for h in self.state.history if h.status == StepStatus.completed
            ],
            failed_steps=[h.step for h in self.state.history if h.status == StepStatus.failed],
        )

    def clear(self) -> None:
        """Delete the state file. Memory is left as is."""
        try:
            self.path.unlink()
            logger.info("State file cleared", path=str(self.path))
        except FileNotFoundError:
            pass

    def reset(self) -> None:
        """Reset memory to an idle document. The state file is left as is."""
        self.state = PipelineRun()
        logger.info("State reset to idle")

    def get_summary(self) -> StateSummary:
        return StateSummary(
            run_id=self.state.run_id,
            status=self.state.status,
            current_step=self.state.current_step,
            start_time=self.state.start_time,
            end_time=self.state.end_time,
            duration=self.state.duration,
            steps=len(self.state.history),
            data_keys=list(self.state.data),
        )

    def _require_running(self, operation: str) -> None:
        if self.state.status != RunStatus.running:
            raise StateError(
                f"Cannot {operation}: run is {self.state.status.value}, not running"
            )


def _message(error: BaseException | None) -> str:
    if error is None:
        return ""
    return getattr(error, "message", None) or str(error) or type(error).__name__
