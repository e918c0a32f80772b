"""Tests for the persisted pipeline run state."""

from pathlib import Path

import orjson
import pytest

from newsdesk.core.exceptions import StateCorruptedError, StateError
from newsdesk.pipeline.state import RunStatus, StateManager, StepStatus, to_jsonable
from newsdesk.providers.base import Script


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "pipeline_state.json"


@pytest.fixture
def manager(state_path: Path) -> StateManager:
    return StateManager(state_path)


def _read(path: Path) -> dict:
    return orjson.loads(path.read_bytes())


class TestLifecycle:
    def test_initial_state_is_idle(self, manager: StateManager) -> None:
        assert manager.state.status == RunStatus.idle
        assert manager.state.run_id is None

    def test_init_run_persists(self, manager: StateManager, state_path: Path) -> None:
        run_id = manager.init_run()

        assert run_id.startswith("run_")
        doc = _read(state_path)
        assert doc["run_id"] == run_id
        assert doc["status"] == "running"
        assert doc["history"] == []
        assert doc["data"] == {}

    def test_init_run_with_explicit_id(self, manager: StateManager) -> None:
        assert manager.init_run("run_custom") == "run_custom"

    def test_init_run_discards_previous_run(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run("first")
        manager.set("market_data", {"a": 1})
        manager.init_run("second")

        doc = _read(state_path)
        assert doc["run_id"] == "second"
        assert doc["data"] == {}

    def test_steps_are_written_through(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run()
        manager.set_step("research", attempt=1)
        assert _read(state_path)["current_step"] == "research"

        manager.complete_step("research", attempt=1)
        manager.set_step("event-detection", attempt=1)
        manager.complete_step("event-detection", success=False, error=ValueError("bad input"))

        history = _read(state_path)["history"]
        assert [(h["step"], h["status"]) for h in history] == [
            ("research", "started"),
            ("research", "completed"),
            ("event-detection", "started"),
            ("event-detection", "failed"),
        ]
        assert history[0]["attempt"] == 1
        assert history[3]["error"] == "bad input"

    def test_complete_success(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run()
        manager.complete()

        doc = _read(state_path)
        assert doc["status"] == "completed"
        assert doc["end_time"] is not None
        assert doc["duration"] >= 0
        assert doc["error"] is None

    def test_complete_failure_records_error(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run()
        manager.complete(success=False, error=RuntimeError("render failed"))

        doc = _read(state_path)
        assert doc["status"] == "failed"
        assert doc["error"]["message"] == "render failed"
        assert doc["error"]["type"] == "RuntimeError"

    def test_mutators_require_running(self, manager: StateManager) -> None:
        with pytest.raises(StateError):
            manager.set_step("research")
        with pytest.raises(StateError):
            manager.set("key", 1)

        manager.init_run()
        manager.complete()

        with pytest.raises(StateError):
            manager.complete_step("research")
        with pytest.raises(StateError):
            manager.complete()


class TestData:
    def test_set_and_get(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run()
        manager.set("script_data", Script(text="hello world", word_count=2))

        stored = manager.get("script_data")
        assert stored["text"] == "hello world"
        assert isinstance(stored["timestamp"], str)
        assert _read(state_path)["data"]["script_data"] == stored

    def test_get_default(self, manager: StateManager) -> None:
        assert manager.get("missing") is None
        assert manager.get("missing", 42) == 42

    def test_get_all_is_a_copy(self, manager: StateManager) -> None:
        manager.init_run()
        manager.set("a", 1)

        data = manager.get_all()
        data["b"] = 2

        assert manager.get_all() == {"a": 1}

    def test_to_jsonable_handles_paths(self) -> None:
        assert to_jsonable({"p": Path("/tmp/video.mp4")}) == {"p": "/tmp/video.mp4"}


class TestPersistence:
    def test_load_missing_file(self, manager: StateManager) -> None:
        assert manager.load() is None

    def test_load_round_trip(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run("run_1")
        manager.set_step("research")
        manager.set("market_data", {"forex": "quiet"})

        other = StateManager(state_path)
        loaded = other.load()

        assert loaded is not None
        assert loaded.run_id == "run_1"
        assert loaded.current_step == "research"
        assert loaded.data == {"market_data": {"forex": "quiet"}}
        assert loaded.history[0].status == StepStatus.started

    def test_load_corrupt_file(self, manager: StateManager, state_path: Path) -> None:
        state_path.parent.mkdir(parents=True)
        state_path.write_text("{not json")

        with pytest.raises(StateCorruptedError):
            manager.load()

    def test_load_invalid_document(self, manager: StateManager, state_path: Path) -> None:
        state_path.parent.mkdir(parents=True)
        state_path.write_bytes(orjson.dumps({"status": "exploded"}))

        with pytest.raises(StateCorruptedError):
            manager.load()

    def test_no_temp_files_left_behind(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run()
        manager.set_step("research")
        manager.complete()

        assert [p.name for p in state_path.parent.iterdir()] == [state_path.name]


class TestRecovery:
    def test_running_state_is_recoverable(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run("run_1")
        manager.set_step("research")
        manager.complete_step("research")
        manager.set_step("event-detection")

        fresh = StateManager(state_path)
        assert fresh.can_recover() is True

        info = fresh.get_recovery_info()
        assert info is not None
        assert info.run_id == "run_1"
        assert info.current_step == "event-detection"
        assert info.completed_steps == ["research"]
        assert info.failed_steps == []

    def test_recovery_info_is_idempotent(self, manager: StateManager) -> None:
        manager.init_run()
        manager.set_step("research")

        assert manager.get_recovery_info() == manager.get_recovery_info()

    def test_finished_run_is_not_recoverable(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run()
        manager.complete()

        fresh = StateManager(state_path)
        assert fresh.can_recover() is False
        assert fresh.get_recovery_info() is None

    def test_missing_or_corrupt_file_is_not_recoverable(
        self, manager: StateManager, state_path: Path
    ) -> None:
        assert manager.can_recover() is False

        state_path.parent.mkdir(parents=True)
        state_path.write_text("garbage")
        assert manager.can_recover() is False

    def test_clear_removes_file_only(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run("run_1")
        manager.clear()

        assert not state_path.exists()
        assert manager.state.run_id == "run_1"
        manager.clear()  # no file, no error

    def test_reset_clears_memory_only(self, manager: StateManager, state_path: Path) -> None:
        manager.init_run("run_1")
        manager.reset()

        assert manager.state.status == RunStatus.idle
        assert manager.state.run_id is None
        assert _read(state_path)["run_id"] == "run_1"

    def test_summary(self, manager: StateManager) -> None:
        manager.init_run("run_1")
        manager.set_step("research")
        manager.set("market_data", {})

        summary = manager.get_summary()
        assert summary.run_id == "run_1"
        assert summary.status == RunStatus.running
        assert summary.current_step == "research"
        assert summary.steps == 1
        assert summary.data_keys == ["market_data"]
