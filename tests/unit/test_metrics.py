"""Tests for run and stage metrics."""

from collections.abc import Callable

from newsdesk.pipeline.metrics import MetricsTracker


def fake_clock(*ticks: float) -> Callable[[], float]:
    return iter(ticks).__next__


class TestMetricsTracker:
    def test_empty(self) -> None:
        snapshot = MetricsTracker().get_metrics()

        assert snapshot.pipeline_runs == 0
        assert snapshot.success_rate == "0.00%"
        assert snapshot.average_duration_seconds == "0.00"
        assert snapshot.stages == {}

    def test_run_with_stages(self) -> None:
        tracker = MetricsTracker(clock=fake_clock(0, 1, 3, 3, 4.5, 5))

        tracker.start_run("run_1")
        tracker.start_stage("research")
        tracker.end_stage("research", success=True)
        tracker.start_stage("upload")
        tracker.end_stage("upload", success=False, error="quota")
        run = tracker.end_run(success=False)

        assert run is not None
        assert run.id == "run_1"
        assert run.duration == 5
        assert run.success is False
        assert run.stages["research"].duration == 2
        assert run.stages["upload"].error == "quota"
        assert tracker.current_run is None

        snapshot = tracker.get_metrics()
        assert snapshot.pipeline_runs == 1
        assert snapshot.failed_runs == 1
        assert snapshot.success_rate == "0.00%"
        assert snapshot.stages["research"].successful_runs == 1
        assert snapshot.stages["upload"].failed_runs == 1
        assert snapshot.stages["upload"].average_duration == 1.5

    def test_aggregates_across_runs(self) -> None:
        tracker = MetricsTracker(clock=fake_clock(0, 0, 2, 2, 10, 10, 14, 20, 30, 33))

        for _ in range(2):
            tracker.start_run()
            tracker.start_stage("research")
            tracker.end_stage("research")
            tracker.end_run(success=True)
        tracker.start_run()
        tracker.end_run(success=False)

        snapshot = tracker.get_metrics()
        assert snapshot.pipeline_runs == 3
        assert snapshot.successful_runs == 2
        assert snapshot.success_rate == "66.67%"
        assert snapshot.total_duration == 15
        assert snapshot.average_duration == 5
        assert snapshot.average_duration_seconds == "5.00"
        assert snapshot.stages["research"].total_runs == 2
        assert snapshot.stages["research"].average_duration == 3

    def test_stage_without_run_is_ignored(self) -> None:
        tracker = MetricsTracker()

        tracker.start_stage("research")
        tracker.end_stage("research")

        assert tracker.get_stage_metrics("research") is None
        assert tracker.end_run() is None

    def test_snapshot_is_detached(self) -> None:
        tracker = MetricsTracker(clock=fake_clock(0, 0, 1, 1))
        tracker.start_run()
        tracker.start_stage("research")
        tracker.end_stage("research")

        snapshot = tracker.get_metrics()
        snapshot.stages["research"].total_runs = 99

        assert tracker.get_stage_metrics("research").total_runs == 1

    def test_reset(self) -> None:
        tracker = MetricsTracker(clock=fake_clock(0, 1))
        tracker.start_run()
        tracker.end_run()

        tracker.reset()

        assert tracker.get_metrics().pipeline_runs == 0
