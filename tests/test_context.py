"""
Program Context Tests
"""

from compatstatus.context import ApplicationContext, RollingTaskStatistics
from compatstatus.export.exporter import StatusSnapshotExporter


class TestRollingTaskStatistics:
    """Tests for the sliding-window task counter."""

    def test_counts_per_window(self):
        stats = RollingTaskStatistics()
        now = 10_000.0
        stats.record(now=now - 30)
        stats.record(now=now - 120, count=2)
        stats.record(now=now - 600, count=5)

        assert stats.get(60, now=now) == 1
        assert stats.get(300, now=now) == 3
        assert stats.get(900, now=now) == 8

    def test_old_events_pruned(self):
        stats = RollingTaskStatistics(max_window=900)
        stats.record(now=0.0)
        stats.record(now=1000.0)

        assert stats.get(900, now=1000.0) == 1

    def test_empty(self):
        assert RollingTaskStatistics().get(60, now=0.0) == 0


class TestApplicationContext:
    """Tests for ApplicationContext."""

    def test_start_time(self):
        assert ApplicationContext(start_time=123.0).start_time() == 123.0

    def test_task_statistics_delegate(self):
        clock = lambda: 5_000.0
        context = ApplicationContext(
            start_time=0.0, statistics=RollingTaskStatistics(clock=clock)
        )
        context.statistics.record(count=4)

        assert context.task_statistics(60) == 4

    def test_recorded_checks_reach_programstatus(self, tmp_path, example_store):
        """Checks recorded by the check engine show up in the exported preamble."""
        context = ApplicationContext(start_time=0.0)
        context.statistics.record(count=3)
        exporter = StatusSnapshotExporter(
            store=example_store,
            context=context,
            status_path=tmp_path / "status.dat",
            objects_path=tmp_path / "objects.cache",
        )

        exporter.run()

        status = (tmp_path / "status.dat").read_text(encoding="utf-8")
        assert "\tactive_scheduled_service_check_stats=3,3,3\n" in status
