"""
Export Scheduler Tests
"""

from unittest.mock import MagicMock

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from compatstatus.models import ExportResult
from compatstatus.scheduler import JOB_ID, add_export_job, create_scheduler, status_job


class TestExportJob:
    """Tests for the APScheduler job wiring."""

    def setup_method(self):
        self.exporter = MagicMock()
        self.exporter.run.return_value = ExportResult(success=True, started_at=0.0)

    def test_job_runs_serialised(self):
        scheduler = BackgroundScheduler(timezone="UTC")

        job = add_export_job(scheduler, self.exporter, interval_seconds=15)

        assert job.id == JOB_ID
        assert job.max_instances == 1
        assert job.coalesce is True
        assert isinstance(job.trigger, IntervalTrigger)
        assert job.trigger.interval.total_seconds() == 15
        assert job.args == (self.exporter,)

    def test_create_scheduler_registers_single_job(self):
        scheduler = create_scheduler(self.exporter, interval_seconds=30)

        jobs = scheduler.get_jobs()

        assert [j.id for j in jobs] == [JOB_ID]
        assert jobs[0].trigger.interval.total_seconds() == 30

    def test_status_job_runs_exporter(self):
        status_job(self.exporter)

        self.exporter.run.assert_called_once_with()

    def test_status_job_logs_failure(self, caplog):
        self.exporter.run.return_value = ExportResult(
            success=False, started_at=0.0, error="disk full"
        )

        status_job(self.exporter)

        assert "disk full" in caplog.text
