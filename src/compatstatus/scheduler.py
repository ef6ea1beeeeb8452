"""
Export Scheduler

Registers the exporter as an APScheduler interval job. Runs never overlap:
the job is limited to one instance and late fires are coalesced.
"""

import logging
from datetime import datetime, timezone

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from compatstatus.export.exporter import StatusSnapshotExporter

logger = logging.getLogger(__name__)

JOB_ID = "compat_status_export"


def status_job(exporter: StatusSnapshotExporter) -> None:
    """Scheduled job wrapper."""
    logger.debug("⏰ Status timer fired")
    result = exporter.run()
    if not result.success and not result.skipped:
        logger.error(f"⏰ Status export failed: {result.error}")


def add_export_job(
    scheduler: BaseScheduler,
    exporter: StatusSnapshotExporter,
    interval_seconds: int = 15,
    run_immediately: bool = True,
):
    """
    Add the export job to an existing scheduler.

    Args:
        scheduler: Any APScheduler scheduler (blocking, background, asyncio)
        exporter: Exporter to run on every tick
        interval_seconds: Seconds between two runs
        run_immediately: Fire once right away instead of after one interval

    Returns:
        The APScheduler job
    """
    # next_run_time=None would add the job paused, so only pass it when set.
    kwargs = {"next_run_time": datetime.now(timezone.utc)} if run_immediately else {}

    job = scheduler.add_job(
        status_job,
        IntervalTrigger(seconds=interval_seconds),
        args=[exporter],
        id=JOB_ID,
        name="Status snapshot export",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
        **kwargs,
    )
    logger.info(f"⏲️ Status export scheduled every {interval_seconds}s")
    return job


def create_scheduler(
    exporter: StatusSnapshotExporter,
    interval_seconds: int = 15,
    timezone_name: str = "UTC",
) -> BlockingScheduler:
    """Build a blocking scheduler running only the export job."""
    scheduler = BlockingScheduler(timezone=timezone_name)
    add_export_job(scheduler, exporter, interval_seconds)
    return scheduler
