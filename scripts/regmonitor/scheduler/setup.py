"""
APScheduler factory: creates the scheduler with the dashboard auto-refresh job.
"""

import logging

from apscheduler.events import EVENT_JOB_ERROR
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from regmonitor.config import config

logger = logging.getLogger(__name__)


def create_scheduler(controller) -> AsyncIOScheduler:
    """Create an AsyncIOScheduler that refreshes the dashboard periodically.

    Reads ``scheduler.interval_minutes`` and ``scheduler.timezone`` from config.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    timezone = config.get("scheduler.timezone", "Europe/Dublin")
    scheduler = AsyncIOScheduler(timezone=timezone)

    _add_refresh_job(scheduler, controller)

    from regmonitor.scheduler.error_handler import job_error_listener

    scheduler.add_listener(job_error_listener, mask=EVENT_JOB_ERROR)

    logger.info(
        "Scheduler configured with %d jobs (timezone=%s)", len(scheduler.get_jobs()), timezone
    )
    return scheduler


def _add_refresh_job(scheduler: AsyncIOScheduler, controller) -> None:
    """Add the interval refresh job."""
    from regmonitor.scheduler.jobs import refresh_job

    interval = int(config.get("scheduler.interval_minutes", 60))

    scheduler.add_job(
        refresh_job,
        IntervalTrigger(minutes=interval),
        args=[controller],
        id="dashboard_refresh",
        name="Dashboard Auto-Refresh",
        misfire_grace_time=3600,
        coalesce=True,
        max_instances=1,
        replace_existing=True,
    )
    logger.info("Dashboard refresh scheduled every %d minutes", interval)
