"""
APScheduler error handler: logs failed jobs.
"""

import logging

logger = logging.getLogger(__name__)


def job_error_listener(event):
    """Handle APScheduler EVENT_JOB_ERROR events."""
    traceback_str = str(event.traceback) if event.traceback else ""

    logger.error(
        "Scheduled job '%s' failed: %s\n%s",
        event.job_id,
        event.exception,
        traceback_str,
    )
