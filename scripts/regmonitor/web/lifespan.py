"""
FastAPI lifespan context manager.

Attaches the dashboard controller and starts/stops the optional
auto-refresh scheduler alongside the web server.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI

from regmonitor.services import get_controller

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup/shutdown of the controller and scheduler."""
    app.state.started_at = datetime.now()
    app.state.controller = get_controller()
    app.state.scheduler = None

    scheduler = _start_scheduler(app.state.controller)
    if scheduler:
        app.state.scheduler = scheduler

    logger.info("Regulatory Monitor started: scheduler=%s", scheduler is not None)

    yield

    # Shutdown
    if app.state.scheduler:
        try:
            app.state.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
        except Exception:
            logger.exception("Error stopping scheduler")

    logger.info("Regulatory Monitor shutdown complete")


def _start_scheduler(controller):
    """Start APScheduler if the extra is installed and auto-refresh is enabled."""
    try:
        from regmonitor.config import config

        if not config.get("scheduler.enabled", False):
            logger.info("Auto-refresh scheduler disabled in config")
            return None

        from regmonitor.scheduler.setup import create_scheduler

        scheduler = create_scheduler(controller)
        scheduler.start()
        logger.info("APScheduler started with %d jobs", len(scheduler.get_jobs()))
        return scheduler
    except ImportError:
        logger.info("APScheduler not installed - install with: pip install -e '.[scheduler]'")
        return None
    except Exception:
        logger.exception("Failed to start scheduler")
        return None
