"""
Health check endpoint for monitoring service status.
"""

from datetime import datetime

from fastapi import APIRouter, Request

from regmonitor.config import config

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Return service health status as JSON."""
    started_at = getattr(request.app.state, "started_at", None)
    scheduler = getattr(request.app.state, "scheduler", None)
    controller = getattr(request.app.state, "controller", None)

    uptime_seconds = None
    if started_at:
        uptime_seconds = (datetime.now() - started_at).total_seconds()

    scheduler_jobs = []
    if scheduler:
        for job in scheduler.get_jobs():
            scheduler_jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": str(job.next_run_time) if job.next_run_time else None,
                }
            )

    dashboard = {"status": None, "last_updated": None, "updates": 0}
    if controller:
        state = controller.state
        dashboard = {
            "status": state.status,
            "last_updated": str(state.last_updated) if state.last_updated else None,
            "updates": len(state.updates),
        }

    return {
        "status": "healthy",
        "started_at": str(started_at) if started_at else None,
        "uptime_seconds": uptime_seconds,
        "mode": "live" if config.api_key else "mock",
        "strict": config.strict,
        "scheduler": {
            "running": scheduler is not None and scheduler.running,
            "jobs": scheduler_jobs,
        }
        if scheduler
        else {"running": False, "jobs": []},
        "dashboard": dashboard,
    }
