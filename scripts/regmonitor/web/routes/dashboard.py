"""
Dashboard routes: the single page, its HTMX partial, refresh and JSON snapshot.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from regmonitor.config import config
from regmonitor.dashboard import IDLE, DashboardController
from regmonitor.intelligence.parsing import grounding_sources
from regmonitor.web.dependencies import (
    flash,
    get_controller,
    get_flashed_messages,
    is_htmx_request,
    templates,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


def _context(request: Request, controller: DashboardController) -> dict:
    state = controller.state
    return {
        "state": state,
        "updates": state.updates,
        "analysis": state.analysis,
        "loading": state.loading,
        "error": state.error,
        "sources": grounding_sources(state.grounding_metadata),
        "live": config.api_key is not None,
        "flashes": get_flashed_messages(request),
    }


def _schedule_refresh(controller: DashboardController, background_tasks: BackgroundTasks) -> bool:
    """Enter Loading now and run the cycle after the response is sent."""
    if not controller.mark_loading():
        return False
    background_tasks.add_task(controller.run_pending)
    return True


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(
    request: Request,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    """Regulatory updates with the AI risk analysis panel."""
    # First visit: load data in the background and render the loading state
    if controller.state.status == IDLE:
        _schedule_refresh(controller, background_tasks)

    return templates.TemplateResponse(request, "dashboard.html", _context(request, controller))


@router.get("/partials/dashboard", response_class=HTMLResponse)
async def dashboard_partial(
    request: Request,
    controller: DashboardController = Depends(get_controller),
):
    """Update list and analysis panel (HTMX partial, polled while loading)."""
    return templates.TemplateResponse(
        request, "partials/_dashboard.html", _context(request, controller)
    )


@router.post("/refresh")
async def refresh(
    request: Request,
    background_tasks: BackgroundTasks,
    controller: DashboardController = Depends(get_controller),
):
    """Start a manual refresh; ignored while one is already running."""
    if _schedule_refresh(controller, background_tasks):
        logger.info("Manual refresh started")
        if not is_htmx_request(request):
            flash(request, "Refreshing regulatory updates...", "info")
    else:
        flash(request, "A refresh is already in progress", "warning")

    if is_htmx_request(request):
        return templates.TemplateResponse(
            request, "partials/_dashboard.html", _context(request, controller)
        )
    return RedirectResponse(url="/", status_code=303)


@router.post("/dismiss")
async def dismiss_error(
    request: Request,
    controller: DashboardController = Depends(get_controller),
):
    """Hide the error banner."""
    controller.dismiss_error()
    if is_htmx_request(request):
        return HTMLResponse("")
    return RedirectResponse(url="/", status_code=303)


@router.get("/api/dashboard")
async def dashboard_json(controller: DashboardController = Depends(get_controller)):
    """Current dashboard state as JSON."""
    return JSONResponse(controller.snapshot())
