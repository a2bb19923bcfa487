"""
Dependency injection and utilities for web routes.
"""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from regmonitor.dashboard import DashboardController
from regmonitor.services import get_controller as service_get_controller

WEB_DIR = Path(__file__).parent
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def get_controller(request: Request) -> DashboardController:
    """Get the dashboard controller attached at startup, or the shared one."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        controller = service_get_controller()
    return controller


# Flash message utilities
def flash(request: Request, message: str, category: str = "info") -> None:
    """Add a flash message to the session."""
    if "_flashes" not in request.session:
        request.session["_flashes"] = []
    request.session["_flashes"].append({"category": category, "message": message})


def get_flashed_messages(request: Request) -> list[dict]:
    """Get and clear flash messages from the session."""
    messages = request.session.pop("_flashes", [])
    return messages


def is_htmx_request(request: Request) -> bool:
    """Check if request is from HTMX."""
    return request.headers.get("HX-Request") == "true"
