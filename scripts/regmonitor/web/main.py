"""
FastAPI application for the Regulatory Monitor dashboard.
"""

import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from regmonitor import __version__
from regmonitor.web.dependencies import STATIC_DIR, get_flashed_messages
from regmonitor.web.lifespan import lifespan

# Load .env before anything else
load_dotenv()

# Create app
app = FastAPI(
    title="Regulatory Monitor",
    description="Ireland insurance & pensions regulatory intelligence",
    version=__version__,
    lifespan=lifespan,
)

# Session middleware for flash messages
secret_key = os.environ.get("REGMONITOR_SECRET_KEY", "regmonitor-secret-change-in-production")
app.add_middleware(
    SessionMiddleware,
    secret_key=secret_key,
    session_cookie="regmonitor_session",
    max_age=3600,
)

# Static files
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# Make flash messages available in templates
@app.middleware("http")
async def add_template_globals(request: Request, call_next):
    request.state.get_flashed_messages = lambda: get_flashed_messages(request)
    response = await call_next(request)
    return response


# Import and register routes
from regmonitor.web.health import router as health_router
from regmonitor.web.routes import dashboard

app.include_router(health_router)
app.include_router(dashboard.router)
