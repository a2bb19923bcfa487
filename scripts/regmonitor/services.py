"""Shared service accessors for core Regulatory Monitor components.

Provides a single place to retrieve the singleton-backed dashboard controller
so the web routes and the auto-refresh scheduler drive the same state.
"""

from functools import lru_cache


@lru_cache
def get_controller():
    """Return the process-wide dashboard controller."""
    from .dashboard import DashboardController

    return DashboardController()
