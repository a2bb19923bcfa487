"""Tests for the FastAPI lifespan context manager."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest


class TestLifespan:
    @pytest.mark.asyncio
    async def test_lifespan_sets_started_at(self):
        """Lifespan sets app.state.started_at on startup."""
        from regmonitor.web.lifespan import lifespan

        app = MagicMock()
        app.state = MagicMock()

        async with lifespan(app):
            assert isinstance(app.state.started_at, datetime)

    @pytest.mark.asyncio
    async def test_lifespan_attaches_controller(self):
        from regmonitor.dashboard import DashboardController
        from regmonitor.web.lifespan import lifespan

        app = MagicMock()
        app.state = MagicMock()

        async with lifespan(app):
            assert isinstance(app.state.controller, DashboardController)

    @pytest.mark.asyncio
    async def test_lifespan_defaults_none_without_config(self):
        """Without scheduler config, scheduler is None."""
        from regmonitor.web.lifespan import lifespan

        app = MagicMock()
        app.state = MagicMock()

        with patch("regmonitor.web.lifespan._start_scheduler", return_value=None):
            async with lifespan(app):
                assert app.state.scheduler is None

    @pytest.mark.asyncio
    async def test_lifespan_starts_scheduler_when_configured(self):
        """Lifespan starts scheduler when create_scheduler returns one."""
        from regmonitor.web.lifespan import lifespan

        mock_scheduler = MagicMock()
        app = MagicMock()
        app.state = MagicMock()

        with patch("regmonitor.web.lifespan._start_scheduler", return_value=mock_scheduler):
            async with lifespan(app):
                assert app.state.scheduler is mock_scheduler

        # Verify shutdown was called
        mock_scheduler.shutdown.assert_called_once_with(wait=False)

    def test_start_scheduler_disabled_by_default(self):
        from regmonitor.web.lifespan import _start_scheduler

        assert _start_scheduler(MagicMock()) is None
