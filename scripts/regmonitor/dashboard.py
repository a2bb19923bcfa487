"""
Dashboard state machine and refresh orchestration.

States: Idle -> Loading -> {Ready, Failed}; refresh re-enters Loading.
Stale updates and analysis stay visible while a refresh is loading.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .exceptions import InvalidTransition
from .intelligence.analyzer import AnalysisGenerator
from .intelligence.fetcher import FetchResult, UpdateFetcher
from .intelligence.parsing import grounding_sources
from .models import ImpactAnalysis, RegulatoryUpdate

logger = logging.getLogger(__name__)

IDLE = "Idle"
LOADING = "Loading"
READY = "Ready"
FAILED = "Failed"


@dataclass(frozen=True)
class DashboardState:
    """Everything the view layer renders."""

    status: str = IDLE
    updates: Tuple[RegulatoryUpdate, ...] = ()
    grounding_metadata: Optional[Dict[str, Any]] = None
    analysis: Optional[ImpactAnalysis] = None
    error: Optional[str] = None
    log: Optional[str] = None
    last_updated: Optional[datetime] = None
    data_version: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status == LOADING


def begin_loading(state: DashboardState) -> DashboardState:
    """Idle/Ready/Failed -> Loading. Clears the error, keeps stale data."""
    if state.status == LOADING:
        raise InvalidTransition("Dashboard is already loading")
    return replace(state, status=LOADING, error=None)


def complete_loading(
    state: DashboardState,
    result: FetchResult,
    analysis: Optional[ImpactAnalysis],
) -> DashboardState:
    """Loading -> Ready with the new batch and its analysis."""
    if state.status != LOADING:
        raise InvalidTransition(f"Cannot complete loading from {state.status}")
    return replace(
        state,
        status=READY,
        updates=tuple(result.updates),
        grounding_metadata=result.grounding_metadata,
        analysis=analysis if result.updates else None,
        error=None,
        log=result.log,
        last_updated=result.fetch_time or datetime.now(),
        data_version=result.data_version,
    )


def fail_loading(state: DashboardState, message: str) -> DashboardState:
    """Loading -> Failed with a human-readable message."""
    if state.status != LOADING:
        raise InvalidTransition(f"Cannot fail loading from {state.status}")
    return replace(
        state,
        status=FAILED,
        error=message or "Failed to retrieve regulatory updates.",
        last_updated=datetime.now(),
    )


class DashboardController:
    """Runs fetch -> analyze refresh cycles and holds the current state."""

    def __init__(
        self,
        fetcher: Optional[UpdateFetcher] = None,
        generator: Optional[AnalysisGenerator] = None,
    ) -> None:
        self.fetcher = fetcher or UpdateFetcher()
        self.generator = generator or AnalysisGenerator()
        self._state = DashboardState()
        self._lock = threading.Lock()

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def updates(self) -> Tuple[RegulatoryUpdate, ...]:
        return self._state.updates

    @property
    def analysis(self) -> Optional[ImpactAnalysis]:
        return self._state.analysis

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    def refresh(self) -> bool:
        """
        Run one fetch/analyze cycle.

        Returns:
            False if a refresh was already in progress (the request is ignored),
            True once this cycle has finished.
        """
        with self._lock:
            if self._state.loading:
                logger.info("Refresh requested while loading - ignored")
                return False
            self._state = begin_loading(self._state)
        self._run_cycle()
        return True

    def _run_cycle(self) -> None:
        """Fetch, then analyze a non-empty batch. Expects the Loading status."""
        try:
            try:
                result = self.fetcher.fetch()
            except Exception as e:
                logger.error(f"Update retrieval failed: {e}")
                with self._lock:
                    self._state = fail_loading(self._state, str(e))
                return

            analysis = None
            if result.updates:
                try:
                    analysis = self.generator.analyze(result.updates)
                except Exception as e:
                    logger.error(f"Impact analysis failed: {e}")

            with self._lock:
                self._state = complete_loading(self._state, result, analysis)
            logger.info(
                "Dashboard ready: %d updates, analysis=%s",
                len(result.updates),
                analysis is not None,
            )
        finally:
            # Never leave the dashboard stuck in Loading
            with self._lock:
                if self._state.loading:
                    logger.error("Refresh cycle ended while still loading")
                    self._state = fail_loading(self._state, "Refresh did not complete.")

    def mark_loading(self) -> bool:
        """Enter Loading ahead of a background refresh. False if already loading."""
        with self._lock:
            if self._state.loading:
                return False
            self._state = begin_loading(self._state)
            return True

    def run_pending(self) -> None:
        """Finish a refresh started with mark_loading()."""
        if not self._state.loading:
            return
        self._run_cycle()

    def dismiss_error(self) -> None:
        """Hide the error banner without touching the data."""
        with self._lock:
            self._state = replace(self._state, error=None)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the current state."""
        state = self._state
        return {
            "status": state.status,
            "loading": state.loading,
            "error": state.error,
            "log": state.log,
            "updates": [u.to_dict() for u in state.updates],
            "analysis": state.analysis.to_dict() if state.analysis else None,
            "groundingSources": grounding_sources(state.grounding_metadata),
            "lastUpdated": state.last_updated.isoformat() if state.last_updated else None,
            "dataVersion": state.data_version,
        }
