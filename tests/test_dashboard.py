"""Tests for the dashboard state machine and controller."""

import json
import threading
from unittest.mock import MagicMock, patch

import pytest
from regmonitor.dashboard import (
    FAILED,
    IDLE,
    LOADING,
    READY,
    DashboardController,
    DashboardState,
    begin_loading,
    complete_loading,
    fail_loading,
)
from regmonitor.exceptions import ConfigurationError, InvalidTransition, ProviderError
from regmonitor.intelligence.analyzer import AnalysisGenerator
from regmonitor.intelligence.fetcher import FetchResult, UpdateFetcher
from regmonitor.models import ImpactAnalysis

ANALYSIS = ImpactAnalysis("Positive", ("r",), ("a",), "s")


class TestTransitions:
    def test_begin_from_idle(self):
        state = begin_loading(DashboardState())
        assert state.status == LOADING
        assert state.loading

    def test_begin_clears_error_keeps_data(self, sample_updates):
        state = DashboardState(status=FAILED, updates=tuple(sample_updates), error="boom")
        state = begin_loading(state)
        assert state.error is None
        assert state.updates == tuple(sample_updates)

    def test_begin_while_loading_raises(self):
        with pytest.raises(InvalidTransition):
            begin_loading(DashboardState(status=LOADING))

    def test_complete(self, sample_updates):
        state = begin_loading(DashboardState())
        result = FetchResult(updates=sample_updates, log="ok")
        state = complete_loading(state, result, ANALYSIS)
        assert state.status == READY
        assert state.analysis is ANALYSIS
        assert state.log == "ok"
        assert state.last_updated is not None

    def test_complete_empty_batch_has_no_analysis(self):
        state = begin_loading(DashboardState(analysis=ANALYSIS))
        state = complete_loading(state, FetchResult(), ANALYSIS)
        assert state.updates == ()
        assert state.analysis is None

    def test_complete_requires_loading(self):
        with pytest.raises(InvalidTransition):
            complete_loading(DashboardState(status=READY), FetchResult(), None)

    def test_fail(self):
        state = fail_loading(begin_loading(DashboardState()), "no key")
        assert state.status == FAILED
        assert state.error == "no key"

    def test_fail_blank_message_gets_default(self):
        state = fail_loading(begin_loading(DashboardState()), "")
        assert state.error

    def test_fail_requires_loading(self):
        with pytest.raises(InvalidTransition):
            fail_loading(DashboardState(), "x")

    def test_transitions_do_not_mutate(self):
        original = DashboardState()
        begin_loading(original)
        assert original.status == IDLE


class TestControllerScenarios:
    def test_no_credential_uses_fallback(self):
        controller = DashboardController(UpdateFetcher(), AnalysisGenerator())
        assert controller.refresh() is True
        assert controller.state.status == READY
        assert controller.updates[0].source == "CBI"
        assert controller.analysis.overall_sentiment == "Neutral"
        assert controller.error is None

    def test_three_updates_ready_with_analysis(self, three_updates_json, analysis_json, make_client):
        client = make_client(three_updates_json, analysis_json)
        controller = DashboardController(
            UpdateFetcher(client=client), AnalysisGenerator(client=client)
        )
        controller.refresh()
        assert controller.state.status == READY
        assert len(controller.updates) == 3
        assert controller.analysis is not None
        assert controller.loading is False

    def test_provider_failure_lenient(self, make_client):
        fetch_client = make_client(side_effect=ProviderError("network down"))
        generator = MagicMock()
        controller = DashboardController(UpdateFetcher(client=fetch_client), generator)
        controller.refresh()
        assert controller.updates == ()
        assert controller.error is None
        assert controller.state.status == READY
        generator.analyze.assert_not_called()

    def test_provider_failure_strict(self, make_client):
        fetch_client = make_client(side_effect=ProviderError("network down"))
        controller = DashboardController(
            UpdateFetcher(client=fetch_client, strict=True), MagicMock()
        )
        controller.refresh()
        assert controller.state.status == FAILED
        assert controller.error == "network down"

    def test_missing_credential_strict(self):
        controller = DashboardController(UpdateFetcher(strict=True), AnalysisGenerator(strict=True))
        controller.refresh()
        assert controller.state.status == FAILED
        assert "GEMINI_API_KEY" in controller.error

    def test_empty_updates_never_analyzed(self, make_client):
        generator = MagicMock()
        controller = DashboardController(UpdateFetcher(client=make_client('{"updates": []}')), generator)
        controller.refresh()
        generator.analyze.assert_not_called()
        assert controller.analysis is None

    def test_null_analysis_is_not_an_error(self, three_updates_json, make_client):
        client = make_client(three_updates_json, "not json")
        controller = DashboardController(
            UpdateFetcher(client=client), AnalysisGenerator(client=client)
        )
        controller.refresh()
        assert controller.state.status == READY
        assert controller.analysis is None
        assert controller.error is None


    def test_analysis_with_wrong_field_types_still_ready(self, three_updates_json, make_client):
        body = json.dumps({"overallSentiment": "Critical", "keyRisks": 5, "summary": "s"})
        client = make_client(three_updates_json, body)
        controller = DashboardController(
            UpdateFetcher(client=client), AnalysisGenerator(client=client)
        )
        controller.refresh()
        assert controller.state.status == READY
        assert controller.analysis.key_risks == ()

    def test_generator_exception_does_not_stick_in_loading(self, sample_updates):
        fetcher = MagicMock()
        fetcher.fetch.return_value = FetchResult(updates=sample_updates)
        generator = MagicMock()
        generator.analyze.side_effect = TypeError("bad analysis")
        controller = DashboardController(fetcher, generator)
        assert controller.refresh() is True
        assert controller.loading is False
        assert controller.state.status == READY
        assert controller.analysis is None
        assert controller.refresh() is True

    def test_unexpected_failure_leaves_loading(self):
        fetcher = MagicMock()
        fetcher.fetch.return_value = FetchResult()
        controller = DashboardController(fetcher, MagicMock())
        with patch("regmonitor.dashboard.complete_loading", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                controller.refresh()
        assert controller.state.status == FAILED
        assert controller.error == "Refresh did not complete."
        assert controller.refresh() is True


class TestRefresh:
    def test_refresh_is_idempotent(self, three_updates_json, analysis_json, make_client):
        client = make_client(three_updates_json, analysis_json, three_updates_json, analysis_json)
        controller = DashboardController(
            UpdateFetcher(client=client), AnalysisGenerator(client=client)
        )
        controller.refresh()
        first = controller.updates
        controller.refresh()
        assert controller.updates == first

    def test_failed_then_recovers(self):
        fetcher = MagicMock()
        fetcher.fetch.side_effect = [ConfigurationError("missing key"), FetchResult()]
        controller = DashboardController(fetcher, MagicMock())
        controller.refresh()
        assert controller.state.status == FAILED
        controller.refresh()
        assert controller.state.status == READY
        assert controller.error is None

    def test_failure_keeps_stale_updates(self, sample_updates):
        fetcher = MagicMock()
        fetcher.fetch.side_effect = [FetchResult(updates=sample_updates), ProviderError("down")]
        generator = MagicMock()
        generator.analyze.return_value = ANALYSIS
        controller = DashboardController(fetcher, generator)
        controller.refresh()
        controller.refresh()
        assert controller.state.status == FAILED
        assert controller.updates == tuple(sample_updates)

    def test_overlapping_refresh_is_noop(self):
        entered = threading.Event()
        release = threading.Event()

        def slow_fetch():
            entered.set()
            release.wait(timeout=5)
            return FetchResult()

        fetcher = MagicMock()
        fetcher.fetch.side_effect = slow_fetch
        controller = DashboardController(fetcher, MagicMock())

        worker = threading.Thread(target=controller.refresh)
        worker.start()
        assert entered.wait(timeout=5)
        assert controller.loading is True
        assert controller.refresh() is False
        release.set()
        worker.join(timeout=5)

        assert fetcher.fetch.call_count == 1
        assert controller.state.status == READY

    def test_mark_loading_then_run_pending(self, sample_updates):
        fetcher = MagicMock()
        fetcher.fetch.return_value = FetchResult(updates=sample_updates)
        controller = DashboardController(fetcher, MagicMock())
        assert controller.mark_loading() is True
        assert controller.mark_loading() is False
        assert controller.refresh() is False
        controller.run_pending()
        assert controller.state.status == READY
        assert fetcher.fetch.call_count == 1

    def test_run_pending_without_mark_is_noop(self):
        fetcher = MagicMock()
        controller = DashboardController(fetcher, MagicMock())
        controller.run_pending()
        fetcher.fetch.assert_not_called()


class TestSnapshot:
    def test_snapshot_shape(self):
        controller = DashboardController(UpdateFetcher(), AnalysisGenerator())
        controller.refresh()
        snap = controller.snapshot()
        assert snap["status"] == READY
        assert snap["loading"] is False
        assert snap["error"] is None
        assert snap["updates"][0]["source"] == "CBI"
        assert snap["analysis"]["overallSentiment"] == "Neutral"
        assert snap["dataVersion"].startswith("mock-")
        assert snap["lastUpdated"]

    def test_dismiss_error(self):
        controller = DashboardController(UpdateFetcher(strict=True), AnalysisGenerator())
        controller.refresh()
        assert controller.error
        controller.dismiss_error()
        assert controller.error is None
        assert controller.state.status == FAILED
