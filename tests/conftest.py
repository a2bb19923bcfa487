"""Shared test fixtures for the Regulatory Monitor test suite."""

import json
from unittest.mock import MagicMock

import pytest
from regmonitor.config import Config
from regmonitor.intelligence.gemini import GeminiResponse
from regmonitor.models import RegulatoryUpdate


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without a real credential or strict override."""
    for name in ("GEMINI_API_KEY", "API_KEY", "REGMONITOR_STRICT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api_key(monkeypatch):
    """Configure a dummy Gemini credential."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def fresh_config(tmp_path, monkeypatch):
    """Create a Config instance with reset singleton state pointed at a temp directory."""
    original = Config._instance
    Config._instance = None
    monkeypatch.setenv("REGMONITOR_BASE_DIR", str(tmp_path))
    cfg = Config()
    yield cfg
    Config._instance = original


def _raw_update(**overrides) -> dict:
    """One provider-shaped update object."""
    data = {
        "id": "cbi-001",
        "source": "CBI",
        "title": "Revised Consumer Protection Code",
        "summary": "The Central Bank published the revised Code.",
        "date": "2024-03-24",
        "impactScore": 8,
        "category": "Consumer Protection",
        "url": "https://www.centralbank.ie/cpc",
        "analysis": "Review sales processes.",
    }
    data.update(overrides)
    return data


@pytest.fixture
def three_updates_json() -> str:
    return json.dumps(
        {
            "updates": [
                _raw_update(),
                _raw_update(id="eiopa-001", source="EIOPA", title="Solvency II review"),
                _raw_update(id="pa-001", source="Pensions Authority", title="IORP II reminder"),
            ]
        }
    )


@pytest.fixture
def analysis_json() -> str:
    return json.dumps(
        {
            "overallSentiment": "Critical",
            "keyRisks": ["Conduct risk", "Capital pressure"],
            "recommendedActions": ["Gap analysis against the revised Code"],
            "summary": "A heavy quarter for Irish insurers.",
        }
    )


def _make_client(*texts, grounding_metadata=None, side_effect=None):
    """A stand-in GeminiClient whose generate() returns the given texts in order."""
    client = MagicMock()
    if side_effect is not None:
        client.generate.side_effect = side_effect
    else:
        client.generate.side_effect = [
            GeminiResponse(text=t, grounding_metadata=grounding_metadata, model="test-model")
            for t in texts
        ]
    return client


@pytest.fixture
def raw_update():
    """Factory for provider-shaped update objects."""
    return _raw_update


@pytest.fixture
def make_client():
    """Factory for stand-in Gemini clients with canned responses."""
    return _make_client


@pytest.fixture
def sample_updates():
    return [
        RegulatoryUpdate(
            id="u1",
            source="CBI",
            title="Title one",
            summary="Summary one",
            date="March 2024",
            impact_score=7.5,
            category="Prudential",
            url="https://www.centralbank.ie/one",
        ),
        RegulatoryUpdate(
            id="u2",
            source="EIOPA",
            title="Title two",
            summary="Summary two",
            date="April 2024",
            impact_score=3,
            category="Governance",
            url="https://www.eiopa.europa.eu/two",
        ),
    ]
