"""
Data model for regulatory updates and the aggregated impact analysis.

Both types are immutable. The provider speaks camelCase JSON, so each type
converts to and from that shape with ``from_dict``/``to_dict``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

SENTIMENTS = ("Neutral", "Positive", "Critical")


def _coerce_score(value: Any) -> float:
    """Coerce an impact score to float; the 0-10 range is advisory only."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _text_list(value: Any) -> Tuple[str, ...]:
    """Strings from a JSON array; a bare string becomes one item, anything else none."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(_text(v) for v in value if _text(v))


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class RegulatoryUpdate:
    """One reported regulatory item."""

    id: str
    source: str
    title: str
    summary: str
    date: str
    impact_score: float
    category: str
    url: str
    analysis: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegulatoryUpdate":
        """Build an update from the provider's camelCase JSON object."""
        analysis = _text(data.get("analysis"))
        return cls(
            id=_text(data.get("id")),
            source=_text(data.get("source")),
            title=_text(data.get("title")),
            summary=_text(data.get("summary")),
            date=_text(data.get("date")),
            impact_score=_coerce_score(data.get("impactScore", data.get("impact_score"))),
            category=_text(data.get("category")) or "General",
            url=_text(data.get("url")),
            analysis=analysis or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape."""
        data = {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "summary": self.summary,
            "date": self.date,
            "impactScore": self.impact_score,
            "category": self.category,
            "url": self.url,
        }
        if self.analysis:
            data["analysis"] = self.analysis
        return data


@dataclass(frozen=True)
class ImpactAnalysis:
    """One aggregated assessment over a batch of updates."""

    overall_sentiment: str
    key_risks: Tuple[str, ...] = field(default_factory=tuple)
    recommended_actions: Tuple[str, ...] = field(default_factory=tuple)
    summary: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImpactAnalysis":
        """Build an analysis from the provider's camelCase JSON object."""
        sentiment = _text(data.get("overallSentiment")).capitalize()
        if sentiment not in SENTIMENTS:
            sentiment = "Neutral"
        return cls(
            overall_sentiment=sentiment,
            key_risks=_text_list(data.get("keyRisks")),
            recommended_actions=_text_list(data.get("recommendedActions")),
            summary=_text(data.get("summary")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape."""
        return {
            "overallSentiment": self.overall_sentiment,
            "keyRisks": list(self.key_risks),
            "recommendedActions": list(self.recommended_actions),
            "summary": self.summary,
        }
