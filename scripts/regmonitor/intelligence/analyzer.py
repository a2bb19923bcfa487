"""
Aggregated sentiment and risk analysis over a batch of regulatory updates.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..config import config
from ..exceptions import ErrorKind, ProviderError
from ..models import ImpactAnalysis, RegulatoryUpdate
from .fallback import FALLBACK_ANALYSIS
from .gemini import GeminiClient
from .parsing import parse_json_payload

logger = logging.getLogger(__name__)

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "overallSentiment": {"type": "STRING", "enum": ["Neutral", "Positive", "Critical"]},
        "keyRisks": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendedActions": {"type": "ARRAY", "items": {"type": "STRING"}},
        "summary": {"type": "STRING"},
    },
    "required": ["overallSentiment", "keyRisks", "recommendedActions", "summary"],
}

ANALYSIS_PROMPT = """You are a chief risk officer at an Irish insurance and pensions group.

Assess the combined impact of the regulatory updates below on the Irish market.

Return:
- overallSentiment: "Neutral", "Positive" or "Critical" for regulated firms overall
- keyRisks: the 3-5 most significant compliance or business risks, most severe first
- recommendedActions: concrete next steps for compliance and risk teams, most urgent first
- summary: a short executive narrative (under 120 words)

Updates (JSON):
{updates}"""


@dataclass
class AnalysisResult:
    """Outcome of one analysis request."""

    analysis: Optional[ImpactAnalysis] = None
    error: Optional[ErrorKind] = None
    log: Optional[str] = None


class AnalysisGenerator:
    """Generates an ImpactAnalysis for a batch of updates using Gemini."""

    def __init__(self, client: Optional[GeminiClient] = None, strict: Optional[bool] = None) -> None:
        self._client = client
        self.strict = config.strict if strict is None else strict
        self.model = config.get("gemini.analysis_model")

    @property
    def has_credential(self) -> bool:
        return self._client is not None or config.api_key is not None

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def build_prompt(self, updates: Sequence[RegulatoryUpdate]) -> str:
        batch = [u.to_dict() for u in updates]
        return ANALYSIS_PROMPT.format(updates=json.dumps(batch, ensure_ascii=False, indent=2))

    def generate(self, updates: Sequence[RegulatoryUpdate]) -> AnalysisResult:
        """
        Analyze a batch of updates.

        Never raises: provider failures and unparseable responses produce a
        result with ``analysis=None`` and the reason in ``error``.
        """
        if not updates:
            return AnalysisResult(log="No updates to analyze.")

        if not self.has_credential:
            if self.strict:
                return AnalysisResult(
                    error=ErrorKind.CONFIGURATION,
                    log="GEMINI_API_KEY not set: analysis unavailable.",
                )
            logger.info("No Gemini credential configured - serving placeholder analysis")
            return AnalysisResult(
                analysis=FALLBACK_ANALYSIS,
                log="GEMINI_API_KEY not set: showing placeholder analysis.",
            )

        logger.info("Generating impact analysis for %d updates", len(updates))
        try:
            response = self._get_client().generate(
                self.build_prompt(updates),
                schema=ANALYSIS_SCHEMA,
                model=self.model,
            )
        except ProviderError as e:
            logger.error(f"Analysis generation failed: {e}")
            return AnalysisResult(error=ErrorKind.PROVIDER_ERROR, log=str(e))

        payload = parse_json_payload(response.text)
        analysis = None
        if isinstance(payload, dict) and payload:
            try:
                analysis = ImpactAnalysis.from_dict(payload)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Analysis response did not match the schema: {e}")

        if analysis is None:
            logger.warning("Analysis response was empty or not a usable JSON object")
            return AnalysisResult(
                error=ErrorKind.MALFORMED_RESPONSE,
                log="Analysis response could not be parsed.",
            )

        return AnalysisResult(analysis=analysis)

    def analyze(self, updates: List[RegulatoryUpdate]) -> Optional[ImpactAnalysis]:
        """Return the analysis for ``updates``, or None when unavailable."""
        return self.generate(updates).analysis
