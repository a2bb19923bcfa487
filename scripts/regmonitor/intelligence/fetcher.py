"""
Regulatory update retrieval via Gemini with Google Search grounding.

Fetches recent CBI, EIOPA and Pensions Authority updates and falls back to the
static data set when no credential is configured.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config import config
from ..exceptions import ConfigurationError, ErrorKind, ProviderError
from ..models import RegulatoryUpdate
from .fallback import FALLBACK_UPDATES, FALLBACK_VERSION
from .gemini import GeminiClient
from .parsing import normalize_updates, parse_json_payload

logger = logging.getLogger(__name__)

UPDATE_FIELDS = ["id", "source", "title", "summary", "date", "impactScore", "category", "url", "analysis"]

UPDATES_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "updates": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "source": {"type": "STRING", "enum": ["CBI", "EIOPA", "Pensions Authority"]},
                    "title": {"type": "STRING"},
                    "summary": {"type": "STRING"},
                    "date": {"type": "STRING"},
                    "impactScore": {"type": "NUMBER"},
                    "category": {"type": "STRING"},
                    "url": {"type": "STRING"},
                    "analysis": {"type": "STRING"},
                },
                "required": UPDATE_FIELDS,
            },
        }
    },
    "required": ["updates"],
}

FETCH_PROMPT = """You are a regulatory affairs analyst covering the Irish insurance and pensions sector.

Find regulatory updates published in the last {days} days (today is {today}) by these regulators only:
- Central Bank of Ireland (source: "CBI")
- European Insurance and Occupational Pensions Authority (source: "EIOPA")
- The Pensions Authority (source: "Pensions Authority")

For each update provide: a short unique id, the source exactly as shown above, the title,
a 1-2 sentence summary, the publication date, an impactScore from 0 (informational) to 10
(urgent, sector-wide change), a category (e.g. Consumer Protection, Prudential, Governance),
the URL of the original publication, and a one-sentence analysis of what Irish insurers or
pension trustees should do.

Ignore items from any other regulator. If nothing qualifies, return an empty updates array."""


@dataclass
class FetchResult:
    """Results from an update fetch."""

    updates: List[RegulatoryUpdate] = field(default_factory=list)
    grounding_metadata: Optional[Dict[str, Any]] = None
    log: Optional[str] = None
    error: Optional[ErrorKind] = None
    data_version: str = "live"
    fetch_time: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        return (
            f"Fetched {len(self.updates)} updates ({self.data_version})"
            f"{f' [{self.error.value}]' if self.error else ''}"
        )


class UpdateFetcher:
    """Fetches regulatory updates from Gemini, or the fallback set in mock mode."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        strict: Optional[bool] = None,
        fallback_on_empty: Optional[bool] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            client: Gemini client to use. Created on demand when omitted.
            strict: Raise on missing credential or provider failure instead of degrading.
            fallback_on_empty: Serve the fallback set when the provider finds nothing.
        """
        self._client = client
        self.strict = config.strict if strict is None else strict
        self.fallback_on_empty = (
            config.get("intelligence.fallback_on_empty", False)
            if fallback_on_empty is None
            else fallback_on_empty
        )
        self.model = config.get("gemini.fetch_model")
        self.window_days = config.get("intelligence.window_days", 30)

    @property
    def has_credential(self) -> bool:
        return self._client is not None or config.api_key is not None

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def _fallback(self, log: str, error: Optional[ErrorKind] = None) -> FetchResult:
        return FetchResult(
            updates=list(FALLBACK_UPDATES),
            log=log,
            error=error,
            data_version=FALLBACK_VERSION,
            fetch_time=datetime.now(),
        )

    def build_prompt(self) -> str:
        """Render the retrieval prompt for the configured time window."""
        return FETCH_PROMPT.format(
            days=self.window_days,
            today=datetime.now().strftime("%d %B %Y"),
        )

    def fetch(self) -> FetchResult:
        """
        Retrieve recent regulatory updates.

        Returns:
            FetchResult with normalized updates and grounding metadata.

        Raises:
            ConfigurationError: Strict mode only, when no credential is configured.
            ProviderError: Strict mode only, when the Gemini call fails.
        """
        if not self.has_credential:
            if self.strict:
                raise ConfigurationError(
                    "GEMINI_API_KEY is not configured; live regulatory updates are unavailable."
                )
            logger.info("No Gemini credential configured - serving fallback updates")
            return self._fallback(
                f"GEMINI_API_KEY not set: showing {len(FALLBACK_UPDATES)} sample updates "
                f"({FALLBACK_VERSION})."
            )

        try:
            response = self._get_client().generate(
                self.build_prompt(),
                schema=UPDATES_SCHEMA,
                use_search=True,
                model=self.model,
            )
        except ProviderError as e:
            if self.strict:
                raise
            logger.error(f"Update fetch failed: {e}")
            return FetchResult(
                log=f"Update fetch failed: {e}",
                error=ErrorKind.PROVIDER_ERROR,
                fetch_time=datetime.now(),
            )

        payload = parse_json_payload(response.text)
        error = None
        if isinstance(payload, dict):
            items = payload.get("updates") or []
        elif isinstance(payload, list):
            items = payload
        else:
            items = []
            error = ErrorKind.MALFORMED_RESPONSE

        updates = normalize_updates(items, response.grounding_metadata)
        log = f"Retrieved {len(updates)} updates from {response.model or self.model}"
        logger.info(log)

        if not updates and self.fallback_on_empty:
            return self._fallback("Provider returned no updates: showing sample updates.", error)

        return FetchResult(
            updates=updates,
            grounding_metadata=response.grounding_metadata,
            log=log if error is None else "Provider response could not be parsed.",
            error=error,
            fetch_time=datetime.now(),
        )
