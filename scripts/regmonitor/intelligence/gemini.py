"""
Minimal REST client for the Gemini ``generateContent`` endpoint.

Only what the dashboard needs: a prompt, an optional JSON response schema,
and the Google Search grounding tool for the update lookup.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..config import config
from ..exceptions import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

USER_AGENT = "RegulatoryMonitor/1.0 (Regulatory Intelligence Dashboard)"

# Statuses worth one more attempt
RETRYABLE_STATUSES = {429, 500, 502, 503, 504}
RETRY_BACKOFF = 2


@dataclass
class GeminiResponse:
    """Text and citation metadata from one generateContent call."""

    text: str
    grounding_metadata: Optional[Dict[str, Any]] = None
    model: str = ""


class GeminiClient:
    """Sends prompts to Gemini over HTTPS using ``requests``."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: Gemini API key. Defaults to GEMINI_API_KEY / API_KEY.
            base_url: API root, e.g. https://generativelanguage.googleapis.com/v1beta.
            timeout: Per-request timeout in seconds.
            max_retries: Extra attempts on timeouts, connection errors and 429/5xx.

        Raises:
            ConfigurationError: If no API key is available.
        """
        self.api_key = api_key or config.api_key
        if not self.api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY environment variable not set. "
                "Set it with: export GEMINI_API_KEY=your-api-key"
            )
        self.base_url = (base_url or config.get("gemini.base_url")).rstrip("/")
        self.timeout = timeout if timeout is not None else config.get("gemini.timeout", 60)
        self.max_retries = (
            max_retries if max_retries is not None else config.get("gemini.max_retries", 1)
        )
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "x-goog-api-key": self.api_key,
                "content-type": "application/json",
            }
        )

    def _build_payload(
        self, prompt: str, schema: Optional[Dict[str, Any]], use_search: bool
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if use_search:
            # Search grounding cannot be combined with a response schema,
            # so the schema travels inside the prompt instead.
            payload["tools"] = [{"google_search": {}}]
            if schema:
                payload["contents"][0]["parts"][0]["text"] = (
                    f"{prompt}\n\nRespond with JSON only, matching this schema:\n"
                    f"{json.dumps(schema)}"
                )
        elif schema:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            }
        return payload

    def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST with bounded retry. Raises ProviderError on final failure."""
        attempts = max(0, int(self.max_retries)) + 1
        last_error = ""
        status_code = None

        for attempt in range(1, attempts + 1):
            try:
                response = self.session.post(url, json=payload, timeout=self.timeout)
            except requests.exceptions.Timeout:
                last_error = f"Gemini request timed out after {self.timeout}s"
                status_code = None
            except requests.exceptions.RequestException as e:
                last_error = f"Gemini request failed: {e}"
                status_code = None
            else:
                if response.status_code == 200:
                    try:
                        return response.json()
                    except ValueError:
                        raise ProviderError("Gemini returned a non-JSON body", 200)
                status_code = response.status_code
                last_error = f"Gemini returned {response.status_code}: {response.text[:200]}"
                if status_code not in RETRYABLE_STATUSES:
                    break

            if attempt < attempts:
                logger.warning("%s (attempt %d/%d), retrying", last_error, attempt, attempts)
                time.sleep(RETRY_BACKOFF * attempt)

        raise ProviderError(last_error, status_code)

    def generate(
        self,
        prompt: str,
        schema: Optional[Dict[str, Any]] = None,
        use_search: bool = False,
        model: Optional[str] = None,
    ) -> GeminiResponse:
        """
        Run one generateContent call.

        Args:
            prompt: Natural-language instruction.
            schema: JSON schema (Gemini OpenAPI subset) for the response.
            use_search: Enable Google Search grounding.
            model: Model name; defaults to the configured analysis model.

        Returns:
            GeminiResponse with the concatenated text parts and grounding metadata.

        Raises:
            ProviderError: On transport failure, non-2xx status, or a body without usable candidates.
        """
        model = model or config.get("gemini.analysis_model")
        url = f"{self.base_url}/models/{model}:generateContent"
        payload = self._build_payload(prompt, schema, use_search)

        logger.info("Calling %s (search=%s)", model, use_search)
        data = self._post(url, payload)

        if not isinstance(data, dict):
            raise ProviderError("Gemini returned an unexpected body")

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback", {})
            raise ProviderError(f"Gemini returned no candidates: {feedback or 'empty response'}")
        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise ProviderError("Gemini returned an unexpected body")

        candidate = candidates[0]
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        texts = [part.get("text") for part in parts if isinstance(part, dict)]
        text = "".join(t for t in texts if isinstance(t, str))

        metadata = candidate.get("groundingMetadata")
        return GeminiResponse(
            text=text,
            grounding_metadata=metadata if isinstance(metadata, dict) else None,
            model=model,
        )
