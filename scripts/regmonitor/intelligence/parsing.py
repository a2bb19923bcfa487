"""
Response parsing: fence stripping, JSON decoding, normalization and URL backfill.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..config import config
from ..models import RegulatoryUpdate

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    if not text:
        return ""
    match = FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_payload(text: str) -> Optional[Any]:
    """
    Decode a model response as JSON.

    Returns:
        The decoded value, or None for an empty or invalid body.
    """
    body = strip_code_fences(text)
    if not body:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        # Grounded answers sometimes wrap the object in prose
        start, end = body.find("{"), body.rfind("}")
        if start != -1 and end > start:
            try:
                return json.loads(body[start : end + 1])
            except json.JSONDecodeError:
                pass
        logger.warning("Could not parse model response as JSON: %s", body[:200])
        return None


def _grounding_chunks(grounding_metadata: Any) -> List[Any]:
    if not isinstance(grounding_metadata, dict):
        return []
    chunks = grounding_metadata.get("groundingChunks")
    return chunks if isinstance(chunks, list) else []


def grounding_links(grounding_metadata: Optional[Dict[str, Any]]) -> List[Optional[str]]:
    """Citation URIs from grounding metadata, positionally aligned with its chunks."""
    links = []
    for chunk in _grounding_chunks(grounding_metadata):
        web = chunk.get("web") if isinstance(chunk, dict) else None
        uri = web.get("uri") if isinstance(web, dict) else None
        links.append(uri or None)
    return links


def grounding_sources(grounding_metadata: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Title/URI pairs for display under the update list."""
    sources = []
    for chunk in _grounding_chunks(grounding_metadata):
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if isinstance(web, dict) and web.get("uri"):
            sources.append({"title": web.get("title") or web["uri"], "uri": web["uri"]})
    return sources


def normalize_updates(
    items: Any,
    grounding_metadata: Optional[Dict[str, Any]] = None,
    default_url: Optional[str] = None,
) -> List[RegulatoryUpdate]:
    """
    Turn the raw ``updates`` array into validated RegulatoryUpdate objects.

    Items that are not objects, have no title, or name a regulator outside the
    monitored set are dropped. Missing or duplicate ids get ``update-<n>``
    (suffixed ``-2``, ``-3``... while taken); missing urls are
    backfilled from the citation at the same position, then from ``default_url``.
    """
    if not isinstance(items, list):
        return []

    default_url = default_url or config.get("intelligence.default_url")
    links = grounding_links(grounding_metadata)
    updates = []
    seen_ids = set()

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.debug("Skipping non-object update at position %d", index)
            continue

        update = RegulatoryUpdate.from_dict(item)
        if not update.title:
            logger.debug("Skipping update without title at position %d", index)
            continue

        source = config.normalize_source(update.source)
        if source is None:
            _, reason = config.validate_source(update.source)
            logger.warning("Dropping update '%s': %s", update.title[:60], reason)
            continue

        update_id = update.id
        if not update_id or update_id in seen_ids:
            base = f"update-{index + 1}"
            update_id, suffix = base, 2
            while update_id in seen_ids:
                update_id = f"{base}-{suffix}"
                suffix += 1
        seen_ids.add(update_id)

        url = update.url
        if not url:
            citation = links[index] if index < len(links) else None
            url = citation or default_url

        updates.append(
            RegulatoryUpdate(
                id=update_id,
                source=source,
                title=update.title,
                summary=update.summary,
                date=update.date,
                impact_score=update.impact_score,
                category=update.category,
                url=url,
                analysis=update.analysis,
            )
        )

    return updates
