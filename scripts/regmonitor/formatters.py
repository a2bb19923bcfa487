"""
Plain-text formatting of updates and analyses for terminal output.
"""

from typing import Sequence

from .models import ImpactAnalysis, RegulatoryUpdate

IMPACT_LEVELS = [(8.0, "HIGH"), (5.0, "MEDIUM"), (0.0, "LOW")]


def impact_level(score: float) -> str:
    """Bucket an impact score into HIGH / MEDIUM / LOW."""
    for threshold, label in IMPACT_LEVELS:
        if score >= threshold:
            return label
    return "LOW"


def truncate(text: str, length: int) -> str:
    if not text or len(text) <= length:
        return text or ""
    return text[: length - 3].rstrip() + "..."


def format_update(update: RegulatoryUpdate, index: int = 0) -> str:
    """Format a single update as a short multi-line block."""
    lines = [f"#{index + 1} [{update.source}] {truncate(update.title, 90)}"]

    meta = [m for m in (update.date, update.category) if m]
    meta.append(f"impact {update.impact_score:g}/10 ({impact_level(update.impact_score)})")
    lines.append("    " + " · ".join(meta))

    if update.summary:
        lines.append(f"    {truncate(update.summary, 200)}")
    lines.append(f"    {update.url}")
    return "\n".join(lines)


def format_updates(updates: Sequence[RegulatoryUpdate]) -> str:
    if not updates:
        return "No regulatory updates found."
    return "\n\n".join(format_update(u, i) for i, u in enumerate(updates))


def format_analysis(analysis: ImpactAnalysis) -> str:
    """Format an impact analysis with numbered risks and actions."""
    lines = [f"Overall sentiment: {analysis.overall_sentiment}"]
    if analysis.summary:
        lines.extend(["", analysis.summary])
    if analysis.key_risks:
        lines.extend(["", "Key risks:"])
        lines.extend(f"  {i}. {risk}" for i, risk in enumerate(analysis.key_risks, 1))
    if analysis.recommended_actions:
        lines.extend(["", "Recommended actions:"])
        lines.extend(
            f"  {i}. {action}" for i, action in enumerate(analysis.recommended_actions, 1)
        )
    return "\n".join(lines)
