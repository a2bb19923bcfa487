"""
Regulatory Intelligence Module

Retrieval and analysis of Irish insurance and pensions regulatory updates.

This module provides:
- A REST client for the Gemini generateContent API
- Update retrieval with Google Search grounding and fallback data
- Aggregated sentiment/risk analysis over a batch of updates
"""

from .analyzer import (
    AnalysisGenerator,
    AnalysisResult,
)
from .fallback import (
    FALLBACK_ANALYSIS,
    FALLBACK_UPDATES,
    FALLBACK_VERSION,
)
from .fetcher import (
    FetchResult,
    UpdateFetcher,
)
from .gemini import (
    GeminiClient,
    GeminiResponse,
)

__all__ = [
    # Gemini
    "GeminiClient",
    "GeminiResponse",
    # Fetcher
    "FetchResult",
    "UpdateFetcher",
    # Analyzer
    "AnalysisGenerator",
    "AnalysisResult",
    # Fallback data
    "FALLBACK_ANALYSIS",
    "FALLBACK_UPDATES",
    "FALLBACK_VERSION",
]
