"""
Static data shown when live retrieval is unavailable.

Bump FALLBACK_VERSION whenever the records below change.
"""

from typing import List

from ..models import ImpactAnalysis, RegulatoryUpdate

FALLBACK_VERSION = "mock-2024.1"

FALLBACK_UPDATES: List[RegulatoryUpdate] = [
    RegulatoryUpdate(
        id="fallback-cbi-1",
        source="CBI",
        title="Consumer Protection Code Review: Revised Code Published",
        summary=(
            "The Central Bank of Ireland published the revised Consumer Protection "
            "Code, including new requirements on digitalisation, informed decision "
            "making and the treatment of vulnerable customers."
        ),
        date="March 2024",
        impact_score=8.5,
        category="Consumer Protection",
        url="https://www.centralbank.ie/regulation/consumer-protection",
        analysis="Insurers should map product governance and sales processes to the revised Code.",
    ),
    RegulatoryUpdate(
        id="fallback-eiopa-1",
        source="EIOPA",
        title="Solvency II Review: Technical Advice on Long-Term Guarantees",
        summary=(
            "EIOPA issued technical advice on the Solvency II review covering the "
            "risk margin, volatility adjustment and sustainability risks in the "
            "standard formula."
        ),
        date="February 2024",
        impact_score=7.0,
        category="Prudential",
        url="https://www.eiopa.europa.eu/browse/regulation-and-policy/solvency-ii_en",
    ),
    RegulatoryUpdate(
        id="fallback-pa-1",
        source="Pensions Authority",
        title="Code of Practice for Trustees: IORP II Governance Requirements",
        summary=(
            "The Pensions Authority reminded trustees of occupational pension schemes "
            "of their obligations under the General Scheme Requirements, including "
            "own-risk assessments and key function holder appointments."
        ),
        date="January 2024",
        impact_score=6.0,
        category="Governance",
        url="https://www.pensionsauthority.ie/en/trustees/",
    ),
]

FALLBACK_ANALYSIS = ImpactAnalysis(
    overall_sentiment="Neutral",
    key_risks=(
        "Live regulatory data is unavailable; figures shown are illustrative.",
        "Conduct requirements under the revised Consumer Protection Code.",
    ),
    recommended_actions=(
        "Configure GEMINI_API_KEY to enable live monitoring.",
        "Review product governance against the revised Consumer Protection Code.",
    ),
    summary=(
        "Mock analysis generated from static sample data. Connect the Gemini API "
        "to receive a live assessment of recent CBI, EIOPA and Pensions Authority updates."
    ),
)
