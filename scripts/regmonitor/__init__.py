"""
Regulatory Monitor

Dashboard of Irish insurance and pensions regulatory updates (CBI, EIOPA,
Pensions Authority) with an AI-generated risk summary.
"""

__version__ = "1.0.0"
