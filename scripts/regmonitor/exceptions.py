"""
Error types shared by the fetch, analysis and dashboard layers.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Why a fetch or analysis produced no live data."""

    CONFIGURATION = "configuration"
    PROVIDER_ERROR = "provider_error"
    MALFORMED_RESPONSE = "malformed_response"


class RegMonitorError(Exception):
    """Base class for Regulatory Monitor errors."""

    kind: ErrorKind = ErrorKind.PROVIDER_ERROR


class ConfigurationError(RegMonitorError):
    """The Gemini credential is missing or configuration is invalid."""

    kind = ErrorKind.CONFIGURATION


class ProviderError(RegMonitorError):
    """The Gemini API could not be reached or returned an unusable response."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidTransition(RegMonitorError):
    """A dashboard state transition was requested from the wrong status."""
