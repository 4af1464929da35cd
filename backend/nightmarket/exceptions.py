"""Error taxonomy shared by services and the API layer.

Every error carries the HTTP status it maps to; the exception handlers in
``nightmarket.main`` turn them into ``{"error": message}`` responses.
"""

from typing import Any, Dict, Optional


class NightMarketError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationMissing(NightMarketError):
    """Store or issue tracker settings are absent."""

    status_code = 500


class Unauthorized(NightMarketError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)


class ValidationFailed(NightMarketError):
    status_code = 400


class NotFound(NightMarketError):
    status_code = 404


class UpstreamFailure(NightMarketError):
    """The issue tracker or the store call failed."""

    status_code = 500
