# app/core/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class DashboardError(Exception):
    """
    Base class for every failure a lookup handler reports to its caller.
    Rendered as {"error": message, "details": ...} with `status_code`.
    """

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequest(DashboardError):
    status_code = 400


class NotFound(DashboardError):
    status_code = 404


class UpstreamError(DashboardError):
    """Upstream returned a non-success status, bad JSON, or could not be reached."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message, details=details)
        self.upstream_status = upstream_status


class ConfigurationError(DashboardError):
    status_code = 500
