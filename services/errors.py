"""Failure taxonomy shared by every portfolio operation.

Each error knows the HTTP status it maps to; `main.py` turns any of them into
an `{"error": ...}` response at the request boundary.
"""
from __future__ import annotations

from typing import Any, Optional


class PortfolioError(Exception):
    status_code = 500

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload

    def to_response(self) -> dict:
        return {"error": self.payload if self.payload is not None else self.message}


class ValidationError(PortfolioError):
    """Malformed or incomplete input. Never persisted, never retried."""

    status_code = 400


class PreconditionError(PortfolioError):
    """Required configuration is missing; the operation was not attempted."""

    status_code = 400


class ExternalServiceError(PortfolioError):
    """Plaid or Google Sheets failed or could not be reached."""

    status_code = 502
