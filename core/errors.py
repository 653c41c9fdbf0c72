"""Errors raised by handlers and rendered as JSON by the app."""
from __future__ import annotations

from typing import Any, Dict


class ApiError(Exception):
    """A client-facing failure with an HTTP status and a JSON payload.

    The payload keeps the shape each endpoint family already answers with,
    e.g. ``{"error": "Invalid planId"}`` for checkout or
    ``{"ok": False, "reason": "missing-token"}`` for KYC.
    """

    def __init__(self, status: int, **payload: Any) -> None:
        self.status = status
        self.payload: Dict[str, Any] = payload
        message = payload.get("error") or payload.get("reason") or "request failed"
        super().__init__(str(message))


class ConfigurationError(ApiError):
    """A required integration is not configured on this deployment."""

    def __init__(self, service: str) -> None:
        super().__init__(503, error=f"{service} is not configured")
        self.service = service


__all__ = ["ApiError", "ConfigurationError"]
