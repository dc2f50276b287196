"""
Error taxonomy surfaced to dashboard callers.

Every failure is rendered as ``{"error": {"code", "message"}, "success": false}``.
"""

from __future__ import annotations

from typing import Any, Dict


class DeltaProxyError(RuntimeError):
    """Base class for failures converted into the JSON error envelope."""

    code = "proxy_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}, "success": False}


class MissingKeysError(DeltaProxyError):
    """Raised when no API key/secret is available from config or request."""

    code = "missing_keys"
    status_code = 400

    def __init__(self, message: str = "API key/secret not provided") -> None:
        super().__init__(message)


class InvalidRequestError(DeltaProxyError):
    """Raised when the caller's payload lacks fields the exchange requires."""

    code = "invalid_request"
    status_code = 400


class BackendError(DeltaProxyError):
    """Transport-level failure reaching the exchange (DNS, refused, timeout)."""

    code = "backend_error"
    # Dashboards read `success`, not the status line.
    status_code = 200


class InvalidUpstreamResponseError(DeltaProxyError):
    """The exchange answered, but not with JSON."""

    code = "invalid_upstream_response"
    status_code = 200
