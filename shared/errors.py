"""
Shared error handling for the Wurd content client.
"""

from typing import Dict, Any, Optional

from httpx import TransportError
from opentelemetry import trace
from pydantic import BaseModel

__all__ = [
    "ErrorResponse",
    "WurdException",
    "ConfigurationError",
    "AuthorizationError",
    "RemoteError",
    "PageNotFound",
    "TransportError",
]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class WurdException(Exception):
    """Base exception for the content client."""

    http_status: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(WurdException):
    """Client constructed with missing or invalid settings."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class AuthorizationError(WurdException):
    """The content API rejected the app credentials (HTTP 401)."""

    http_status = 502

    def __init__(self, message: str = "Authorization failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHORIZATION_ERROR", message, details)


class RemoteError(WurdException):
    """Any other non-OK answer from the content API.

    ``status_code`` is the status the remote API answered with, and
    ``details["payload"]`` holds whatever error body it sent.
    """

    http_status = 502

    def __init__(self, status_code: int, payload: Any = None, message: Optional[str] = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(
            "REMOTE_ERROR",
            message or _payload_message(payload) or f"Content API responded with status {status_code}",
            {"status_code": status_code, "payload": payload},
        )


class PageNotFound(WurdException):
    """Page-by-parameter lookup found nothing; handlers should fall through."""

    http_status = 404

    def __init__(self, page: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.page = page
        super().__init__("PAGE_NOT_FOUND", f"Page not found: {page}", {"page": page, **(details or {})})


def _payload_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None
