"""
Error types raised by the identity-platform client.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

try:
    from opentelemetry import trace
    HAS_OPENTELEMETRY = True
except ImportError:
    HAS_OPENTELEMETRY = False


class ErrorResponse(BaseModel):
    """Serializable error payload."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class IdentityClientError(Exception):
    """Base exception for the client library."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        if HAS_OPENTELEMETRY:
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


class ConfigurationError(IdentityClientError):
    """Invalid client configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class RequiredParameterError(IdentityClientError):
    """A required request parameter was null or missing."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(
            "REQUIRED_PARAMETER",
            message or f"Required parameter requestParameters.{field} was null or undefined.",
            {"field": field}
        )


class RequestTimeoutError(IdentityClientError):
    """The request did not complete before the configured deadline."""

    def __init__(self, timeout_ms: Optional[int] = None, message: str = "The request was timed out."):
        self.timeout_ms = timeout_ms
        details = {"timeout_ms": timeout_ms} if timeout_ms is not None else None
        super().__init__("REQUEST_TIMEOUT", message, details)


class FetchError(IdentityClientError):
    """The exchange failed and no middleware supplied a recovery response."""

    def __init__(self, cause: BaseException, message: str = "The request failed"):
        self.cause = cause
        super().__init__(
            "FETCH_ERROR",
            message,
            {"cause": f"{type(cause).__name__}: {cause}"}
        )


class ResponseError(IdentityClientError):
    """A non-2xx response was received."""

    def __init__(self,
                 status_code: int,
                 body: Any = None,
                 headers: Optional[Dict[str, str]] = None,
                 message: Optional[str] = None,
                 code: str = "RESPONSE_ERROR"):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        super().__init__(
            code,
            message or f"Response returned an error code: {status_code}",
            {"status_code": status_code}
        )


class IdTokenValidationError(IdentityClientError):
    """An ID token failed signature or claim validation."""

    def __init__(self, message: str, claim: Optional[str] = None):
        self.claim = claim
        super().__init__("ID_TOKEN_INVALID", message, {"claim": claim} if claim else None)
