import logging
from typing import Dict, Optional

from fastapi.responses import JSONResponse

from meetingdesk.core.config import settings

logger = logging.getLogger(__name__)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": settings.cors_allow_origin,
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


class ExtractionError(Exception):
    """Base for every failure the meeting extraction can report. Subclasses fix the HTTP status, a stable kind, and whether retrying the same request may help.
    Why available: Lets the API map failures to distinguishable responses instead of raw strings."""

    status_code = 500
    kind = "extraction_error"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(ExtractionError):
    status_code = 401
    kind = "unauthorized"


class InvalidInput(ExtractionError):
    """Request content failed validation; `field` names the offending field."""

    status_code = 400
    kind = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ProviderCallFailed(ExtractionError):
    # timeouts, 5xx, quota: the provider never produced an answer
    kind = "provider_call_failed"
    retryable = True


class ProviderResponseInvalid(ExtractionError):
    # provider answered but broke the output contract
    kind = "provider_response_invalid"


def error_body(err: ExtractionError) -> Dict[str, object]:
    body: Dict[str, object] = {"error": err.message, "kind": err.kind, "retryable": err.retryable}
    field = getattr(err, "field", None)
    if field:
        body["field"] = field
    return body


def as_json_error(err: ExtractionError, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Render a typed extraction error as {"error": ...} with its status code and CORS headers."""
    return JSONResponse(status_code=err.status_code, content=error_body(err), headers=headers or CORS_HEADERS)


def as_http_500(e: Exception, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Log exception and return a generic 500 (no internal details leaked).
    Why available: Centralized error handling so the API never leaks stack traces or internal state to clients."""
    logger.error("unhandled_exception", exc_info=e)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "kind": "internal_error", "retryable": False},
        headers=headers or CORS_HEADERS,
    )
