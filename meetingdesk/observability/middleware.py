import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("meetingdesk.access")

REQUEST_ID_HEADER = "x-request-id"


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id (client-supplied x-request-id or a new uuid4), echoes it back, and logs one
    "request_completed" record per request with method, path, status and latency as structured `extra` fields.
    Why available: Lets a failed /analyze-meeting call reported by the UI be matched to the server-side log lines."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        logger.info(
            "request_completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "latency_ms": round((time.perf_counter() - started) * 1000.0, 2),
            },
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")
