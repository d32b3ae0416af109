"""Request logging middleware with request id propagation."""

import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(request: Request) -> str:
    """Reuse the caller's request id, or generate one."""
    request_id = request.headers.get(REQUEST_ID_HEADER)
    if request_id:
        return request_id[:128]
    return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and echoes the request id header."""

    def __init__(self, app, exclude_paths: Optional[list] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/docs", "/redoc", "/openapi.json"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request, timing it."""
        request_id = get_request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        path = request.url.path
        if not any(path.startswith(excluded) for excluded in self.exclude_paths):
            logger.info(
                f"{request.method} {path} -> {response.status_code} "
                f"in {duration_ms:.1f}ms [{request_id}]"
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
