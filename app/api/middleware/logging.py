# 📄 File: app/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request made to the plant health app: what was asked for, how
# long it took and whether it went wrong, tagged with an id so related log lines match up.
# 🧪 Purpose (Technical Summary):
# Request logging middleware that binds a request id into the logging context, emits
# structured request/response records with timing, and echoes X-Request-ID.
# 🔗 Dependencies:
# FastAPI/Starlette, app.shared.utils.logging, uuid, time
# 🔄 Connected Modules / Calls From:
# app.main.py (middleware registration)

import time
import uuid
from typing import Set

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

EXCLUDED_PATHS = {"/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    Features:
    - Request id correlation (header in, header out, log context)
    - Request/response timing
    - Slow request warnings
    """

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold: float = 2.0,
        excluded_paths: Set[str] = None,
    ):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.excluded_paths = excluded_paths or EXCLUDED_PATHS

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER.lower()) or str(uuid.uuid4())
        request.state.request_id = request_id

        with log_context(request_id=request_id):
            start_time = time.time()
            logger.info(
                f"{request.method} {request.url.path}",
                extra={
                    "event_type": "http_request",
                    "method": request.method,
                    "path": request.url.path,
                    "client": request.client.host if request.client else None,
                }
            )

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} raised {type(e).__name__}",
                    extra={"event_type": "http_error", "error_type": type(e).__name__},
                    exc_info=True,
                )
                raise

            processing_ms = round((time.time() - start_time) * 1000, 2)
            extra = {
                "event_type": "http_response",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "processing_time_ms": processing_ms,
            }
            message = f"{request.method} {request.url.path} -> {response.status_code} ({processing_ms}ms)"
            if processing_ms / 1000 >= self.slow_request_threshold:
                logger.warning(f"Slow request: {message}", extra=extra)
            else:
                logger.info(message, extra=extra)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
