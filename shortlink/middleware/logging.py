"""
Logging Middleware for Request/Response Logging

This middleware logs all HTTP requests and responses for observability.
It captures:
- Request method and path
- Response status code
- Request processing time
- Client IP address

Design Decisions:
- Uses Starlette's BaseHTTPMiddleware for compatibility
- Logs to standard Python logging; the remote audit channel is separate
- Non-blocking: Doesn't impact request processing time significantly
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shortlink.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    Server errors are logged at ERROR, client errors at WARNING,
    everything else at INFO.
    """

    async def dispatch(self, request: Request, call_next):
        client_ip = self._get_client_ip(request)
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time

        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP
        message = (
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{client_ip}"
        )
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        response.headers["X-Process-Time"] = f"{process_time:.6f}"

        return response

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        return request.client.host if request.client else "unknown"


def add_logging_middleware(app: FastAPI) -> None:
    """
    Add logging middleware to FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)
