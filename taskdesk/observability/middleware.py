"""
FastAPI middleware for observability.

Correlation ID and request logging middleware.

Dependencies: fastapi, taskdesk.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from taskdesk.observability.correlation import clear_correlation_id, set_correlation_id
from taskdesk.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
# Polled by orchestrators; logged at DEBUG only.
QUIET_PATHS = frozenset({"/api/ai/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """
        Log HTTP request and response with timing.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response object
        """
        start_time = time.time()

        method = request.method
        path = request.url.path
        level = logging.DEBUG if path in QUIET_PATHS else logging.INFO

        log_with_context(
            logger,
            level,
            f"{method} {path}",
            method=method,
            path=path,
            client_host=request.client.host if request.client else None,
        )

        try:
            response: Response = await call_next(request)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{method} {path} - Exception",
                e,
                method=method,
                path=path,
                process_time_ms=round((time.time() - start_time) * 1000, 2),
            )
            raise

        log_with_context(
            logger,
            level if response.status_code < 500 else logging.WARNING,
            f"{method} {path} - {response.status_code}",
            method=method,
            path=path,
            status_code=response.status_code,
            process_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation ID injection."""

    async def dispatch(self, request: Request, call_next):
        """
        Inject correlation ID into request context.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
