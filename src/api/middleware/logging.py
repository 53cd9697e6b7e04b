"""Request logging middleware."""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Polled by load balancers
UNLOGGED_PATHS = frozenset({"/health", "/health/detailed"})
# Fired on every outbound tap from a public page
BEACON_PATHS = frozenset({"/api/v1/analytics/click"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request context for structlog and log one line per request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=getattr(request.state, "request_id", "unknown"),
            method=request.method,
            path=path,
            authenticated="authorization" in request.headers,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=_elapsed_ms(started),
            )
            raise

        if path in UNLOGGED_PATHS:
            return response

        if response.status_code >= 500:
            log = logger.warning
        elif path in BEACON_PATHS:
            log = logger.debug
        else:
            log = logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
