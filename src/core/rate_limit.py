"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

# Keyed by client IP: visitors are anonymous, and owners share budgets with
# whoever else is behind the same address
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)

READ_LIMIT = settings.rate_limit_read
WRITE_LIMIT = settings.rate_limit_write
CLICK_LIMIT = settings.rate_limit_click


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer 429 in the standard error shape."""
    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitExceeded):
        limit = exc.detail
        headers["Retry-After"] = str(exc.limit.limit.get_expiry())
    else:
        limit = str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Too many requests to {request.url.path}",
            "details": {"limit": str(limit)},
        },
        headers=headers,
    )
