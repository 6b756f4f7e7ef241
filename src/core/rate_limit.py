"""Per-client request throttling with slowapi."""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

logger = structlog.get_logger()

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a throttled request in the standard error envelope."""
    limit = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    logger.warning("rate_limited", client=get_remote_address(request), limit=limit)
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": "60"},
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": "Too many requests, slow down",
            "details": {"limit": limit},
        },
    )
