"""
Per-client rate limits.

Every route shares the RATE_LIMIT_PER_MINUTE default. The credential form
gets its own tighter AUTH_RATE_LIMIT_PER_MINUTE, since each submission is a
Supabase auth call made on the visitor's behalf.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import config

logger = logging.getLogger(__name__)

# Effectively unlimited, used when a limit is configured as 0
UNLIMITED = "1000000/minute"


def per_minute(limit: int) -> str:
    return f"{limit}/minute" if limit > 0 else UNLIMITED


def default_limit() -> str:
    return per_minute(config.RATE_LIMIT_PER_MINUTE)


def auth_limit() -> str:
    return per_minute(config.AUTH_RATE_LIMIT_PER_MINUTE)


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[default_limit],
    storage_uri="memory://",
)


def _retry_after(exc: RateLimitExceeded) -> int:
    item = getattr(getattr(exc, "limit", None), "limit", None)
    return item.get_expiry() if item is not None else 60


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = _retry_after(exc)
    logger.warning(
        f"Rate limit hit by {get_remote_address(request)} on {request.url.path}: {exc.detail}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Too many requests ({exc.detail}), try again later",
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )


def setup_rate_limiting(app):
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
