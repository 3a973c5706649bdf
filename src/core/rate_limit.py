"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

SPACE_HEADER = "X-Space-Id"


def space_scoped_key(request: Request) -> str:
    """Bucket requests per client address and, when present, per space."""
    address = get_remote_address(request)
    space_id = request.headers.get(SPACE_HEADER) or request.path_params.get("space_id")
    return f"{address}:{space_id}" if space_id else address


limiter = Limiter(
    key_func=space_scoped_key,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Rate limit exceeded: {detail}",
            "details": {
                "retry_after": str(detail),
            },
        },
    )
