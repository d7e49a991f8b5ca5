from __future__ import annotations

import os
from collections.abc import Callable
from typing import TypedDict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import parse as parse_limit
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter

READ_LIMIT = "60/minute"
WRITE_LIMIT = "30/minute"
# Scans and trade-in lookups each cost a model call.
AI_LIMIT = "10/minute"


class RateLimitInfo(TypedDict, total=False):
    method: str
    ip: str
    limit: str


def _client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For, else the ASGI peer
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "local"


# slowapi supplies the RateLimitExceeded type the app's 429 handler is bound to;
# the per-route-group limits below are applied with `limits` directly.
limiter = Limiter(key_func=_client_ip)

_storage = MemoryStorage()
_rate = MovingWindowRateLimiter(_storage)


def _enabled() -> bool:
    # RATE_LIMIT_ENABLED=1 wins over TESTING
    if os.getenv("RATE_LIMIT_ENABLED") in {"1", "true", "TRUE"}:
        return True
    return not os.getenv("TESTING")


def _is_ai_route(method: str, path: str) -> bool:
    return path.startswith("/scans/") or (method == "POST" and path.endswith("/trade-in"))


def limit_for(method: str, path: str) -> tuple[str, str] | None:
    """Return (bucket, limit) for a request, or None when it is not limited."""
    m = method.upper()
    if _is_ai_route(m, path):
        return "ai", AI_LIMIT
    if m in {"GET", "HEAD"}:
        return "read", READ_LIMIT
    if m in {"POST", "PUT", "PATCH", "DELETE"}:
        return "write", WRITE_LIMIT
    # OPTIONS (CORS preflight) is never limited
    return None


def rate_limited_response(info: RateLimitInfo) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "rate_limited",
                "message": "Too Many Requests",
                "detail": info,
            }
        },
    )


async def rate_limit_middleware(request: Request, call_next: Callable) -> Response:
    if not _enabled():
        return await call_next(request)

    rule = limit_for(request.method, request.url.path)
    if rule is None:
        return await call_next(request)
    bucket, limit_str = rule

    ip = _client_ip(request)
    if not _rate.hit(parse_limit(limit_str), f"ip:{ip}|b:{bucket}"):
        info: RateLimitInfo = {"method": request.method.upper(), "ip": ip, "limit": limit_str}
        request.state.rate_limit_info = info
        return rate_limited_response(info)

    response = await call_next(request)
    response.headers.setdefault("X-RateLimit-Limit", limit_str)
    return response
