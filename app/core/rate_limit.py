"""Rate limiting dependencies for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Rate limiting strategy:
- Fixed-window limits per named limit class (register, proof, high_five,
  acknowledgement, general).
- Keys are ``"<class>:<identity>"``; identity is the agent id where the route
  has one, otherwise the client IP.
- The limiter instance lives on ``app.state`` and is created by the app
  factory, so each app (and each test) owns its own buckets.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitConfig, RateLimitResult
from app.core.config import RateLimitSettings, settings
from app.core.errors import RateLimitAppError
from app.core.logging import hash_identity

logger = logging.getLogger(__name__)

REGISTER = "register"
PROOF = "proof"
HIGH_FIVE = "high_five"
ACKNOWLEDGEMENT = "acknowledgement"
GENERAL = "general"

_EXCEEDED_MESSAGES = {
    HIGH_FIVE: "Too many high-fives. Please try again later.",
    ACKNOWLEDGEMENT: "Too many acknowledgements. Please try again later.",
}


def build_limit_classes(rate_settings: RateLimitSettings | None = None) -> dict[str, RateLimitConfig]:
    """Resolve every limit class from settings.

    Args:
        rate_settings: Optional override; defaults to the global settings.

    Returns:
        Mapping of limit class name to its RateLimitConfig.
    """

    cfg = rate_settings or settings.rate_limit
    window_ms = cfg.window_seconds * 1000
    return {
        REGISTER: RateLimitConfig(max_requests=cfg.register_max, window_ms=window_ms),
        PROOF: RateLimitConfig(max_requests=cfg.proof_max, window_ms=window_ms),
        HIGH_FIVE: RateLimitConfig(max_requests=cfg.high_five_max, window_ms=window_ms),
        ACKNOWLEDGEMENT: RateLimitConfig(max_requests=cfg.acknowledgement_max, window_ms=window_ms),
        GENERAL: RateLimitConfig(max_requests=cfg.general_max, window_ms=window_ms),
    }


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""

    return request.app.state.rate_limiter


def get_client_ip(request: Request) -> str:
    """Derive the client network identity from proxy headers or the socket.

    Examples:
        X-Forwarded-For: "203.0.113.9, 10.0.0.1" -> "203.0.113.9"
        X-Real-IP: "198.51.100.4"                -> "198.51.100.4"
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _build_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {"Retry-After": str(result.retry_after_seconds)}
    if settings.rate_limit.include_headers:
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.retry_after_seconds)
    return headers


def enforce_rate_limit(
    request: Request,
    limit_class: str,
    *,
    identity: str | None = None,
) -> RateLimitResult | None:
    """Consume one request from the caller's budget for ``limit_class``.

    Args:
        request: FastAPI request (used for the limiter and client IP).
        limit_class: Name of the limit class to enforce.
        identity: Caller identity; defaults to the client IP.

    Returns:
        The limiter result, or None when rate limiting is disabled.

    Raises:
        RateLimitAppError: When the caller has exhausted the window.
        KeyError: If ``limit_class`` is not a known class.
    """

    if not settings.rate_limit.enabled:
        return None

    config = build_limit_classes()[limit_class]
    identity = identity or get_client_ip(request)
    limiter = get_rate_limiter(request)

    result = limiter.check(f"{limit_class}:{identity}", config)
    if result.success:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "limit_class": limit_class,
                "identity_hash": hash_identity(identity),
                "remaining": result.remaining,
            },
        )
        return result

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "limit_class": limit_class,
            "identity_hash": hash_identity(identity),
            "limit": result.limit,
            "reset_in_ms": result.reset_in_ms,
        },
    )
    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message=_EXCEEDED_MESSAGES.get(limit_class, "Too many requests. Please try again later."),
        details={
            "limit_class": limit_class,
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after": result.retry_after_seconds,
        },
        retry_after=result.retry_after_seconds,
        headers=_build_headers(result),
    )


def rate_limited(limit_class: str) -> Callable[[Request], Awaitable[None]]:
    """Build a route dependency enforcing ``limit_class`` per client IP.

    Usage:
        @router.get("/stats", dependencies=[Depends(rate_limited(GENERAL))])
    """

    async def _dependency(request: Request) -> None:
        enforce_rate_limit(request, limit_class)

    return _dependency
