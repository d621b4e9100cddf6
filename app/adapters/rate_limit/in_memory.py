"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Windows start at a key's first request, not on aligned clock boundaries.
- Buckets are only removed by ``purge_expired``; without periodic sweeps the
  map grows with every distinct key.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitConfig, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    count: int
    expires_at_ms: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter keeping one counter and window expiry per key.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the limiter.

        Args:
            clock: Time source returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._buckets: dict[str, _Bucket] = {}

    def _now_ms(self) -> int:
        return int(round(self._clock() * 1000))

    def _get_or_start_bucket(self, key: str, window_ms: int, now_ms: int) -> _Bucket:
        """Return the live bucket for key, starting a new window if needed.

        A bucket whose expiry lies strictly before ``now_ms`` is replaced by a
        fresh one expiring ``window_ms`` from now.
        """
        bucket = self._buckets.get(key)
        if bucket is None or bucket.expires_at_ms < now_ms:
            bucket = _Bucket(count=0, expires_at_ms=now_ms + window_ms)
            self._buckets[key] = bucket
        return bucket

    def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        """Check the key's budget and consume one unit when allowed.

        Args:
            key: Unique identifier for rate limiting.
            config: Limit class (max requests and window length).

        Returns:
            RateLimitResult with the allowance decision and reset timing.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        now_ms = self._now_ms()

        with self._lock:
            bucket = self._get_or_start_bucket(key, config.window_ms, now_ms)
            reset_in_ms = max(0, bucket.expires_at_ms - now_ms)

            if bucket.count >= config.max_requests:
                return RateLimitResult(
                    success=False,
                    remaining=0,
                    reset_in_ms=reset_in_ms,
                    limit=config.max_requests,
                )

            bucket.count += 1
            return RateLimitResult(
                success=True,
                remaining=config.max_requests - bucket.count,
                reset_in_ms=reset_in_ms,
                limit=config.max_requests,
            )

    def purge_expired(self) -> int:
        now_ms = self._now_ms()
        with self._lock:
            expired = [k for k, b in self._buckets.items() if b.expires_at_ms < now_ms]
            for key in expired:
                del self._buckets[key]
            remaining = len(self._buckets)

        if expired:
            logger.debug(
                "rate_limit.purged",
                extra={"purged": len(expired), "buckets": remaining},
            )
        return len(expired)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"buckets": len(self._buckets)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)
