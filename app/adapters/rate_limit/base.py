"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
in-memory store can later be swapped for a shared one (e.g., Redis) whose
increment-and-compare is atomic across server instances.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitConfig:
    """A limit class: how many requests are allowed per window.

    Attributes:
        max_requests: Maximum successful checks per window.
        window_ms: Window length in milliseconds.
    """

    max_requests: int
    window_ms: int

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a check-and-increment operation.

    Attributes:
        success: Whether the request may proceed.
        remaining: Requests left in the current window (0 when blocked).
        reset_in_ms: Milliseconds until the current window expires.
        limit: Max requests per window for the checked class.
    """

    success: bool
    remaining: int
    reset_in_ms: int
    limit: int

    @property
    def retry_after_seconds(self) -> int:
        """Whole seconds a blocked client should wait (Retry-After value)."""
        return -(-max(0, self.reset_in_ms) // 1000)


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request for ``key`` against ``config``.

        Args:
            key: Namespaced client identity (e.g. ``"general:203.0.113.9"``).
            config: Limit class to enforce.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop buckets whose window has expired.

        Returns:
            Number of buckets removed.
        """
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, int]:
        """Return lightweight counters about the store."""
        raise NotImplementedError
