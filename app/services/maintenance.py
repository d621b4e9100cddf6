"""Periodic cleanup of expired in-memory state.

Rate limit buckets and daily reaction quota counters are only useful until
their window resets. Sweeping them keeps the per-process maps from growing
with every distinct client; reaction entries themselves are never removed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.services.reaction_service import ReactionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeReport:
    purged_buckets: int
    purged_daily_counters: int


def purge_expired_state(
    limiter: AbstractRateLimiter,
    services: list[ReactionService],
) -> PurgeReport:
    """Run one sweep over the limiter and every reaction ledger."""

    buckets = limiter.purge_expired()
    daily = sum(service.ledger.purge_expired() for service in services)
    logger.info(
        "maintenance.purged",
        extra={"purged_buckets": buckets, "purged_daily_counters": daily},
    )
    return PurgeReport(purged_buckets=buckets, purged_daily_counters=daily)


async def run_purge_loop(
    limiter: AbstractRateLimiter,
    services: list[ReactionService],
    *,
    interval_seconds: float,
) -> None:
    """Sweep expired state every ``interval_seconds`` until cancelled."""

    logger.info("maintenance.started", extra={"interval_s": interval_seconds})
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            purge_expired_state(limiter, services)
        except Exception:
            # A failed sweep must not stop future sweeps
            logger.exception("maintenance.purge_failed")
