"""Tests for the expired-state sweeper."""

import asyncio

import pytest

from app.adapters.rate_limit import InMemoryFixedWindowRateLimiter, RateLimitConfig
from app.adapters.reactions import InMemoryReactionLedger
from app.services.maintenance import purge_expired_state, run_purge_loop
from app.services.reaction_service import ACKNOWLEDGEMENTS, HIGH_FIVES, ReactionService

DAY = 24 * 60 * 60


@pytest.fixture
def stores(clock):
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    services = [
        ReactionService(InMemoryReactionLedger(clock=clock), kind=HIGH_FIVES),
        ReactionService(
            InMemoryReactionLedger(target_noun="proof", reaction_plural="acknowledgements", clock=clock),
            kind=ACKNOWLEDGEMENTS,
            stores_emoji=True,
        ),
    ]
    return clock, limiter, services


def test_purge_expired_state_sweeps_limiter_and_ledgers(stores) -> None:
    clock, limiter, services = stores
    limiter.check("general:1.2.3.4", RateLimitConfig(max_requests=5, window_ms=60_000))
    services[0].react("r1", "agent-a")
    services[1].react("p1", "agent-a", "fire")

    assert purge_expired_state(limiter, services).purged_buckets == 0

    clock.advance(DAY + 1)
    report = purge_expired_state(limiter, services)

    assert report.purged_buckets == 1
    assert report.purged_daily_counters == 2
    assert services[0].total("r1") == 1
    assert services[1].total("p1") == 1


def test_run_purge_loop_sweeps_until_cancelled(stores) -> None:
    clock, limiter, services = stores
    limiter.check("general:1.2.3.4", RateLimitConfig(max_requests=5, window_ms=1_000))
    clock.advance(2)

    async def scenario() -> None:
        task = asyncio.create_task(run_purge_loop(limiter, services, interval_seconds=0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert len(limiter) == 0


def test_run_purge_loop_survives_failed_sweep(stores, monkeypatch) -> None:
    _, limiter, services = stores
    calls = []

    def broken_purge() -> int:
        calls.append(1)
        raise RuntimeError("boom")

    monkeypatch.setattr(limiter, "purge_expired", broken_purge)

    async def scenario() -> None:
        task = asyncio.create_task(run_purge_loop(limiter, services, interval_seconds=0.01))
        await asyncio.sleep(0.05)
        assert not task.done()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert len(calls) >= 2
