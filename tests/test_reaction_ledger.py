"""Unit tests for the in-memory reaction ledger."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from app.adapters.reactions import (
    ALREADY_ACKNOWLEDGED,
    DAILY_QUOTA_EXCEEDED,
    InMemoryReactionLedger,
)

# 2024-01-01T12:00:00Z
NOON = 1_704_110_400.0


@pytest.fixture
def clock() -> Mock:
    return Mock(return_value=NOON)


@pytest.fixture
def ledger(clock: Mock) -> InMemoryReactionLedger:
    return InMemoryReactionLedger(clock=clock)


def test_get_is_zero_before_any_reaction(ledger: InMemoryReactionLedger) -> None:
    assert ledger.get("T1") == 0
    assert ledger.stats()["targets"] == 0


def test_two_agents_one_duplicate_scenario(ledger: InMemoryReactionLedger) -> None:
    first = ledger.add("T1", "A")
    assert first.success is True
    assert first.count == 1

    duplicate = ledger.add("T1", "A")
    assert duplicate.success is False
    assert duplicate.error_code == ALREADY_ACKNOWLEDGED
    assert duplicate.error == "Already acknowledged this receipt"
    assert ledger.get("T1") == 1

    second = ledger.add("T1", "B")
    assert second.success is True
    assert second.count == 2


def test_get_counts_distinct_successful_reactions(ledger: InMemoryReactionLedger) -> None:
    for i in range(7):
        assert ledger.add("T1", f"agent-{i}").success is True
    ledger.add("T1", "agent-3")

    assert ledger.get("T1") == 7


def test_daily_quota_applies_across_targets(ledger: InMemoryReactionLedger) -> None:
    for i in range(20):
        assert ledger.add(f"T{i}", "A").success is True

    over = ledger.add("T20", "A")
    assert over.success is False
    assert over.error_code == DAILY_QUOTA_EXCEEDED
    assert over.error == "Rate limit: max high-fives per day reached"
    # Next UTC midnight
    assert over.reset_at_ms == int(NOON * 1000) + 12 * 60 * 60 * 1000
    assert ledger.get("T20") == 0

    # Other agents are unaffected
    assert ledger.add("T20", "B").success is True


def test_duplicate_is_reported_before_quota(ledger: InMemoryReactionLedger) -> None:
    for i in range(20):
        ledger.add(f"T{i}", "A")

    result = ledger.add("T0", "A")
    assert result.error_code == ALREADY_ACKNOWLEDGED


def test_daily_quota_resets_on_next_utc_day(ledger: InMemoryReactionLedger, clock: Mock) -> None:
    for i in range(20):
        ledger.add(f"T{i}", "A")
    assert ledger.add("T20", "A").success is False

    clock.return_value = NOON + 12 * 60 * 60  # 2024-01-02T00:00:00Z
    assert ledger.add("T20", "A").success is True


def test_acknowledged_is_terminal_across_days(ledger: InMemoryReactionLedger, clock: Mock) -> None:
    ledger.add("T1", "A")
    clock.return_value = NOON + 3 * 24 * 60 * 60

    assert ledger.add("T1", "A").error_code == ALREADY_ACKNOWLEDGED


def test_custom_cap_and_messages(clock: Mock) -> None:
    ledger = InMemoryReactionLedger(
        max_per_agent_per_day=1,
        target_noun="proof",
        reaction_plural="acknowledgements",
        clock=clock,
    )

    assert ledger.add("P1", "A").success is True
    assert ledger.add("P1", "A").error == "Already acknowledged this proof"
    assert ledger.add("P2", "A").error == "Rate limit: max acknowledgements per day reached"


def test_merge_adds_base_count(ledger: InMemoryReactionLedger) -> None:
    assert ledger.merge("T1", 5) == 5
    ledger.add("T1", "A")
    ledger.add("T1", "B")
    assert ledger.merge("T1", 5) == 7


def test_details_and_recent(ledger: InMemoryReactionLedger, clock: Mock) -> None:
    ledger.add("T1", "A", "🚀")
    clock.return_value = NOON + 60
    ledger.add("T2", "A")
    clock.return_value = NOON + 120
    ledger.add("T1", "B", "🔥")

    details = ledger.details("T1")
    assert [(r.agent_id, r.emoji) for r in details] == [("A", "🚀"), ("B", "🔥")]
    assert details[0].created_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    recent = ledger.recent(2)
    assert [(r.target_id, r.agent_id) for r in recent] == [("T1", "B"), ("T2", "A")]
    assert ledger.recent(0) == []
    assert ledger.details("missing") == []


def test_recent_capacity_keeps_newest(clock: Mock) -> None:
    ledger = InMemoryReactionLedger(recent_capacity=3, clock=clock)
    for i in range(5):
        ledger.add(f"T{i}", "A")

    assert [r.target_id for r in ledger.recent(10)] == ["T4", "T3", "T2"]
    # Capacity bounds the feed only; totals are untouched
    assert ledger.get("T0") == 1


def test_purge_drops_reset_daily_counters(ledger: InMemoryReactionLedger, clock: Mock) -> None:
    ledger.add("T1", "A")
    ledger.add("T1", "B")
    assert ledger.stats()["daily_counters"] == 2

    assert ledger.purge_expired() == 0

    clock.return_value = NOON + 24 * 60 * 60
    assert ledger.purge_expired() == 2
    assert ledger.stats() == {"targets": 1, "reactions": 2, "daily_counters": 0}
    assert ledger.get("T1") == 2


def test_quota_reset_late_in_the_day_matches_midnight_rollover(clock: Mock) -> None:
    late = NOON + 11 * 60 * 60 + 50 * 60  # 23:50Z
    clock.return_value = late
    ledger = InMemoryReactionLedger(max_per_agent_per_day=1, clock=clock)
    ledger.add("T1", "A")

    over = ledger.add("T2", "A")
    assert over.success is False
    assert over.reset_at_ms == int((late + 10 * 60) * 1000)

    clock.return_value = over.reset_at_ms / 1000 - 1
    assert ledger.add("T2", "A").success is False

    clock.return_value = over.reset_at_ms / 1000
    assert ledger.add("T2", "A").success is True


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        InMemoryReactionLedger(max_per_agent_per_day=0)

    ledger = InMemoryReactionLedger()
    with pytest.raises(ValueError):
        ledger.add("", "A")
    with pytest.raises(ValueError):
        ledger.add("T1", "")
