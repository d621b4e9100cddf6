"""In-memory reaction ledger.

Notes:
- Per-process only: duplicate checks and daily quotas are enforced per worker.
- Target entries grow monotonically and are never pruned; only daily quota
  counters are dropped by ``purge_expired`` once they have reset.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.adapters.reactions.base import (
    ALREADY_ACKNOWLEDGED,
    DAILY_QUOTA_EXCEEDED,
    AbstractReactionLedger,
    AcknowledgementRecord,
    ReactionResult,
)

DAY_MS = 24 * 60 * 60 * 1000


@dataclass
class _TargetEntry:
    count: int = 0
    agent_ids: set[str] = field(default_factory=set)
    records: list[AcknowledgementRecord] = field(default_factory=list)


@dataclass
class _DailyCounter:
    count: int
    reset_at_ms: int


class InMemoryReactionLedger(AbstractReactionLedger):
    """Ledger enforcing one reaction per (target, agent) and a daily cap per agent.

    Args:
        max_per_agent_per_day: Successful reactions allowed per agent per UTC day.
        target_noun: Used in messages ("Already acknowledged this receipt").
        reaction_plural: Used in messages ("max high-fives per day reached").
        recent_capacity: Records kept for ``recent()``.
        clock: Time source returning UNIX time in seconds.
    """

    def __init__(
        self,
        *,
        max_per_agent_per_day: int = 20,
        target_noun: str = "receipt",
        reaction_plural: str = "high-fives",
        recent_capacity: int = 500,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_per_agent_per_day < 1:
            raise ValueError("max_per_agent_per_day must be >= 1")
        if recent_capacity < 1:
            raise ValueError("recent_capacity must be >= 1")

        self._max_per_day = max_per_agent_per_day
        self._target_noun = target_noun
        self._reaction_plural = reaction_plural
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _TargetEntry] = {}
        self._daily: dict[str, _DailyCounter] = {}
        self._recent: deque[AcknowledgementRecord] = deque(maxlen=recent_capacity)

    @property
    def max_per_agent_per_day(self) -> int:
        return self._max_per_day

    def _get_or_create_entry(self, target_id: str) -> _TargetEntry:
        entry = self._entries.get(target_id)
        if entry is None:
            entry = _TargetEntry()
            self._entries[target_id] = entry
        return entry

    def _get_or_create_daily(self, agent_id: str, now: float) -> _DailyCounter:
        now_ms = int(round(now * 1000))
        day = datetime.fromtimestamp(now, tz=timezone.utc).strftime("%Y-%m-%d")
        day_key = f"{agent_id}:{day}"
        daily = self._daily.get(day_key)
        if daily is None:
            daily = _DailyCounter(count=0, reset_at_ms=now_ms + DAY_MS)
            self._daily[day_key] = daily
        return daily

    @staticmethod
    def _next_utc_midnight_ms(now: float) -> int:
        today = datetime.fromtimestamp(now, tz=timezone.utc).date()
        midnight = datetime.combine(today + timedelta(days=1), datetime.min.time(), tzinfo=timezone.utc)
        return int(midnight.timestamp() * 1000)

    def add(self, target_id: str, agent_id: str, emoji: str | None = None) -> ReactionResult:
        """Record a reaction.

        The duplicate check runs before the quota check, so a repeat reaction
        is always reported as a duplicate even when the agent is over quota.

        Raises:
            ValueError: If target_id or agent_id is empty.
        """
        if not target_id:
            raise ValueError("target_id must be a non-empty string")
        if not agent_id:
            raise ValueError("agent_id must be a non-empty string")

        now = self._clock()

        with self._lock:
            entry = self._get_or_create_entry(target_id)
            if agent_id in entry.agent_ids:
                return ReactionResult.rejected(
                    ALREADY_ACKNOWLEDGED,
                    f"Already acknowledged this {self._target_noun}",
                )

            daily = self._get_or_create_daily(agent_id, now)
            if daily.count >= self._max_per_day:
                return ReactionResult.rejected(
                    DAILY_QUOTA_EXCEEDED,
                    f"Rate limit: max {self._reaction_plural} per day reached",
                    # Quota frees when the UTC day key rolls over
                    reset_at_ms=min(daily.reset_at_ms, self._next_utc_midnight_ms(now)),
                )

            entry.agent_ids.add(agent_id)
            entry.count += 1
            daily.count += 1

            record = AcknowledgementRecord(
                target_id=target_id,
                agent_id=agent_id,
                emoji=emoji,
                created_at=datetime.fromtimestamp(now, tz=timezone.utc),
            )
            entry.records.append(record)
            self._recent.append(record)
            return ReactionResult.accepted(entry.count)

    def get(self, target_id: str) -> int:
        with self._lock:
            entry = self._entries.get(target_id)
            return entry.count if entry else 0

    def details(self, target_id: str) -> list[AcknowledgementRecord]:
        with self._lock:
            entry = self._entries.get(target_id)
            return list(entry.records) if entry else []

    def recent(self, limit: int) -> list[AcknowledgementRecord]:
        if limit < 1:
            return []
        with self._lock:
            newest_first = reversed(self._recent)
            return [record for _, record in zip(range(limit), newest_first)]

    def purge_expired(self) -> int:
        now_ms = int(round(self._clock() * 1000))
        with self._lock:
            expired = [k for k, d in self._daily.items() if d.reset_at_ms <= now_ms]
            for key in expired:
                del self._daily[key]
        return len(expired)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "targets": len(self._entries),
                "reactions": sum(e.count for e in self._entries.values()),
                "daily_counters": len(self._daily),
            }
