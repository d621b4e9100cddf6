"""Reaction ledger interfaces.

A ledger records one-time reactions ("high-fives", acknowledgements) that
agents leave on a target object. Each agent may react to a target at most once,
and each agent has a daily quota across all targets of the ledger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

ALREADY_ACKNOWLEDGED = "already_acknowledged"
DAILY_QUOTA_EXCEEDED = "daily_quota_exceeded"


@dataclass(frozen=True)
class AcknowledgementRecord:
    """One accepted reaction."""

    target_id: str
    agent_id: str
    emoji: str | None
    created_at: datetime


@dataclass(frozen=True)
class ReactionResult:
    """Outcome of ``AbstractReactionLedger.add``.

    Rejections are returned as data rather than raised: callers decide how to
    surface them (the HTTP layer answers 429).

    Attributes:
        success: Whether the reaction was recorded.
        count: New total for the target (0 when rejected).
        error_code: ``already_acknowledged`` or ``daily_quota_exceeded``.
        error: Human-readable rejection message.
        reset_at_ms: For quota rejections, when the agent's daily counter resets.
    """

    success: bool
    count: int = 0
    error_code: str | None = None
    error: str | None = None
    reset_at_ms: int | None = None

    @classmethod
    def accepted(cls, count: int) -> "ReactionResult":
        return cls(success=True, count=count)

    @classmethod
    def rejected(
        cls, error_code: str, error: str, *, reset_at_ms: int | None = None
    ) -> "ReactionResult":
        return cls(success=False, error_code=error_code, error=error, reset_at_ms=reset_at_ms)


class AbstractReactionLedger(ABC):
    """Interface for reaction ledgers."""

    @abstractmethod
    def add(self, target_id: str, agent_id: str, emoji: str | None = None) -> ReactionResult:
        """Record a reaction by ``agent_id`` on ``target_id``."""
        raise NotImplementedError

    @abstractmethod
    def get(self, target_id: str) -> int:
        """Return the total reactions recorded for ``target_id`` (0 if none)."""
        raise NotImplementedError

    def merge(self, target_id: str, base_count: int) -> int:
        """Add the in-memory total to an externally persisted base count."""
        return base_count + self.get(target_id)

    @abstractmethod
    def details(self, target_id: str) -> list[AcknowledgementRecord]:
        """Return the reactions recorded for ``target_id``, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def recent(self, limit: int) -> list[AcknowledgementRecord]:
        """Return up to ``limit`` reactions across all targets, newest first."""
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop daily quota counters that have reset. Returns how many."""
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, int]:
        """Return lightweight counters about the ledger."""
        raise NotImplementedError
