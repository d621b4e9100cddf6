"""Reaction ledger adapters (high-fives and acknowledgements).

Mirrors the rate limit package: an abstract ledger plus an in-memory
implementation that a shared store can replace later.
"""

from app.adapters.reactions.base import (
    ALREADY_ACKNOWLEDGED,
    DAILY_QUOTA_EXCEEDED,
    AbstractReactionLedger,
    AcknowledgementRecord,
    ReactionResult,
)
from app.adapters.reactions.in_memory import InMemoryReactionLedger

__all__ = [
    "ALREADY_ACKNOWLEDGED",
    "DAILY_QUOTA_EXCEEDED",
    "AbstractReactionLedger",
    "AcknowledgementRecord",
    "InMemoryReactionLedger",
    "ReactionResult",
]
