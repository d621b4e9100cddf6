"""Reaction service: input validation, ledger calls and baseline merging.

Routes never talk to a ledger directly. This service:
- Validates agent ids and reaction slugs from request bodies
- Records reactions and turns ledger rejections into ReactionRejectedAppError
- Combines in-memory totals with persisted baseline counts (seed data)
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Mapping

from app.adapters.reactions.base import (
    DAILY_QUOTA_EXCEEDED,
    AbstractReactionLedger,
    AcknowledgementRecord,
)
from app.core.config import settings
from app.core.errors import ReactionRejectedAppError, ValidationAppError
from app.core.logging import hash_identity
from app.utils.reactions import get_emoji_for_reaction

logger = logging.getLogger(__name__)

HIGH_FIVES = "high_fives"
ACKNOWLEDGEMENTS = "acknowledgements"
LEDGER_KINDS = (HIGH_FIVES, ACKNOWLEDGEMENTS)


def validate_agent_id(agent_id: str | None, *, action: str = "acknowledge") -> str:
    """Check that a client-supplied agent id is present and well formed.

    Args:
        agent_id: Value from the request body.
        action: Verb used in the "missing" message.

    Returns:
        The agent id unchanged.

    Raises:
        ValidationAppError: If the id is missing, too short/long, or lacks
            the configured prefix.
    """
    if not agent_id:
        raise ValidationAppError(
            code="missing_agent_id",
            message=f"Missing agent_id (only agents can {action})",
        )

    cfg = settings.app
    if not cfg.min_agent_id_chars <= len(agent_id) <= cfg.max_agent_id_chars:
        raise ValidationAppError(
            code="invalid_agent_id_length",
            message="Invalid agent_id length",
            details={
                "field": "agent_id",
                "min_length": cfg.min_agent_id_chars,
                "max_length": cfg.max_agent_id_chars,
            },
        )
    if not agent_id.startswith(cfg.agent_id_prefix):
        raise ValidationAppError(
            code="invalid_agent_id_format",
            message="Invalid agent_id format",
            details={"field": "agent_id", "hint": f"Expected prefix '{cfg.agent_id_prefix}'"},
        )
    return agent_id


def validate_emoji(emoji: str | None) -> str | None:
    """Reject oversized reaction values; returns the value unchanged."""
    if emoji and len(emoji) > settings.app.max_emoji_chars:
        raise ValidationAppError(
            code="emoji_too_long",
            message="emoji too long",
            details={"field": "emoji", "max_length": settings.app.max_emoji_chars},
        )
    return emoji


def _validate_counts(counts: Mapping[str, int]) -> dict[str, int]:
    clean: dict[str, int] = {}
    for target_id, count in counts.items():
        if not target_id:
            raise ValidationAppError(code="invalid_baseline", message="Baseline target id must not be empty")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValidationAppError(
                code="invalid_baseline",
                message="Baseline counts must be non-negative integers",
                details={"target_id": target_id},
            )
        clean[target_id] = count
    return clean


def load_baseline_seed(path: str | Path) -> dict[str, dict[str, int]]:
    """Read persisted baseline counts from a JSON seed file.

    Expected shape::

        {"high_fives": {"<receipt id>": 3}, "acknowledgements": {"<proof id>": 7}}

    Unknown top-level keys are ignored.

    Raises:
        ValidationAppError: If the file is missing, not JSON, or malformed.
    """
    seed_path = Path(path)
    try:
        raw = json.loads(seed_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValidationAppError(
            code="baseline_seed_missing",
            message=f"Baseline seed file not found: {seed_path}",
        ) from exc
    except json.JSONDecodeError as exc:
        raise ValidationAppError(
            code="baseline_seed_invalid",
            message=f"Baseline seed file is not valid JSON: {exc.msg}",
        ) from exc

    if not isinstance(raw, dict):
        raise ValidationAppError(code="baseline_seed_invalid", message="Baseline seed must be a JSON object")

    seed: dict[str, dict[str, int]] = {}
    for kind in LEDGER_KINDS:
        counts = raw.get(kind, {})
        if not isinstance(counts, dict):
            raise ValidationAppError(
                code="baseline_seed_invalid",
                message=f"'{kind}' must map target ids to counts",
            )
        seed[kind] = _validate_counts(counts)

    logger.info(
        "baselines.seed_loaded",
        extra={"path": str(seed_path), **{kind: len(seed[kind]) for kind in LEDGER_KINDS}},
    )
    return seed


class ReactionService:
    """Front door to one reaction ledger.

    Attributes:
        kind: ``high_fives`` or ``acknowledgements``.
        ledger: Backing ledger (in-memory by default).
        stores_emoji: Whether reactions carry an emoji (acknowledgements do).
    """

    def __init__(
        self,
        ledger: AbstractReactionLedger,
        *,
        kind: str,
        stores_emoji: bool = False,
        baselines: Mapping[str, int] | None = None,
    ) -> None:
        if kind not in LEDGER_KINDS:
            raise ValueError(f"Unknown ledger kind: {kind!r}")
        self.kind = kind
        self.ledger = ledger
        self.stores_emoji = stores_emoji
        self._baselines: dict[str, int] = _validate_counts(baselines or {})
        self._lock = threading.RLock()

    def baseline(self, target_id: str) -> int:
        with self._lock:
            return self._baselines.get(target_id, 0)

    @property
    def baseline_count(self) -> int:
        with self._lock:
            return len(self._baselines)

    def import_baselines(self, counts: Mapping[str, int], *, replace: bool = False) -> int:
        """Store persisted base counts; returns how many ids were imported."""
        clean = _validate_counts(counts)
        with self._lock:
            if replace:
                self._baselines.clear()
            self._baselines.update(clean)
            total = len(self._baselines)

        logger.info(
            "baselines.imported",
            extra={"ledger": self.kind, "imported": len(clean), "total": total, "replace": replace},
        )
        return len(clean)

    def react(self, target_id: str, agent_id: str, emoji: str | None = None) -> int:
        """Record a reaction and return the merged total for the target.

        Args:
            target_id: Receipt or proof id.
            agent_id: Already validated agent id.
            emoji: Reaction slug; mapped to a catalog emoji when stored.

        Returns:
            Baseline count plus in-memory reactions for ``target_id``.

        Raises:
            ReactionRejectedAppError: Duplicate reaction or daily quota reached.
        """
        stored_emoji = get_emoji_for_reaction(emoji) if self.stores_emoji else None
        result = self.ledger.add(target_id, agent_id, stored_emoji)

        if not result.success:
            logger.warning(
                "reaction.rejected",
                extra={
                    "ledger": self.kind,
                    "target_id": target_id,
                    "agent_hash": hash_identity(agent_id),
                    "reason": result.error_code,
                },
            )
            details = {"target_id": target_id}
            if result.error_code == DAILY_QUOTA_EXCEEDED and result.reset_at_ms is not None:
                details["reset_at"] = result.reset_at_ms // 1000
            raise ReactionRejectedAppError(
                code=result.error_code or "reaction_rejected",
                message=result.error or "Reaction rejected",
                details=details,
            )

        total = self.ledger.merge(target_id, self.baseline(target_id))
        logger.info(
            "reaction.recorded",
            extra={
                "ledger": self.kind,
                "target_id": target_id,
                "agent_hash": hash_identity(agent_id),
                "ledger_count": result.count,
                "total": total,
            },
        )
        return total

    def total(self, target_id: str) -> int:
        return self.ledger.merge(target_id, self.baseline(target_id))

    def details(self, target_id: str) -> list[AcknowledgementRecord]:
        return self.ledger.details(target_id)

    def recent(self, limit: int) -> list[AcknowledgementRecord]:
        return self.ledger.recent(limit)
