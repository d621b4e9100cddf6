"""Pydantic schemas for the admin back-office endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ThrottleStatsResponse(BaseModel):
    rate_limit_buckets: int
    high_fives: dict[str, int]
    acknowledgements: dict[str, int]
    baselines: dict[str, int] = Field(
        default_factory=dict,
        description="Number of persisted baseline counts per ledger.",
    )


class PurgeResponse(BaseModel):
    purged_buckets: int
    purged_daily_counters: int


class BaselineImportRequest(BaseModel):
    ledger: Literal["high_fives", "acknowledgements"]
    counts: dict[str, int] = Field(
        ...,
        description="Target id → persisted base count. Replaces existing values for those ids.",
    )
    replace: bool = Field(
        default=False,
        description="Drop all existing baselines of the ledger before importing.",
    )


class BaselineImportResponse(BaseModel):
    ledger: str
    imported: int
    total: int
