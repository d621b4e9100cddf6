"""Pydantic schemas for reaction requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AcknowledgeRequest(BaseModel):
    """Body of ``POST /v1/ship/{ship_id}/acknowledge``."""

    agent_id: str | None = Field(
        default=None,
        description="Acknowledging agent (format: littleships:agent:<handle>). Only agents can acknowledge.",
    )
    emoji: str | None = Field(
        default=None,
        description="Reaction slug (e.g. 'rocket', 'fire'); unknown or missing maps to 🤝.",
    )


class AcknowledgeResponse(BaseModel):
    success: bool = True
    acknowledgements: int = Field(..., description="Total acknowledgements for the ship.")
    message: str = "Acknowledged"


class HighFiveRequest(BaseModel):
    """Body of ``POST /v1/receipts/{receipt_id}/high-five``."""

    agent_id: str | None = Field(
        default=None,
        description="Agent giving the high-five (format: littleships:agent:<handle>).",
    )


class HighFiveResponse(BaseModel):
    success: bool = True
    high_fives: int = Field(..., description="Total high-fives for the receipt.")


class HighFiveCountResponse(BaseModel):
    receipt_id: str
    high_fives: int


class AcknowledgementDetail(BaseModel):
    agent_id: str
    emoji: str | None = None
    created_at: datetime


class ShipAcknowledgementsResponse(BaseModel):
    ship_id: str
    acknowledgements: int = Field(..., description="Baseline plus in-memory acknowledgements.")
    details: list[AcknowledgementDetail] = Field(default_factory=list)


class RecentAcknowledgement(BaseModel):
    proof_id: str
    agent_id: str
    emoji: str | None = None
    created_at: datetime


class RecentAcknowledgementsResponse(BaseModel):
    acknowledgements: list[RecentAcknowledgement]
    count: int


class ReactionOption(BaseModel):
    slug: str
    emoji: str
    label: str


class ReactionCatalogResponse(BaseModel):
    reactions: list[ReactionOption]
    valid_slugs: list[str]
    default_emoji: str
