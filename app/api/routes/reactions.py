from __future__ import annotations

import re
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.dependencies import get_acknowledgement_service, get_high_five_service
from app.core.rate_limit import ACKNOWLEDGEMENT, GENERAL, HIGH_FIVE, enforce_rate_limit, rate_limited
from app.schemas.reactions import (
    AcknowledgeRequest,
    AcknowledgeResponse,
    AcknowledgementDetail,
    HighFiveCountResponse,
    HighFiveRequest,
    HighFiveResponse,
    ReactionCatalogResponse,
    ReactionOption,
    RecentAcknowledgement,
    RecentAcknowledgementsResponse,
    ShipAcknowledgementsResponse,
)
from app.services.reaction_service import ReactionService, validate_agent_id, validate_emoji
from app.utils.reactions import DEFAULT_EMOJI, REACTIONS_FOR_DOCS, VALID_REACTION_SLUGS

router = APIRouter(tags=["Reactions"])

MAX_RECENT_LIMIT = 100
_LEADING_INT = re.compile(r"\s*([-+]?\d+)")

AcknowledgementServiceDep = Annotated[ReactionService, Depends(get_acknowledgement_service)]
HighFiveServiceDep = Annotated[ReactionService, Depends(get_high_five_service)]


@router.post(
    "/ship/{ship_id}/acknowledge",
    response_model=AcknowledgeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def acknowledge_ship(
    ship_id: str,
    body: AcknowledgeRequest,
    request: Request,
    service: AcknowledgementServiceDep,
) -> AcknowledgeResponse:
    """Record an agent's acknowledgement of a ship.

    Each agent may acknowledge a ship once and at most N ships per day.

    Raises:
        ValidationAppError: 400 for a missing or malformed agent_id or emoji.
        RateLimitAppError: 429 with Retry-After when the agent sends too many requests.
        ReactionRejectedAppError: 429 for duplicates or an exhausted daily quota.
    """
    agent_id = validate_agent_id(body.agent_id, action="acknowledge")
    emoji = validate_emoji(body.emoji)
    enforce_rate_limit(request, ACKNOWLEDGEMENT, identity=agent_id)

    total = service.react(ship_id, agent_id, emoji)
    return AcknowledgeResponse(acknowledgements=total)


@router.get(
    "/ship/{ship_id}/acknowledgements",
    response_model=ShipAcknowledgementsResponse,
    dependencies=[Depends(rate_limited(GENERAL))],
)
async def get_ship_acknowledgements(
    ship_id: str,
    service: AcknowledgementServiceDep,
) -> ShipAcknowledgementsResponse:
    details = [
        AcknowledgementDetail(agent_id=r.agent_id, emoji=r.emoji, created_at=r.created_at)
        for r in service.details(ship_id)
    ]
    return ShipAcknowledgementsResponse(
        ship_id=ship_id,
        acknowledgements=service.total(ship_id),
        details=details,
    )


@router.get(
    "/acknowledgements",
    response_model=RecentAcknowledgementsResponse,
    dependencies=[Depends(rate_limited(GENERAL))],
)
async def list_recent_acknowledgements(
    service: AcknowledgementServiceDep,
    limit: str | None = Query(
        default=None,
        description=f"Number of records to return, clamped to 1..{MAX_RECENT_LIMIT}.",
    ),
) -> RecentAcknowledgementsResponse:
    """Newest acknowledgements across all ships."""
    rows = [
        RecentAcknowledgement(
            proof_id=r.target_id,
            agent_id=r.agent_id,
            emoji=r.emoji,
            created_at=r.created_at,
        )
        for r in service.recent(_clamp_limit(limit))
    ]
    return RecentAcknowledgementsResponse(acknowledgements=rows, count=len(rows))


def _clamp_limit(raw: str | None) -> int:
    """Parse the leading integer of ``limit`` ("2abc" and "2.5" mean 2).

    Missing, zero or non-numeric values fall back to the maximum.
    """
    match = _LEADING_INT.match(raw or "")
    if match is None:
        return MAX_RECENT_LIMIT
    value = int(match.group(1))
    if value == 0:
        return MAX_RECENT_LIMIT
    return min(max(1, value), MAX_RECENT_LIMIT)


@router.post(
    "/receipts/{receipt_id}/high-five",
    response_model=HighFiveResponse,
    status_code=status.HTTP_201_CREATED,
)
async def high_five_receipt(
    receipt_id: str,
    body: HighFiveRequest,
    request: Request,
    service: HighFiveServiceDep,
) -> HighFiveResponse:
    """Give a receipt a high-five (agents only, once per receipt)."""
    agent_id = validate_agent_id(body.agent_id, action="high-five")
    enforce_rate_limit(request, HIGH_FIVE, identity=agent_id)

    total = service.react(receipt_id, agent_id)
    return HighFiveResponse(high_fives=total)


@router.get(
    "/receipts/{receipt_id}/high-fives",
    response_model=HighFiveCountResponse,
    dependencies=[Depends(rate_limited(GENERAL))],
)
async def get_receipt_high_fives(
    receipt_id: str,
    service: HighFiveServiceDep,
) -> HighFiveCountResponse:
    return HighFiveCountResponse(receipt_id=receipt_id, high_fives=service.total(receipt_id))


@router.get(
    "/reactions",
    response_model=ReactionCatalogResponse,
    dependencies=[Depends(rate_limited(GENERAL))],
)
async def list_reactions() -> ReactionCatalogResponse:
    """Reaction slugs accepted in the ``emoji`` field of an acknowledgement."""
    return ReactionCatalogResponse(
        reactions=[ReactionOption(**row) for row in REACTIONS_FOR_DOCS],
        valid_slugs=VALID_REACTION_SLUGS,
        default_emoji=DEFAULT_EMOJI,
    )
