from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.core.auth import verify_admin_key
from app.schemas.admin import (
    BaselineImportRequest,
    BaselineImportResponse,
    PurgeResponse,
    ThrottleStatsResponse,
)
from app.services.maintenance import purge_expired_state
from app.services.reaction_service import ReactionService

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_key)])


def _services(request: Request) -> dict[str, ReactionService]:
    state = request.app.state
    return {"high_fives": state.high_fives, "acknowledgements": state.acknowledgements}


@router.get("/throttle/stats", response_model=ThrottleStatsResponse)
async def throttle_stats(request: Request) -> ThrottleStatsResponse:
    """Sizes of the in-memory limiter and ledgers."""
    services = _services(request)
    return ThrottleStatsResponse(
        rate_limit_buckets=request.app.state.rate_limiter.stats()["buckets"],
        high_fives=services["high_fives"].ledger.stats(),
        acknowledgements=services["acknowledgements"].ledger.stats(),
        baselines={kind: service.baseline_count for kind, service in services.items()},
    )


@router.post("/throttle/purge", response_model=PurgeResponse)
async def purge_throttle_state(request: Request) -> PurgeResponse:
    """Run the expired-state sweep now instead of waiting for the next tick."""
    report = purge_expired_state(
        request.app.state.rate_limiter,
        list(_services(request).values()),
    )
    return PurgeResponse(
        purged_buckets=report.purged_buckets,
        purged_daily_counters=report.purged_daily_counters,
    )


@router.post("/seed/baselines", response_model=BaselineImportResponse)
async def import_baselines(body: BaselineImportRequest, request: Request) -> BaselineImportResponse:
    """Import persisted base counts that in-memory reactions are added to."""
    service = _services(request)[body.ledger]
    imported = service.import_baselines(body.counts, replace=body.replace)
    return BaselineImportResponse(ledger=body.ledger, imported=imported, total=service.baseline_count)
