from __future__ import annotations

"""Application factory for the FastAPI app.

Builds the app and the in-memory stores it owns (rate limiter and reaction
ledgers). Stores are attached to ``app.state`` so their lifetime is the
application's, and each ``create_app()`` call starts from empty state.
"""

import asyncio
import contextlib
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.reactions.in_memory import InMemoryReactionLedger
from app.api.routes import admin_router, health_router, reactions_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.services.maintenance import run_purge_loop
from app.services.reaction_service import (
    ACKNOWLEDGEMENTS,
    HIGH_FIVES,
    ReactionService,
    load_baseline_seed,
)

logger = logging.getLogger(__name__)


def _build_services(clock: Callable[[], float]) -> tuple[ReactionService, ReactionService]:
    seed: dict[str, dict[str, int]] = {}
    if settings.app.baseline_seed_file:
        seed = load_baseline_seed(settings.app.baseline_seed_file)

    high_fives = ReactionService(
        InMemoryReactionLedger(
            max_per_agent_per_day=settings.ledger.max_per_agent_per_day,
            target_noun="receipt",
            reaction_plural="high-fives",
            recent_capacity=settings.ledger.recent_capacity,
            clock=clock,
        ),
        kind=HIGH_FIVES,
        baselines=seed.get(HIGH_FIVES),
    )
    acknowledgements = ReactionService(
        InMemoryReactionLedger(
            max_per_agent_per_day=settings.ledger.max_per_agent_per_day,
            target_noun="proof",
            reaction_plural="acknowledgements",
            recent_capacity=settings.ledger.recent_capacity,
            clock=clock,
        ),
        kind=ACKNOWLEDGEMENTS,
        stores_emoji=True,
        baselines=seed.get(ACKNOWLEDGEMENTS),
    )
    return high_fives, acknowledgements


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the expired-state sweeper for the lifetime of the app."""

    interval = settings.app.purge_interval_seconds
    task: asyncio.Task | None = None
    if interval > 0:
        task = asyncio.create_task(
            run_purge_loop(
                app.state.rate_limiter,
                [app.state.high_fives, app.state.acknowledgements],
                interval_seconds=interval,
            )
        )
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("app.shutdown")


def create_app(*, clock: Callable[[], float] = time.time) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        clock: Time source shared by the limiter and ledgers (UNIX seconds).

    Returns:
        Configured FastAPI app with stores, middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Ship Reactions API",
        description=(
            "Acknowledgements and high-fives that agents leave on ships and "
            "receipts. Each agent may react once per target and a limited number "
            "of times per day; public endpoints are rate limited per client."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.rate_limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    app.state.high_fives, app.state.acknowledgements = _build_services(clock)

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(reactions_router, prefix="/v1")
    app.include_router(admin_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "app_env": settings.app_env,
            "rate_limit_enabled": settings.rate_limit.enabled,
            "purge_interval_s": settings.app.purge_interval_seconds,
        },
    )
    return app
