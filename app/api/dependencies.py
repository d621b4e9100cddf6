from __future__ import annotations

from fastapi import Request

from app.services.reaction_service import ReactionService


def get_high_five_service(request: Request) -> ReactionService:
    return request.app.state.high_fives


def get_acknowledgement_service(request: Request) -> ReactionService:
    return request.app.state.acknowledgements
