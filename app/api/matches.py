"""
Filmatch — Matches API

Read-only views over created matches.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_swipe_service
from app.schemas.match import MatchStatusResponse, UserMatchesResponse
from app.services.swipe_service import SwipeService

router = APIRouter()


@router.get(
    "/{user_id}",
    response_model=UserMatchesResponse,
    summary="List every user matched with a user",
)
async def list_user_matches(
    user_id: str,
    service: SwipeService = Depends(get_swipe_service),
) -> UserMatchesResponse:
    matched = await service.get_user_matches(user_id)
    return UserMatchesResponse(user_id=user_id, matched_user_ids=matched)


@router.get(
    "/{user_a_id}/{user_b_id}",
    response_model=MatchStatusResponse,
    summary="Check whether two users have matched",
)
async def match_status(
    user_a_id: str,
    user_b_id: str,
    service: SwipeService = Depends(get_swipe_service),
) -> MatchStatusResponse:
    matched = await service.has_match(user_a_id, user_b_id)
    return MatchStatusResponse(user_a_id=user_a_id, user_b_id=user_b_id, matched=matched)
