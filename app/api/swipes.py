"""
Filmatch — Swipes API

Records like / pass decisions.  A like answers whether it completed a
mutual match so the client can celebrate and open the chat.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_swipe_service
from app.schemas.match import SwipeRequest, SwipeResponse
from app.services.errors import InvalidSwipeError
from app.services.swipe_service import SwipeService

logger = structlog.get_logger("filmatch.api.swipes")

router = APIRouter()


@router.post(
    "/like",
    response_model=SwipeResponse,
    summary="Record a like",
)
async def like(
    payload: SwipeRequest,
    service: SwipeService = Depends(get_swipe_service),
) -> SwipeResponse:
    try:
        result = await service.record_like(payload.from_user_id, payload.to_user_id)
    except InvalidSwipeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    return SwipeResponse(
        status="matched" if result.is_match else "liked",
        is_match=result.is_match,
        chat_id=result.chat_id,
    )


@router.post(
    "/pass",
    response_model=SwipeResponse,
    summary="Record a pass",
)
async def pass_(
    payload: SwipeRequest,
    service: SwipeService = Depends(get_swipe_service),
) -> SwipeResponse:
    try:
        await service.record_pass(payload.from_user_id, payload.to_user_id)
    except InvalidSwipeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    return SwipeResponse(status="passed")
