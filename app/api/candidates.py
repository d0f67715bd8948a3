"""
Filmatch — Candidates API

Ranked discovery feed for a user and the per-pair score breakdown behind it.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_candidate_service
from app.config import get_settings
from app.schemas.match import CandidateResponse, CompatibilityBreakdown
from app.services.candidate_service import CandidateService
from app.services.errors import ProfileNotFoundError

logger = structlog.get_logger("filmatch.api.candidates")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /{user_id}: ranked candidates
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}",
    response_model=list[CandidateResponse],
    summary="List ranked candidates for a user",
)
async def list_candidates(
    user_id: str,
    max_results: Optional[int] = Query(None, ge=1),
    city: Optional[str] = Query(None, description="Override the stored home city"),
    service: CandidateService = Depends(get_candidate_service),
) -> list[CandidateResponse]:
    """Return eligible, not-yet-swiped candidates, same-city first and then
    by compatibility score."""
    settings = get_settings()
    if max_results is not None:
        max_results = min(max_results, settings.MAX_RESULTS_LIMIT)

    try:
        candidates = await service.get_potential_matches(
            user_id, max_results=max_results, city=city
        )
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return [
        CandidateResponse(
            uid=c.profile.uid,
            display_name=c.profile.display_name,
            city=c.profile.city,
            compatibility_score=c.compatibility_score,
            same_city=c.same_city,
        )
        for c in candidates
    ]


# ──────────────────────────────────────────────────────────────────────────────
# GET /{user_id}/score/{other_id}: score breakdown for one pair
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}/score/{other_id}",
    response_model=CompatibilityBreakdown,
    summary="Explain the compatibility score of one candidate",
)
async def score_breakdown(
    user_id: str,
    other_id: str,
    service: CandidateService = Depends(get_candidate_service),
) -> CompatibilityBreakdown:
    log = logger.bind(user_id=user_id, other_id=other_id)
    log.info("score_breakdown")

    try:
        return await service.explain_score(user_id, other_id)
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
