from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.profile import Profile


class SwipeAction(str, Enum):
    LIKE = "like"
    PASS = "pass"


class SwipeDecision(BaseModel):
    from_user_id: str
    to_user_id: str
    action: SwipeAction
    timestamp: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MatchRecord(BaseModel):
    match_id: str
    user1_id: str
    user2_id: str
    chat_id: str
    created_at: Optional[datetime] = None


class MatchResult(BaseModel):
    is_match: bool = False
    chat_id: Optional[str] = None


class CompatibilityBreakdown(BaseModel):
    genre: int
    film: int
    discovery: int
    total: int


class ScoredCandidate(BaseModel):
    profile: Profile
    compatibility_score: int
    same_city: bool = False


# ── API payloads ────────────────────────────────────────────────────────────

class SwipeRequest(BaseModel):
    from_user_id: str = Field(min_length=1)
    to_user_id: str = Field(min_length=1)


class SwipeResponse(BaseModel):
    status: str
    is_match: bool = False
    chat_id: Optional[str] = None


class CandidateResponse(BaseModel):
    uid: str
    display_name: Optional[str] = None
    city: Optional[str] = None
    compatibility_score: int
    same_city: bool


class MatchStatusResponse(BaseModel):
    user_a_id: str
    user_b_id: str
    matched: bool


class UserMatchesResponse(BaseModel):
    user_id: str
    matched_user_ids: list[str]
