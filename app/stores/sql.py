"""
Filmatch — SQLAlchemy implementations of the store protocols.

Each operation runs in its own short-lived session so that a write is
durable as soon as the call returns, the way a document store write is.
That matters for match detection: user B's request must be able to read
user A's like while A's request is still running.

Writes are keyed upserts:
  * swipes   — ``INSERT .. ON CONFLICT (from_user_id, to_user_id) DO UPDATE``
  * matches  — ``INSERT .. ON CONFLICT (id) DO NOTHING``
so a racing duplicate write is harmless.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog
from pydantic import ValidationError
from sqlalchemy import Select, func, or_, select
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.match import Match, Swipe
from app.models.profile import UserBlock, UserProfile
from app.schemas.match import MatchRecord, SwipeAction, SwipeDecision
from app.schemas.profile import Gender, Profile

logger = structlog.get_logger("filmatch.stores")


# ──────────────────────────────────────────────────────────────────────────────
# Statement builders
# ──────────────────────────────────────────────────────────────────────────────

def build_profile_query(
    genders: Iterable[Gender],
    city: Optional[str] = None,
    limit: int = 100,
) -> Select:
    stmt = select(UserProfile).where(
        UserProfile.has_profile.is_(True),
        UserProfile.has_preferences.is_(True),
        UserProfile.gender.in_(sorted(g.value for g in genders)),
    )
    if city is not None:
        stmt = stmt.where(UserProfile.city == city)
    return stmt.limit(limit)


def build_decision_upsert(from_id: str, to_id: str, action: SwipeAction) -> Insert:
    stmt = insert(Swipe).values(
        from_user_id=from_id,
        to_user_id=to_id,
        action=action.value,
    )
    return stmt.on_conflict_do_update(
        index_elements=[Swipe.from_user_id, Swipe.to_user_id],
        set_={"action": stmt.excluded.action, "timestamp": func.now()},
    )


def build_match_insert(record: MatchRecord) -> Insert:
    return (
        insert(Match)
        .values(
            id=record.match_id,
            user1_id=record.user1_id,
            user2_id=record.user2_id,
            chat_id=record.chat_id,
        )
        .on_conflict_do_nothing(index_elements=[Match.id])
    )


def _to_profile(row: UserProfile) -> Optional[Profile]:
    try:
        return Profile.model_validate(row)
    except ValidationError as exc:
        logger.warning(
            "profile_row_invalid",
            uid=row.uid,
            errors=exc.error_count(),
        )
        return None


def _to_match_record(row: Match) -> MatchRecord:
    return MatchRecord(
        match_id=row.id,
        user1_id=row.user1_id,
        user2_id=row.user2_id,
        chat_id=row.chat_id,
        created_at=row.created_at,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Stores
# ──────────────────────────────────────────────────────────────────────────────

class SqlProfileStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_profile(self, uid: str) -> Optional[Profile]:
        async with self._session_factory() as session:
            row = await session.get(UserProfile, uid)
        if row is None:
            return None
        return _to_profile(row)

    async def query_profiles(
        self,
        genders: Iterable[Gender],
        city: Optional[str] = None,
        limit: int = 100,
    ) -> list[Profile]:
        stmt = build_profile_query(genders, city=city, limit=limit)
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
        profiles = [_to_profile(row) for row in rows]
        return [p for p in profiles if p is not None]

    async def list_blocked_ids(self, uid: str) -> set[str]:
        stmt = select(UserBlock).where(
            or_(UserBlock.blocker_id == uid, UserBlock.blocked_id == uid)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return {
            row.blocked_id if row.blocker_id == uid else row.blocker_id
            for row in rows
        }


class SqlSwipeStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_decision(self, from_id: str, to_id: str) -> Optional[SwipeDecision]:
        async with self._session_factory() as session:
            row = await session.get(Swipe, (from_id, to_id))
        if row is None:
            return None
        return SwipeDecision.model_validate(row)

    async def list_outbound_decisions(self, from_id: str) -> list[SwipeDecision]:
        stmt = select(Swipe).where(Swipe.from_user_id == from_id)
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [SwipeDecision.model_validate(row) for row in rows]

    async def upsert_decision(self, from_id: str, to_id: str, action: SwipeAction) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(build_decision_upsert(from_id, to_id, action))


class SqlMatchStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_match(self, match_id: str) -> Optional[MatchRecord]:
        async with self._session_factory() as session:
            row = await session.get(Match, match_id)
        if row is None:
            return None
        return _to_match_record(row)

    async def create_match(self, record: MatchRecord) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(build_match_insert(record))

    async def list_matches_for_user(self, uid: str) -> list[MatchRecord]:
        stmt = (
            select(Match)
            .where(or_(Match.user1_id == uid, Match.user2_id == uid))
            .order_by(Match.created_at.desc())
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [_to_match_record(row) for row in rows]
