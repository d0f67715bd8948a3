"""
Filmatch — Swipe decision recording.

Likes and passes are upserts keyed by the ordered pair (from, to); a repeat
swipe overwrites the previous decision.  Recording never raises into the
swipe gesture: a failed write is logged and reported as "no match".
"""

from __future__ import annotations

import structlog

from app.schemas.match import MatchResult, SwipeAction
from app.services.errors import InvalidSwipeError
from app.services.match_service import MatchDetector, is_pair_record, match_key
from app.stores.base import MatchStore, SwipeStore

logger = structlog.get_logger("filmatch.swipe_service")


class SwipeService:
    """Records like/pass decisions and triggers match detection on likes."""

    def __init__(
        self,
        swipe_store: SwipeStore,
        match_store: MatchStore,
        match_detector: MatchDetector | None = None,
    ) -> None:
        self.swipe_store = swipe_store
        self.match_store = match_store
        self.match_detector = match_detector or MatchDetector(swipe_store, match_store)

    # ── Recording ───────────────────────────────────────────────────

    async def record_like(self, from_id: str, to_id: str) -> MatchResult:
        """Persist a like and report whether it completes a mutual match."""
        self._validate_pair(from_id, to_id)
        log = logger.bind(from_user=from_id, to_user=to_id)

        try:
            await self.swipe_store.upsert_decision(from_id, to_id, SwipeAction.LIKE)
            log.info("like_recorded")
            result = await self.match_detector.detect(from_id, to_id)
        except Exception:
            log.exception("record_like_failed")
            return MatchResult(is_match=False)

        if result.is_match:
            log.info("mutual_match", chat_id=result.chat_id)
        return result

    async def record_pass(self, from_id: str, to_id: str) -> None:
        """Persist a pass.  Failures are logged, never raised."""
        self._validate_pair(from_id, to_id)
        log = logger.bind(from_user=from_id, to_user=to_id)

        try:
            await self.swipe_store.upsert_decision(from_id, to_id, SwipeAction.PASS)
        except Exception:
            log.exception("record_pass_failed")
            return
        log.info("pass_recorded")

    # ── Lookups ─────────────────────────────────────────────────────

    async def has_swiped_on(self, from_id: str, to_id: str) -> bool:
        try:
            return await self.swipe_store.get_decision(from_id, to_id) is not None
        except Exception:
            logger.exception("has_swiped_on_failed", from_user=from_id, to_user=to_id)
            return False

    async def has_match(self, user_a_id: str, user_b_id: str) -> bool:
        try:
            record = await self.match_store.get_match(match_key(user_a_id, user_b_id))
        except Exception:
            logger.exception("has_match_failed", user_a=user_a_id, user_b=user_b_id)
            return False
        return record is not None and is_pair_record(record, user_a_id, user_b_id)

    async def get_user_matches(self, user_id: str) -> list[str]:
        """Return the ids of every user ``user_id`` has matched with."""
        try:
            records = await self.match_store.list_matches_for_user(user_id)
        except Exception:
            logger.exception("get_user_matches_failed", user_id=user_id)
            return []
        return [
            r.user2_id if r.user1_id == user_id else r.user1_id
            for r in records
        ]

    @staticmethod
    def _validate_pair(from_id: str, to_id: str) -> None:
        if not from_id or not to_id:
            raise InvalidSwipeError("Both user ids are required.")
        if from_id == to_id:
            raise InvalidSwipeError(f"User {from_id} cannot swipe on themselves.")
