"""
Filmatch — Mutual-like match detection.

A match exists for an unordered pair once both directions hold a ``like``.
Both users' clients may record their likes concurrently and each runs
detection, so the match record is keyed by the lexicographically sorted
pair and created only if absent.  Whichever writer loses the race still
finds the record and reports the match to its own caller.

Key conventions:
  match id  = ``match_<low>_<high>``
  chat id   = ``chat_<low>_<high>``
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from app.schemas.match import MatchRecord, MatchResult, SwipeAction
from app.stores.base import MatchStore, SwipeStore

logger = structlog.get_logger("filmatch.match_service")

PAIR_DELIMITER = "_"


def sorted_pair(user_a_id: str, user_b_id: str) -> tuple[str, str]:
    low, high = sorted((user_a_id, user_b_id))
    return low, high


def match_key(user_a_id: str, user_b_id: str) -> str:
    return PAIR_DELIMITER.join(("match", *sorted_pair(user_a_id, user_b_id)))


def chat_id_for(user_a_id: str, user_b_id: str) -> str:
    return PAIR_DELIMITER.join(("chat", *sorted_pair(user_a_id, user_b_id)))


def is_pair_record(record: MatchRecord, user_a_id: str, user_b_id: str) -> bool:
    """True if ``record`` belongs to exactly this pair.

    Ids containing the delimiter can share a key with another pair
    (``a_b`` + ``c`` and ``a`` + ``b_c``); the stored user ids settle it.
    """
    return (record.user1_id, record.user2_id) == sorted_pair(user_a_id, user_b_id)


class MatchDetector:
    """Detect reciprocal likes and materialise the match record once."""

    def __init__(self, swipe_store: SwipeStore, match_store: MatchStore) -> None:
        self.swipe_store = swipe_store
        self.match_store = match_store

    async def detect(self, from_id: str, to_id: str) -> MatchResult:
        """Check whether ``to_id`` already liked ``from_id``.

        Must be called after ``from_id``'s like has been persisted.  Returns
        ``is_match=True`` with the chat id whenever the reverse like exists,
        whether or not this call created the match record.
        """
        log = logger.bind(from_user=from_id, to_user=to_id)

        reverse = await self.swipe_store.get_decision(to_id, from_id)
        if reverse is None or reverse.action != SwipeAction.LIKE:
            log.info("match_detection_no_reverse_like")
            return MatchResult(is_match=False)

        key = match_key(from_id, to_id)
        chat_id = chat_id_for(from_id, to_id)

        existing = await self.match_store.get_match(key)
        if existing is not None:
            if not is_pair_record(existing, from_id, to_id):
                log.warning(
                    "match_key_collision",
                    match_id=key,
                    stored_users=[existing.user1_id, existing.user2_id],
                )
                return MatchResult(is_match=False)
            log.info("match_already_exists", match_id=key)
            return MatchResult(is_match=True, chat_id=existing.chat_id)

        user1_id, user2_id = sorted_pair(from_id, to_id)
        await self.match_store.create_match(
            MatchRecord(
                match_id=key,
                user1_id=user1_id,
                user2_id=user2_id,
                chat_id=chat_id,
                created_at=datetime.now(timezone.utc),
            )
        )
        log.info("match_created", match_id=key, chat_id=chat_id)
        return MatchResult(is_match=True, chat_id=chat_id)
