"""Unit tests for SwipeService and MatchDetector — recording and mutual-like detection."""
import asyncio
from unittest.mock import AsyncMock

import pytest

from app.schemas.match import SwipeAction
from app.services.errors import InvalidSwipeError
from app.services.match_service import MatchDetector, chat_id_for, match_key, sorted_pair
from app.services.swipe_service import SwipeService


@pytest.fixture
def swipe_service(swipe_store, match_store):
    return SwipeService(swipe_store, match_store)


class TestPairKeys:
    """Sorted-pair key conventions."""

    def test_sorted_pair_is_order_independent(self):
        assert sorted_pair("zoe", "adam") == sorted_pair("adam", "zoe") == ("adam", "zoe")

    def test_match_and_chat_ids(self):
        assert match_key("zoe", "adam") == "match_adam_zoe"
        assert chat_id_for("zoe", "adam") == "chat_adam_zoe"
        assert match_key("adam", "zoe") == match_key("zoe", "adam")

    def test_lexicographic_not_numeric(self):
        assert match_key("10", "9") == "match_10_9"


class TestRecordDecisions:
    """Like/pass upserts keyed by the ordered pair."""

    @pytest.mark.asyncio
    async def test_pass_is_recorded(self, swipe_service, swipe_store):
        await swipe_service.record_pass("a", "b")
        decision = swipe_store.decisions[("a", "b")]
        assert decision.action == SwipeAction.PASS

    @pytest.mark.asyncio
    async def test_later_decision_overwrites(self, swipe_service, swipe_store):
        await swipe_service.record_pass("a", "b")
        await swipe_service.record_like("a", "b")
        assert len(swipe_store.decisions) == 1
        assert swipe_store.decisions[("a", "b")].action == SwipeAction.LIKE

    @pytest.mark.asyncio
    async def test_decisions_are_directional(self, swipe_service, swipe_store):
        await swipe_service.record_like("a", "b")
        assert await swipe_service.has_swiped_on("a", "b") is True
        assert await swipe_service.has_swiped_on("b", "a") is False

    @pytest.mark.asyncio
    async def test_self_swipe_rejected(self, swipe_service, swipe_store):
        with pytest.raises(InvalidSwipeError):
            await swipe_service.record_like("a", "a")
        with pytest.raises(InvalidSwipeError):
            await swipe_service.record_pass("a", "a")
        assert swipe_store.decisions == {}

    @pytest.mark.asyncio
    async def test_like_write_failure_reports_no_match(self, match_store):
        swipe_store = AsyncMock()
        swipe_store.upsert_decision.side_effect = ConnectionError("write failed")
        service = SwipeService(swipe_store, match_store)

        result = await service.record_like("a", "b")

        assert result.is_match is False
        assert result.chat_id is None
        swipe_store.get_decision.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pass_write_failure_is_swallowed(self, match_store):
        swipe_store = AsyncMock()
        swipe_store.upsert_decision.side_effect = ConnectionError("write failed")
        service = SwipeService(swipe_store, match_store)

        assert await service.record_pass("a", "b") is None


class TestMutualMatch:
    """Reciprocal likes create exactly one match."""

    @pytest.mark.asyncio
    async def test_second_like_completes_match(self, swipe_service, match_store):
        first = await swipe_service.record_like("alice", "bob")
        assert first.is_match is False
        assert match_store.matches == {}

        second = await swipe_service.record_like("bob", "alice")
        assert second.is_match is True
        assert second.chat_id == "chat_alice_bob"

        record = match_store.matches["match_alice_bob"]
        assert (record.user1_id, record.user2_id) == ("alice", "bob")
        assert record.chat_id == "chat_alice_bob"
        assert record.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_tap_still_matches_without_new_record(self, swipe_service, match_store):
        await swipe_service.record_like("alice", "bob")
        await swipe_service.record_like("bob", "alice")

        again = await swipe_service.record_like("bob", "alice")

        assert again.is_match is True
        assert again.chat_id == "chat_alice_bob"
        assert len(match_store.matches) == 1
        assert match_store.create_calls == 1

    @pytest.mark.asyncio
    async def test_order_independent(self, swipe_service, match_store):
        await swipe_service.record_like("bob", "alice")
        result = await swipe_service.record_like("alice", "bob")
        assert result.is_match is True
        assert list(match_store.matches) == ["match_alice_bob"]

    @pytest.mark.asyncio
    async def test_reverse_pass_is_not_a_match(self, swipe_service, match_store):
        await swipe_service.record_pass("bob", "alice")
        result = await swipe_service.record_like("alice", "bob")
        assert result.is_match is False
        assert match_store.matches == {}

    @pytest.mark.asyncio
    async def test_concurrent_likes_create_one_record(self, swipe_store, match_store):
        """Both clients record first, then both detect: both see the match,
        one record exists."""
        service = SwipeService(swipe_store, match_store)
        await swipe_store.upsert_decision("alice", "bob", SwipeAction.LIKE)
        await swipe_store.upsert_decision("bob", "alice", SwipeAction.LIKE)

        detector = MatchDetector(swipe_store, match_store)
        results = await asyncio.gather(
            detector.detect("alice", "bob"),
            detector.detect("bob", "alice"),
        )

        assert all(r.is_match for r in results)
        assert {r.chat_id for r in results} == {"chat_alice_bob"}
        assert len(match_store.matches) == 1
        assert await service.has_match("bob", "alice") is True

    @pytest.mark.asyncio
    async def test_racing_create_is_idempotent(self, swipe_store, match_store):
        """Both detectors read 'absent' before either writes."""
        await swipe_store.upsert_decision("alice", "bob", SwipeAction.LIKE)
        await swipe_store.upsert_decision("bob", "alice", SwipeAction.LIKE)

        real_get = match_store.get_match
        match_store.get_match = AsyncMock(return_value=None)
        detector = MatchDetector(swipe_store, match_store)

        first = await detector.detect("alice", "bob")
        second = await detector.detect("bob", "alice")

        assert first.is_match and second.is_match
        assert match_store.create_calls == 2
        assert len(match_store.matches) == 1
        assert (await real_get("match_alice_bob")).chat_id == "chat_alice_bob"

    @pytest.mark.asyncio
    async def test_match_write_failure_reports_no_match(self, swipe_store):
        match_store = AsyncMock()
        match_store.get_match.return_value = None
        match_store.create_match.side_effect = ConnectionError("write failed")
        service = SwipeService(swipe_store, match_store)

        await service.record_like("alice", "bob")
        result = await service.record_like("bob", "alice")

        assert result.is_match is False


class TestLookups:
    """Supplementary read helpers."""

    @pytest.mark.asyncio
    async def test_get_user_matches_returns_other_ids(self, swipe_service):
        for other in ("bob", "carol"):
            await swipe_service.record_like("alice", other)
            await swipe_service.record_like(other, "alice")
        await swipe_service.record_like("alice", "dave")

        assert sorted(await swipe_service.get_user_matches("alice")) == ["bob", "carol"]
        assert await swipe_service.get_user_matches("bob") == ["alice"]
        assert await swipe_service.get_user_matches("dave") == []

    @pytest.mark.asyncio
    async def test_has_match_false_before_mutual(self, swipe_service):
        await swipe_service.record_like("alice", "bob")
        assert await swipe_service.has_match("alice", "bob") is False

    @pytest.mark.asyncio
    async def test_lookup_failures_degrade(self):
        swipe_store = AsyncMock()
        match_store = AsyncMock()
        swipe_store.get_decision.side_effect = ConnectionError("down")
        match_store.get_match.side_effect = ConnectionError("down")
        match_store.list_matches_for_user.side_effect = ConnectionError("down")
        service = SwipeService(swipe_store, match_store)

        assert await service.has_swiped_on("a", "b") is False
        assert await service.has_match("a", "b") is False
        assert await service.get_user_matches("a") == []


class TestKeyCollisions:
    """Underscored ids that produce the same sorted-pair key."""

    @pytest.mark.asyncio
    async def test_other_pairs_record_is_not_reported(self, swipe_service, match_store):
        await swipe_service.record_like("a_b", "c")
        await swipe_service.record_like("c", "a_b")
        assert match_key("a_b", "c") == match_key("a", "b_c")

        assert await swipe_service.has_match("a_b", "c") is True
        assert await swipe_service.has_match("a", "b_c") is False

    @pytest.mark.asyncio
    async def test_detection_does_not_borrow_chat(self, swipe_service, match_store):
        await swipe_service.record_like("a_b", "c")
        await swipe_service.record_like("c", "a_b")

        await swipe_service.record_like("a", "b_c")
        result = await swipe_service.record_like("b_c", "a")

        assert result.is_match is False
        assert result.chat_id is None
        assert match_store.matches[match_key("a", "b_c")].user1_id == "a_b"
