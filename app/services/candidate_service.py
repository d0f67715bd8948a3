"""
Filmatch — Candidate filtering and ranking.

Pipeline for one acting user:
  1. Load the acting profile (hard failure if absent).
  2. Resolve effective preferences:
       gender preferences  — empty -> opposite-binary guess (male -> female,
                             anything else -> male)
       relationship intent — empty -> {friends, romance}
  3. Retrieve the pool: a same-city pass first; if it yields fewer than
     ``CITY_MIN_RESULTS`` rows a global pass supplements it.  Rows are
     de-duplicated by uid, keeping the same-city copy.
  4. Keep candidates that pass every check:
       not the acting user, not already swiped on, not blocked either way,
       acting gender accepted by the candidate (empty preferences accept
       anyone), at least one shared relationship intent.
  5. Score with ``CompatibilityService`` and stable-sort by
     (same city, score), both descending.  Truncate to ``max_results``.

Every individual read in step 3-4 degrades to an empty result on failure.
"""

from __future__ import annotations

from typing import Awaitable, Optional, TypeVar

import structlog

from app.config import Settings, get_settings
from app.schemas.match import CompatibilityBreakdown, ScoredCandidate
from app.schemas.profile import ALL_INTENTS, Gender, Profile, RelationshipIntent
from app.services.compatibility_service import CompatibilityService
from app.services.errors import ProfileNotFoundError
from app.services.genre_catalog import GenreCatalog
from app.stores.base import ProfileStore, SwipeStore

logger = structlog.get_logger("filmatch.candidate_service")

T = TypeVar("T")


def effective_gender_preferences(profile: Profile) -> frozenset[Gender]:
    if profile.gender_preferences:
        return profile.gender_preferences
    if profile.gender == Gender.MALE:
        return frozenset({Gender.FEMALE})
    return frozenset({Gender.MALE})


def effective_intent(profile: Profile) -> frozenset[RelationshipIntent]:
    return profile.relationship_intent or ALL_INTENTS


class CandidateService:
    """Produce a ranked list of eligible, undecided candidates."""

    def __init__(
        self,
        profile_store: ProfileStore,
        swipe_store: SwipeStore,
        compatibility_service: CompatibilityService | None = None,
        genre_catalog: GenreCatalog | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.profile_store = profile_store
        self.swipe_store = swipe_store
        self.compatibility_service = compatibility_service or CompatibilityService()
        self.genre_catalog = genre_catalog

        self.city_query_limit: int = settings.CITY_QUERY_LIMIT
        self.global_query_limit: int = settings.GLOBAL_QUERY_LIMIT
        self.city_min_results: int = settings.CITY_MIN_RESULTS
        self.default_max_results: int = settings.DEFAULT_MAX_RESULTS

    # ── Public API ──────────────────────────────────────────────────

    async def get_potential_matches(
        self,
        user_id: str,
        max_results: Optional[int] = None,
        city: Optional[str] = None,
    ) -> list[ScoredCandidate]:
        """Return up to ``max_results`` scored candidates for ``user_id``.

        ``city`` overrides the home city stored on the acting profile.

        Raises
        ------
        ProfileNotFoundError
            The acting user's profile is missing or could not be read.
        """
        if max_results is None:
            max_results = self.default_max_results
        log = logger.bind(user_id=user_id)

        viewer = await self._load_profile(user_id)
        home_city = city or viewer.city

        genders = effective_gender_preferences(viewer)
        intent = effective_intent(viewer)
        if not viewer.gender_preferences:
            log.warning(
                "gender_preferences_fallback",
                gender=viewer.gender,
                fallback=sorted(g.value for g in genders),
            )
        if not viewer.relationship_intent:
            log.info("relationship_intent_fallback")

        pool = await self._gather_pool(user_id, genders, home_city)
        decided = await self._outbound_ids(user_id)
        blocked = await self._blocked_ids(user_id)

        genres = await self._genre_table([viewer, *pool])
        viewer = self._with_resolved_genres(viewer, genres)

        scored: list[ScoredCandidate] = []
        for candidate in pool:
            if not self.is_eligible(viewer, candidate, intent, decided | blocked):
                continue
            candidate = self._with_resolved_genres(candidate, genres)
            scored.append(
                ScoredCandidate(
                    profile=candidate,
                    compatibility_score=self.compatibility_service.score(viewer, candidate),
                    same_city=home_city is not None and candidate.city == home_city,
                )
            )

        scored.sort(key=lambda s: (s.same_city, s.compatibility_score), reverse=True)
        results = scored[:max(max_results, 0)]

        log.info(
            "candidates_ranked",
            pool_size=len(pool),
            eligible=len(scored),
            returned=len(results),
            excluded_decided=len(decided),
            excluded_blocked=len(blocked),
        )
        return results

    async def explain_score(self, user_id: str, other_id: str) -> CompatibilityBreakdown:
        """Return the sub-scores behind ``other_id``'s score as seen by
        ``user_id``.

        Raises ``ProfileNotFoundError`` if either profile is missing or
        could not be read.
        """
        viewer = await self._load_profile(user_id)
        other = await self._load_profile(other_id)
        genres = await self._genre_table([viewer, other])
        return self.compatibility_service.breakdown(
            self._with_resolved_genres(viewer, genres),
            self._with_resolved_genres(other, genres),
        )

    @staticmethod
    def is_eligible(
        viewer: Profile,
        candidate: Profile,
        intent: frozenset[RelationshipIntent],
        excluded_ids: set[str],
    ) -> bool:
        if candidate.uid == viewer.uid:
            return False
        if candidate.uid in excluded_ids:
            return False
        # The store already checked the candidate's gender against the
        # viewer's preferences; this is the converse.
        if candidate.gender_preferences and viewer.gender not in candidate.gender_preferences:
            return False
        return bool(intent & candidate.relationship_intent)

    # ── Retrieval ───────────────────────────────────────────────────

    async def _load_profile(self, user_id: str) -> Profile:
        try:
            profile = await self.profile_store.get_profile(user_id)
        except Exception as exc:
            logger.exception("profile_load_failed", user_id=user_id)
            raise ProfileNotFoundError(user_id) from exc
        if profile is None:
            logger.warning("profile_missing", user_id=user_id)
            raise ProfileNotFoundError(user_id)
        return profile

    async def _gather_pool(
        self,
        user_id: str,
        genders: frozenset[Gender],
        home_city: Optional[str],
    ) -> list[Profile]:
        pool: dict[str, Profile] = {}

        if home_city:
            city_rows = await self._safe_read(
                self.profile_store.query_profiles(
                    genders, city=home_city, limit=self.city_query_limit
                ),
                default=[],
                source="city_query",
                user_id=user_id,
            )
            for profile in city_rows:
                pool.setdefault(profile.uid, profile)

        if len(pool) < self.city_min_results:
            global_rows = await self._safe_read(
                self.profile_store.query_profiles(
                    genders, limit=self.global_query_limit
                ),
                default=[],
                source="global_query",
                user_id=user_id,
            )
            for profile in global_rows:
                pool.setdefault(profile.uid, profile)

        return list(pool.values())

    async def _outbound_ids(self, user_id: str) -> set[str]:
        decisions = await self._safe_read(
            self.swipe_store.list_outbound_decisions(user_id),
            default=[],
            source="swipe_history",
            user_id=user_id,
        )
        return {d.to_user_id for d in decisions}

    async def _blocked_ids(self, user_id: str) -> set[str]:
        return await self._safe_read(
            self.profile_store.list_blocked_ids(user_id),
            default=set(),
            source="blocks",
            user_id=user_id,
        )

    async def _genre_table(self, profiles: list[Profile]) -> dict[str, str]:
        """Load the genre table at most once for a whole batch of profiles."""
        if self.genre_catalog is None:
            return {}
        if not any(GenreCatalog.has_genre_ids(p.genre_ratings) for p in profiles):
            return {}
        return await self.genre_catalog.ensure_loaded()

    @staticmethod
    def _with_resolved_genres(profile: Profile, genres: dict[str, str]) -> Profile:
        ratings = GenreCatalog.apply(genres, profile.genre_ratings)
        if ratings is profile.genre_ratings:
            return profile
        return profile.model_copy(update={"genre_ratings": ratings})

    @staticmethod
    async def _safe_read(
        awaitable: Awaitable[T], default: T, source: str, user_id: str
    ) -> T:
        try:
            return await awaitable
        except Exception:
            logger.exception("candidate_source_failed", source=source, user_id=user_id)
            return default
