"""
Filmatch — Taste compatibility scoring.

Scores a viewer/candidate pair on a 10-99 integer scale from three
independent signals:

  (a) Genre similarity, up to 40:
        round((1 - mean(|r_a - r_b| / 4)) * 40) over genres both users rated
  (b) Film overlap, capped at 40:
        per movie in A's favorites ∪ recents that B also has
        fav/fav = 8, fav/recent = 5, recent/fav = 4, recent/recent = 2
  (c) Discovery bonus, up to 20:
        +10 if one of A's recents is among B's favorites
        +10 if one of B's recents is among A's favorites

  total = clamp(a + b + c, 10, 99)

Ratings run 0-5 but the distance divisor is 4, so a 0 vs 5 pair has a
distance of 1.25 and can pull the genre sub-score below zero.  The clamp
absorbs that.  The score is always computed from the viewer's side and is
not guaranteed to be symmetric.
"""

from __future__ import annotations

import math

import structlog

from app.schemas.match import CompatibilityBreakdown
from app.schemas.profile import Profile

logger = structlog.get_logger("filmatch.compatibility")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


class CompatibilityService:
    """Pure, stateless compatibility scorer."""

    GENRE_MAX_POINTS: int = 40
    GENRE_DISTANCE_DIVISOR: float = 4.0

    FILM_MAX_POINTS: int = 40
    FILM_POINTS: dict[tuple[bool, bool], int] = {
        # (in A's favorites, in B's favorites) -> points
        (True, True): 8,
        (True, False): 5,
        (False, True): 4,
        (False, False): 2,
    }

    DISCOVERY_POINTS: int = 10

    SCORE_FLOOR: int = 10
    SCORE_CEILING: int = 99

    # ── Public API ──────────────────────────────────────────────────

    def score(self, user_a: Profile, user_b: Profile) -> int:
        """Return the clamped compatibility score of ``user_b`` as seen by
        ``user_a``."""
        return self.breakdown(user_a, user_b).total

    def breakdown(self, user_a: Profile, user_b: Profile) -> CompatibilityBreakdown:
        genre = self._genre_similarity(user_a.genre_ratings, user_b.genre_ratings)
        film = self._film_overlap(user_a, user_b)
        discovery = self._discovery_bonus(user_a, user_b)
        total = max(self.SCORE_FLOOR, min(self.SCORE_CEILING, genre + film + discovery))

        logger.debug(
            "compatibility_scored",
            user_a=user_a.uid,
            user_b=user_b.uid,
            genre=genre,
            film=film,
            discovery=discovery,
            total=total,
        )
        return CompatibilityBreakdown(
            genre=genre, film=film, discovery=discovery, total=total
        )

    # ── Sub-scores ──────────────────────────────────────────────────

    def _genre_similarity(
        self, ratings_a: dict[str, int], ratings_b: dict[str, int]
    ) -> int:
        shared = ratings_a.keys() & ratings_b.keys()
        if not shared:
            return 0

        distances = [
            abs(ratings_a[genre] - ratings_b[genre]) / self.GENRE_DISTANCE_DIVISOR
            for genre in shared
        ]
        avg_distance = sum(distances) / len(distances)
        return round_half_up((1.0 - avg_distance) * self.GENRE_MAX_POINTS)

    def _film_overlap(self, user_a: Profile, user_b: Profile) -> int:
        favs_a, recents_a = user_a.favorite_keys, user_a.recent_keys
        favs_b, recents_b = user_b.favorite_keys, user_b.recent_keys
        seen_b = favs_b | recents_b

        points = 0
        for key in favs_a | recents_a:
            if key not in seen_b:
                continue
            points += self.FILM_POINTS[(key in favs_a, key in favs_b)]
        return min(points, self.FILM_MAX_POINTS)

    def _discovery_bonus(self, user_a: Profile, user_b: Profile) -> int:
        bonus = 0
        if user_a.recent_keys & user_b.favorite_keys:
            bonus += self.DISCOVERY_POINTS
        if user_b.recent_keys & user_a.favorite_keys:
            bonus += self.DISCOVERY_POINTS
        return bonus
