"""
Filmatch — Store interfaces consumed by the matching core.

The core only needs equality / membership reads over a bounded candidate
set plus keyed upserts.  Any backend that satisfies these protocols (the
SQLAlchemy stores in ``app.stores.sql``, or in-memory fakes in tests) can
be injected into the services.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from app.schemas.match import MatchRecord, SwipeAction, SwipeDecision
from app.schemas.profile import Gender, Profile


class ProfileStore(Protocol):
    async def get_profile(self, uid: str) -> Optional[Profile]:
        ...

    async def query_profiles(
        self,
        genders: Iterable[Gender],
        city: Optional[str] = None,
        limit: int = 100,
    ) -> list[Profile]:
        """Profiles with ``has_profile`` and ``has_preferences`` set whose
        gender is in ``genders`` (and whose city equals ``city`` if given)."""
        ...

    async def list_blocked_ids(self, uid: str) -> set[str]:
        """Ids blocked by ``uid`` or blocking ``uid``."""
        ...


class SwipeStore(Protocol):
    async def get_decision(self, from_id: str, to_id: str) -> Optional[SwipeDecision]:
        ...

    async def list_outbound_decisions(self, from_id: str) -> list[SwipeDecision]:
        ...

    async def upsert_decision(self, from_id: str, to_id: str, action: SwipeAction) -> None:
        ...


class MatchStore(Protocol):
    async def get_match(self, match_id: str) -> Optional[MatchRecord]:
        ...

    async def create_match(self, record: MatchRecord) -> None:
        """Create ``record`` unless a match with the same id exists."""
        ...

    async def list_matches_for_user(self, uid: str) -> list[MatchRecord]:
        ...
