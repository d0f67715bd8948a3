"""
Filmatch — Service wiring for FastAPI dependency injection.

Stateless services and the genre catalog are process-wide singletons; the
stores are cheap wrappers around the shared session factory.  Tests swap
any of these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends

from app.config import get_settings
from app.database import async_session_factory
from app.services.candidate_service import CandidateService
from app.services.compatibility_service import CompatibilityService
from app.services.genre_catalog import GenreCatalog
from app.services.swipe_service import SwipeService
from app.stores.base import MatchStore, ProfileStore, SwipeStore
from app.stores.sql import SqlMatchStore, SqlProfileStore, SqlSwipeStore

# ── Service singletons ────────────────────────────────────────────────────────

_compatibility_service: CompatibilityService | None = None
_genre_catalog: GenreCatalog | None = None


def get_compatibility_service() -> CompatibilityService:
    global _compatibility_service
    if _compatibility_service is None:
        _compatibility_service = CompatibilityService()
    return _compatibility_service


def get_genre_catalog() -> GenreCatalog:
    global _genre_catalog
    if _genre_catalog is None:
        settings = get_settings()
        _genre_catalog = GenreCatalog(
            api_key=settings.TMDB_API_KEY,
            base_url=settings.TMDB_BASE_URL,
            timeout=settings.TMDB_TIMEOUT_SECONDS,
        )
    return _genre_catalog


# ── Stores ────────────────────────────────────────────────────────────────────

def get_profile_store() -> ProfileStore:
    return SqlProfileStore(async_session_factory)


def get_swipe_store() -> SwipeStore:
    return SqlSwipeStore(async_session_factory)


def get_match_store() -> MatchStore:
    return SqlMatchStore(async_session_factory)


# ── Composed services ─────────────────────────────────────────────────────────

def get_candidate_service(
    profile_store: ProfileStore = Depends(get_profile_store),
    swipe_store: SwipeStore = Depends(get_swipe_store),
    compatibility_service: CompatibilityService = Depends(get_compatibility_service),
    genre_catalog: GenreCatalog = Depends(get_genre_catalog),
) -> CandidateService:
    return CandidateService(
        profile_store=profile_store,
        swipe_store=swipe_store,
        compatibility_service=compatibility_service,
        genre_catalog=genre_catalog,
    )


def get_swipe_service(
    swipe_store: SwipeStore = Depends(get_swipe_store),
    match_store: MatchStore = Depends(get_match_store),
) -> SwipeService:
    return SwipeService(swipe_store=swipe_store, match_store=match_store)
