"""
Filmatch — Genre catalog lookup.

Maps movie-catalog genre ids to genre names (``"35" -> "comedy"``).  The
table is fetched once per process on first use; concurrent first callers
wait on the same lock and share one fetch.  A failed fetch leaves the
catalog unloaded so the next caller retries.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx
import structlog

logger = structlog.get_logger("filmatch.genre_catalog")


class GenreCatalog:
    """Lazily-loaded genre id -> name table."""

    GENRE_LIST_PATH = "/genre/movie/list"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._genres: dict[str, str] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def ensure_loaded(self) -> dict[str, str]:
        """Return the id -> name table, fetching it on first use."""
        if self._loaded:
            return self._genres

        async with self._lock:
            if self._loaded:
                return self._genres

            if not self.api_key:
                logger.info("genre_catalog_skipped", reason="TMDB_API_KEY not configured")
                return {}

            try:
                self._genres = await self._fetch()
            except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
                logger.warning("genre_catalog_fetch_failed", error=str(exc))
                return {}

            self._loaded = True
            logger.info("genre_catalog_loaded", count=len(self._genres))
            return self._genres

    async def genre_name(self, genre_id: int | str) -> Optional[str]:
        genres = await self.ensure_loaded()
        return genres.get(str(genre_id))

    async def resolve_ratings(self, ratings: dict[str, int]) -> dict[str, int]:
        """Rewrite numeric genre-id keys as genre names.

        Unknown ids are kept unchanged.  If an id and its name are both
        present the first one encountered wins.
        """
        if not self.has_genre_ids(ratings):
            return ratings
        return self.apply(await self.ensure_loaded(), ratings)

    @staticmethod
    def has_genre_ids(ratings: dict[str, int]) -> bool:
        return any(key.isdigit() for key in ratings)

    @staticmethod
    def apply(genres: dict[str, str], ratings: dict[str, int]) -> dict[str, int]:
        """Resolve ``ratings`` against an already loaded id -> name table."""
        if not genres or not GenreCatalog.has_genre_ids(ratings):
            return ratings
        resolved: dict[str, int] = {}
        for key, rating in ratings.items():
            name = genres.get(key, key) if key.isdigit() else key
            resolved.setdefault(name, rating)
        return resolved

    async def _fetch(self) -> dict[str, str]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.get(
                self.GENRE_LIST_PATH,
                params={"api_key": self.api_key, "language": "en-US"},
            )
            response.raise_for_status()
            payload = response.json()

        return {
            str(genre["id"]): str(genre["name"]).strip().lower()
            for genre in payload["genres"]
        }
