"""
Filmatch — Genres API
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_genre_catalog
from app.services.genre_catalog import GenreCatalog

router = APIRouter()


@router.get("/", response_model=dict[str, str], summary="Genre id to name lookup")
async def list_genres(catalog: GenreCatalog = Depends(get_genre_catalog)) -> dict[str, str]:
    return await catalog.ensure_loaded()
