"""
Filmatch — Profile domain records.

Profiles arrive from storage in loose shapes: camelCase or snake_case keys,
movies as bare titles or as objects, genre ratings as a mapping or as a list
of ``{genre, rating}`` objects.  ``Profile.model_validate`` is the single
boundary where that shape is normalised; everything downstream (filtering,
scoring) works on the validated record only.

Movie identity for overlap purposes is a ``MovieKey``: the catalog id when
one is present, otherwise the lowercased, trimmed title.  Two different
catalog entries sharing a normalised title therefore collide when neither
carries an id.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

MAX_FAVORITES = 4
MAX_RECENT_WATCHES = 10
GENRE_RATING_MIN, GENRE_RATING_MAX = 0, 5
WATCH_RATING_MIN, WATCH_RATING_MAX = 1, 5


class Gender(str, Enum):
    FEMALE = "female"
    MALE = "male"
    NONBINARY = "nonbinary"
    OTHER = "other"


class RelationshipIntent(str, Enum):
    FRIENDS = "friends"
    ROMANCE = "romance"


ALL_INTENTS: frozenset[RelationshipIntent] = frozenset(RelationshipIntent)


# ── Movie identity ──────────────────────────────────────────────────────────

class CatalogId(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["catalog"] = "catalog"
    value: str


class TitleKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["title"] = "title"
    value: str


MovieKey = Annotated[Union[CatalogId, TitleKey], Field(discriminator="kind")]


def movie_key(movie_id: Any, title: Optional[str]) -> Optional[MovieKey]:
    """Return the overlap identity of a movie entry, or ``None`` if it has
    neither a usable id nor a title.

    Favorites saved by older clients carry ids of the form
    ``fav_<catalog id>_<suffix>``; that decoration is stripped so they
    compare equal to plain catalog ids.
    """
    if movie_id is not None:
        raw = str(movie_id).strip()
        if raw.startswith("fav_"):
            raw = raw[len("fav_"):].split("_")[0]
        if raw:
            return CatalogId(value=raw)
    if title is not None and title.strip():
        return TitleKey(value=title.strip().lower())
    return None


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class FavoriteMovie(BaseModel):
    id: Optional[str] = None
    title: str = ""
    year: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_title(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"title": data}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("title", mode="before")
    @classmethod
    def _title_or_blank(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("year", mode="before")
    @classmethod
    def _year_or_none(cls, v: Any) -> Optional[int]:
        # Clients have stored release dates ("2010-07-16") and blanks here.
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(str(v).strip()[:4])
        except ValueError:
            return None

    @property
    def key(self) -> Optional[MovieKey]:
        return movie_key(self.id, self.title)


class RecentWatch(FavoriteMovie):
    rating: Optional[int] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, v: Any) -> Optional[int]:
        try:
            return _clamp(int(v), WATCH_RATING_MIN, WATCH_RATING_MAX)
        except (TypeError, ValueError):
            return None


# ── Profile ─────────────────────────────────────────────────────────────────

class Profile(BaseModel):
    """A user profile as seen by the matching core."""

    model_config = ConfigDict(from_attributes=True)

    uid: str
    display_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("display_name", "displayName")
    )
    gender: Optional[Gender] = None
    gender_preferences: frozenset[Gender] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("gender_preferences", "genderPreferences"),
    )
    relationship_intent: frozenset[RelationshipIntent] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("relationship_intent", "relationshipIntent"),
    )
    city: Optional[str] = None
    genre_ratings: dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("genre_ratings", "genreRatings"),
    )
    favorites: list[FavoriteMovie] = Field(default_factory=list)
    recent_watches: list[RecentWatch] = Field(
        default_factory=list,
        validation_alias=AliasChoices("recent_watches", "recentWatches"),
    )
    has_profile: bool = Field(
        default=False, validation_alias=AliasChoices("has_profile", "hasProfile")
    )
    has_preferences: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_preferences", "hasPreferences"),
    )

    @field_validator("gender", mode="before")
    @classmethod
    def _normalise_gender(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("gender_preferences", "relationship_intent", mode="before")
    @classmethod
    def _normalise_enum_set(cls, v: Any) -> Any:
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(
            item.strip().lower() if isinstance(item, str) else item for item in v
        )

    @field_validator("city", mode="before")
    @classmethod
    def _blank_city_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("genre_ratings", mode="before")
    @classmethod
    def _normalise_genre_ratings(cls, v: Any) -> dict[str, int]:
        if v is None:
            return {}
        if isinstance(v, dict):
            pairs = list(v.items())
        else:
            pairs = []
            for item in v:
                if not isinstance(item, dict):
                    raise ValueError(f"genre rating entry must be an object, got {item!r}")
                pairs.append((item.get("genre"), item.get("rating")))

        ratings: dict[str, int] = {}
        for genre, rating in pairs:
            if genre is None or rating is None:
                continue
            name = str(genre).strip().lower()
            if not name or name in ratings:
                continue
            ratings[name] = _clamp(int(rating), GENRE_RATING_MIN, GENRE_RATING_MAX)
        return ratings

    @field_validator("favorites", "recent_watches", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("favorites", mode="after")
    @classmethod
    def _keep_first_favorites(cls, v: list[FavoriteMovie]) -> list[FavoriteMovie]:
        return [m for m in v if m.key is not None][:MAX_FAVORITES]

    @field_validator("recent_watches", mode="after")
    @classmethod
    def _keep_first_recents(cls, v: list[RecentWatch]) -> list[RecentWatch]:
        return [m for m in v if m.key is not None][:MAX_RECENT_WATCHES]

    # ── Derived views ───────────────────────────────────────────────

    @property
    def favorite_keys(self) -> set[MovieKey]:
        return {m.key for m in self.favorites}

    @property
    def recent_keys(self) -> set[MovieKey]:
        return {m.key for m in self.recent_watches}
