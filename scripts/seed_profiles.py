"""Seed a handful of demo profiles into the user_profiles table."""
import asyncio

from sqlalchemy import select

from app.database import async_session_factory
from app.models.profile import UserProfile
from app.schemas.profile import Profile


DEMO_PROFILES = [
    {
        "uid": "demo_ada",
        "display_name": "Ada",
        "gender": "female",
        "gender_preferences": ["male", "nonbinary"],
        "relationship_intent": ["romance"],
        "city": "Istanbul",
        "genre_ratings": {"drama": 5, "sci-fi": 4, "horror": 1},
        "favorites": [
            {"id": "27205", "title": "Inception"},
            {"id": "666277", "title": "Past Lives"},
        ],
        "recent_watches": [{"id": "157336", "title": "Interstellar", "rating": 5}],
    },
    {
        "uid": "demo_baris",
        "display_name": "Baris",
        "gender": "male",
        "gender_preferences": ["female"],
        "relationship_intent": ["romance", "friends"],
        "city": "Istanbul",
        "genre_ratings": {"drama": 4, "sci-fi": 5, "comedy": 3},
        "favorites": [{"id": "157336", "title": "Interstellar"}],
        "recent_watches": [{"id": "27205", "title": "Inception", "rating": 4}],
    },
    {
        "uid": "demo_cem",
        "display_name": "Cem",
        "gender": "nonbinary",
        "gender_preferences": [],
        "relationship_intent": ["friends"],
        "city": "Ankara",
        "genre_ratings": {"horror": 5, "comedy": 4},
        "favorites": [{"title": "Hereditary"}],
        "recent_watches": [],
    },
    {
        "uid": "demo_deniz",
        "display_name": "Deniz",
        "gender": "female",
        "gender_preferences": ["female", "male"],
        "relationship_intent": ["friends", "romance"],
        "city": "Izmir",
        "genre_ratings": {"comedy": 5, "drama": 3},
        "favorites": [{"id": "666277", "title": "Past Lives"}],
        "recent_watches": [{"title": "Hereditary", "rating": 3}],
    },
]


async def seed():
    async with async_session_factory() as session:
        for data in DEMO_PROFILES:
            # Validate through the same boundary the stores use.
            profile = Profile.model_validate(data)
            existing = await session.execute(
                select(UserProfile).where(UserProfile.uid == profile.uid)
            )
            if existing.scalar_one_or_none() is None:
                session.add(UserProfile(**data, has_profile=True, has_preferences=True))
                print(f"  Seeded profile {profile.uid} ({profile.city})")
            else:
                print(f"  Profile {profile.uid} already exists, skipping.")
        await session.commit()
    print("Done seeding profiles.")


if __name__ == "__main__":
    asyncio.run(seed())
