"""Shared pytest fixtures for Filmatch tests."""
import pytest

from app.config import Settings
from tests.helpers import FakeMatchStore, FakeProfileStore, FakeSwipeStore, make_profile


@pytest.fixture
def settings():
    return Settings(
        CITY_QUERY_LIMIT=100,
        GLOBAL_QUERY_LIMIT=100,
        CITY_MIN_RESULTS=30,
        DEFAULT_MAX_RESULTS=20,
    )


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def swipe_store():
    return FakeSwipeStore()


@pytest.fixture
def match_store():
    return FakeMatchStore()


@pytest.fixture
def viewer():
    """Male viewer in Istanbul looking for women, open to romance."""
    return make_profile(
        "viewer",
        gender="male",
        gender_preferences=["female"],
        relationship_intent=["romance"],
        genre_ratings={"comedy": 5, "horror": 1},
    )
