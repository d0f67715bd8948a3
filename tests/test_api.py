"""HTTP-level tests for the candidates, swipes, matches and genres routes.

The app is exercised without its lifespan so no database is touched; every
store is replaced by an in-memory fake through ``dependency_overrides``.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import (
    get_candidate_service,
    get_genre_catalog,
    get_swipe_service,
)
from app.main import app
from app.services.candidate_service import CandidateService
from app.services.compatibility_service import CompatibilityService
from app.services.genre_catalog import GenreCatalog
from app.services.swipe_service import SwipeService
from tests.helpers import FakeMatchStore, FakeProfileStore, FakeSwipeStore, make_profile


@pytest.fixture
def stores():
    profiles = FakeProfileStore([
        make_profile(
            "viewer",
            gender="male",
            gender_preferences=["female"],
            genre_ratings={"35": 5},
        ),
        make_profile("ayse", display_name="Ayse", genre_ratings={"comedy": 5}),
        make_profile("lena", city="Berlin"),
    ])
    return profiles, FakeSwipeStore(), FakeMatchStore()


@pytest.fixture
def client(stores, settings):
    profile_store, swipe_store, match_store = stores
    catalog = GenreCatalog(
        api_key="test-key",
        base_url="https://catalog.test/3",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(
                200, json={"genres": [{"id": 35, "name": "Comedy"}]}
            )
        ),
    )

    app.dependency_overrides[get_genre_catalog] = lambda: catalog
    app.dependency_overrides[get_candidate_service] = lambda: CandidateService(
        profile_store, swipe_store, genre_catalog=catalog, settings=settings
    )
    app.dependency_overrides[get_swipe_service] = lambda: SwipeService(
        swipe_store, match_store
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:

    def test_liveness(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestCandidatesRoute:

    def test_ranked_candidates(self, client):
        response = client.get("/api/v1/candidates/viewer")
        assert response.status_code == 200

        body = response.json()
        assert [c["uid"] for c in body] == ["ayse", "lena"]
        assert body[0]["same_city"] is True
        assert body[0]["display_name"] == "Ayse"
        assert body[1]["same_city"] is False
        assert all(10 <= c["compatibility_score"] <= 99 for c in body)

    def test_max_results(self, client):
        response = client.get("/api/v1/candidates/viewer", params={"max_results": 1})
        assert [c["uid"] for c in response.json()] == ["ayse"]

    def test_max_results_must_be_positive(self, client):
        response = client.get("/api/v1/candidates/viewer", params={"max_results": 0})
        assert response.status_code == 422

    def test_unknown_user_is_404(self, client):
        response = client.get("/api/v1/candidates/ghost")
        assert response.status_code == 404

    def test_swiped_candidate_disappears(self, client):
        client.post("/api/v1/swipes/pass", json={"from_user_id": "viewer", "to_user_id": "ayse"})
        response = client.get("/api/v1/candidates/viewer")
        assert [c["uid"] for c in response.json()] == ["lena"]

    def test_score_breakdown_resolves_genre_ids(self, client, stores):
        response = client.get("/api/v1/candidates/viewer/score/ayse")
        assert response.status_code == 200

        body = response.json()
        assert set(body) == {"genre", "film", "discovery", "total"}
        # "35" resolves to comedy, so both users rate comedy 5.
        assert body["genre"] == 40
        expected = CompatibilityService().score(
            make_profile("a", genre_ratings={"comedy": 5}),
            make_profile("b", genre_ratings={"comedy": 5}),
        )
        assert body["total"] == expected

    def test_score_breakdown_unknown_profile(self, client):
        response = client.get("/api/v1/candidates/viewer/score/ghost")
        assert response.status_code == 404

    def test_score_breakdown_store_error_is_404(self, client, stores):
        async def broken(uid):
            raise ConnectionError("profile store down")

        stores[0].get_profile = broken
        response = client.get("/api/v1/candidates/viewer/score/ayse")
        assert response.status_code == 404


class TestSwipeRoutes:

    def test_like_then_mutual_match(self, client):
        first = client.post(
            "/api/v1/swipes/like", json={"from_user_id": "viewer", "to_user_id": "ayse"}
        )
        assert first.status_code == 200
        assert first.json() == {"status": "liked", "is_match": False, "chat_id": None}

        second = client.post(
            "/api/v1/swipes/like", json={"from_user_id": "ayse", "to_user_id": "viewer"}
        )
        assert second.json() == {
            "status": "matched",
            "is_match": True,
            "chat_id": "chat_ayse_viewer",
        }

        status = client.get("/api/v1/matches/viewer/ayse").json()
        assert status["matched"] is True
        assert client.get("/api/v1/matches/viewer").json() == {
            "user_id": "viewer",
            "matched_user_ids": ["ayse"],
        }

    def test_pass(self, client, stores):
        response = client.post(
            "/api/v1/swipes/pass", json={"from_user_id": "viewer", "to_user_id": "lena"}
        )
        assert response.json()["status"] == "passed"
        assert ("viewer", "lena") in stores[1].decisions

    def test_self_swipe_is_422(self, client):
        response = client.post(
            "/api/v1/swipes/like", json={"from_user_id": "viewer", "to_user_id": "viewer"}
        )
        assert response.status_code == 422

    def test_blank_ids_rejected(self, client):
        response = client.post(
            "/api/v1/swipes/like", json={"from_user_id": "", "to_user_id": "ayse"}
        )
        assert response.status_code == 422


class TestGenresRoute:

    def test_lists_genres(self, client):
        response = client.get("/api/v1/genres/")
        assert response.json() == {"35": "comedy"}
