import pytest

from fakes import INCEPTION, SCI_FI, FakeTMDBClient
from recommendations import views as recommendation_views
from recommendations.services import RecommendationEngine

URL = "/api/recommendations/"


@pytest.fixture
def use_tmdb(monkeypatch):
    def install(client):
        monkeypatch.setattr(recommendation_views, "get_engine", lambda: RecommendationEngine(tmdb=client))
        return client

    return install


def test_recommendations_for_liked_movie(api_client, use_tmdb, fake_tmdb):
    use_tmdb(fake_tmdb)

    response = api_client.get(URL, {"liked_movies": str(INCEPTION), "genres": str(SCI_FI), "limit": "5"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == len(body["recommendations"]) <= 5
    first = body["recommendations"][0]
    assert first["poster_url"].startswith("https://image.tmdb.org/t/p/w500/")
    assert isinstance(first["year"], int)
    assert first["reasons"]
    assert set(["match_score", "confidence", "recommendation_type", "final_score"]) <= set(first)


def test_duplicate_ids_are_collapsed(api_client, use_tmdb, fake_tmdb):
    use_tmdb(fake_tmdb)

    response = api_client.get(URL, {"liked_movies": f"{INCEPTION},{INCEPTION}"})

    assert response.status_code == 200
    requested = [call for call in fake_tmdb.calls if call[0] == "get_movie_recommendations"]
    assert requested == [("get_movie_recommendations", INCEPTION)]


def test_upstream_outage_returns_empty_list(api_client, use_tmdb):
    use_tmdb(FakeTMDBClient(fail=True))

    response = api_client.get(URL, {"liked_movies": str(INCEPTION), "genres": str(SCI_FI)})

    assert response.status_code == 200
    body = response.json()
    assert body["recommendations"] == []
    assert body["avg_confidence"] == 0


@pytest.mark.parametrize(
    "params, code",
    [
        ({"liked_movies": "abc"}, "INVALID_MOVIE_ID"),
        ({"liked_movies": "1,-2"}, "INVALID_MOVIE_ID"),
        ({"genres": "sci-fi"}, "INVALID_GENRE_ID"),
        ({"limit": "0"}, "INVALID_LIMIT"),
        ({"limit": "ten"}, "INVALID_LIMIT"),
    ],
)
def test_invalid_parameters(api_client, use_tmdb, fake_tmdb, params, code):
    use_tmdb(fake_tmdb)

    response = api_client.get(URL, params)

    assert response.status_code == 400
    assert response.json()["code"] == code
    assert fake_tmdb.calls == []
