import pytest
import requests

from recommendations.services import RecommendationEngine, tmdb_client
from recommendations.services.tmdb_client import (
    TMDBClient,
    TMDBConfigurationError,
    TMDBNetworkError,
    TMDBUpstreamError,
)


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload if payload is not None else {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        return self.payload


@pytest.fixture
def captured(monkeypatch):
    """Record outgoing requests and answer with whatever the test queued."""
    calls = []
    state = {"response": FakeResponse({"results": []})}

    def fake_get(url, params=None, timeout=None):
        calls.append({"url": url, "params": params, "timeout": timeout})
        response = state["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(tmdb_client.requests, "get", fake_get)
    return calls, state


def test_get_sends_api_key_and_timeout(captured):
    calls, state = captured
    state["response"] = FakeResponse({"page": 1, "results": [{"id": 1}]})

    data = TMDBClient(api_key="abc", timeout=3).get_popular_movies(page=2)

    assert data["results"] == [{"id": 1}]
    assert calls[0]["url"] == "https://api.themoviedb.org/3/movie/popular"
    assert calls[0]["params"] == {"page": 2, "api_key": "abc"}
    assert calls[0]["timeout"] == 3


def test_timeout_defaults_to_settings(captured, settings):
    calls, _ = captured
    settings.TMDB_TIMEOUT = 7.5

    TMDBClient(api_key="abc").get_genres()

    assert calls[0]["timeout"] == 7.5


def test_discover_translates_range_filters(captured):
    calls, _ = captured

    TMDBClient(api_key="abc").discover_movies(
        with_genres=878, sort_by="vote_average.desc", vote_count_gte=500, vote_count_lte=None
    )

    params = calls[0]["params"]
    assert calls[0]["url"].endswith("/discover/movie")
    assert params["vote_count.gte"] == 500
    assert "vote_count.lte" not in params
    assert params["with_genres"] == 878
    assert params["sort_by"] == "vote_average.desc"


def test_get_movie_appends_sections(captured):
    calls, state = captured
    state["response"] = FakeResponse({"id": 27205, "title": "Inception"})

    movie = TMDBClient(api_key="abc").get_movie(27205, append=("credits",))

    assert movie["title"] == "Inception"
    assert calls[0]["url"].endswith("/movie/27205")
    assert calls[0]["params"]["append_to_response"] == "credits"


def test_list_helpers_unwrap_results(captured):
    _, state = captured
    client = TMDBClient(api_key="abc")

    state["response"] = FakeResponse({"results": [{"id": 1}, {"id": 2}]})
    assert client.get_movie_recommendations(27205) == [{"id": 1}, {"id": 2}]
    assert client.get_trending_movies() == [{"id": 1}, {"id": 2}]

    state["response"] = FakeResponse({"genres": [{"id": 878, "name": "Science Fiction"}]})
    assert client.get_genres() == [{"id": 878, "name": "Science Fiction"}]


def test_upstream_status_is_preserved(captured):
    _, state = captured
    state["response"] = FakeResponse({"status_message": "not found"}, status_code=404)

    with pytest.raises(TMDBUpstreamError) as exc_info:
        TMDBClient(api_key="abc").get_movie(1)

    assert exc_info.value.status_code == 404


def test_connection_failure_is_network_error(captured):
    _, state = captured
    state["response"] = requests.exceptions.ConnectTimeout("timed out")

    with pytest.raises(TMDBNetworkError):
        TMDBClient(api_key="abc").search_movies("inception")


def test_missing_key_fails_before_any_request(captured, settings):
    calls, _ = captured
    settings.TMDB_API_KEY = ""

    with pytest.raises(TMDBConfigurationError):
        TMDBClient().get_popular_movies()

    assert calls == []


def test_image_urls():
    client = TMDBClient(api_key="abc")

    assert client.get_poster_url("/p.jpg") == "https://image.tmdb.org/t/p/w342/p.jpg"
    assert client.get_poster_url("/p.jpg", size="w500") == "https://image.tmdb.org/t/p/w500/p.jpg"
    assert client.get_backdrop_url("/b.jpg") == "https://image.tmdb.org/t/p/original/b.jpg"
    assert client.get_poster_url(None) is None


def test_null_lists_are_treated_as_empty(captured):
    _, state = captured
    state["response"] = FakeResponse({"results": None, "genres": None})
    client = TMDBClient(api_key="abc")

    assert client.get_movie_recommendations(27205) == []
    assert client.get_trending_movies() == []
    assert client.get_genres() == []


def test_engine_survives_null_results(captured):
    _, state = captured
    state["response"] = FakeResponse({"page": 1, "results": None})

    result = RecommendationEngine(tmdb=TMDBClient(api_key="abc")).get_recommendations(
        liked_movie_ids=[27205], genre_ids=[878], limit=5
    )

    assert result["recommendations"] == []
    assert result["avg_confidence"] == 0
