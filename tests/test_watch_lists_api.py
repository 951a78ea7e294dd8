import pytest

from users.models import WatchHistory, WatchLater

pytestmark = pytest.mark.django_db


def test_watch_later_lifecycle(auth_client, user):
    created = auth_client.post("/api/watch-later/", {"movie_id": 603, "movie_title": "The Matrix"}, format="json")
    assert created.status_code == 201

    duplicate = auth_client.post("/api/watch-later/", {"movie_id": 603}, format="json")
    assert duplicate.status_code == 400
    assert duplicate.json()["code"] == "ALREADY_IN_WATCH_LATER"

    assert [w["movie_id"] for w in auth_client.get("/api/watch-later/").json()] == [603]

    assert auth_client.delete("/api/watch-later/603/").status_code == 200
    assert not WatchLater.objects.filter(user=user).exists()


def test_watch_later_delete_missing(auth_client):
    response = auth_client.delete("/api/watch-later/603/")

    assert response.status_code == 404
    assert response.json()["code"] == "WATCH_LATER_NOT_FOUND"


def test_watch_later_requires_authentication(api_client):
    assert api_client.post("/api/watch-later/", {"movie_id": 603}, format="json").status_code == 401


def test_twentieth_watch_later_awards_planner(auth_client):
    for movie_id in range(1, 20):
        auth_client.post("/api/watch-later/", {"movie_id": movie_id}, format="json")

    response = auth_client.post("/api/watch-later/", {"movie_id": 20}, format="json")

    assert response.json()["new_achievements"] == ["Watchlist Planner"]


def test_watch_history(auth_client, other_client, user):
    auth_client.post("/api/watch-history/", {"movie_id": 27205, "movie_title": "Inception"}, format="json")
    auth_client.post("/api/watch-history/", {"movie_id": 27205, "movie_title": "Inception"}, format="json")
    other_client.post("/api/watch-history/", {"movie_id": 603}, format="json")

    entries = auth_client.get("/api/watch-history/").json()

    assert [e["movie_id"] for e in entries] == [27205, 27205]
    assert WatchHistory.objects.filter(user=user).count() == 2
