import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from fakes import build_catalog


@pytest.fixture(autouse=True)
def tmdb_settings(settings):
    """Never let a test reach the real TMDB API or depend on the local .env."""
    settings.TMDB_API_KEY = "test-key"
    settings.TMDB_PUBLIC_API_KEY = ""
    settings.TMDB_TIMEOUT = 10
    settings.EARLY_ADOPTER_CUTOFF = None
    return settings


@pytest.fixture
def fake_tmdb():
    return build_catalog()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(username="alice", password="correct-horse-battery")


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(username="bob", password="correct-horse-battery")


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client
