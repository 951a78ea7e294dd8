"""Catalog views: thin proxies over the TMDB API."""

import logging

from django.conf import settings
from recommendations.services.tmdb_client import (
    TMDBClient,
    TMDBConfigurationError,
    TMDBError,
    TMDBNetworkError,
    TMDBUpstreamError,
)
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .exceptions import ApiError, error_response

logger = logging.getLogger(__name__)

# Used when TMDB's genre list cannot be fetched
FALLBACK_GENRES = [
    {"id": 28, "name": "Action"},
    {"id": 12, "name": "Adventure"},
    {"id": 16, "name": "Animation"},
    {"id": 35, "name": "Comedy"},
    {"id": 80, "name": "Crime"},
    {"id": 99, "name": "Documentary"},
    {"id": 18, "name": "Drama"},
    {"id": 10751, "name": "Family"},
    {"id": 14, "name": "Fantasy"},
    {"id": 36, "name": "History"},
    {"id": 27, "name": "Horror"},
    {"id": 10402, "name": "Music"},
    {"id": 9648, "name": "Mystery"},
    {"id": 10749, "name": "Romance"},
    {"id": 878, "name": "Science Fiction"},
    {"id": 10770, "name": "TV Movie"},
    {"id": 53, "name": "Thriller"},
    {"id": 10752, "name": "War"},
    {"id": 37, "name": "Western"},
]


def get_tmdb_client():
    """Get TMDB client instance."""
    return TMDBClient()


def parse_positive_int(value, code: str, name: str) -> int:
    """Parse a positive integer query/path value or raise a 400 ApiError."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ApiError(f"Valid {name} is required", code)
    if number < 1:
        raise ApiError(f"Valid {name} is required", code)
    return number


def tmdb_error_response(e: TMDBError, not_found_code: str = "MOVIE_NOT_FOUND") -> Response:
    """Map a gateway failure onto the API's error body."""
    if isinstance(e, TMDBConfigurationError):
        return error_response("TMDB API key not configured", "TMDB_NOT_CONFIGURED", status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(e, TMDBUpstreamError) and e.status_code == 404:
        return error_response("Movie not found", not_found_code, status.HTTP_404_NOT_FOUND)
    if isinstance(e, TMDBNetworkError):
        return error_response("Movie catalog unavailable", "UPSTREAM_UNAVAILABLE", status.HTTP_502_BAD_GATEWAY)
    return error_response("Failed to fetch from movie catalog", "UPSTREAM_ERROR", status.HTTP_502_BAD_GATEWAY)


@api_view(["GET"])
def movie_list(request):
    """
    Browse movies.

    Query params:
    - query: free-text title search (takes precedence)
    - genre: TMDB genre id, or "All"
    - page: result page (default 1)
    """
    query = request.query_params.get("query", "").strip()
    genre = request.query_params.get("genre", "").strip()
    page = parse_positive_int(request.query_params.get("page", 1), "INVALID_PAGE", "page")

    tmdb = get_tmdb_client()
    try:
        if query:
            data = tmdb.search_movies(query, page=page)
        elif genre and genre != "All":
            genre_id = parse_positive_int(genre, "INVALID_GENRE_ID", "genre")
            data = tmdb.get_movies_by_genre(genre_id, page=page)
        else:
            data = tmdb.get_popular_movies(page=page)
    except TMDBError as e:
        return tmdb_error_response(e)

    return Response(data)


@api_view(["GET"])
def movie_detail(request, movie_id):
    """Get movie details with credits."""
    movie_id = parse_positive_int(movie_id, "INVALID_MOVIE_ID", "movie id")

    tmdb = get_tmdb_client()
    try:
        data = tmdb.get_movie(movie_id, append=("credits",))
    except TMDBError as e:
        return tmdb_error_response(e)

    return Response(data)


@api_view(["GET"])
def genre_list(request):
    """Get all available genres for filtering."""
    try:
        genres = get_tmdb_client().get_genres()
    except TMDBError as e:
        logger.warning(f"Falling back to built-in genre list: {e}")
        genres = FALLBACK_GENRES
    return Response({"genres": genres})


@api_view(["GET"])
def health_check(request):
    """Health check endpoint."""
    return Response({"status": "healthy"})


@api_view(["GET"])
def public_config(request):
    """Client configuration. Only the public read-only TMDB key is exposed."""
    return Response(
        {
            "tmdb_public_api_key": settings.TMDB_PUBLIC_API_KEY or None,
            "image_base_url": TMDBClient.IMAGE_BASE_URL,
        }
    )
