"""TMDB API client."""

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class TMDBError(Exception):
    """Base class for catalog gateway failures."""


class TMDBConfigurationError(TMDBError):
    """Raised when no API key is configured."""


class TMDBNetworkError(TMDBError):
    """Transient failure: connection refused, DNS, timeout."""


class TMDBUpstreamError(TMDBError):
    """TMDB answered with a 4xx/5xx status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


# discover/movie filter names use dots, which are not valid keyword arguments
_DISCOVER_PARAM_NAMES = {
    "vote_count_gte": "vote_count.gte",
    "vote_count_lte": "vote_count.lte",
    "vote_average_gte": "vote_average.gte",
}


class TMDBClient:
    """Client for The Movie Database (TMDB) API."""

    BASE_URL = "https://api.themoviedb.org/3"
    IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else settings.TMDB_API_KEY
        self.timeout = timeout if timeout is not None else settings.TMDB_TIMEOUT
        if not self.api_key:
            logger.warning("TMDB_API_KEY not set")

    def _get(self, endpoint: str, params: Dict = None) -> Dict[str, Any]:
        """Make GET request to TMDB API."""
        if not self.api_key:
            raise TMDBConfigurationError("TMDB API key not configured")

        url = f"{self.BASE_URL}{endpoint}"
        params = dict(params or {})
        params["api_key"] = self.api_key

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 502
            logger.error(f"TMDB API error on {endpoint}: HTTP {status_code}")
            raise TMDBUpstreamError(f"TMDB returned HTTP {status_code} for {endpoint}", status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"TMDB request to {endpoint} failed: {e}")
            raise TMDBNetworkError(f"TMDB request to {endpoint} failed") from e
        except ValueError as e:
            logger.error(f"TMDB returned invalid JSON for {endpoint}")
            raise TMDBUpstreamError(f"TMDB returned invalid JSON for {endpoint}", 502) from e

    def get_movie(self, movie_id: int, append: Iterable[str] = ("credits", "keywords")) -> Dict[str, Any]:
        """Get detailed movie information, with extra sections appended."""
        params = {}
        append = list(append)
        if append:
            params["append_to_response"] = ",".join(append)
        return self._get(f"/movie/{movie_id}", params=params)

    def search_movies(self, query: str, page: int = 1) -> Dict[str, Any]:
        """Search for movies by title. Returns the raw results page."""
        return self._get("/search/movie", params={"query": query, "page": page})

    def get_popular_movies(self, page: int = 1) -> Dict[str, Any]:
        """Get popular movies page."""
        return self._get("/movie/popular", params={"page": page})

    def discover_movies(self, page: int = 1, **filters) -> Dict[str, Any]:
        """
        Query /discover/movie.

        Filters are passed as keyword arguments; range filters use underscores
        in place of TMDB's dots (``vote_count_gte=500``).
        """
        params = {"page": page}
        for name, value in filters.items():
            if value is None:
                continue
            params[_DISCOVER_PARAM_NAMES.get(name, name)] = value
        return self._get("/discover/movie", params=params)

    def get_movies_by_genre(self, genre_id: int, page: int = 1) -> Dict[str, Any]:
        """Get popular movies in a genre."""
        return self.discover_movies(page=page, with_genres=genre_id, sort_by="popularity.desc")

    def get_movie_recommendations(self, movie_id: int, page: int = 1) -> List[Dict[str, Any]]:
        """Get TMDB's related-movie list for a movie."""
        data = self._get(f"/movie/{movie_id}/recommendations", params={"page": page})
        return data.get("results") or []

    def get_trending_movies(self, window: str = "week") -> List[Dict[str, Any]]:
        """Get trending movies for a time window (``day`` or ``week``)."""
        data = self._get(f"/trending/movie/{window}", params={"page": 1})
        return data.get("results") or []

    def get_genres(self) -> List[Dict[str, Any]]:
        """Get list of movie genres."""
        data = self._get("/genre/movie/list")
        return data.get("genres") or []

    def get_poster_url(self, poster_path: Optional[str], size: str = "w342") -> Optional[str]:
        """Get full poster URL."""
        if poster_path:
            return f"{self.IMAGE_BASE_URL}/{size}{poster_path}"
        return None

    def get_backdrop_url(self, backdrop_path: Optional[str], size: str = "original") -> Optional[str]:
        """Get full backdrop URL."""
        if backdrop_path:
            return f"{self.IMAGE_BASE_URL}/{size}{backdrop_path}"
        return None
