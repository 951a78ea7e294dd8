"""Recommendation services."""

from .candidates import CandidatePool, Contribution, ScoredCandidate
from .recommendation_engine import RecommendationEngine
from .tmdb_client import TMDBClient, TMDBConfigurationError, TMDBError, TMDBNetworkError, TMDBUpstreamError

__all__ = [
    "CandidatePool",
    "Contribution",
    "ScoredCandidate",
    "TMDBClient",
    "TMDBError",
    "TMDBConfigurationError",
    "TMDBNetworkError",
    "TMDBUpstreamError",
    "RecommendationEngine",
]
