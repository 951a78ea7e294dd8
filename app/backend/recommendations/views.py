"""Recommendation views."""

import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

from .serializers import RecommendationQuerySerializer, RecommendationSerializer
from .services import RecommendationEngine

logger = logging.getLogger(__name__)


def get_engine():
    """Build the recommendation engine for a request."""
    return RecommendationEngine()


@api_view(["GET"])
def recommendations(request):
    """
    Get blended recommendations.

    Query params (all optional; an absent signal disables its strategies):
    - liked_movies: comma-separated TMDB movie ids
    - genres: comma-separated TMDB genre ids
    - search_history: comma-separated free-text terms
    - limit: number of results (default 24)
    """
    query = RecommendationQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    params = query.validated_data

    engine = get_engine()
    result = engine.get_recommendations(
        liked_movie_ids=params["liked_movies"],
        genre_ids=params["genres"],
        search_terms=params["search_history"],
        limit=params["limit"],
    )
    result["recommendations"] = RecommendationSerializer(result["recommendations"], many=True).data

    return Response(result)
