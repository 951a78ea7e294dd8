"""Serializers for recommendation requests and results."""

from core.serializers import MovieResultSerializer
from rest_framework import serializers

from .services.candidates import RECOMMENDATION_TYPES
from .services.recommendation_engine import DEFAULT_LIMIT
from .services.strategies import parse_search_terms


def parse_id_list(value: str, code: str, name: str):
    """Comma-separated positive integers, de-duplicated in order."""
    ids = []
    for raw in value.split(","):
        raw = raw.strip()
        if not raw:
            continue
        if not raw.isdigit() or int(raw) < 1:
            raise serializers.ValidationError(f"Invalid {name}: {raw!r}", code=code)
        number = int(raw)
        if number not in ids:
            ids.append(number)
    return ids


class RecommendationQuerySerializer(serializers.Serializer):
    """Validates /recommendations query params."""

    liked_movies = serializers.CharField(required=False, allow_blank=True, default="")
    genres = serializers.CharField(required=False, allow_blank=True, default="")
    search_history = serializers.CharField(required=False, allow_blank=True, default="")
    limit = serializers.CharField(required=False, default=str(DEFAULT_LIMIT))

    def validate_liked_movies(self, value):
        return parse_id_list(value, "INVALID_MOVIE_ID", "movie id")

    def validate_genres(self, value):
        return parse_id_list(value, "INVALID_GENRE_ID", "genre id")

    def validate_search_history(self, value):
        return parse_search_terms(value)

    def validate_limit(self, value):
        try:
            limit = int(value)
        except (TypeError, ValueError):
            raise serializers.ValidationError("limit must be an integer", code="INVALID_LIMIT")
        if limit < 1:
            raise serializers.ValidationError("limit must be at least 1", code="INVALID_LIMIT")
        return limit


class RecommendationSerializer(MovieResultSerializer):
    """A ranked movie with the blender's scoring metadata."""

    match_score = serializers.IntegerField()
    confidence = serializers.IntegerField(min_value=0, max_value=99)
    reasons = serializers.ListField(child=serializers.CharField())
    recommendation_type = serializers.ChoiceField(choices=RECOMMENDATION_TYPES)
    final_score = serializers.FloatField()
