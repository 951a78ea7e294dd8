"""Serializers for TMDB movie payloads."""

from recommendations.services.scoring import get_year
from rest_framework import serializers

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"


class MovieResultSerializer(serializers.Serializer):
    """A movie as it appears in TMDB list endpoints."""

    id = serializers.IntegerField()
    title = serializers.CharField(allow_blank=True, default="")
    original_title = serializers.CharField(allow_blank=True, required=False)
    overview = serializers.CharField(allow_blank=True, default="")
    poster_path = serializers.CharField(allow_null=True, required=False)
    backdrop_path = serializers.CharField(allow_null=True, required=False)
    release_date = serializers.CharField(allow_blank=True, allow_null=True, required=False)
    vote_average = serializers.FloatField(default=0)
    vote_count = serializers.IntegerField(allow_null=True, required=False)
    popularity = serializers.FloatField(default=0)
    genre_ids = serializers.ListField(child=serializers.IntegerField(), default=list)
    original_language = serializers.CharField(allow_blank=True, required=False)
    poster_url = serializers.SerializerMethodField()
    year = serializers.SerializerMethodField()

    def get_poster_url(self, obj):
        if obj.get("poster_path"):
            return f"{IMAGE_BASE_URL}/w500{obj['poster_path']}"
        return None

    def get_year(self, obj):
        return get_year(obj.get("release_date"))
