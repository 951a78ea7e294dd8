"""Serializers for user models."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Achievement, Favorite, Review, UserAchievement, UserFollow, UserProfile, WatchHistory, WatchLater

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username"]


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=8, write_only=True)
    email = serializers.EmailField(required=False, allow_blank=True, default="")

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already taken", code="USERNAME_TAKEN")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data.get("email", ""),
            password=validated_data["password"],
        )


class UserProfileSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    favorite_genres = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = UserProfile
        fields = ["id", "user", "bio", "avatar_url", "location", "favorite_genres", "created_at", "updated_at"]
        read_only_fields = ["id", "user", "created_at", "updated_at"]


class ReviewSerializer(serializers.ModelSerializer):
    rating = serializers.IntegerField(min_value=1, max_value=10)

    class Meta:
        model = Review
        fields = [
            "id",
            "user_id",
            "user_name",
            "movie_id",
            "movie_title",
            "movie_poster",
            "rating",
            "review_text",
            "created_at",
        ]
        read_only_fields = ["id", "user_id", "user_name", "created_at"]

    def validate_movie_id(self, value):
        if value < 1:
            raise serializers.ValidationError("Valid movie_id is required", code="INVALID_MOVIE_ID")
        return value


class MovieListEntrySerializer(serializers.ModelSerializer):
    """Shared shape of favorites and watch-later rows."""

    class Meta:
        fields = ["id", "movie_id", "movie_title", "movie_poster", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_movie_id(self, value):
        if value < 1:
            raise serializers.ValidationError("Valid movie_id is required", code="INVALID_MOVIE_ID")
        return value


class FavoriteSerializer(MovieListEntrySerializer):
    class Meta(MovieListEntrySerializer.Meta):
        model = Favorite


class WatchLaterSerializer(MovieListEntrySerializer):
    class Meta(MovieListEntrySerializer.Meta):
        model = WatchLater


class WatchHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = WatchHistory
        fields = ["id", "movie_id", "movie_title", "movie_poster", "watched_at"]
        read_only_fields = ["id", "watched_at"]


class AchievementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Achievement
        fields = ["id", "name", "description", "icon", "requirement", "badge_color"]


class UserAchievementSerializer(serializers.ModelSerializer):
    achievement = AchievementSerializer(read_only=True)

    class Meta:
        model = UserAchievement
        fields = ["id", "achievement", "earned_at"]


class AwardAchievementSerializer(serializers.Serializer):
    achievement_id = serializers.IntegerField(min_value=1)


class FollowSerializer(serializers.ModelSerializer):
    follower = UserSummarySerializer(read_only=True)
    following = UserSummarySerializer(read_only=True)

    class Meta:
        model = UserFollow
        fields = ["id", "follower", "following", "created_at"]


class CreateFollowSerializer(serializers.Serializer):
    following_id = serializers.IntegerField(min_value=1)
