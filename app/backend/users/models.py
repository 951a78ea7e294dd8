"""User-owned models: profiles, reviews, movie lists, achievements, follows."""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class UserProfile(models.Model):
    """Public profile details for a user."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    bio = models.TextField(blank=True, null=True)
    avatar_url = models.URLField(max_length=500, blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    favorite_genres = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "user_profiles"

    def __str__(self):
        return f"Profile of {self.user}"


class Review(models.Model):
    """A user's rating (1-10) and optional review of a movie."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    movie_id = models.IntegerField()
    movie_title = models.CharField(max_length=500)
    movie_poster = models.CharField(max_length=500, blank=True, null=True)
    user_name = models.CharField(max_length=150)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(10)])
    review_text = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "reviews"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["movie_id"], name="review_movie_idx"),
        ]

    def __str__(self):
        return f"{self.user_name} rated {self.movie_title}: {self.rating}/10"


class MovieListEntry(models.Model):
    """A (user, movie) membership row; existence is the whole relation."""

    movie_id = models.IntegerField()
    movie_title = models.CharField(max_length=500, blank=True, default="")
    movie_poster = models.CharField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]


class Favorite(MovieListEntry):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorites")

    class Meta(MovieListEntry.Meta):
        db_table = "favorites"
        constraints = [
            models.UniqueConstraint(fields=["user", "movie_id"], name="unique_favorite"),
        ]

    def __str__(self):
        return f"{self.user} favorited {self.movie_id}"


class WatchLater(MovieListEntry):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="watch_later")

    class Meta(MovieListEntry.Meta):
        db_table = "watch_later"
        verbose_name_plural = "watch later"
        constraints = [
            models.UniqueConstraint(fields=["user", "movie_id"], name="unique_watch_later"),
        ]

    def __str__(self):
        return f"{self.user} will watch {self.movie_id}"


class WatchHistory(models.Model):
    """User watch history."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="watch_history")
    movie_id = models.IntegerField()
    movie_title = models.CharField(max_length=500, blank=True, default="")
    movie_poster = models.CharField(max_length=500, blank=True, null=True)
    watched_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "watch_history"
        ordering = ["-watched_at"]
        verbose_name_plural = "watch history"

    def __str__(self):
        return f"{self.user} watched {self.movie_id}"


class Achievement(models.Model):
    """A badge users can earn."""

    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=255, blank=True, default="")
    icon = models.CharField(max_length=16, blank=True, default="")
    requirement = models.CharField(max_length=100, blank=True, default="")
    badge_color = models.CharField(max_length=16, blank=True, default="")

    class Meta:
        db_table = "achievements"

    def __str__(self):
        return self.name


class UserAchievement(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="achievements")
    achievement = models.ForeignKey(Achievement, on_delete=models.CASCADE, related_name="awards")
    earned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "user_achievements"
        ordering = ["-earned_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "achievement"], name="unique_user_achievement"),
        ]

    def __str__(self):
        return f"{self.user} earned {self.achievement}"


class UserFollow(models.Model):
    follower = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="following")
    following = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="followers")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "user_follows"
        constraints = [
            models.UniqueConstraint(fields=["follower", "following"], name="unique_follow"),
            models.CheckConstraint(condition=~models.Q(follower=models.F("following")), name="no_self_follow"),
        ]

    def __str__(self):
        return f"{self.follower} follows {self.following}"
