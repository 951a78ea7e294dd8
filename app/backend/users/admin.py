from django.contrib import admin

from .models import Achievement, Favorite, Review, UserAchievement, UserFollow, UserProfile, WatchHistory, WatchLater


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "location", "created_at")
    search_fields = ("user__username",)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("user_name", "movie_title", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("movie_title", "user_name")


@admin.register(Favorite, WatchLater, WatchHistory)
class MovieListAdmin(admin.ModelAdmin):
    list_display = ("user", "movie_id", "movie_title")
    search_fields = ("user__username", "movie_title")


@admin.register(Achievement)
class AchievementAdmin(admin.ModelAdmin):
    list_display = ("name", "requirement", "icon")


@admin.register(UserAchievement)
class UserAchievementAdmin(admin.ModelAdmin):
    list_display = ("user", "achievement", "earned_at")
    list_filter = ("achievement",)


@admin.register(UserFollow)
class UserFollowAdmin(admin.ModelAdmin):
    list_display = ("follower", "following", "created_at")
