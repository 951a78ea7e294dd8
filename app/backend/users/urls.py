"""URL configuration for users app."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register(r"favorites", views.FavoriteViewSet, basename="favorite")
router.register(r"watch-later", views.WatchLaterViewSet, basename="watch-later")
router.register(r"watch-history", views.WatchHistoryViewSet, basename="watch-history")
router.register(r"reviews", views.ReviewViewSet, basename="review")
router.register(r"achievements", views.AchievementViewSet, basename="achievement")
router.register(r"user-achievements", views.UserAchievementViewSet, basename="user-achievement")
router.register(r"user-follows", views.UserFollowViewSet, basename="user-follow")

urlpatterns = [
    path("auth/register/", views.register, name="register"),
    path("auth/login/", views.login, name="login"),
    path("user-profiles/", views.UserProfileView.as_view(), name="user-profile"),
    path("", include(router.urls)),
]
