"""User views: auth, profiles, reviews, movie lists, achievements, follows."""

import logging

from core.exceptions import ApiError
from core.views import parse_positive_int
from django.contrib.auth import authenticate, get_user_model
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Avg, Count
from rest_framework import mixins, status, viewsets
from rest_framework.authtoken.models import Token
from rest_framework.decorators import action, api_view
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .achievements import check_and_award_achievements
from .models import Achievement, Favorite, Review, UserAchievement, UserFollow, UserProfile, WatchHistory, WatchLater
from .serializers import (
    AchievementSerializer,
    AwardAchievementSerializer,
    CreateFollowSerializer,
    FavoriteSerializer,
    FollowSerializer,
    RegisterSerializer,
    ReviewSerializer,
    UserAchievementSerializer,
    UserProfileSerializer,
    UserSummarySerializer,
    WatchHistorySerializer,
    WatchLaterSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

REVIEW_SORTS = {
    "newest": ["-created_at", "-id"],
    "oldest": ["created_at", "id"],
    "highest": ["-rating", "-created_at"],
    "lowest": ["rating", "-created_at"],
}


def award_achievements(user):
    """Run the achievement check after a mutation; failures never undo the mutation."""
    try:
        return check_and_award_achievements(user)
    except DatabaseError:
        logger.exception(f"Achievement check failed for user {user.pk}")
        return []


def _auth_payload(user):
    token, _ = Token.objects.get_or_create(user=user)
    return {"token": token.key, "user": UserSummarySerializer(user).data}


# =============================================================================
# Auth
# =============================================================================


@api_view(["POST"])
def register(request):
    """Create an account and return its API token."""
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    return Response(_auth_payload(user), status=status.HTTP_201_CREATED)


@api_view(["POST"])
def login(request):
    """Exchange username/password for the user's API token."""
    username = request.data.get("username")
    password = request.data.get("password")
    if not username or not password:
        raise ApiError("username and password are required", "MISSING_CREDENTIALS")

    user = authenticate(request, username=username, password=password)
    if user is None:
        raise ApiError("Invalid credentials", "INVALID_CREDENTIALS", status.HTTP_401_UNAUTHORIZED)
    return Response(_auth_payload(user))


# =============================================================================
# Favorites / watch later / history
# =============================================================================


class MovieListViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    A per-user movie list keyed by TMDB movie id.

    Rows are always scoped to request.user, so a movie id that belongs to
    someone else is indistinguishable from one that does not exist.
    """

    permission_classes = [IsAuthenticated]
    lookup_field = "movie_id"
    lookup_value_regex = "[^/]+"
    pagination_class = None

    model = None
    duplicate_code = "DUPLICATE"
    duplicate_message = "Movie already in list"
    not_found_code = "NOT_FOUND"
    not_found_message = "Movie not in list"
    awards_achievements = False

    def get_queryset(self):
        return self.model.objects.filter(user=self.request.user)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if self.get_queryset().filter(movie_id=serializer.validated_data["movie_id"]).exists():
            raise ApiError(self.duplicate_message, self.duplicate_code)

        try:
            with transaction.atomic():
                entry = serializer.save(user=request.user)
        except IntegrityError:
            raise ApiError(self.duplicate_message, self.duplicate_code)

        data = dict(serializer.data)
        if self.awards_achievements:
            data["new_achievements"] = award_achievements(request.user)
        logger.info(f"User {request.user.pk} added movie {entry.movie_id} to {self.model._meta.db_table}")
        return Response(data, status=status.HTTP_201_CREATED)

    def destroy(self, request, movie_id=None):
        movie_id = parse_positive_int(movie_id, "INVALID_MOVIE_ID", "movieId")

        entry = self.get_queryset().filter(movie_id=movie_id).first()
        if entry is None:
            raise ApiError(self.not_found_message, self.not_found_code, status.HTTP_404_NOT_FOUND)

        data = self.get_serializer(entry).data
        entry.delete()
        return Response({"message": "Deleted successfully", "entry": data})


class FavoriteViewSet(MovieListViewSet):
    serializer_class = FavoriteSerializer
    model = Favorite
    duplicate_code = "ALREADY_FAVORITED"
    duplicate_message = "Movie already in favorites"
    not_found_code = "FAVORITE_NOT_FOUND"
    not_found_message = "Favorite not found"
    awards_achievements = True


class WatchLaterViewSet(MovieListViewSet):
    serializer_class = WatchLaterSerializer
    model = WatchLater
    duplicate_code = "ALREADY_IN_WATCH_LATER"
    duplicate_message = "Movie already in watch later"
    not_found_code = "WATCH_LATER_NOT_FOUND"
    not_found_message = "Watch later entry not found"
    awards_achievements = True


class WatchHistoryViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """User watch history, newest first."""

    permission_classes = [IsAuthenticated]
    serializer_class = WatchHistorySerializer
    pagination_class = None

    def get_queryset(self):
        return WatchHistory.objects.filter(user=self.request.user)[:50]

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)


# =============================================================================
# Reviews
# =============================================================================


class ReviewViewSet(mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """Reviews are public to read; writing and deleting require the owner's session."""

    serializer_class = ReviewSerializer
    pagination_class = None

    def get_permissions(self):
        if self.action in ("list", "stats"):
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = Review.objects.all()
        if self.action in ("list", "stats"):
            params = self.request.query_params
            if params.get("movie_id"):
                queryset = queryset.filter(movie_id=parse_positive_int(params["movie_id"], "INVALID_MOVIE_ID", "movie_id"))
            if params.get("user_id"):
                queryset = queryset.filter(user_id=parse_positive_int(params["user_id"], "INVALID_USER_ID", "user_id"))
            if params.get("rating"):
                queryset = queryset.filter(rating=parse_positive_int(params["rating"], "INVALID_RATING", "rating"))

            sort = params.get("sort", "newest")
            if sort not in REVIEW_SORTS:
                raise ApiError(f"sort must be one of {', '.join(REVIEW_SORTS)}", "INVALID_SORT")
            queryset = queryset.order_by(*REVIEW_SORTS[sort])
        return queryset

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(user=request.user, user_name=request.user.get_username())

        data = dict(serializer.data)
        data["new_achievements"] = award_achievements(request.user)
        return Response(data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        review_id = parse_positive_int(pk, "INVALID_REVIEW_ID", "review id")
        deleted, _ = Review.objects.filter(id=review_id, user=request.user).delete()
        if not deleted:
            raise ApiError("Review not found", "REVIEW_NOT_FOUND", status.HTTP_404_NOT_FOUND)
        return Response({"message": "Review deleted successfully"})

    @action(detail=False, methods=["get"])
    def stats(self, request):
        """Total, average and 1-10 distribution of the (filtered) reviews."""
        queryset = self.get_queryset()
        summary = queryset.aggregate(total=Count("id"), average=Avg("rating"))

        distribution = {str(value): 0 for value in range(1, 11)}
        for row in queryset.order_by().values("rating").annotate(count=Count("id")):
            distribution[str(row["rating"])] = row["count"]

        return Response(
            {
                "total": summary["total"],
                "average_rating": round(summary["average"], 2) if summary["average"] else 0,
                "distribution": distribution,
            }
        )


# =============================================================================
# Profiles
# =============================================================================


class UserProfileView(APIView):
    """The caller's own profile."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile = UserProfile.objects.filter(user=request.user).first()
        if profile is None:
            raise ApiError("Profile not found", "PROFILE_NOT_FOUND", status.HTTP_404_NOT_FOUND)
        return Response(UserProfileSerializer(profile).data)

    def post(self, request):
        if UserProfile.objects.filter(user=request.user).exists():
            raise ApiError("Profile already exists", "PROFILE_EXISTS")

        serializer = UserProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(user=request.user)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def put(self, request):
        profile_id = request.query_params.get("id")
        if not profile_id:
            raise ApiError("Profile id is required", "MISSING_PROFILE_ID")
        profile_id = parse_positive_int(profile_id, "INVALID_PROFILE_ID", "profile id")

        profile = UserProfile.objects.filter(id=profile_id, user=request.user).first()
        if profile is None:
            raise ApiError("Profile not found", "PROFILE_NOT_FOUND", status.HTTP_404_NOT_FOUND)

        serializer = UserProfileSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


# =============================================================================
# Achievements
# =============================================================================


class AchievementViewSet(viewsets.ReadOnlyModelViewSet):
    """The achievement catalog."""

    queryset = Achievement.objects.order_by("id")
    serializer_class = AchievementSerializer
    pagination_class = None


class UserAchievementViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Achievements earned by the caller."""

    permission_classes = [IsAuthenticated]
    serializer_class = UserAchievementSerializer
    pagination_class = None

    def get_queryset(self):
        return UserAchievement.objects.filter(user=self.request.user).select_related("achievement")

    def create(self, request):
        serializer = AwardAchievementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        achievement = Achievement.objects.filter(id=serializer.validated_data["achievement_id"]).first()
        if achievement is None:
            raise ApiError("Achievement not found", "ACHIEVEMENT_NOT_FOUND", status.HTTP_404_NOT_FOUND)

        award, created = UserAchievement.objects.get_or_create(user=request.user, achievement=achievement)
        if not created:
            raise ApiError("Achievement already earned", "ALREADY_EARNED")
        return Response(UserAchievementSerializer(award).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def check(self, request):
        """Re-run the threshold check and award anything newly earned."""
        awarded = check_and_award_achievements(request.user)
        return Response({"awarded": awarded})


# =============================================================================
# Follows
# =============================================================================


class UserFollowViewSet(viewsets.GenericViewSet):
    """Who the caller follows and who follows them."""

    permission_classes = [IsAuthenticated]
    serializer_class = FollowSerializer
    lookup_field = "user_id"
    lookup_value_regex = "[^/]+"

    def list(self, request):
        followers = UserFollow.objects.filter(following=request.user).select_related("follower", "following")
        following = UserFollow.objects.filter(follower=request.user).select_related("follower", "following")
        return Response(
            {
                "followers": followers.count(),
                "following": following.count(),
                "followers_list": [UserSummarySerializer(f.follower).data for f in followers],
                "following_list": [UserSummarySerializer(f.following).data for f in following],
            }
        )

    def create(self, request):
        serializer = CreateFollowSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        following_id = serializer.validated_data["following_id"]

        if following_id == request.user.pk:
            raise ApiError("You cannot follow yourself", "CANNOT_FOLLOW_SELF")

        target = User.objects.filter(pk=following_id).first()
        if target is None:
            raise ApiError("User not found", "USER_NOT_FOUND", status.HTTP_404_NOT_FOUND)

        follow, created = UserFollow.objects.get_or_create(follower=request.user, following=target)
        if not created:
            raise ApiError("Already following this user", "ALREADY_FOLLOWING")
        return Response(FollowSerializer(follow).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, user_id=None):
        user_id = parse_positive_int(user_id, "INVALID_USER_ID", "user id")
        deleted, _ = UserFollow.objects.filter(follower=request.user, following_id=user_id).delete()
        if not deleted:
            raise ApiError("Follow not found", "FOLLOW_NOT_FOUND", status.HTTP_404_NOT_FOUND)
        return Response({"message": "Unfollowed successfully"})
