"""
Achievement thresholds and awarding.

``earned_achievement_names`` is a pure function of a user's activity counts;
``check_and_award_achievements`` persists whichever of those the user does not
hold yet. Awards are never revoked.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Set

from django.conf import settings
from django.db import transaction

from .models import Achievement, UserAchievement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserStats:
    review_count: int = 0
    favorites_count: int = 0
    watch_later_count: int = 0
    is_early_user: bool = False


@dataclass(frozen=True)
class AchievementDefinition:
    name: str
    description: str
    icon: str
    requirement: str
    badge_color: str
    condition: Callable[[UserStats], bool]


ACHIEVEMENT_CATALOG = (
    AchievementDefinition(
        "First Steps", "Welcome to the community!", "🎬", "1 review", "#4F46E5",
        lambda s: s.review_count >= 1,
    ),
    AchievementDefinition(
        "Movie Critic", "You're getting the hang of it!", "✍️", "5 reviews", "#8B5CF6",
        lambda s: s.review_count >= 5,
    ),
    AchievementDefinition(
        "Film Buff", "A true movie enthusiast", "🎭", "10 reviews", "#7C3AED",
        lambda s: s.review_count >= 10,
    ),
    AchievementDefinition(
        "Review Master", "You've seen it all!", "🏆", "25 reviews", "#6D28D9",
        lambda s: s.review_count >= 25,
    ),
    AchievementDefinition(
        "Legendary Critic", "A legend among critics", "👑", "50 reviews", "#5B21B6",
        lambda s: s.review_count >= 50,
    ),
    AchievementDefinition(
        "Favorites Collector", "Building your collection", "❤️", "10 favorites", "#DC2626",
        lambda s: s.favorites_count >= 10,
    ),
    AchievementDefinition(
        "Watchlist Planner", "Planning your viewing schedule", "📚", "20 watch later", "#0891B2",
        lambda s: s.watch_later_count >= 20,
    ),
    AchievementDefinition(
        "Early Adopter", "You were here from the start!", "🌟", "early_user", "#059669",
        lambda s: s.is_early_user,
    ),
)

CATALOG_BY_NAME = {definition.name: definition for definition in ACHIEVEMENT_CATALOG}


def earned_achievement_names(stats: UserStats) -> Set[str]:
    """Names of every achievement whose threshold ``stats`` satisfies."""
    return {definition.name for definition in ACHIEVEMENT_CATALOG if definition.condition(stats)}


def is_early_user(user) -> bool:
    cutoff = settings.EARLY_ADOPTER_CUTOFF
    if cutoff is None or user.date_joined is None:
        return False
    return user.date_joined.date() < cutoff


def collect_user_stats(user) -> UserStats:
    return UserStats(
        review_count=user.reviews.count(),
        favorites_count=user.favorites.count(),
        watch_later_count=user.watch_later.count(),
        is_early_user=is_early_user(user),
    )


def get_or_create_achievement(name: str) -> Achievement:
    """Catalog row for ``name``, created from the built-in definition if missing."""
    definition = CATALOG_BY_NAME[name]
    achievement, _ = Achievement.objects.get_or_create(
        name=definition.name,
        defaults={
            "description": definition.description,
            "icon": definition.icon,
            "requirement": definition.requirement,
            "badge_color": definition.badge_color,
        },
    )
    return achievement


def seed_achievement_catalog() -> int:
    """Create or refresh every catalog row. Returns how many were created."""
    created_count = 0
    for definition in ACHIEVEMENT_CATALOG:
        _, created = Achievement.objects.update_or_create(
            name=definition.name,
            defaults={
                "description": definition.description,
                "icon": definition.icon,
                "requirement": definition.requirement,
                "badge_color": definition.badge_color,
            },
        )
        created_count += int(created)
    return created_count


def check_and_award_achievements(user) -> List[str]:
    """
    Award every newly satisfied achievement to ``user``.

    Idempotent: running it again without new activity awards nothing.
    Returns the names awarded by this call, in catalog order.
    """
    stats = collect_user_stats(user)
    earned = earned_achievement_names(stats)

    with transaction.atomic():
        already = set(user.achievements.values_list("achievement__name", flat=True))
        awarded = []
        for definition in ACHIEVEMENT_CATALOG:
            if definition.name not in earned or definition.name in already:
                continue
            achievement = get_or_create_achievement(definition.name)
            _, created = UserAchievement.objects.get_or_create(user=user, achievement=achievement)
            if created:
                awarded.append(definition.name)

    if awarded:
        logger.info(f"Awarded {', '.join(awarded)} to user {user.pk}")
    return awarded
