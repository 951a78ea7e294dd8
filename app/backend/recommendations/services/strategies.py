"""
Candidate discovery strategies.

Each strategy takes the TMDB client, the request's signals and the current
pool, and returns Contributions for the engine to apply. Failed TMDB calls
are logged and contribute nothing; they never abort the strategy's other calls.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from .candidates import CandidatePool, Contribution
from .tmdb_client import TMDBClient, TMDBError

logger = logging.getLogger(__name__)

# Similar: TMDB related lists of liked movies
SIMILAR_MAX_LIKED = 5
SIMILAR_PER_MOVIE = 8
SIMILAR_BASE_SCORE = 100
SIMILAR_POSITION_PENALTY = 5
SIMILAR_BASE_CONFIDENCE = 85
SIMILAR_MERGE_WEIGHT = 0.5
SIMILAR_MERGE_CONFIDENCE = 5

# Genre: top rated in preferred genres
GENRE_MAX_GENRES = 3
GENRE_PER_GENRE = 6
GENRE_MIN_VOTES = 500
GENRE_BASE_SCORE = 80
GENRE_POSITION_PENALTY = 4
GENRE_BASE_CONFIDENCE = 75
GENRE_MERGE_WEIGHT = 0.6
GENRE_MERGE_CONFIDENCE = 8

# Director: other work by directors of liked movies
DIRECTOR_MAX_DIRECTORS = 2
DIRECTOR_PER_DIRECTOR = 4
DIRECTOR_MIN_VOTES = 200
DIRECTOR_SCORE = 75
DIRECTOR_CONFIDENCE = 82
DIRECTOR_MERGE_WEIGHT = 0.7
DIRECTOR_MERGE_CONFIDENCE = 10

# Hidden gems: well rated, modest vote counts
HIDDEN_GEM_MIN_VOTES = 300
HIDDEN_GEM_MAX_VOTES = 3000
HIDDEN_GEM_MIN_RATING = 7.5
HIDDEN_GEM_LIMIT = 8
HIDDEN_GEM_SCORE = 70
HIDDEN_GEM_CONFIDENCE = 78

# Trending: only tops up thin pools
TRENDING_POOL_THRESHOLD = 15
TRENDING_LIMIT = 12
TRENDING_SCORE = 65
TRENDING_CONFIDENCE = 70
TRENDING_MERGE_WEIGHT = 0.3

# Diversity: Action, Sci-Fi, Drama, Comedy, Horror, Romance, Fantasy, Thriller
DIVERSITY_GENRE_PALETTE = (28, 878, 18, 35, 27, 10749, 14, 53)
DIVERSITY_MAX_GENRES = 2
DIVERSITY_PER_GENRE = 3
DIVERSITY_MIN_VOTES = 1000
DIVERSITY_SCORE = 55
DIVERSITY_CONFIDENCE = 65

# Keyword boost from search history
KEYWORD_SCORE_PER_MATCH = 15
KEYWORD_CONFIDENCE_PER_MATCH = 5


@dataclass
class RecommendationSignals:
    """What we know about the user's taste for one request."""

    liked_movie_ids: List[int] = field(default_factory=list)
    genre_ids: List[int] = field(default_factory=list)
    search_terms: List[str] = field(default_factory=list)
    # Filled by the similar strategy, read by the director strategy
    liked_details: Dict[int, Dict[str, Any]] = field(default_factory=dict)


def parse_search_terms(search_history: str) -> List[str]:
    """Lower-case, trimmed, non-empty comma-separated terms."""
    if not search_history:
        return []
    return [term.strip() for term in search_history.lower().split(",") if term.strip()]


def _rated_confidence(base: float, movie: Dict[str, Any]) -> float:
    return base + ((movie.get("vote_average") or 0) / 10) * 15


def similar_strategy(client: TMDBClient, signals: RecommendationSignals, pool: CandidatePool) -> List[Contribution]:
    liked_ids = signals.liked_movie_ids[:SIMILAR_MAX_LIKED]
    if not liked_ids:
        return []

    with ThreadPoolExecutor(max_workers=len(liked_ids) * 2) as executor:
        futures = [
            (
                movie_id,
                executor.submit(client.get_movie_recommendations, movie_id),
                executor.submit(client.get_movie, movie_id, ("credits", "keywords")),
            )
            for movie_id in liked_ids
        ]

        contributions = []
        for movie_id, related_future, details_future in futures:
            try:
                related = related_future.result()[:SIMILAR_PER_MOVIE]
            except TMDBError as e:
                logger.warning(f"Similar strategy skipped liked movie {movie_id}: {e}")
                continue

            try:
                signals.liked_details[movie_id] = details_future.result()
            except TMDBError as e:
                logger.warning(f"Could not load credits for liked movie {movie_id}: {e}")

            for index, movie in enumerate(related):
                contributions.append(
                    Contribution(
                        movie=movie,
                        score=SIMILAR_BASE_SCORE - index * SIMILAR_POSITION_PENALTY,
                        confidence=_rated_confidence(SIMILAR_BASE_CONFIDENCE, movie),
                        reason="Similar to movies you liked",
                        recommendation_type="similar",
                        merge_weight=SIMILAR_MERGE_WEIGHT,
                        confidence_boost=SIMILAR_MERGE_CONFIDENCE,
                        merge_reason="Similar to multiple liked movies",
                    )
                )
    return contributions


def genre_strategy(client: TMDBClient, signals: RecommendationSignals, pool: CandidatePool) -> List[Contribution]:
    contributions = []
    for genre_id in signals.genre_ids[:GENRE_MAX_GENRES]:
        try:
            data = client.discover_movies(
                with_genres=genre_id,
                sort_by="vote_average.desc",
                vote_count_gte=GENRE_MIN_VOTES,
            )
        except TMDBError as e:
            logger.warning(f"Genre strategy skipped genre {genre_id}: {e}")
            continue

        for index, movie in enumerate((data.get("results") or [])[:GENRE_PER_GENRE]):
            contributions.append(
                Contribution(
                    movie=movie,
                    score=GENRE_BASE_SCORE - index * GENRE_POSITION_PENALTY,
                    confidence=_rated_confidence(GENRE_BASE_CONFIDENCE, movie),
                    reason="Matches your genre preferences",
                    recommendation_type="genre",
                    merge_weight=GENRE_MERGE_WEIGHT,
                    confidence_boost=GENRE_MERGE_CONFIDENCE,
                    merge_reason="Perfect genre match",
                )
            )
    return contributions


def extract_director_ids(liked_details: Dict[int, Dict[str, Any]], limit: int = DIRECTOR_MAX_DIRECTORS) -> List[int]:
    """Distinct director ids from cached credits, in liked-movie order."""
    directors = []
    for details in liked_details.values():
        crew = (details.get("credits") or {}).get("crew") or []
        for member in crew:
            if member.get("job") == "Director" and member.get("id") not in directors:
                directors.append(member["id"])
    return directors[:limit]


def director_strategy(client: TMDBClient, signals: RecommendationSignals, pool: CandidatePool) -> List[Contribution]:
    contributions = []
    for director_id in extract_director_ids(signals.liked_details):
        try:
            data = client.discover_movies(
                with_crew=director_id,
                sort_by="vote_average.desc",
                vote_count_gte=DIRECTOR_MIN_VOTES,
            )
        except TMDBError as e:
            logger.warning(f"Director strategy skipped director {director_id}: {e}")
            continue

        for movie in (data.get("results") or [])[:DIRECTOR_PER_DIRECTOR]:
            contributions.append(
                Contribution(
                    movie=movie,
                    score=DIRECTOR_SCORE,
                    confidence=DIRECTOR_CONFIDENCE,
                    reason="Same director as movies you loved",
                    recommendation_type="director",
                    merge_weight=DIRECTOR_MERGE_WEIGHT,
                    confidence_boost=DIRECTOR_MERGE_CONFIDENCE,
                    merge_reason="Same acclaimed director",
                )
            )
    return contributions


def hidden_gem_strategy(client: TMDBClient, signals: RecommendationSignals, pool: CandidatePool) -> List[Contribution]:
    data = client.discover_movies(
        sort_by="vote_average.desc",
        vote_count_gte=HIDDEN_GEM_MIN_VOTES,
        vote_count_lte=HIDDEN_GEM_MAX_VOTES,
        vote_average_gte=HIDDEN_GEM_MIN_RATING,
    )
    return [
        Contribution(
            movie=movie,
            score=HIDDEN_GEM_SCORE,
            confidence=HIDDEN_GEM_CONFIDENCE,
            reason="Hidden gem - highly rated but underrated",
            recommendation_type="hidden-gem",
        )
        for movie in (data.get("results") or [])[:HIDDEN_GEM_LIMIT]
    ]


def trending_strategy(client: TMDBClient, signals: RecommendationSignals, pool: CandidatePool) -> List[Contribution]:
    if len(pool) >= TRENDING_POOL_THRESHOLD:
        return []

    return [
        Contribution(
            movie=movie,
            score=TRENDING_SCORE,
            confidence=TRENDING_CONFIDENCE,
            reason="Trending now",
            recommendation_type="trending",
            merge_weight=TRENDING_MERGE_WEIGHT,
            merge_reason="Also trending",
        )
        for movie in client.get_trending_movies("week")[:TRENDING_LIMIT]
    ]


def unused_diversity_genres(preferred: Sequence[int], limit: int = DIVERSITY_MAX_GENRES) -> List[int]:
    preferred = set(preferred)
    return [genre_id for genre_id in DIVERSITY_GENRE_PALETTE if genre_id not in preferred][:limit]


def diversity_strategy(client: TMDBClient, signals: RecommendationSignals, pool: CandidatePool) -> List[Contribution]:
    if not signals.genre_ids:
        return []

    contributions = []
    for genre_id in unused_diversity_genres(signals.genre_ids):
        try:
            data = client.discover_movies(
                with_genres=genre_id,
                sort_by="vote_average.desc",
                vote_count_gte=DIVERSITY_MIN_VOTES,
            )
        except TMDBError as e:
            logger.warning(f"Diversity strategy skipped genre {genre_id}: {e}")
            continue

        for movie in (data.get("results") or [])[:DIVERSITY_PER_GENRE]:
            contributions.append(
                Contribution(
                    movie=movie,
                    score=DIVERSITY_SCORE,
                    confidence=DIVERSITY_CONFIDENCE,
                    reason="Expand your horizons - different genre",
                    recommendation_type="diverse",
                )
            )
    return contributions


def apply_keyword_boost(pool: CandidatePool, search_terms: Sequence[str]) -> int:
    """
    Boost candidates whose title or overview mentions a search-history term.

    Returns the number of candidates boosted.
    """
    if not search_terms:
        return 0

    boosted = 0
    for candidate in pool:
        text = f"{candidate.movie.get('title') or ''} {candidate.movie.get('overview') or ''}".lower()
        matched = [term for term in search_terms if term in text]
        if matched:
            candidate.boost(
                KEYWORD_SCORE_PER_MATCH * len(matched),
                KEYWORD_CONFIDENCE_PER_MATCH * len(matched),
                f"Matches your interest in: {', '.join(matched)}",
            )
            boosted += 1
    return boosted


StrategyFn = Callable[[TMDBClient, RecommendationSignals, CandidatePool], List[Contribution]]


@dataclass(frozen=True)
class Strategy:
    name: str
    label: str
    run: StrategyFn
    requires: str = ""  # signal attribute that must be non-empty

    def enabled(self, signals: RecommendationSignals) -> bool:
        return not self.requires or bool(getattr(signals, self.requires))


STRATEGIES = (
    Strategy("similar", "collaborative-filtering", similar_strategy, requires="liked_movie_ids"),
    Strategy("genre", "content-based-filtering", genre_strategy, requires="genre_ids"),
    Strategy("director", "director-matching", director_strategy, requires="liked_movie_ids"),
    Strategy("hidden-gem", "hidden-gems-discovery", hidden_gem_strategy),
    Strategy("trending", "trending-boost", trending_strategy),
    Strategy("diverse", "diversity-injection", diversity_strategy, requires="genre_ids"),
)
