"""
Final ranking of blended candidates.

Each candidate is described by five features on a 0-100 scale and ranked by
their weighted sum:

    final = 0.35*match + 0.25*rating + 0.15*recency + 0.15*popularity + 0.10*votes
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .candidates import ScoredCandidate

FEATURE_WEIGHTS = np.array([0.35, 0.25, 0.15, 0.15, 0.10])

# (max years since release, score); anything older scores RECENCY_FLOOR
RECENCY_STEPS = (
    (0, 100),
    (1, 95),
    (2, 85),
    (3, 75),
    (5, 65),
    (10, 50),
    (20, 35),
)
RECENCY_FLOOR = 20
RECENCY_UNKNOWN = 50

VOTE_COUNT_SATURATION = 5000
VOTE_COUNT_UNKNOWN = 50


def get_year(release_date) -> Optional[int]:
    """Extract year from release_date (handles both string and date objects)."""
    if not release_date:
        return None
    if isinstance(release_date, str):
        try:
            return int(release_date[:4])
        except (ValueError, IndexError):
            return None
    if hasattr(release_date, "year"):
        return release_date.year
    return None


def recency_score(release_date, today: Optional[date] = None) -> float:
    year = get_year(release_date)
    if year is None:
        return RECENCY_UNKNOWN
    current_year = (today or date.today()).year
    years_since = current_year - year
    for max_years, score in RECENCY_STEPS:
        if years_since <= max_years:
            return score
    return RECENCY_FLOOR


def rating_score(vote_average: Optional[float]) -> float:
    return ((vote_average or 0) / 10) * 100


def popularity_score(popularity: Optional[float]) -> float:
    return min(100.0, float(popularity or 0))


def vote_count_score(vote_count: Optional[int]) -> float:
    # 0 votes is treated as unknown, same as missing
    if not vote_count:
        return VOTE_COUNT_UNKNOWN
    return min(100.0, (vote_count / VOTE_COUNT_SATURATION) * 100)


def feature_vector(candidate: ScoredCandidate, today: Optional[date] = None) -> List[float]:
    movie = candidate.movie
    return [
        candidate.match_score,
        rating_score(movie.get("vote_average")),
        recency_score(movie.get("release_date"), today=today),
        popularity_score(movie.get("popularity")),
        vote_count_score(movie.get("vote_count")),
    ]


def final_scores(candidates: Sequence[ScoredCandidate], today: Optional[date] = None) -> np.ndarray:
    """Weighted ensemble score for each candidate, in input order."""
    if not candidates:
        return np.zeros(0)
    features = np.array([feature_vector(c, today=today) for c in candidates], dtype=float)
    return features @ FEATURE_WEIGHTS


def rank_candidates(
    candidates: Sequence[ScoredCandidate],
    limit: int,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Score, sort (descending, stable) and truncate candidates.

    Returns plain dicts: the movie fields plus the blender's scoring fields,
    with match_score and confidence rounded.
    """
    candidates = list(candidates)
    scores = final_scores(candidates, today=today)
    order = np.argsort(-scores, kind="stable")[:limit]

    ranked = []
    for idx in order:
        candidate = candidates[idx]
        ranked.append(
            {
                **candidate.movie,
                "match_score": round(candidate.match_score),
                "confidence": round(candidate.confidence),
                "reasons": list(candidate.reasons),
                "recommendation_type": candidate.recommendation_type,
                "final_score": round(float(scores[idx]), 2),
            }
        )
    return ranked
