"""Request-scoped candidate pool for the recommendation blender."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

RECOMMENDATION_TYPES = ("similar", "genre", "trending", "hidden-gem", "director", "diverse")

CONFIDENCE_MIN = 0.0
CONFIDENCE_MAX = 99.0


def clamp_confidence(value: float) -> float:
    return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, value))


@dataclass
class ScoredCandidate:
    """A movie under consideration plus its accumulated score metadata."""

    movie: Dict[str, Any]
    match_score: float
    confidence: float
    recommendation_type: str
    reasons: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.recommendation_type not in RECOMMENDATION_TYPES:
            raise ValueError(f"Unknown recommendation type: {self.recommendation_type}")
        self.confidence = clamp_confidence(self.confidence)

    @property
    def movie_id(self) -> int:
        return self.movie["id"]

    def add_reason(self, reason: Optional[str]):
        if reason and reason not in self.reasons:
            self.reasons.append(reason)

    def boost(self, score: float, confidence: float = 0.0, reason: Optional[str] = None):
        """Add to the score and confidence; confidence stays within [0, 99]."""
        self.match_score += score
        self.confidence = clamp_confidence(self.confidence + confidence)
        self.add_reason(reason)


@dataclass
class Contribution:
    """
    A strategy's instruction to add or merge one movie.

    ``merge_weight`` of None means the movie is only added when absent;
    otherwise an existing candidate receives ``merge_weight * score``.
    """

    movie: Dict[str, Any]
    score: float
    confidence: float
    reason: str
    recommendation_type: str
    merge_weight: Optional[float] = None
    confidence_boost: float = 0.0
    merge_reason: Optional[str] = None


class CandidatePool:
    """Movie id -> ScoredCandidate, in discovery order."""

    def __init__(self):
        self._candidates: Dict[int, ScoredCandidate] = {}

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, movie_id: int) -> bool:
        return movie_id in self._candidates

    def __iter__(self) -> Iterator[ScoredCandidate]:
        return iter(self._candidates.values())

    def get(self, movie_id: int) -> Optional[ScoredCandidate]:
        return self._candidates.get(movie_id)

    def apply(self, contribution: Contribution) -> Optional[ScoredCandidate]:
        """Create or merge the candidate described by ``contribution``."""
        movie_id = contribution.movie.get("id")
        if movie_id is None:
            return None

        existing = self._candidates.get(movie_id)
        if existing is None:
            candidate = ScoredCandidate(
                movie=dict(contribution.movie),
                match_score=contribution.score,
                confidence=contribution.confidence,
                recommendation_type=contribution.recommendation_type,
                reasons=[contribution.reason],
            )
            self._candidates[movie_id] = candidate
            return candidate

        if contribution.merge_weight is None:
            return existing

        existing.boost(
            contribution.score * contribution.merge_weight,
            contribution.confidence_boost,
            contribution.merge_reason,
        )
        return existing

    def apply_all(self, contributions: Iterable[Contribution]) -> int:
        """Apply contributions in order; returns how many were applied."""
        count = 0
        for contribution in contributions:
            if self.apply(contribution) is not None:
                count += 1
        return count
